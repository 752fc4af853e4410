#!/usr/bin/env python3
"""
warehouse Data Models - collected metrics snapshots and history values

Paradigm: Collector → Warehouse
- A snapshot (MetricsData) carries one metric set of one monitored entity
- Fields describe the columns; rows hold string cells aligned with them
- Label fields identify the instance a row belongs to (disk, interface, ...)
- NULL_VALUE marks a cell the collector could not fill
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional

NULL_VALUE = "&nbsp;"


class Code(IntEnum):
    """Collection status of a snapshot."""
    SUCCESS = 0
    UN_AVAILABLE = 1
    UN_REACHABLE = 2
    UN_CONNECTABLE = 3
    FAIL = 4
    TIMEOUT = 5


class FieldType(IntEnum):
    NUMBER = 0
    STRING = 1


@dataclass
class Field:
    """Metric column definition."""
    name: str
    type: FieldType = FieldType.NUMBER
    label: bool = False


@dataclass
class ValueRow:
    """One collected row, cells aligned with MetricsData.fields."""
    columns: List[str] = field(default_factory=list)

    def column(self, index: int) -> str:
        if index >= len(self.columns):
            return NULL_VALUE
        return self.columns[index]


@dataclass
class MetricsData:
    """Metric set snapshot of a single monitored entity."""
    id: int
    app: str
    metrics: str
    code: Code = Code.SUCCESS
    fields: List[Field] = field(default_factory=list)
    values: List[ValueRow] = field(default_factory=list)
    time: Optional[int] = None

    @property
    def is_success(self) -> bool:
        return self.code == Code.SUCCESS


@dataclass
class Value:
    """
    History point.

    Raw history fills `origin` only. Interval history fills origin (first
    value in the bucket), mean, min and max.
    """
    time: int
    origin: Optional[str] = None
    mean: Optional[str] = None
    min: Optional[str] = None
    max: Optional[str] = None
