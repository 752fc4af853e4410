"""
Write batch assembly.

A snapshot is split into one WriteBatch (IoTDB tablet) per label set. Label
fields go into the device path, the remaining fields become typed columns.
"""

import json
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..models import NULL_VALUE, FieldType, MetricsData
from .identifiers import IoTDBVersion, build_device_id

logger = logging.getLogger("warehouse.storage")


class ColumnType(str, Enum):
    DOUBLE = "DOUBLE"
    TEXT = "TEXT"


@dataclass(frozen=True)
class ColumnSchema:
    name: str
    type: ColumnType


@dataclass
class WriteBatch:
    """Columnar rows of a single device, one timestamp per row."""
    device_id: str
    schema: List[ColumnSchema]
    timestamps: List[int] = field(default_factory=list)
    columns: Dict[str, List[Any]] = field(default_factory=dict)

    def __post_init__(self):
        for column in self.schema:
            self.columns.setdefault(column.name, [])

    @property
    def row_size(self) -> int:
        return len(self.timestamps)

    @property
    def measurements(self) -> List[str]:
        return [column.name for column in self.schema]

    @property
    def data_types(self) -> List[ColumnType]:
        return [column.type for column in self.schema]

    def add_row(self, timestamp: int, values: Dict[str, Any]) -> int:
        """Append a row; columns missing from `values` get an explicit None."""
        row_index = self.row_size
        self.timestamps.append(timestamp)
        for column in self.schema:
            self.columns[column.name].append(values.get(column.name))
        return row_index

    def rows(self) -> List[List[Any]]:
        """Row-major view of the column buffers."""
        return [
            [self.columns[column.name][i] for column in self.schema]
            for i in range(self.row_size)
        ]

    def reset(self) -> None:
        self.timestamps.clear()
        for values in self.columns.values():
            values.clear()


def build_schema(data: MetricsData) -> List[ColumnSchema]:
    schema = []
    for metric_field in data.fields:
        if metric_field.label:
            continue
        column_type = ColumnType.DOUBLE if metric_field.type == FieldType.NUMBER else ColumnType.TEXT
        schema.append(ColumnSchema(metric_field.name, column_type))
    return schema


def label_signature(labels: Dict[str, str]) -> str:
    """Compact JSON of the label values, empty when the row has no labels."""
    if not labels:
        return ""
    return json.dumps(labels, ensure_ascii=False, separators=(",", ":"))


def _parse_number(data: MetricsData, name: str, cell: str) -> Optional[float]:
    try:
        return float(cell)
    except ValueError:
        logger.warning(f"[warehouse iotdb] {data.app}.{data.metrics} monitor {data.id} "
                       f"field {name} value {cell!r} is not numeric, stored as null")
        return None


def assemble(
    data: MetricsData,
    root: str,
    version: IoTDBVersion = IoTDBVersion.V_1_0,
    now_ms: Optional[int] = None,
) -> Dict[str, WriteBatch]:
    """
    Group the rows of a snapshot into write batches keyed by label signature.

    IoTDB indexes a device by exact timestamp, so every row landing in an
    already used label set advances the shared clock by one millisecond.
    The clock starts at `now_ms`, then the snapshot collection time, then
    the wall clock. Empty label cells do not take part in the signature.
    """
    schema = build_schema(data)
    if not schema or not data.values:
        logger.info(f"[warehouse iotdb] metrics data {data.id} {data.app}.{data.metrics} "
                    f"has no columns or rows, ignore.")
        return {}

    if now_ms is not None:
        now = now_ms
    elif data.time is not None:
        now = data.time
    else:
        now = int(time.time() * 1000)
    batches: Dict[str, WriteBatch] = {}
    for row in data.values:
        labels: Dict[str, str] = {}
        values: Dict[str, Any] = {}
        for index, metric_field in enumerate(data.fields):
            cell = row.column(index)
            if cell == NULL_VALUE:
                continue
            if metric_field.label:
                if cell:
                    labels[metric_field.name] = cell
            elif metric_field.type == FieldType.NUMBER:
                values[metric_field.name] = _parse_number(data, metric_field.name, cell)
            else:
                values[metric_field.name] = cell

        signature = label_signature(labels)
        if signature in batches:
            # Avoid Time repeats
            now += 1
        else:
            device_id = build_device_id(root, data.app, data.metrics, data.id,
                                        signature, use_quote=False, version=version)
            batches[signature] = WriteBatch(device_id, schema)
        batches[signature].add_row(now, values)
    return batches
