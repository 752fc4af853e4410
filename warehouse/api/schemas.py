#!/usr/bin/env python3
"""
warehouse API Schemas - Pydantic Models for Request/Response Validation
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..models import Code, FieldType, MetricsData, Value, ValueRow
from ..models import Field as MetricField


class FieldRecord(BaseModel):
    name: str = Field(..., min_length=1)
    type: FieldType = FieldType.NUMBER
    label: bool = False


class ValueRowRecord(BaseModel):
    columns: List[str]


class MetricsDataRequest(BaseModel):
    id: int = Field(..., ge=0)
    app: str = Field(..., min_length=1)
    metrics: str = Field(..., min_length=1)
    code: Code = Code.SUCCESS
    time: Optional[int] = None
    fields: List[FieldRecord] = []
    values: List[ValueRowRecord] = []

    def to_metrics_data(self) -> MetricsData:
        return MetricsData(
            id=self.id,
            app=self.app,
            metrics=self.metrics,
            code=self.code,
            time=self.time,
            fields=[MetricField(f.name, f.type, f.label) for f in self.fields],
            values=[ValueRow(list(v.columns)) for v in self.values],
        )


class ValueRecord(BaseModel):
    time: int
    origin: Optional[str] = None
    mean: Optional[str] = None
    min: Optional[str] = None
    max: Optional[str] = None

    @classmethod
    def from_value(cls, value: Value) -> "ValueRecord":
        return cls(time=value.time, origin=value.origin, mean=value.mean, min=value.min, max=value.max)


class MetricsHistoryResponse(BaseModel):
    id: int
    app: str
    metrics: str
    field: str
    values: Dict[str, List[ValueRecord]]
