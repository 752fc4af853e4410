"""
Result decoding.

Turns backend rows into history values. Numbers are rendered with four
decimal places (half up) and trailing zeros stripped: 12.34500 -> "12.345".
"""

import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Dict, List

from ..models import Value
from .errors import DecodeError
from .session import Cursor

FOUR_PLACES = Decimal("0.0001")
# wide enough to quantize any finite double
_CONTEXT = Context(prec=400)


def format_value(value: float) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"value {value!r} is not numeric")
    if not math.isfinite(value):
        raise DecodeError(f"value {value!r} is not finite")
    rounded = Decimal(repr(float(value))).quantize(FOUR_PLACES, rounding=ROUND_HALF_UP, context=_CONTEXT)
    if rounded.is_zero():
        return "0"
    return format(rounded.normalize(_CONTEXT), "f")


def decode_history(cursor: Cursor, instance: str, values_map: Dict[str, List[Value]]) -> int:
    """Append raw points, newest first as returned. Returns the number of rows read."""
    count = 0
    for record in cursor:
        if not record.fields:
            raise DecodeError(f"row at {record.timestamp} has no fields")
        value = Value(time=record.timestamp, origin=format_value(record.fields[0]))
        values_map.setdefault(instance, []).append(value)
        count += 1
    return count


def decode_history_interval(cursor: Cursor, instance: str, values_map: Dict[str, List[Value]]) -> int:
    """Append one point per complete bucket; buckets with a null aggregate are skipped."""
    count = 0
    for record in cursor:
        if len(record.fields) < 4 or record.has_null_field():
            continue
        origin, mean, minimum, maximum = (format_value(v) for v in record.fields[:4])
        value = Value(time=record.timestamp, origin=origin, mean=mean, min=minimum, max=maximum)
        values_map.setdefault(instance, []).append(value)
        count += 1
    return count
