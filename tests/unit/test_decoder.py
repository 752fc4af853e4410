"""Unit tests for result decoding"""
import pytest

from fakes import FakeCursor
from warehouse.store.decoder import decode_history, decode_history_interval, format_value
from warehouse.store.errors import DecodeError
from warehouse.store.session import RowRecord


class TestFormatValue:
    """Four decimals, half up, trailing zeros stripped"""

    @pytest.mark.parametrize("value, expected", [
        (12.345, "12.345"),
        (12.34500, "12.345"),
        (1.23456, "1.2346"),
        (1.00005, "1.0001"),
        (2.0, "2"),
        (100.0, "100"),
        (0.0, "0"),
        (-0.00001, "0"),
        (-3.14159, "-3.1416"),
        (7, "7"),
        (1e20, "100000000000000000000"),
    ])
    def test_formatting(self, value, expected):
        assert format_value(value) == expected

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), "12", None, True])
    def test_rejects_non_numeric(self, value):
        with pytest.raises(DecodeError):
            format_value(value)


class TestDecodeHistory:
    """Raw history rows"""

    def test_rows_appended_in_return_order(self):
        cursor = FakeCursor([RowRecord(3000, [3.0]), RowRecord(2000, [2.5]), RowRecord(1000, [1.25])])
        values = {}
        count = decode_history(cursor, "", values)

        assert count == 3
        assert [v.time for v in values[""]] == [3000, 2000, 1000]
        assert [v.origin for v in values[""]] == ["3", "2.5", "1.25"]
        assert values[""][0].mean is None

    def test_text_value_aborts_decoding(self):
        cursor = FakeCursor([RowRecord(2000, [1.0]), RowRecord(1000, ["SSD"])])
        values = {}
        with pytest.raises(DecodeError):
            decode_history(cursor, "sda", values)
        assert len(values["sda"]) == 1

    def test_empty_cursor_leaves_map_untouched(self):
        values = {}
        assert decode_history(FakeCursor([]), "", values) == 0
        assert values == {}


class TestDecodeHistoryInterval:
    """Interval aggregate rows"""

    def test_complete_row_gives_one_point(self):
        cursor = FakeCursor([RowRecord(1000, [1.0, 2.55555, 0.5, 4.0])])
        values = {}
        decode_history_interval(cursor, "eth0", values)

        [point] = values["eth0"]
        assert (point.origin, point.mean, point.min, point.max) == ("1", "2.5556", "0.5", "4")
        assert point.time == 1000

    @pytest.mark.parametrize("position", range(4))
    def test_row_with_null_aggregate_is_skipped(self, position):
        fields = [1.0, 2.0, 0.5, 4.0]
        fields[position] = None
        values = {}
        count = decode_history_interval(FakeCursor([RowRecord(1000, fields)]), "", values)

        assert count == 0
        assert values == {}

    def test_null_rows_do_not_hide_others(self):
        cursor = FakeCursor([
            RowRecord(1000, [None, None, None, None]),
            RowRecord(2000, [1.0, 1.0, 1.0, 1.0]),
        ])
        values = {}
        decode_history_interval(cursor, "", values)
        assert [v.time for v in values[""]] == [2000]
