"""Pytest configuration and shared fixtures"""
import pytest
from typing import Callable, List

from fakes import FakeSession
from warehouse.core.config import IoTDBConfig
from warehouse.models import Code, Field, FieldType, MetricsData, ValueRow
from warehouse.store.session import RowRecord
from warehouse.store.storage import IotDbHistoryStorage


@pytest.fixture
def session():
    """Fresh fake backend session"""
    return FakeSession()


@pytest.fixture
def iotdb_config():
    return IoTDBConfig(enabled=True, namespace_root="root.warehouse", query_timeout_in_ms=3000)


@pytest.fixture
def storage(session, iotdb_config) -> IotDbHistoryStorage:
    """Initialized storage on an existing database"""
    session.responses["show databases root.warehouse"] = [RowRecord(0, ["root.warehouse"])]
    storage = IotDbHistoryStorage(session, iotdb_config)
    storage.initialize()
    session.queries.clear()
    session.timeouts.clear()
    session.statements.clear()
    session.cursors.clear()
    return storage


@pytest.fixture
def make_metrics_data() -> Callable[..., MetricsData]:
    """Build a disk usage snapshot: label `disk`, numeric `usage`, text `model`"""

    def _make(rows: List[List[str]], code: Code = Code.SUCCESS, monitor_id: int = 1) -> MetricsData:
        return MetricsData(
            id=monitor_id,
            app="linux",
            metrics="disk",
            code=code,
            fields=[
                Field("disk", FieldType.STRING, label=True),
                Field("usage", FieldType.NUMBER),
                Field("model", FieldType.STRING),
            ],
            values=[ValueRow(row) for row in rows],
        )

    return _make
