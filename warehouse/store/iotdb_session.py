"""
BackendSession on top of the apache-iotdb session pool.

A session is borrowed from the pool for each call and put back afterwards;
query sessions stay borrowed until their cursor is closed.
"""

import logging
from typing import Any, List, Optional

from iotdb.SessionPool import PoolConfig, create_session_pool
from iotdb.utils.IoTDBConstants import TSDataType
from iotdb.utils.Tablet import Tablet

from ..core.config import IoTDBConfig
from .batches import ColumnType, WriteBatch
from .errors import BackendError, ErrorKind
from .session import BackendSession, Cursor, RowRecord

logger = logging.getLogger("warehouse.iotdb")

DATA_TYPES = {
    ColumnType.DOUBLE: TSDataType.DOUBLE,
    ColumnType.TEXT: TSDataType.TEXT,
}


def _field_value(field) -> Any:
    if field is None:
        return None
    data_type = field.get_data_type()
    if data_type is None:
        return None
    if data_type == TSDataType.DOUBLE:
        return field.get_double_value()
    if data_type == TSDataType.FLOAT:
        return field.get_float_value()
    if data_type == TSDataType.INT64:
        return field.get_long_value()
    if data_type == TSDataType.INT32:
        return field.get_int_value()
    if data_type == TSDataType.BOOLEAN:
        return field.get_bool_value()
    return field.get_string_value()


class IoTDBCursor(Cursor):
    def __init__(self, pool, session, data_set):
        self._pool = pool
        self._session = session
        self._data_set = data_set
        self._closed = False

    def has_next(self) -> bool:
        try:
            return self._data_set.has_next()
        except Exception as e:
            raise BackendError(f"fetch result failed: {e}", ErrorKind.QUERY) from e

    def next(self) -> RowRecord:
        try:
            record = self._data_set.next()
        except Exception as e:
            raise BackendError(f"fetch result failed: {e}", ErrorKind.QUERY) from e
        return RowRecord(record.get_timestamp(), [_field_value(f) for f in record.get_fields()])

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._data_set.close_operation_handle()
        except Exception as e:
            logger.warning(f"close result set failed: {e}")
        finally:
            self._pool.put_back(self._session)


class IoTDBSession(BackendSession):
    """Thread safe, the underlying pool hands out one session per call."""

    def __init__(self, pool):
        self._pool = pool

    def _borrow(self):
        try:
            return self._pool.get_session()
        except Exception as e:
            raise BackendError(f"no IoTDB session available: {e}", ErrorKind.CONNECTIVITY) from e

    def execute_query(self, sql: str, timeout_ms: Optional[int] = None) -> Cursor:
        session = self._borrow()
        try:
            data_set = session.execute_query_statement(sql, timeout_ms or 0)
        except Exception as e:
            self._pool.put_back(session)
            raise BackendError(f"{e}", ErrorKind.QUERY) from e
        return IoTDBCursor(self._pool, session, data_set)

    def execute_statement(self, sql: str) -> None:
        session = self._borrow()
        try:
            session.execute_non_query_statement(sql)
        except Exception as e:
            raise BackendError(f"{e}", ErrorKind.QUERY) from e
        finally:
            self._pool.put_back(session)

    def insert_batch(self, batch: WriteBatch, is_sorted: bool = True) -> None:
        if batch.row_size == 0:
            return
        timestamps: List[int] = list(batch.timestamps)
        values = batch.rows()
        if not is_sorted:
            order = sorted_indices(timestamps)
            timestamps = [timestamps[i] for i in order]
            values = [values[i] for i in order]
        tablet = Tablet(batch.device_id, batch.measurements,
                        [DATA_TYPES[t] for t in batch.data_types], values, timestamps)
        session = self._borrow()
        try:
            session.insert_tablet(tablet)
        except Exception as e:
            raise BackendError(f"{e}", ErrorKind.WRITE) from e
        finally:
            self._pool.put_back(session)

    def close(self) -> None:
        try:
            self._pool.close()
        except Exception as e:
            raise BackendError(f"close session pool failed: {e}", ErrorKind.CONNECTIVITY) from e


def sorted_indices(timestamps: List[int]) -> List[int]:
    return sorted(range(len(timestamps)), key=timestamps.__getitem__)


def create_session(config: IoTDBConfig) -> IoTDBSession:
    """Build the session pool described by the configuration."""
    options = {
        "user_name": config.username,
        "password": config.password,
        "fetch_size": config.fetch_size,
    }
    if config.node_urls:
        options["node_urls"] = config.node_urls
    else:
        options.update({"host": config.host, "port": str(config.rpc_port)})
    if config.zone_id:
        options["time_zone"] = config.zone_id
    pool = create_session_pool(PoolConfig(**options), config.max_pool_size, config.wait_timeout_in_ms)
    logger.info(f"IoTDB session pool created ({config.node_urls or f'{config.host}:{config.rpc_port}'})")
    return IoTDBSession(pool)
