"""
IoTDB history storage.

Persists collected metrics snapshots and serves raw and 4h-interval history
back per instance. Availability wins over strictness: no public method
raises, every failure becomes a log line and an empty result.
"""

import logging
from enum import Enum
from typing import Callable, Dict, List, Optional

from ..core.config import IoTDBConfig
from ..models import MetricsData, Value
from .batches import assemble
from .decoder import decode_history, decode_history_interval
from .errors import BackendError, ErrorKind, StorageError
from .fanout import InstanceResolver
from .identifiers import EntityPath, IoTDBVersion
from .queries import (
    cancel_ttl_statement,
    create_database_statement,
    history_interval_query,
    history_query,
    set_ttl_statement,
    show_database_statement,
)
from .session import BackendSession, Cursor
from .writer import WriteReport, write_batches

logger = logging.getLogger("warehouse.storage")

NEVER_EXPIRE = "-1"

UNAVAILABLE_MESSAGE = (
    "\n\t---------------IotDb Init Failed---------------\n"
    "\t--------------Please Config IotDb--------------\n"
    "\t----------Can Not Use Metric History Now----------\n"
)

SHUTDOWN_MESSAGE = "IoTDB history storage is shut down, request ignored"

InstanceMap = Dict[str, List[Value]]
Decoder = Callable[[Cursor, str, InstanceMap], int]


class Readiness(str, Enum):
    UNINITIALIZED = "uninitialized"
    PROBING = "probing"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    SHUTDOWN = "shutdown"


class IotDbHistoryStorage:
    """History storage on top of a pooled IoTDB session."""

    def __init__(self, session: Optional[BackendSession], config: IoTDBConfig):
        self.session = session
        self.config = config
        self.root = config.namespace_root
        self.version = config.version
        self.query_timeout_ms = config.query_timeout_in_ms
        self.readiness = Readiness.UNINITIALIZED
        self._closed = False

    @property
    def available(self) -> bool:
        return self.readiness == Readiness.AVAILABLE

    def initialize(self) -> Readiness:
        """Probe the backend, make sure the database exists and apply TTL.

        A storage that was shut down stays shut down, its pool is closed.
        """
        if self._closed:
            logger.warning("IoTDB history storage is shut down, skip init")
            return self.readiness
        self.readiness = Readiness.PROBING
        if self.session is None:
            self.readiness = Readiness.UNAVAILABLE
            return self.readiness
        try:
            self.session.probe()
            self._create_database()
        except StorageError as e:
            self._handle(e, "IoTDB init failed", ErrorKind.CONNECTIVITY)
            self.readiness = Readiness.UNAVAILABLE
            return self.readiness

        self.readiness = Readiness.AVAILABLE
        try:
            self._init_ttl(self.config.expire_time)
        except StorageError as e:
            self._handle(e, f"IoTDB init ttl error, expireTime: {self.config.expire_time}")
        logger.info("IotDB session pool init success")
        return self.readiness

    def _create_database(self) -> None:
        if self.version != IoTDBVersion.V_1_0:
            return
        with self.session.execute_query(show_database_statement(self.root)) as cursor:
            exists = cursor.has_next()
        if not exists:
            self.session.execute_statement(create_database_statement(self.root))
            logger.info(f"created IoTDB database {self.root}")

    def _init_ttl(self, expire_time: Optional[str]) -> None:
        if not expire_time:
            return
        try:
            if expire_time == NEVER_EXPIRE:
                # drop a TTL that may already exist
                self.session.execute_statement(cancel_ttl_statement(self.root))
            else:
                self.session.execute_statement(set_ttl_statement(self.root, expire_time))
        except BackendError as e:
            raise StorageError(str(e), ErrorKind.TTL_CONFIGURATION) from e

    def shutdown(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.readiness = Readiness.SHUTDOWN
        if self.session is None:
            return
        try:
            self.session.close()
        except StorageError as e:
            self._handle(e, "IotDB session pool close failed")
            return
        logger.info("IotDB session pool closed")

    def _handle(self, error: StorageError, context: str, kind: Optional[ErrorKind] = None) -> None:
        """Single mapping from error kind to log line, nothing is re-raised."""
        kind = kind or error.kind
        if kind == ErrorKind.TTL_CONFIGURATION:
            # Failure does not affect the primary business
            logger.error(f"{context}, error: {error}")
        elif kind == ErrorKind.DECODE:
            logger.error(f"{context}, decode error: {error}")
        else:
            logger.error(f"{context}, {kind.value} error: {error}", exc_info=error)

    def _log_unavailable(self) -> None:
        if self.readiness == Readiness.SHUTDOWN:
            logger.warning(SHUTDOWN_MESSAGE)
        else:
            logger.error(UNAVAILABLE_MESSAGE)

    def save_data(self, data: MetricsData) -> Optional[WriteReport]:
        """
        Persist one snapshot, fire and forget.

        Failures are logged, never raised. The returned report is informational
        only: None when nothing was attempted, otherwise the written and failed
        devices. Callers must not rely on it for retries.
        """
        if not self.available:
            self._log_unavailable()
            return None
        if not data.is_success:
            return None
        if not data.values:
            logger.info(f"[warehouse iotdb] flush metrics data {data.id} is null, ignore.")
            return None
        batches = assemble(data, self.root, self.version)
        if not batches:
            return None
        report = write_batches(self.session, batches)
        if not report.ok:
            logger.error(f"[warehouse iotdb] {len(report.failed)} of "
                         f"{len(report.failed) + len(report.written)} batches of monitor {data.id} not saved")
        return report

    def get_history(self, monitor_id: int, app: str, metrics: str, metric: str,
                    label: Optional[str] = None, history: str = "6h") -> InstanceMap:
        return self._select(monitor_id, app, metrics, metric, label, history,
                            history_query, decode_history, "select error history sql")

    def get_history_interval(self, monitor_id: int, app: str, metrics: str, metric: str,
                             label: Optional[str] = None, history: str = "6h") -> InstanceMap:
        return self._select(monitor_id, app, metrics, metric, label, history,
                            history_interval_query, decode_history_interval,
                            "select error history interval sql")

    def _select(self, monitor_id: int, app: str, metrics: str, metric: str,
                label: Optional[str], history: str,
                build_query: Callable[[str, str, str], str], decoder: Decoder,
                context: str) -> InstanceMap:
        values_map: InstanceMap = {}
        if not self.available:
            self._log_unavailable()
            return values_map

        path = EntityPath(self.root, app, metrics, monitor_id, label,
                          use_quote=True, version=self.version)
        resolver = InstanceResolver(self.session, self.query_timeout_ms)
        for instance, target in resolver.plan(path, label):
            sql = build_query(metric, target.device_id, history)
            try:
                self._run(sql, instance, decoder, values_map)
            except StorageError as e:
                self._handle(e, f"{context}: {sql}")
        return values_map

    def _run(self, sql: str, instance: str, decoder: Decoder, values_map: InstanceMap) -> None:
        cursor = self.session.execute_query(sql, self.query_timeout_ms)
        try:
            logger.debug(f"iot select sql: {sql}")
            decoder(cursor, instance, values_map)
        finally:
            # need to close the result set, otherwise it leaks server side heap
            cursor.close()
