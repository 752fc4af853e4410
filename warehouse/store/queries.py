"""
IoTDB statements used by the history storage.

The lookback window (eg: "7d", "6h") is a backend duration literal and is
interpolated as given. Metric names are always quoted since they may clash
with reserved words.
"""

from .identifiers import quote

INTERVAL_BUCKET = "4h"

SHOW_STORAGE_GROUP = "show storage group"
SHOW_DATABASE = "show databases {database}"
CREATE_DATABASE = "create database {database}"
SET_TTL = "set ttl to {database} {expire_time}"
CANCEL_TTL = "unset ttl to {database}"
SHOW_DEVICES = "SHOW DEVICES {device}.*"

QUERY_HISTORY_SQL = "SELECT {metric} FROM {device} WHERE Time >= now() - {history} order by Time desc"
QUERY_HISTORY_INTERVAL_SQL = (
    "SELECT FIRST_VALUE({metric}), AVG({metric}), MIN_VALUE({metric}), MAX_VALUE({metric}) "
    "FROM {device} GROUP BY ([now() - {history}, now()), {bucket})"
)


def history_query(metric: str, device_id: str, history: str) -> str:
    return QUERY_HISTORY_SQL.format(metric=quote(metric), device=device_id, history=history)


def history_interval_query(metric: str, device_id: str, history: str) -> str:
    return QUERY_HISTORY_INTERVAL_SQL.format(
        metric=quote(metric), device=device_id, history=history, bucket=INTERVAL_BUCKET
    )


def show_devices_query(prefix: str) -> str:
    return SHOW_DEVICES.format(device=prefix)


def show_database_statement(database: str) -> str:
    return SHOW_DATABASE.format(database=database)


def create_database_statement(database: str) -> str:
    return CREATE_DATABASE.format(database=database)


def set_ttl_statement(database: str, expire_time: str) -> str:
    return SET_TTL.format(database=database, expire_time=expire_time)


def cancel_ttl_statement(database: str) -> str:
    return CANCEL_TTL.format(database=database)
