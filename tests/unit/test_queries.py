"""Unit tests for IoTDB statement building"""
from warehouse.store.queries import (
    cancel_ttl_statement,
    create_database_statement,
    history_interval_query,
    history_query,
    set_ttl_statement,
    show_database_statement,
    show_devices_query,
)

DEVICE = "root.warehouse.`linux`.`cpu`.`1`"


class TestHistoryQueries:

    def test_raw_history(self):
        sql = history_query("usage", DEVICE, "7d")
        assert sql == ("SELECT `usage` FROM root.warehouse.`linux`.`cpu`.`1` "
                       "WHERE Time >= now() - 7d order by Time desc")

    def test_interval_history_uses_4h_buckets(self):
        sql = history_interval_query("usage", DEVICE, "1d")
        assert sql == ("SELECT FIRST_VALUE(`usage`), AVG(`usage`), MIN_VALUE(`usage`), MAX_VALUE(`usage`) "
                       "FROM root.warehouse.`linux`.`cpu`.`1` GROUP BY ([now() - 1d, now()), 4h)")

    def test_reserved_metric_name_is_quoted(self):
        assert "SELECT `nodes` FROM" in history_query("nodes", DEVICE, "6h")

    def test_quoted_metric_name_is_not_quoted_twice(self):
        assert "SELECT `usage` FROM" in history_query("`usage`", DEVICE, "6h")

    def test_lookback_is_passed_through(self):
        assert "now() - 90m" in history_query("usage", DEVICE, "90m")


class TestDiscoveryAndSetup:

    def test_show_devices(self):
        assert show_devices_query(DEVICE) == "SHOW DEVICES root.warehouse.`linux`.`cpu`.`1`.*"

    def test_database_statements(self):
        assert show_database_statement("root.warehouse") == "show databases root.warehouse"
        assert create_database_statement("root.warehouse") == "create database root.warehouse"

    def test_ttl_statements(self):
        assert set_ttl_statement("root.warehouse", "604800000") == "set ttl to root.warehouse 604800000"
        assert cancel_ttl_statement("root.warehouse") == "unset ttl to root.warehouse"
