"""Unit tests for instance discovery and query planning"""
from warehouse.store.fanout import InstanceResolver
from warehouse.store.identifiers import EntityPath
from warehouse.store.queries import show_devices_query
from warehouse.store.session import RowRecord

PATH = EntityPath("root", "app", "set", 1, use_quote=True)
SHOW = show_devices_query(PATH.prefix)


class TestResolve:
    """Device discovery"""

    def test_discovers_instances(self, session):
        session.responses[SHOW] = [
            RowRecord(0, ["root.app.set.1.instA"]),
            RowRecord(0, ["root.app.set.1.instB"]),
        ]
        resolver = InstanceResolver(session, 500)

        assert resolver.resolve(PATH) == ["instA", "instB"]
        assert session.queries == ["SHOW DEVICES root.`app`.`set`.`1`.*"]
        assert session.timeouts == [500]
        assert all(c.closed for c in session.cursors)

    def test_foreign_devices_are_skipped(self, session):
        session.responses[SHOW] = [
            RowRecord(0, ["root.app.set.1.instA"]),
            RowRecord(0, ["root.other.set.1.x"]),
        ]
        assert InstanceResolver(session).resolve(PATH) == ["instA"]

    def test_discovery_failure_yields_no_instances(self, session):
        session.failing_queries.add(SHOW)
        assert InstanceResolver(session).resolve(PATH) == []

    def test_cursor_closed_when_fetch_fails(self, session):
        session.responses[SHOW] = [RowRecord(0, ["root.app.set.1.instA"])]
        session.fail_after[SHOW] = 0

        assert InstanceResolver(session).resolve(PATH) == []
        assert session.cursors[0].closed


class TestPlan:
    """Query targets per instance"""

    def test_explicit_label_skips_discovery(self, session):
        plan = InstanceResolver(session).plan(PATH, "instA")

        assert session.queries == []
        assert [(key, target.device_id) for key, target in plan] == [("", "root.`app`.`set`.`1`.`instA`")]

    def test_no_children_falls_back_to_bare_path(self, session):
        plan = InstanceResolver(session).plan(PATH, None)

        assert [(key, target.device_id) for key, target in plan] == [("", "root.`app`.`set`.`1`")]

    def test_one_target_per_child(self, session):
        session.responses[SHOW] = [
            RowRecord(0, ["root.app.set.1.instA"]),
            RowRecord(0, ["root.app.set.1.instB"]),
        ]
        plan = InstanceResolver(session).plan(PATH, None)

        assert [(key, target.device_id) for key, target in plan] == [
            ("instA", "root.`app`.`set`.`1`.`instA`"),
            ("instB", "root.`app`.`set`.`1`.`instB`"),
        ]
