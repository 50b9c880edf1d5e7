"""
Observability Tests
===================

Every store call is logged with its outcome; content never is.
"""

from entrystore import EntryStore, EntryStoreConfig, Identity
from entrystore.contracts.events import AuditEventType
from entrystore.observability import ObservabilityConfig


ALICE = Identity("alice")


class TestOperationLog:

    def test_one_entry_per_call(self):
        store = EntryStore()
        store.create_entry(ALICE, "secret text")
        store.fetch_entry(ALICE)
        store.create_entry(ALICE, "again")

        log = store.observability.get_operation_log(identity="alice")
        assert [e.action for e in log] == ["create_entry", "fetch_entry", "create_entry"]
        assert [e.outcome for e in log] == ["success", "success", "DUPLICATE_ENTRY"]
        assert log[1].event_type == AuditEventType.QUERY
        assert log[2].event_type == AuditEventType.REJECTION
        assert ("status", "409") in log[2].metadata

    def test_content_is_never_logged(self):
        store = EntryStore()
        store.create_entry(ALICE, "secret text")
        for entry in store.observability.get_operation_log():
            assert "secret" not in repr(entry)

    def test_log_is_bounded(self):
        config = EntryStoreConfig(observability=ObservabilityConfig(oplog_capacity=3))
        store = EntryStore(config)
        for _ in range(10):
            store.diagnostics(ALICE)

        assert len(store.observability.get_operation_log()) == 3
        report = store.observability.generate_report()
        assert report['total_entries'] == 3
        assert report['total_collected'] == 10


class TestMetrics:

    def test_operation_counter(self):
        store = EntryStore()
        store.create_entry(ALICE, "x")
        store.create_entry(ALICE, "x")
        metrics = store.observability.get_metrics()
        assert metrics.value(
            "entry_operations_total", {"operation": "create_entry", "outcome": "success"}
        ) == 1
        assert metrics.value(
            "entry_operations_total", {"operation": "create_entry", "outcome": "DUPLICATE_ENTRY"}
        ) == 1

    def test_entries_present_gauge(self):
        store = EntryStore()
        store.create_entry(ALICE, "x")
        store.delegate_entry(Identity("bob"), "y")
        metrics = store.observability.get_metrics()
        assert metrics.value("entries_present") == 2

        store.delete_entry(ALICE)
        assert metrics.value("entries_present") == 1

    def test_metrics_can_be_disabled(self):
        config = EntryStoreConfig(observability=ObservabilityConfig(enable_metrics=False))
        store = EntryStore(config)
        store.create_entry(ALICE, "x")
        assert store.observability.get_metrics() is None
        assert len(store.observability.get_operation_log()) == 1


class TestReport:

    def test_report_groups_by_action_and_outcome(self):
        store = EntryStore()
        store.create_entry(ALICE, "x")
        store.assign_priority(ALICE, 9)
        report = store.observability.generate_report()
        assert report['by_action'] == {"create_entry": 1, "assign_priority": 1}
        assert report['by_outcome'] == {"success": 1, "INVALID_PARAMETER": 1}
