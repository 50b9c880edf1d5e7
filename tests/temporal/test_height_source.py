"""
Height Source Tests
===================

Live counting, monotonicity and replay from a recorded height log.
"""

import pytest

from entrystore import EntryStore, Identity, LogicalHeight
from entrystore.temporal import HeightLogExhausted


class TestLiveHeight:

    def test_starts_at_given_height(self):
        assert LogicalHeight.live(42).current_height() == 42

    def test_advance(self):
        height = LogicalHeight.live(0)
        assert height.advance(5) == 5
        assert height.advance() == 6
        assert height.current_height() == 6

    def test_cannot_go_backwards(self):
        height = LogicalHeight.live(10)
        with pytest.raises(ValueError):
            height.advance(-1)

    def test_negative_start_rejected(self):
        with pytest.raises(ValueError):
            LogicalHeight.live(-1)

    def test_reads_are_counted(self):
        height = LogicalHeight.live(0)
        height.current_height()
        height.current_height()
        assert height.read_count() == 2

    def test_unrecorded_source_keeps_no_log(self, tmp_path):
        height = LogicalHeight.live(7)
        for _ in range(1000):
            height.current_height()

        assert height.read_count() == 1000
        assert height._log == []
        with pytest.raises(RuntimeError):
            height.save_log(tmp_path / "heights.json")

    def test_store_default_source_does_not_record(self):
        store = EntryStore()
        alice = Identity("alice")
        store.create_entry(alice, "x")
        for _ in range(50):
            store.configure_deadline(alice, 3)

        assert store.height_source.read_count() == 50
        assert store.height_source._log == []


class TestReplay:

    def test_replay_reproduces_deadlines(self, tmp_path):
        log_path = tmp_path / "heights.json"
        alice, bob = Identity("alice"), Identity("bob")

        live = LogicalHeight.live(100, record=True)
        store = EntryStore(height_source=live)
        store.create_entry(alice, "a")
        store.create_entry(bob, "b")
        first = store.configure_deadline(alice, 5).value
        live.advance(30)
        second = store.configure_deadline(bob, 5).value
        live.save_log(log_path)

        replay = LogicalHeight.from_log(log_path)
        assert not replay.is_live()
        store = EntryStore(height_source=replay)
        store.create_entry(alice, "a")
        store.create_entry(bob, "b")
        assert store.configure_deadline(alice, 5).value == first
        assert store.configure_deadline(bob, 5).value == second

    def test_exhausted_log_raises(self, tmp_path):
        log_path = tmp_path / "heights.json"
        live = LogicalHeight.live(3, record=True)
        live.current_height()
        live.save_log(log_path)

        replay = LogicalHeight.from_log(log_path)
        assert replay.current_height() == 3
        with pytest.raises(HeightLogExhausted):
            replay.current_height()

    def test_replay_cannot_advance(self, tmp_path):
        log_path = tmp_path / "heights.json"
        LogicalHeight.live(0, record=True).save_log(log_path)
        with pytest.raises(RuntimeError):
            LogicalHeight.from_log(log_path).advance(1)

    def test_non_monotonic_log_rejected(self, tmp_path):
        log_path = tmp_path / "heights.json"
        log_path.write_text('{"version": "1.0", "heights": [5, 4]}')
        with pytest.raises(ValueError):
            LogicalHeight.from_log(log_path)
