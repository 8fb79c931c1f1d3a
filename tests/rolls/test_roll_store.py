"""Tests for RollHistoryStore."""

import pytest

from icc.exceptions import RollOrderError
from icc.rolls import RollHistoryStore


class TestRollHistoryStore:
    """Test the append-only roll log."""

    def test_empty_store(self):
        store = RollHistoryStore()

        assert len(store) == 0
        assert store.history("put-AAPL-1") == ()
        assert "put-AAPL-1" not in store
        assert store.position_ids() == []

    def test_append_keeps_order(self, sample_rolls):
        store = RollHistoryStore()
        store.extend("put-AAPL-1", sample_rolls)

        assert store.history("put-AAPL-1") == sample_rolls
        assert "put-AAPL-1" in store
        assert len(store) == 2

    def test_same_timestamp_is_allowed(self, make_roll):
        store = RollHistoryStore()
        store.append("p1", make_roll(day=5))
        store.append("p1", make_roll(day=5, credit=50.0))

        assert len(store.history("p1")) == 2

    def test_out_of_order_append_raises(self, make_roll):
        store = RollHistoryStore()
        store.append("p1", make_roll(day=10))

        with pytest.raises(RollOrderError):
            store.append("p1", make_roll(day=3))

        assert len(store.history("p1")) == 1

    def test_positions_are_independent(self, make_roll):
        store = RollHistoryStore()
        store.append("p1", make_roll(day=10))
        store.append("p2", make_roll(day=3))

        assert sorted(store.position_ids()) == ["p1", "p2"]
        assert len(store) == 2

    def test_history_is_immutable_copy(self, make_roll):
        store = RollHistoryStore()
        store.append("p1", make_roll())

        history = store.history("p1")
        store.append("p1", make_roll(day=2))

        assert len(history) == 1

    def test_lookup_does_not_register_position(self):
        store = RollHistoryStore()
        store.history("p1")

        assert store.position_ids() == []
