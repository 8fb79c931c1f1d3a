"""
Tests for the refresh pipeline

build_snapshot() wires rolls, watchlist and analytics together; these tests
check the wiring, not the individual calculations.
"""

import pytest

from icc.config import AppConfig
from icc.data import MockDataSource, fetch_portfolio
from icc.market import PriceTable
from icc.portfolio import build_snapshot, enrich_positions
from icc.rolls import RollHistoryStore


class TestEnrichPositions:
    def test_store_history_is_applied(self, make_option, sample_rolls):
        position = make_option(strike=150.0, quantity=-10)
        store = RollHistoryStore()
        store.extend(position.id, sample_rolls)

        [enriched] = enrich_positions([position], store)

        assert enriched.roll_count == 2
        assert enriched.break_even_price == pytest.approx(146.7)

    def test_positions_without_rolls(self, make_option):
        [enriched] = enrich_positions([make_option(strike=90.0)], RollHistoryStore())

        assert enriched.is_rolled is False
        assert enriched.break_even_price == 90.0


class TestBuildSnapshot:
    def test_snapshot_contents(self, make_option, sample_rolls, sample_stocks, sample_nav, as_of):
        rolled = make_option(strike=150.0, delta=-0.4)
        quiet = make_option(underlying="MSFT", strike=300.0, delta=-0.1)
        store = RollHistoryStore()
        store.extend(rolled.id, sample_rolls)

        snapshot = build_snapshot(
            [rolled, quiet],
            sample_stocks,
            sample_nav,
            PriceTable({"AAPL": 145.0, "MSFT": 400.0}),
            roll_store=store,
            as_of=as_of,
        )

        assert snapshot.as_of == as_of
        assert len(snapshot.option_positions) == 2
        assert snapshot.rolled_positions == (snapshot.option_positions[0],)
        assert [item.position.id for item in snapshot.watchlist] == [rolled.id]
        # watchlist entries carry the enriched position
        assert snapshot.watchlist[0].position.is_rolled
        assert snapshot.watchlist_summary.itm == 1
        assert snapshot.options_totals.positions == 2
        assert snapshot.kpis.nav_total == pytest.approx(120_000.0)
        assert snapshot.risk is not None
        assert len(snapshot.sector_allocation) == 2
        assert snapshot.put_positions == snapshot.option_positions
        assert snapshot.call_positions == ()

    def test_watchlist_size_from_config(self, make_option, as_of):
        positions = [make_option(strike=150.0, delta=-0.5) for _ in range(6)]
        config = AppConfig(watchlist={"size": 3})

        snapshot = build_snapshot(positions, [], [], PriceTable({"AAPL": 145.0}), config=config, as_of=as_of)

        assert len(snapshot.watchlist) == 3

    def test_no_nav_history(self, make_option, as_of):
        snapshot = build_snapshot([make_option()], [], [], PriceTable(), as_of=as_of)

        assert snapshot.risk is None
        assert snapshot.kpis.nav_total == 0.0
        assert snapshot.nav_history == ()

    def test_nav_history_is_sorted_and_complete(self, sample_nav, as_of):
        shuffled = [sample_nav[i] for i in (3, 0, 4, 2, 1)]

        snapshot = build_snapshot([], [], shuffled, PriceTable(), as_of=as_of)

        assert snapshot.nav_history == tuple(sample_nav)
        assert [r.date for r in snapshot.nav_history] == sorted(r.date for r in sample_nav)
        assert snapshot.nav_history[-1].cash == pytest.approx(18_000.0)
        assert snapshot.kpis.nav_total == pytest.approx(120_000.0)

    def test_from_mock_book(self, mock_book, as_of):
        data = fetch_portfolio(MockDataSource(mock_book), schema="mock")

        snapshot = build_snapshot(
            data.option_positions,
            data.stock_positions,
            data.nav_history,
            data.prices,
            roll_store=data.roll_store,
            as_of=as_of,
        )

        rolled_ids = {pid for pid, _ in mock_book.roll_entries}
        assert {p.id for p in snapshot.rolled_positions} == rolled_ids
        assert len(snapshot.watchlist) <= 8
        scores = [item.priority_score for item in snapshot.watchlist]
        assert scores == sorted(scores, reverse=True)
        assert len(snapshot.expiry_buckets) == 4
