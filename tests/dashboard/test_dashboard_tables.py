"""
Tests for dashboard data functions

The table helpers are pure functions of the snapshot; load_snapshot is run
against the mock book.
"""

import pytest

from icc.config import AppConfig
from icc.dashboard.components.nav_chart import nav_figure
from icc.dashboard.data import (
    dashboard_env,
    expiry_bucket_table,
    load_snapshot,
    nav_table,
    option_positions_table,
    refresh_window,
    roll_history_table,
    sector_table,
    stocks_table,
    watchlist_table,
)
from icc.market import PriceTable
from icc.portfolio import build_snapshot


@pytest.fixture
def snapshot(as_of):
    """Snapshot of the default mock book."""
    return load_snapshot(AppConfig(), as_of=as_of)


class TestLoadSnapshot:
    def test_mock_snapshot(self, snapshot, as_of):
        assert snapshot.as_of == as_of
        assert len(snapshot.option_positions) > 0
        assert len(snapshot.stock_positions) == 8

    def test_connection_ignored_when_mock_enabled(self, as_of):
        config = AppConfig(
            connection={
                "name": "Portfolio DB",
                "connection_type": "mssql",
                "host": "db.local",
                "port": 1433,
                "database_name": "portfolio",
                "username": "reader",
            }
        )

        assert load_snapshot(config, as_of=as_of).option_positions


class TestTables:
    def test_watchlist_table(self, snapshot):
        df = watchlist_table(snapshot)

        assert len(df) == len(snapshot.watchlist)
        if len(df):
            assert list(df["Score"]) == sorted(df["Score"], reverse=True)

    def test_option_positions_table(self, snapshot, as_of):
        df = option_positions_table(snapshot.option_positions, as_of)

        assert len(df) == len(snapshot.option_positions)
        assert {"Strike", "Expiry", "Rolls", "Break-even"} <= set(df.columns)

    def test_roll_history_table(self, make_option, sample_rolls):
        position = make_option(
            roll_history=sample_rolls, roll_count=2, is_rolled=True,
            total_roll_credits=3500.0, total_realized_pl=-200.0,
        )

        df = roll_history_table(position)

        assert list(df["Credit"]) == [2000.0, 1500.0]

    def test_stocks_table_weights_sum_to_100(self, snapshot):
        df = stocks_table(snapshot)

        assert df["Weight %"].sum() == pytest.approx(100.0)

    def test_sector_and_bucket_tables(self, snapshot):
        assert sector_table(snapshot)["Percentage"].sum() == pytest.approx(100.0)
        assert list(expiry_bucket_table(snapshot)["Bucket"]) == ["0-7d", "8-30d", "31-60d", "60d+"]

    def test_nav_table(self, snapshot):
        df = nav_table(snapshot)

        assert len(df) == 90
        assert list(df.columns) == ["Date", "Cash", "Securities", "Options", "Total"]
        assert df["Date"].is_monotonic_increasing

    def test_nav_table_without_history(self, make_option, as_of):
        snapshot = build_snapshot([make_option()], [], [], PriceTable(), as_of=as_of)

        assert nav_table(snapshot).empty


class TestNavFigure:
    def test_stacked_asset_classes_and_total(self, snapshot):
        fig = nav_figure(nav_table(snapshot))

        assert [trace.name for trace in fig.data] == ["Cash", "Securities", "Options", "Total"]
        assert {trace.stackgroup for trace in fig.data[:3]} == {"nav"}
        assert fig.data[3].stackgroup is None
        assert len(fig.data[3].x) == 90


class TestDashboardEnvironment:
    def test_env_from_launcher(self, monkeypatch):
        monkeypatch.setenv("ICC_ENV", "prod")

        assert dashboard_env() == "prod"

    def test_default_env(self, monkeypatch):
        monkeypatch.delenv("ICC_ENV", raising=False)

        assert dashboard_env() == "default"

    def test_refresh_window_changes_once_per_ttl(self):
        windows = [refresh_window(30, now=t) for t in (0.0, 29.9, 30.0, 59.9, 60.0)]

        assert windows == [0, 0, 1, 1, 2]
