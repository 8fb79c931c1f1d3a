"""
Dashboard Data Functions

Loads the portfolio snapshot for the dashboard and shapes it into pandas
DataFrames for st.dataframe / plotly.

The snapshot is built once per cache window (dashboard.cache_ttl_seconds of
the config environment named by ICC_ENV); the table helpers below are pure
and only read it.
"""

import os
import time
from datetime import date
from typing import Optional

import pandas as pd
import streamlit as st
from loguru import logger

from icc.config import CONFIG_ENV_VAR, AppConfig, load_config
from icc.data import MockDataSource, create_data_source, fetch_portfolio, generate_mock_book
from icc.models import OptionPosition, PortfolioSnapshot
from icc.portfolio import build_snapshot, stock_weights
from icc.utils.formatters import dte_label, format_expiry


def load_snapshot(config: AppConfig, as_of: Optional[date] = None) -> PortfolioSnapshot:
    """
    Fetch portfolio data and build a snapshot.

    Uses the configured database unless mock data is enabled or no
    connection is configured.
    """
    as_of = as_of or date.today()
    if config.dashboard.use_mock_data or config.connection is None:
        source = MockDataSource(generate_mock_book(seed=config.dashboard.mock_seed, as_of=as_of))
        schema = MockDataSource.schema
    else:
        source = create_data_source(config.connection)
        schema = config.connection.schema_name or "public"

    data = fetch_portfolio(source, schema=schema)
    return build_snapshot(
        data.option_positions,
        data.stock_positions,
        data.nav_history,
        data.prices,
        roll_store=data.roll_store,
        config=config,
        as_of=as_of,
    )


def dashboard_env() -> str:
    """Config environment handed over by scripts/run_dashboard.py."""
    return os.environ.get(CONFIG_ENV_VAR, "default")


@st.cache_resource
def get_config(env: str) -> AppConfig:
    return load_config(env)


def refresh_window(ttl_seconds: int, now: Optional[float] = None) -> int:
    """
    Index of the cache window that contains now.

    The snapshot cache is keyed on this index, so a new snapshot is built
    once every ttl_seconds.
    """
    now = time.time() if now is None else now
    return int(now // ttl_seconds)


@st.cache_resource(max_entries=4)
def _cached_snapshot(env: str, window: int) -> PortfolioSnapshot:
    logger.debug(f"Refreshing dashboard snapshot (env={env}, window={window})")
    return load_snapshot(get_config(env))


def get_snapshot(env: Optional[str] = None) -> PortfolioSnapshot:
    """Snapshot for the dashboard, rebuilt every dashboard.cache_ttl_seconds."""
    env = env or dashboard_env()
    config = get_config(env)
    return _cached_snapshot(env, refresh_window(config.dashboard.cache_ttl_seconds))


def clear_cache() -> None:
    """Drop the cached config and snapshot (Refresh Now)."""
    get_config.clear()
    _cached_snapshot.clear()


def watchlist_table(snapshot: PortfolioSnapshot) -> pd.DataFrame:
    """Priority watchlist, most urgent first."""
    rows = [
        {
            "Underlying": item.position.underlying,
            "Type": item.position.put_call.value,
            "Strike": item.position.strike,
            "Price": item.current_price,
            "Distance %": item.distance_to_strike,
            "DTE": item.dte,
            "Reason": item.reason_label,
            "Score": round(item.priority_score, 1),
            "Capital at Risk": item.position.capital_at_risk,
        }
        for item in snapshot.watchlist
    ]
    return pd.DataFrame(rows)


def option_positions_table(positions: tuple[OptionPosition, ...], as_of: date) -> pd.DataFrame:
    rows = [
        {
            "Underlying": p.underlying,
            "Symbol": p.symbol,
            "Type": p.put_call.value,
            "Strike": p.strike,
            "Expiry": format_expiry(p.exp_date),
            "DTE": dte_label(p.days_to_expiry(as_of)),
            "Qty": p.quantity,
            "Capital at Risk": p.capital_at_risk,
            "Collected": p.premium_collected_to_date,
            "Collected %": p.premium_collected_pct,
            "Unrealized P/L": p.unrealized_pl,
            "Delta": p.delta,
            "Rolls": p.roll_count,
            "Break-even": p.break_even_price,
        }
        for p in positions
    ]
    return pd.DataFrame(rows)


def roll_history_table(position: OptionPosition) -> pd.DataFrame:
    """Roll events of one position, oldest first."""
    rows = [
        {
            "Date": entry.roll_date,
            "From": entry.from_symbol,
            "To": entry.to_symbol,
            "From Strike": entry.from_strike,
            "To Strike": entry.to_strike,
            "Credit": entry.credit,
            "Realized P/L": entry.realized_pl,
        }
        for entry in position.roll_history
    ]
    return pd.DataFrame(rows)


def stocks_table(snapshot: PortfolioSnapshot) -> pd.DataFrame:
    weights = stock_weights(snapshot.stock_positions)
    rows = [
        {
            "Symbol": s.symbol,
            "Description": s.description,
            "Sector": s.sector or "Other",
            "Quantity": s.quantity,
            "Market Value": s.market_value,
            "Cost Basis": s.cost_basis,
            "Unrealized P/L": s.unrealized_pl,
            "Weight %": weights[s.id],
        }
        for s in snapshot.stock_positions
    ]
    return pd.DataFrame(rows)


def sector_table(snapshot: PortfolioSnapshot) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"Sector": a.sector, "Value": a.value, "Percentage": a.percentage, "Positions": a.positions}
            for a in snapshot.sector_allocation
        ]
    )


def expiry_bucket_table(snapshot: PortfolioSnapshot) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"Bucket": b.label, "Positions": b.count, "Capital at Risk": b.capital_at_risk, "Percentage": b.percentage}
            for b in snapshot.expiry_buckets
        ]
    )


def nav_table(snapshot: PortfolioSnapshot) -> pd.DataFrame:
    """NAV over time split by asset class, oldest first."""
    return pd.DataFrame(
        [
            {
                "Date": r.date,
                "Cash": r.cash,
                "Securities": r.securities,
                "Options": r.options,
                "Total": r.total,
            }
            for r in snapshot.nav_history
        ],
        columns=["Date", "Cash", "Securities", "Options", "Total"],
    )
