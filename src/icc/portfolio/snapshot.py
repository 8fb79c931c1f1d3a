"""
Refresh Pipeline

One data refresh flows one way:

    option rows + roll history -> roll aggregator -> enriched positions
    enriched positions + prices -> watchlist scorer -> watchlist
    enriched positions + stocks + NAV -> analytics -> snapshot

The resulting PortfolioSnapshot is immutable; the presentation layer only
reads it.
"""

from datetime import date
from typing import Optional, Sequence

from loguru import logger

from icc.config.settings import AppConfig
from icc.market.prices import PriceLookup
from icc.models.derived import PortfolioSnapshot
from icc.models.positions import NAVRecord, OptionPosition, StockPosition
from icc.portfolio.analytics import (
    compute_kpis,
    expiry_buckets,
    expiry_groups,
    options_totals,
    portfolio_greeks,
    risk_metrics,
    sector_allocation,
)
from icc.rolls.aggregator import apply_roll_summary
from icc.rolls.store import RollHistoryStore
from icc.watchlist.scorer import WatchlistScorer, summarize_watchlist


def enrich_positions(
    positions: Sequence[OptionPosition],
    roll_store: Optional[RollHistoryStore] = None,
) -> list[OptionPosition]:
    """
    Derive roll fields for every position.

    History comes from the store when it knows the position, otherwise from
    the position's own roll_history.

    Raises:
        InvalidPositionError: If a position has no risk-bearing size
    """
    enriched = []
    for position in positions:
        history = None
        if roll_store is not None and position.id in roll_store:
            history = roll_store.history(position.id)
        enriched.append(apply_roll_summary(position, history))
    return enriched


def build_snapshot(
    option_positions: Sequence[OptionPosition],
    stocks: Sequence[StockPosition],
    nav_history: Sequence[NAVRecord],
    price_lookup: PriceLookup,
    roll_store: Optional[RollHistoryStore] = None,
    config: Optional[AppConfig] = None,
    as_of: Optional[date] = None,
) -> PortfolioSnapshot:
    """
    Run one refresh and return the snapshot.

    Args:
        option_positions: Option positions as loaded (roll fields not required)
        stocks: Stock holdings
        nav_history: NAV records (any order)
        price_lookup: Underlying -> price, None when unknown
        roll_store: Roll history keyed by position id
        config: Application config (watchlist size and fallback markup)
        as_of: Reference date for DTE (default: today)

    Returns:
        PortfolioSnapshot
    """
    config = config or AppConfig()
    as_of = as_of or date.today()

    positions = enrich_positions(option_positions, roll_store)
    nav_series = tuple(sorted(nav_history, key=lambda record: record.date))

    scorer = WatchlistScorer(limit=config.watchlist.size, fallback_markup=config.watchlist.fallback_markup)
    watchlist = scorer.score(positions, price_lookup, as_of=as_of)

    snapshot = PortfolioSnapshot(
        option_positions=tuple(positions),
        stock_positions=tuple(stocks),
        watchlist=tuple(watchlist),
        watchlist_summary=summarize_watchlist(watchlist),
        options_totals=options_totals(positions),
        expiry_groups=tuple(expiry_groups(positions, as_of)),
        expiry_buckets=tuple(expiry_buckets(positions, as_of)),
        greeks=portfolio_greeks(positions),
        sector_allocation=tuple(sector_allocation(stocks)),
        kpis=compute_kpis(nav_series, positions, stocks),
        risk=risk_metrics(nav_series) if nav_series else None,
        nav_history=nav_series,
        as_of=as_of,
    )

    logger.info(
        f"Snapshot built: {len(positions)} options ({len(snapshot.rolled_positions)} rolled), "
        f"{len(stocks)} stocks, {len(watchlist)} on watchlist"
    )
    return snapshot
