"""
Priority watchlist: rules that flag option positions needing attention and
the scorer that ranks them.

Usage:
    from icc.watchlist import WatchlistScorer, build_watchlist

    watchlist = build_watchlist(positions, PriceTable(quotes))
"""

from icc.watchlist.rules import (
    ExpiringSoonRule,
    HighDeltaRule,
    InTheMoneyRule,
    NearStrikeRule,
    RuleMatch,
    ScoringContext,
    default_rules,
)
from icc.watchlist.scorer import (
    DEFAULT_WATCHLIST_SIZE,
    ScoringRule,
    WatchlistScorer,
    build_watchlist,
    distance_to_strike,
    summarize_watchlist,
)

__all__ = [
    "InTheMoneyRule",
    "HighDeltaRule",
    "NearStrikeRule",
    "ExpiringSoonRule",
    "RuleMatch",
    "ScoringContext",
    "default_rules",
    "DEFAULT_WATCHLIST_SIZE",
    "ScoringRule",
    "WatchlistScorer",
    "build_watchlist",
    "distance_to_strike",
    "summarize_watchlist",
]
