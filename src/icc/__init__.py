"""
Investment Control Center

Options portfolio monitoring library: roll tracking with break-even prices,
a priority watchlist scorer, portfolio analytics and pluggable data sources.

Usage:
    from icc.rolls import aggregate_rolls, apply_roll_summary
    from icc.watchlist import build_watchlist
    from icc.portfolio import build_snapshot
"""

__version__ = "0.1.0"
