"""
Portfolio analytics and the refresh pipeline that produces PortfolioSnapshot.
"""

from icc.portfolio.analytics import (
    compute_kpis,
    expiry_buckets,
    expiry_groups,
    options_totals,
    portfolio_greeks,
    risk_metrics,
    sector_allocation,
    stock_weights,
    stress_test_pnl,
)
from icc.portfolio.snapshot import build_snapshot, enrich_positions

__all__ = [
    "compute_kpis",
    "expiry_buckets",
    "expiry_groups",
    "options_totals",
    "portfolio_greeks",
    "risk_metrics",
    "sector_allocation",
    "stock_weights",
    "stress_test_pnl",
    "build_snapshot",
    "enrich_positions",
]
