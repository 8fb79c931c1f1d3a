"""
Derived Values for Portfolio Monitoring

Dataclasses for values computed inside the process on every data refresh:
roll summaries, watchlist entries, analytics aggregates and the immutable
portfolio snapshot handed to the presentation layer.

Key patterns:
- dataclass(frozen=True, slots=True): results are values, never patched in place
- Properties for figures derived from stored fields (net cushion, labels)
- Percentages stored unrounded, rounded only by formatters

Decision tree:
    Is this data internal to my process?
    ├─ Yes → Use dataclass (performance matters) ← WE ARE HERE
    └─ No → Use Pydantic (validation critical)
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional

from icc.models.positions import NAVRecord, OptionPosition, StockPosition


@dataclass(frozen=True, slots=True)
class RollSummary:
    """
    Summary of a position's roll history.

    Attributes:
        roll_count: Number of rolls (== len(roll_history))
        total_roll_credits: Sum of roll credits
        total_realized_pl: Sum of P/L realized by closing prior legs
        is_rolled: True when roll_count > 0
        break_even_price: Underlying price at which the current short leg
            breaks even after all roll cushion (== strike when never rolled)
    """

    roll_count: int
    total_roll_credits: float
    total_realized_pl: float
    is_rolled: bool
    break_even_price: float

    @property
    def net_cushion(self) -> float:
        """Net credit available to absorb a loss on the current leg."""
        return self.total_roll_credits + self.total_realized_pl


class PriorityReason(str, Enum):
    """Why a position is on the priority watchlist."""

    ITM = "itm"
    HIGH_DELTA = "high_delta"
    NEAR_STRIKE = "near_strike"
    EXPIRING_SOON = "expiring_soon"


@dataclass(frozen=True, slots=True)
class PriorityOption:
    """
    Watchlist entry for one option position.

    Ephemeral: recomputed on every scoring pass and never persisted.

    Attributes:
        position: The scored option position
        current_price: Underlying price used for scoring
        distance_to_strike: Signed % distance (negative = through the strike)
        distance_to_strike_abs: Absolute price distance to strike
        priority_score: Urgency score (higher = more urgent)
        reason: Rule that put the position on the watchlist
        dte: Days to expiry at scoring time
    """

    position: OptionPosition
    current_price: float
    distance_to_strike: float
    distance_to_strike_abs: float
    priority_score: float
    reason: PriorityReason
    dte: int

    @property
    def reason_label(self) -> str:
        if self.reason == PriorityReason.ITM:
            return f"ITM by {abs(self.distance_to_strike):.1f}%"
        if self.reason == PriorityReason.HIGH_DELTA:
            return f"Delta {(self.position.delta or 0.0):.2f}"
        if self.reason == PriorityReason.NEAR_STRIKE:
            return f"{abs(self.distance_to_strike):.1f}% from strike"
        return f"{self.dte}d to expiry"


@dataclass(frozen=True, slots=True)
class WatchlistSummary:
    """Watchlist footer figures: counts per reason and capital at risk."""

    itm: int = 0
    high_delta: int = 0
    near_strike: int = 0
    expiring_soon: int = 0
    total_capital_at_risk: float = 0.0


@dataclass(frozen=True, slots=True)
class OptionsTotals:
    """
    Totals over a set of option positions.

    Attributes:
        positions: Number of positions
        capital_at_risk: Sum of capital at risk
        premium_collected: Sum of premium collected to date
        unrealized_pl: Sum of unrealized P/L
        delta: Share-equivalent delta (delta * |quantity| * multiplier)
        theta: Sum of position theta
    """

    positions: int = 0
    capital_at_risk: float = 0.0
    premium_collected: float = 0.0
    unrealized_pl: float = 0.0
    delta: float = 0.0
    theta: float = 0.0


@dataclass(frozen=True, slots=True)
class ExpiryGroup:
    """Option positions sharing one expiry date."""

    exp_date: date
    dte: int
    positions: tuple[OptionPosition, ...]
    total_capital_at_risk: float
    total_premium_collected: float
    total_delta: float


@dataclass(frozen=True, slots=True)
class ExpiryBucket:
    """DTE bucket (0-7d, 8-30d, ...) with its share of capital at risk."""

    label: str
    min_dte: int
    max_dte: Optional[int]
    count: int
    capital_at_risk: float
    percentage: float


@dataclass(frozen=True, slots=True)
class PortfolioGreeks:
    """
    Portfolio-level Greeks.

    Delta and gamma are share-equivalent (scaled by |quantity| * multiplier);
    theta and vega are already position-level currency figures.
    """

    delta: float = 0.0
    gamma: float = 0.0
    theta: float = 0.0
    vega: float = 0.0


@dataclass(frozen=True, slots=True)
class SectorAllocation:
    """Stock market value aggregated per sector."""

    sector: str
    value: float
    percentage: float
    positions: int


@dataclass(frozen=True, slots=True)
class KPIData:
    """
    Headline figures for the dashboard.

    Attributes:
        nav_total: Latest NAV
        nav_change: Change vs previous NAV record
        nav_change_pct: Change in percent (value * 100)
        capital_at_risk: Options capital at risk
        capital_at_risk_pct: Capital at risk as % of NAV
        avg_delta: Mean delta over options with a delta
        stock_value: Stock market value
        stock_value_pct: Stock value as % of NAV
    """

    nav_total: float = 0.0
    nav_change: float = 0.0
    nav_change_pct: float = 0.0
    capital_at_risk: float = 0.0
    capital_at_risk_pct: float = 0.0
    avg_delta: float = 0.0
    stock_value: float = 0.0
    stock_value_pct: float = 0.0


@dataclass(frozen=True, slots=True)
class RiskMetrics:
    """Return-based risk metrics computed from NAV history."""

    volatility: float = 0.0
    sharpe_ratio: float = 0.0
    sortino_ratio: float = 0.0
    max_drawdown: float = 0.0


@dataclass(frozen=True, slots=True)
class PortfolioSnapshot:
    """
    Immutable result of one data refresh.

    Built once per refresh by build_snapshot() and read by the presentation
    layer; nothing is recomputed on render.
    """

    option_positions: tuple[OptionPosition, ...]
    stock_positions: tuple[StockPosition, ...]
    watchlist: tuple[PriorityOption, ...]
    watchlist_summary: WatchlistSummary
    options_totals: OptionsTotals
    expiry_groups: tuple[ExpiryGroup, ...]
    expiry_buckets: tuple[ExpiryBucket, ...]
    greeks: PortfolioGreeks
    sector_allocation: tuple[SectorAllocation, ...]
    kpis: KPIData
    risk: Optional[RiskMetrics] = None
    nav_history: tuple[NAVRecord, ...] = ()
    as_of: date = field(default_factory=date.today)
    generated_at: datetime = field(default_factory=datetime.now)

    @property
    def put_positions(self) -> tuple[OptionPosition, ...]:
        return tuple(p for p in self.option_positions if p.is_put)

    @property
    def call_positions(self) -> tuple[OptionPosition, ...]:
        return tuple(p for p in self.option_positions if not p.is_put)

    @property
    def rolled_positions(self) -> tuple[OptionPosition, ...]:
        return tuple(p for p in self.option_positions if p.is_rolled)
