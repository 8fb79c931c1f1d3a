"""
Portfolio Analytics

Aggregates over option positions, stock holdings and NAV history, computed
with Polars. All functions are pure: same inputs, same outputs, no I/O.

Conventions:
- Delta and gamma exposures are share-equivalent: greek * |quantity| * multiplier
- Theta and vega are already position-level and are summed as-is
- Missing Greeks count as 0
- Percentages are in percent units (12.5 means 12.5%)
"""

import math
from datetime import date
from typing import Optional, Sequence

import polars as pl

from icc.models.derived import (
    ExpiryBucket,
    ExpiryGroup,
    KPIData,
    OptionsTotals,
    PortfolioGreeks,
    RiskMetrics,
    SectorAllocation,
)
from icc.models.positions import NAVRecord, OptionPosition, StockPosition

EXPIRY_BUCKETS: list[tuple[str, int, Optional[int]]] = [
    ("0-7d", 0, 7),
    ("8-30d", 8, 30),
    ("31-60d", 31, 60),
    ("60d+", 61, None),
]

TRADING_DAYS_PER_YEAR = 252
UNKNOWN_SECTOR = "Other"

OPTIONS_SCHEMA = {
    "idx": pl.Int64,
    "exp_date": pl.Date,
    "dte": pl.Int64,
    "contracts": pl.Int64,
    "capital_at_risk": pl.Float64,
    "premium_collected": pl.Float64,
    "unrealized_pl": pl.Float64,
    "delta": pl.Float64,
    "gamma": pl.Float64,
    "theta": pl.Float64,
    "vega": pl.Float64,
}


def options_frame(positions: Sequence[OptionPosition], as_of: Optional[date] = None) -> pl.DataFrame:
    """
    Option positions as a DataFrame (one row per position).

    `idx` is the position's index in the input sequence; `contracts` is the
    risk-bearing size |quantity| * multiplier.
    """
    as_of = as_of or date.today()
    rows = [
        {
            "idx": i,
            "exp_date": p.exp_date,
            "dte": p.days_to_expiry(as_of),
            "contracts": p.contract_size,
            "capital_at_risk": p.capital_at_risk,
            "premium_collected": p.premium_collected_to_date,
            "unrealized_pl": p.unrealized_pl,
            "delta": p.delta or 0.0,
            "gamma": p.gamma or 0.0,
            "theta": p.theta or 0.0,
            "vega": p.vega or 0.0,
        }
        for i, p in enumerate(positions)
    ]
    return pl.DataFrame(rows, schema=OPTIONS_SCHEMA)


def options_totals(positions: Sequence[OptionPosition]) -> OptionsTotals:
    """Count, capital at risk, premium, P/L, delta exposure and theta."""
    if not positions:
        return OptionsTotals()

    df = options_frame(positions)
    totals = df.select(
        pl.len().alias("positions"),
        pl.col("capital_at_risk").sum(),
        pl.col("premium_collected").sum(),
        pl.col("unrealized_pl").sum(),
        (pl.col("delta") * pl.col("contracts")).sum().alias("delta"),
        pl.col("theta").sum(),
    ).row(0, named=True)

    return OptionsTotals(
        positions=int(totals["positions"]),
        capital_at_risk=float(totals["capital_at_risk"]),
        premium_collected=float(totals["premium_collected"]),
        unrealized_pl=float(totals["unrealized_pl"]),
        delta=float(totals["delta"]),
        theta=float(totals["theta"]),
    )


def expiry_groups(positions: Sequence[OptionPosition], as_of: Optional[date] = None) -> list[ExpiryGroup]:
    """
    Group positions by expiry date, nearest expiry first.

    Within a group positions keep their input order.
    """
    if not positions:
        return []

    df = options_frame(positions, as_of)
    grouped = (
        df.group_by("exp_date", maintain_order=True)
        .agg(
            pl.col("idx"),
            pl.col("dte").first(),
            pl.col("capital_at_risk").sum(),
            pl.col("premium_collected").sum(),
            (pl.col("delta") * pl.col("contracts")).sum().alias("delta"),
        )
        .sort("exp_date")
    )

    return [
        ExpiryGroup(
            exp_date=row["exp_date"],
            dte=int(row["dte"]),
            positions=tuple(positions[i] for i in row["idx"]),
            total_capital_at_risk=float(row["capital_at_risk"]),
            total_premium_collected=float(row["premium_collected"]),
            total_delta=float(row["delta"]),
        )
        for row in grouped.iter_rows(named=True)
    ]


def expiry_buckets(positions: Sequence[OptionPosition], as_of: Optional[date] = None) -> list[ExpiryBucket]:
    """
    Capital at risk per DTE bucket.

    Percentages are relative to the capital at risk of all positions passed
    in. Expired positions (dte < 0) fall in no bucket.
    """
    df = options_frame(positions, as_of)
    total_risk = float(df["capital_at_risk"].sum()) if len(df) else 0.0

    buckets = []
    for label, min_dte, max_dte in EXPIRY_BUCKETS:
        condition = pl.col("dte") >= min_dte
        if max_dte is not None:
            condition = condition & (pl.col("dte") <= max_dte)
        subset = df.filter(condition)
        risk = float(subset["capital_at_risk"].sum()) if len(subset) else 0.0
        buckets.append(
            ExpiryBucket(
                label=label,
                min_dte=min_dte,
                max_dte=max_dte,
                count=len(subset),
                capital_at_risk=risk,
                percentage=risk / total_risk * 100 if total_risk else 0.0,
            )
        )
    return buckets


def portfolio_greeks(positions: Sequence[OptionPosition]) -> PortfolioGreeks:
    if not positions:
        return PortfolioGreeks()

    df = options_frame(positions)
    greeks = df.select(
        (pl.col("delta") * pl.col("contracts")).sum().alias("delta"),
        (pl.col("gamma") * pl.col("contracts")).sum().alias("gamma"),
        pl.col("theta").sum(),
        pl.col("vega").sum(),
    ).row(0, named=True)

    return PortfolioGreeks(
        delta=float(greeks["delta"]),
        gamma=float(greeks["gamma"]),
        theta=float(greeks["theta"]),
        vega=float(greeks["vega"]),
    )


def stress_test_pnl(
    greeks: PortfolioGreeks,
    spot_move_pct: float,
    iv_move_pct: float,
    nav_total: float,
) -> float:
    """
    Approximate P/L for a spot and implied-volatility shock.

    Simplified Taylor expansion used by the risk view:
        delta_pl = delta * spot_move * nav_total * 0.01
        gamma_pl = 0.5 * gamma * (spot_move * 100) ** 2
        vega_pl  = vega * iv_move * 100

    Args:
        greeks: Portfolio Greeks
        spot_move_pct: Underlying move in percent (e.g. -10 for -10%)
        iv_move_pct: Implied volatility move in percent
        nav_total: Current NAV

    Returns:
        Estimated P/L in account currency
    """
    spot_change = spot_move_pct / 100
    iv_change = iv_move_pct / 100

    delta_pl = greeks.delta * spot_change * nav_total * 0.01
    gamma_pl = 0.5 * greeks.gamma * (spot_change * 100) ** 2
    vega_pl = greeks.vega * iv_change * 100
    return delta_pl + gamma_pl + vega_pl


def stocks_frame(stocks: Sequence[StockPosition]) -> pl.DataFrame:
    return pl.DataFrame(
        [
            {"id": s.id, "sector": s.sector or UNKNOWN_SECTOR, "market_value": s.market_value}
            for s in stocks
        ],
        schema={"id": pl.Utf8, "sector": pl.Utf8, "market_value": pl.Float64},
    )


def stock_weights(stocks: Sequence[StockPosition]) -> dict[str, float]:
    """Weight of each holding in total stock value, keyed by position id."""
    total = sum(s.market_value for s in stocks)
    if not total:
        return {s.id: 0.0 for s in stocks}
    return {s.id: s.market_value / total * 100 for s in stocks}


def sector_allocation(stocks: Sequence[StockPosition]) -> list[SectorAllocation]:
    """Stock market value per sector, largest first. Missing sector -> "Other"."""
    if not stocks:
        return []

    df = stocks_frame(stocks)
    total = float(df["market_value"].sum())
    grouped = (
        df.group_by("sector")
        .agg(pl.col("market_value").sum().alias("value"), pl.len().alias("positions"))
        .sort(["value", "sector"], descending=[True, False])
    )

    return [
        SectorAllocation(
            sector=row["sector"],
            value=float(row["value"]),
            percentage=float(row["value"]) / total * 100 if total else 0.0,
            positions=int(row["positions"]),
        )
        for row in grouped.iter_rows(named=True)
    ]


def compute_kpis(
    nav_history: Sequence[NAVRecord],
    option_positions: Sequence[OptionPosition],
    stocks: Sequence[StockPosition],
) -> KPIData:
    """
    Headline figures.

    NAV change is measured against the previous NAV record (0 with fewer than
    two records). Ratios against NAV are 0 when NAV is 0.
    """
    ordered = sorted(nav_history, key=lambda r: r.date)
    nav_total = ordered[-1].total if ordered else 0.0
    previous = ordered[-2].total if len(ordered) > 1 else nav_total
    nav_change = nav_total - previous

    capital_at_risk = sum(p.capital_at_risk for p in option_positions)
    deltas = [p.delta for p in option_positions if p.delta is not None]
    stock_value = sum(s.market_value for s in stocks)

    def pct_of_nav(value: float) -> float:
        return value / nav_total * 100 if nav_total else 0.0

    return KPIData(
        nav_total=nav_total,
        nav_change=nav_change,
        nav_change_pct=nav_change / previous * 100 if previous else 0.0,
        capital_at_risk=capital_at_risk,
        capital_at_risk_pct=pct_of_nav(capital_at_risk),
        avg_delta=sum(deltas) / len(deltas) if deltas else 0.0,
        stock_value=stock_value,
        stock_value_pct=pct_of_nav(stock_value),
    )


def risk_metrics(
    nav_history: Sequence[NAVRecord],
    periods_per_year: int = TRADING_DAYS_PER_YEAR,
) -> RiskMetrics:
    """
    Return-based risk metrics from NAV history.

    - volatility: annualized std of period returns
    - sharpe_ratio: annualized mean return / volatility (zero risk-free rate)
    - sortino_ratio: annualized mean return / annualized downside deviation
    - max_drawdown: worst peak-to-trough decline as a negative fraction

    Returns all zeros with fewer than two NAV records.
    """
    if len(nav_history) < 2:
        return RiskMetrics()

    df = (
        pl.DataFrame(
            {"date": [r.date for r in nav_history], "nav": [r.total for r in nav_history]},
            schema={"date": pl.Date, "nav": pl.Float64},
        )
        .sort("date")
        .with_columns(
            pl.col("nav").pct_change().alias("ret"),
            (pl.col("nav") / pl.col("nav").cum_max() - 1).alias("drawdown"),
        )
    )
    returns = df["ret"].drop_nulls()

    mean = float(returns.mean())
    std = float(returns.std()) if len(returns) > 1 else 0.0
    downside = math.sqrt(float((returns.clip(upper_bound=0.0) ** 2).mean()))
    scale = math.sqrt(periods_per_year)

    volatility = std * scale
    annual_return = mean * periods_per_year

    return RiskMetrics(
        volatility=volatility,
        sharpe_ratio=annual_return / volatility if volatility else 0.0,
        sortino_ratio=annual_return / (downside * scale) if downside else 0.0,
        max_drawdown=float(df["drawdown"].min()),
    )
