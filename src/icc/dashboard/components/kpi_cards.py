"""
KPI Card Components

Headline metric rows for the overview page.
"""

import streamlit as st

from icc.models import KPIData, OptionsTotals, PortfolioGreeks, RiskMetrics
from icc.utils.formatters import format_currency, format_number, format_percent


def kpi_cards(kpis: KPIData, totals: OptionsTotals) -> None:
    """
    Display NAV, capital at risk, premium and stock value cards.

    Args:
        kpis: Headline figures
        totals: Options totals (premium, theta)
    """
    col1, col2, col3, col4 = st.columns(4)

    with col1:
        st.metric(
            label="NAV",
            value=format_currency(kpis.nav_total, compact=True),
            delta=format_percent(kpis.nav_change_pct),
            help="Latest net asset value vs previous record",
        )

    with col2:
        st.metric(
            label="Capital at Risk",
            value=format_currency(kpis.capital_at_risk, compact=True),
            delta=f"{kpis.capital_at_risk_pct:.1f}% of NAV",
            delta_color="off",
        )

    with col3:
        st.metric(
            label="Premium Collected",
            value=format_currency(totals.premium_collected, compact=True),
            delta=f"{totals.positions} positions",
            delta_color="off",
        )

    with col4:
        st.metric(
            label="Stock Value",
            value=format_currency(kpis.stock_value, compact=True),
            delta=f"{kpis.stock_value_pct:.1f}% of NAV",
            delta_color="off",
        )


def greeks_cards(greeks: PortfolioGreeks, avg_delta: float) -> None:
    col1, col2, col3, col4, col5 = st.columns(5)

    with col1:
        st.metric(label="Avg Delta", value=f"{avg_delta:.2f}")
    with col2:
        st.metric(label="Delta (shares)", value=format_number(greeks.delta))
    with col3:
        st.metric(label="Gamma", value=format_number(greeks.gamma, 1))
    with col4:
        st.metric(label="Theta / day", value=format_currency(greeks.theta, compact=True))
    with col5:
        st.metric(label="Vega", value=format_currency(greeks.vega, compact=True))


def risk_cards(risk: RiskMetrics) -> None:
    col1, col2, col3, col4 = st.columns(4)

    with col1:
        st.metric(label="Volatility (ann.)", value=f"{risk.volatility * 100:.1f}%")
    with col2:
        st.metric(label="Sharpe Ratio", value=f"{risk.sharpe_ratio:.2f}")
    with col3:
        st.metric(label="Sortino Ratio", value=f"{risk.sortino_ratio:.2f}")
    with col4:
        st.metric(label="Max Drawdown", value=format_percent(risk.max_drawdown * 100))
