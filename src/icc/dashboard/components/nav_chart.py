"""
NAV Chart Component

Stacked area chart of NAV by asset class with the total as a line on top.
"""

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from icc.dashboard.data import nav_table
from icc.models import PortfolioSnapshot

ASSET_CLASS_COLORS = {
    "Cash": "#8ECAE6",
    "Securities": "#2E86AB",
    "Options": "#F4A261",
}


def nav_figure(nav: pd.DataFrame) -> go.Figure:
    """
    Build the NAV history figure.

    Args:
        nav: Output of nav_table() (Date, Cash, Securities, Options, Total)

    Returns:
        Plotly figure with one stacked trace per asset class plus the total
    """
    fig = go.Figure()
    for column, color in ASSET_CLASS_COLORS.items():
        fig.add_trace(
            go.Scatter(
                x=nav["Date"],
                y=nav[column],
                mode="lines",
                name=column,
                stackgroup="nav",
                line=dict(color=color, width=1),
            )
        )

    fig.add_trace(
        go.Scatter(
            x=nav["Date"],
            y=nav["Total"],
            mode="lines",
            name="Total",
            line=dict(color="#264653", width=2, dash="dot"),
        )
    )

    fig.update_layout(
        xaxis_title="Date",
        yaxis_title="NAV (EUR)",
        hovermode="x unified",
        height=360,
        margin=dict(l=10, r=10, t=10, b=10),
        legend=dict(orientation="h", y=1.08),
    )
    return fig


def nav_history_chart(snapshot: PortfolioSnapshot) -> None:
    """Render the NAV history section."""
    st.markdown("### NAV History")

    nav = nav_table(snapshot)
    if nav.empty:
        st.info("No NAV history available")
        return

    st.plotly_chart(nav_figure(nav), use_container_width=True)
