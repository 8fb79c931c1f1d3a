"""Priority watchlist component."""

import streamlit as st

from icc.dashboard.data import watchlist_table
from icc.models import PortfolioSnapshot
from icc.utils.formatters import format_currency


def priority_watchlist(snapshot: PortfolioSnapshot) -> None:
    """
    Display the watchlist table with a per-reason footer.

    Args:
        snapshot: Current portfolio snapshot
    """
    st.markdown("### Priority Watchlist")

    if not snapshot.watchlist:
        st.success("No positions need attention")
        return

    st.dataframe(
        watchlist_table(snapshot),
        hide_index=True,
        use_container_width=True,
        column_config={
            "Price": st.column_config.NumberColumn(format="%.2f"),
            "Distance %": st.column_config.NumberColumn(format="%.1f%%"),
            "Capital at Risk": st.column_config.NumberColumn(format="%.0f"),
        },
    )

    summary = snapshot.watchlist_summary
    st.caption(
        f"ITM: {summary.itm} | High delta: {summary.high_delta} | "
        f"Near strike: {summary.near_strike} | Expiring: {summary.expiring_soon} | "
        f"At risk: {format_currency(summary.total_capital_at_risk, compact=True)}"
    )
