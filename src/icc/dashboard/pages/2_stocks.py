"""
Stocks Page

Stock holdings with portfolio weights and sector allocation.
"""

import plotly.express as px
import streamlit as st

from icc.dashboard.data import get_snapshot, sector_table, stocks_table
from icc.utils.formatters import format_currency


def main():
    """Stocks page main function."""
    st.set_page_config(page_title="Stocks", page_icon="💼", layout="wide")
    st.title("💼 Stocks")

    snapshot = get_snapshot()

    if not snapshot.stock_positions:
        st.info("No stock positions")
        return

    col1, col2 = st.columns(2)
    with col1:
        st.metric(label="Stock Value", value=format_currency(snapshot.kpis.stock_value, compact=True))
    with col2:
        unrealized = sum(s.unrealized_pl for s in snapshot.stock_positions)
        st.metric(label="Unrealized P/L", value=format_currency(unrealized, compact=True))

    left, right = st.columns([3, 2])
    with left:
        st.dataframe(
            stocks_table(snapshot),
            hide_index=True,
            use_container_width=True,
            column_config={"Weight %": st.column_config.NumberColumn(format="%.1f%%")},
        )
    with right:
        sectors = sector_table(snapshot)
        fig = px.pie(sectors, names="Sector", values="Value", hole=0.4)
        fig.update_layout(height=360, margin=dict(l=10, r=10, t=10, b=10))
        st.plotly_chart(fig, use_container_width=True)


if __name__ == "__main__":
    main()
