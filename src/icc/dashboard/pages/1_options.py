"""
Options Page

Option positions grouped by expiry, with roll history and break-even for
rolled positions, plus the stress test.
"""

import streamlit as st

from icc.dashboard.data import get_snapshot, option_positions_table, roll_history_table
from icc.portfolio import stress_test_pnl
from icc.utils.formatters import dte_label, format_currency, format_expiry


def main():
    """Options page main function."""
    st.set_page_config(page_title="Options", page_icon="📈", layout="wide")
    st.title("📈 Options")

    if "opt_type_filter" not in st.session_state:
        st.session_state.opt_type_filter = "ALL"

    with st.sidebar:
        st.markdown("### Filters")
        type_options = ["ALL", "PUT", "CALL"]
        type_filter = st.selectbox(
            "Type",
            type_options,
            index=type_options.index(st.session_state.opt_type_filter),
        )
        st.session_state.opt_type_filter = type_filter
        rolled_only = st.checkbox("Rolled positions only", value=False)

    snapshot = get_snapshot()

    for group in snapshot.expiry_groups:
        positions = tuple(
            p
            for p in group.positions
            if (type_filter == "ALL" or p.put_call.value == type_filter) and (p.is_rolled or not rolled_only)
        )
        if not positions:
            continue

        header = (
            f"{format_expiry(group.exp_date)} ({dte_label(group.dte)}) | "
            f"{len(positions)} positions | Risk {format_currency(group.total_capital_at_risk, compact=True)} | "
            f"Premium {format_currency(group.total_premium_collected, compact=True)}"
        )
        with st.expander(header, expanded=True):
            st.dataframe(option_positions_table(positions, snapshot.as_of), hide_index=True, use_container_width=True)

            for position in positions:
                if not position.is_rolled:
                    continue
                st.markdown(
                    f"**{position.symbol}** rolled {position.roll_count}x | "
                    f"credits {format_currency(position.total_roll_credits)} | "
                    f"realized {format_currency(position.total_realized_pl)} | "
                    f"break-even {position.break_even_price:.2f}"
                )
                st.dataframe(roll_history_table(position), hide_index=True, use_container_width=True)

    st.markdown("---")
    st.markdown("### Stress Test")
    col1, col2 = st.columns(2)
    with col1:
        spot_move = st.slider("Underlying move (%)", min_value=-30, max_value=30, value=0)
    with col2:
        iv_move = st.slider("IV move (%)", min_value=-50, max_value=100, value=0)

    pnl = stress_test_pnl(snapshot.greeks, spot_move, iv_move, snapshot.kpis.nav_total)
    nav_pct = pnl / snapshot.kpis.nav_total * 100 if snapshot.kpis.nav_total else 0.0
    st.metric(label="Estimated P/L", value=format_currency(pnl, compact=True), delta=f"{nav_pct:.2f}% of NAV")


if __name__ == "__main__":
    main()
