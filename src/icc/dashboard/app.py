"""
Investment Control Center Dashboard - Main Application

Overview page: KPI cards, NAV history, priority watchlist, expiry buckets,
Greeks and risk metrics. Other views live in pages/.

Usage:
    python scripts/run_dashboard.py --env prod
    ICC_ENV=prod streamlit run src/icc/dashboard/app.py
"""

import time

import plotly.express as px
import streamlit as st

from icc.dashboard.components.kpi_cards import greeks_cards, kpi_cards, risk_cards
from icc.dashboard.components.nav_chart import nav_history_chart
from icc.dashboard.components.watchlist import priority_watchlist
from icc.dashboard.data import clear_cache, dashboard_env, expiry_bucket_table, get_config, get_snapshot
from icc.utils.formatters import refresh_label
from icc.utils.logging_config import configure_logging


def main():
    """Overview page."""
    env = dashboard_env()
    config = get_config(env)
    configure_logging(config)

    st.set_page_config(
        page_title="Investment Control Center",
        page_icon="📊",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    st.sidebar.title("📊 Investment Control Center")
    st.sidebar.markdown("---")
    st.sidebar.page_link("app.py", label="Overview", icon="🏠")
    st.sidebar.page_link("pages/1_options.py", label="Options", icon="📈")
    st.sidebar.page_link("pages/2_stocks.py", label="Stocks", icon="💼")
    st.sidebar.markdown("---")

    refresh_options = config.dashboard.auto_refresh_options
    auto_refresh = st.sidebar.selectbox(
        "Auto-Refresh",
        refresh_options,
        index=refresh_options.index(config.dashboard.default_refresh),
        format_func=refresh_label,
    )

    if st.sidebar.button("🔄 Refresh Now"):
        clear_cache()
        st.rerun()

    source = "mock data" if config.dashboard.use_mock_data or config.connection is None else config.connection.name
    st.sidebar.caption(f"Config: {env} | Data source: {source}")

    with st.spinner("Loading portfolio..."):
        snapshot = get_snapshot(env)

    st.title("📊 Portfolio Overview")
    st.caption(f"As of {snapshot.as_of:%d %b %Y}, refreshed {snapshot.generated_at:%H:%M:%S}")

    kpi_cards(snapshot.kpis, snapshot.options_totals)
    st.markdown("---")

    nav_history_chart(snapshot)
    st.markdown("---")

    left, right = st.columns([3, 2])
    with left:
        priority_watchlist(snapshot)
    with right:
        st.markdown("### Capital at Risk by Expiry")
        buckets = expiry_bucket_table(snapshot)
        fig = px.bar(buckets, x="Bucket", y="Capital at Risk", text="Positions")
        fig.update_layout(height=320, margin=dict(l=10, r=10, t=10, b=10))
        st.plotly_chart(fig, use_container_width=True)

    st.markdown("---")
    st.markdown("### Greeks")
    greeks_cards(snapshot.greeks, snapshot.kpis.avg_delta)

    if snapshot.risk is not None:
        st.markdown("### Risk")
        risk_cards(snapshot.risk)

    # Rerun after the interval; the snapshot itself follows cache_ttl_seconds
    if auto_refresh:
        time.sleep(auto_refresh)
        st.rerun()


if __name__ == "__main__":
    main()
