"""
Streamlit dashboard for the Investment Control Center.

Usage:
    streamlit run src/icc/dashboard/app.py
"""
