"""Reusable Streamlit components for the dashboard."""
