"""Shared helpers: logging setup and display formatters."""
