"""
Portfolio data access: connection models, PostgreSQL and mock sources,
row loaders and the mock book generator.
"""

from icc.data.connections import (
    ConnectionConfig,
    ConnectionStatus,
    ConnectionTestResult,
    ConnectionType,
    QueryResult,
)
from icc.data.loaders import (
    LoadResult,
    PortfolioData,
    build_roll_store,
    fetch_portfolio,
    load_nav_history,
    load_option_positions,
    load_prices,
    load_roll_entries,
    load_stock_positions,
)
from icc.data.mock import MockBook, generate_mock_book
from icc.data.sources import DataSource, MockDataSource, PostgresDataSource, create_data_source

__all__ = [
    "ConnectionConfig",
    "ConnectionStatus",
    "ConnectionTestResult",
    "ConnectionType",
    "QueryResult",
    "LoadResult",
    "PortfolioData",
    "build_roll_store",
    "fetch_portfolio",
    "load_nav_history",
    "load_option_positions",
    "load_prices",
    "load_roll_entries",
    "load_stock_positions",
    "MockBook",
    "generate_mock_book",
    "DataSource",
    "MockDataSource",
    "PostgresDataSource",
    "create_data_source",
]
