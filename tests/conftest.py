"""Shared pytest fixtures for Investment Control Center tests."""

import pytest

# Import all fixtures for global availability
from tests.fixtures.position_fixtures import *
from icc.data import generate_mock_book
from icc.market import PriceTable


@pytest.fixture
def lake_path(tmp_path):
    """
    Fresh Delta Lake directory for each test.

    Example:
        def test_with_lake(lake_path):
            table_path = lake_path / "roll_history"
    """
    return tmp_path / "lake"


@pytest.fixture
def prices():
    """Quotes for AAPL, MSFT and TSLA."""
    return PriceTable({"AAPL": 145.0, "MSFT": 400.0, "TSLA": 250.0})


@pytest.fixture
def mock_book(as_of):
    """Deterministic mock book (seed 42) as of the reference date."""
    return generate_mock_book(seed=42, as_of=as_of)
