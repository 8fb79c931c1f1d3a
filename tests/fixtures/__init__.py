"""Test fixtures for the Investment Control Center.

Fixtures are auto-discovered by pytest through conftest.py.
"""

from tests.fixtures.position_fixtures import (
    as_of,
    make_option,
    make_roll,
    sample_nav,
    sample_rolls,
    sample_stocks,
)

__all__ = [
    "as_of",
    "make_option",
    "make_roll",
    "sample_nav",
    "sample_rolls",
    "sample_stocks",
]
