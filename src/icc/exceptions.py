"""
Exceptions for the Investment Control Center.

Computation errors (bad position sizing, out-of-order roll logs) are
programmer/configuration errors and propagate to the caller. Data source
errors wrap the underlying driver exception.
"""

from typing import Optional


class ICCError(Exception):
    """Base class for all Investment Control Center errors."""


class InvalidPositionError(ICCError):
    """
    Exception raised when a position cannot be used in a calculation.

    Raised by the roll aggregator when a position has no risk-bearing size
    (multiplier * |quantity| <= 0), which would otherwise divide by zero.

    Attributes:
        message: Human-readable error message
        position_id: Position identifier (if known)
    """

    def __init__(self, message: str, position_id: Optional[str] = None):
        self.message = message
        self.position_id = position_id
        super().__init__(message)

    def __str__(self) -> str:
        if self.position_id:
            return f"{self.message} (position={self.position_id})"
        return self.message


class RollOrderError(ICCError):
    """Raised when a roll entry is appended out of chronological order."""


class DataSourceError(ICCError):
    """Raised when a data source call fails."""


class UnsupportedConnectionTypeError(DataSourceError):
    """Raised when no driver is available for a connection type."""


class QueryExecutionError(DataSourceError):
    """
    Raised when a query fails on the remote database.

    Attributes:
        query: The SQL text that failed
    """

    def __init__(self, message: str, query: str = ""):
        self.query = query
        super().__init__(message)
