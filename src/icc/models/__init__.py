"""
ICC Data Models Package

This package provides type-safe data structures for portfolio monitoring:
- Pydantic models: For validating records from external data sources
- Dataclasses: For derived values computed on each refresh

Usage:
    from icc.models import OptionPosition, RollHistoryEntry, PutCall
    from icc.models import RollSummary, PriorityOption, PortfolioSnapshot
"""

# Pydantic models for external data validation
from icc.models.positions import (
    NAVRecord,
    OptionPosition,
    PutCall,
    RollHistoryEntry,
    StockPosition,
)

# Dataclasses for derived values
from icc.models.derived import (
    ExpiryBucket,
    ExpiryGroup,
    KPIData,
    OptionsTotals,
    PortfolioGreeks,
    PortfolioSnapshot,
    PriorityOption,
    PriorityReason,
    RiskMetrics,
    RollSummary,
    SectorAllocation,
    WatchlistSummary,
)

__all__ = [
    # Pydantic models
    "PutCall",
    "RollHistoryEntry",
    "OptionPosition",
    "StockPosition",
    "NAVRecord",
    # Dataclasses
    "RollSummary",
    "PriorityReason",
    "PriorityOption",
    "WatchlistSummary",
    "OptionsTotals",
    "ExpiryGroup",
    "ExpiryBucket",
    "PortfolioGreeks",
    "SectorAllocation",
    "KPIData",
    "RiskMetrics",
    "PortfolioSnapshot",
]
