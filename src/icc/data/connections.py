"""
Connection Models

Pydantic model for a user-configured portfolio database connection, plus the
result types returned by data sources.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

import polars as pl
from pydantic import BaseModel, ConfigDict, Field, SecretStr


class ConnectionType(str, Enum):
    """Supported database engines."""

    POSTGRESQL = "postgresql"
    MSSQL = "mssql"


class ConnectionStatus(str, Enum):
    """Health of a configured connection."""

    OK = "ok"
    WARNING = "warning"
    ERROR = "error"
    DISCONNECTED = "disconnected"
    PAUSED = "paused"


class ConnectionConfig(BaseModel):
    """
    Database connection settings.

    The password is a SecretStr and never appears in safe_dict() or logs.

    Attributes:
        id: Optional identifier
        name: Display name
        connection_type: postgresql or mssql
        host, port, database_name: Server location
        schema_name: Schema holding the portfolio tables
        username, password: Credentials
        use_ssl: Require SSL
        status, last_success, last_error, latency_ms: Last observed health
    """

    model_config = ConfigDict(validate_assignment=True)

    id: Optional[str] = None
    name: str = Field(..., min_length=1)
    connection_type: ConnectionType
    host: str = Field(..., min_length=1)
    port: int = Field(..., ge=1, le=65535)
    database_name: str = Field(..., min_length=1)
    schema_name: Optional[str] = None
    username: str = Field(..., min_length=1)
    password: Optional[SecretStr] = None
    use_ssl: bool = True

    status: ConnectionStatus = ConnectionStatus.DISCONNECTED
    last_success: Optional[datetime] = None
    last_error: Optional[str] = None
    latency_ms: Optional[int] = None

    def safe_dict(self) -> dict[str, Any]:
        """Connection settings without the password."""
        return self.model_dump(exclude={"password"})

    def __repr__(self) -> str:
        return (
            f"ConnectionConfig(name={self.name}, type={self.connection_type.value}, "
            f"host={self.host}:{self.port}, db={self.database_name}, status={self.status.value})"
        )


@dataclass(slots=True)
class ConnectionTestResult:
    """Outcome of a connection test."""

    success: bool
    latency_ms: int = 0
    error: Optional[str] = None


@dataclass(slots=True)
class QueryResult:
    """
    Rows returned by a query.

    Attributes:
        rows: One dict per row, keyed by column name
        row_count: Rows returned (or affected)
        latency_ms: Round-trip time including connect
    """

    rows: list[dict[str, Any]] = field(default_factory=list)
    row_count: int = 0
    latency_ms: int = 0

    def to_frame(self) -> pl.DataFrame:
        """Rows as a Polars DataFrame."""
        return pl.DataFrame(self.rows)
