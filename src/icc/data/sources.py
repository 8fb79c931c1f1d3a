"""
Data Sources

Uniform access to the portfolio database: connection test, schema/table/column
introspection and read queries.

Decision tree (create_data_source):
- postgresql -> PostgresDataSource (psycopg2)
- mssql -> UnsupportedConnectionTypeError (no driver shipped)

MockDataSource serves a generated MockBook through the same interface so the
dashboard and loaders run without a database.
"""

import re
import time
from contextlib import closing
from datetime import datetime
from typing import Any, Optional, Protocol, runtime_checkable

import psycopg2
import psycopg2.extras
from loguru import logger

from icc.data.connections import (
    ConnectionConfig,
    ConnectionStatus,
    ConnectionTestResult,
    ConnectionType,
    QueryResult,
)
from icc.data.mock import MockBook
from icc.exceptions import QueryExecutionError, UnsupportedConnectionTypeError

SYSTEM_SCHEMAS = ("pg_catalog", "information_schema", "pg_toast")


@runtime_checkable
class DataSource(Protocol):
    """Read access to a portfolio database."""

    def test_connection(self) -> ConnectionTestResult:
        ...

    def list_schemas(self) -> list[str]:
        ...

    def list_tables(self, schema: str) -> list[str]:
        ...

    def list_columns(self, schema: str, table: str) -> list[dict[str, Any]]:
        ...

    def run_query(self, query: str, params: Optional[tuple] = None) -> QueryResult:
        ...


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class PostgresDataSource:
    """
    PostgreSQL data source backed by psycopg2.

    Each call opens its own short-lived connection; nothing is pooled.

    Example:
        >>> source = PostgresDataSource(config)
        >>> result = source.test_connection()
        >>> rows = source.run_query("SELECT * FROM public.option_positions").rows
    """

    def __init__(self, config: ConnectionConfig, connect_timeout: int = 10):
        if config.connection_type != ConnectionType.POSTGRESQL:
            raise UnsupportedConnectionTypeError(
                f"PostgresDataSource cannot serve {config.connection_type.value} connections"
            )
        self.config = config
        self.connect_timeout = connect_timeout

    def _connect(self):
        password = self.config.password.get_secret_value() if self.config.password else None
        return psycopg2.connect(
            host=self.config.host,
            port=self.config.port,
            dbname=self.config.database_name,
            user=self.config.username,
            password=password,
            sslmode="require" if self.config.use_ssl else "disable",
            connect_timeout=self.connect_timeout,
        )

    def test_connection(self) -> ConnectionTestResult:
        """
        Run SELECT 1 and record the outcome on the connection config.

        Never raises; failures are reported in the result.
        """
        start = time.perf_counter()
        try:
            with closing(self._connect()) as conn:
                with conn.cursor() as cursor:
                    cursor.execute("SELECT 1")
                    cursor.fetchone()
        except psycopg2.Error as e:
            error = str(e).strip() or e.__class__.__name__
            self.config.status = ConnectionStatus.ERROR
            self.config.last_error = error
            logger.warning(f"Connection test failed for {self.config.name}: {error}")
            return ConnectionTestResult(success=False, latency_ms=_elapsed_ms(start), error=error)

        latency = _elapsed_ms(start)
        self.config.status = ConnectionStatus.OK
        self.config.last_success = datetime.now()
        self.config.last_error = None
        self.config.latency_ms = latency
        logger.info(f"Connection test OK for {self.config.name} ({latency}ms)")
        return ConnectionTestResult(success=True, latency_ms=latency)

    def run_query(self, query: str, params: Optional[tuple] = None) -> QueryResult:
        """
        Execute a query and return its rows as dicts.

        Raises:
            QueryExecutionError: If the driver reports an error
        """
        start = time.perf_counter()
        try:
            with closing(self._connect()) as conn:
                with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cursor:
                    cursor.execute(query, params)
                    rows = [dict(row) for row in cursor.fetchall()] if cursor.description else []
                    row_count = len(rows) if cursor.description else cursor.rowcount
        except psycopg2.Error as e:
            logger.error(f"Query failed on {self.config.name}: {e}")
            raise QueryExecutionError(str(e).strip(), query=query) from e

        latency = _elapsed_ms(start)
        logger.debug(f"Query returned {row_count} rows in {latency}ms")
        return QueryResult(rows=rows, row_count=row_count, latency_ms=latency)

    def list_schemas(self) -> list[str]:
        result = self.run_query(
            "SELECT schema_name FROM information_schema.schemata "
            "WHERE schema_name NOT IN %s ORDER BY schema_name",
            (SYSTEM_SCHEMAS,),
        )
        return [row["schema_name"] for row in result.rows]

    def list_tables(self, schema: str) -> list[str]:
        result = self.run_query(
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_schema = %s AND table_type = 'BASE TABLE' ORDER BY table_name",
            (schema,),
        )
        return [row["table_name"] for row in result.rows]

    def list_columns(self, schema: str, table: str) -> list[dict[str, Any]]:
        """Columns as {name, type, nullable} in ordinal order."""
        result = self.run_query(
            "SELECT column_name, data_type, is_nullable FROM information_schema.columns "
            "WHERE table_schema = %s AND table_name = %s ORDER BY ordinal_position",
            (schema, table),
        )
        return [
            {"name": row["column_name"], "type": row["data_type"], "nullable": row["is_nullable"] == "YES"}
            for row in result.rows
        ]


_SELECT_ALL = re.compile(r"^\s*select\s+\*\s+from\s+(?:(\w+)\.)?(\w+)\s*;?\s*$", re.IGNORECASE)


class MockDataSource:
    """
    In-memory data source over a generated MockBook.

    Understands only `SELECT * FROM [schema.]table`; the schema is reported as
    "mock" and otherwise ignored.
    """

    schema = "mock"

    def __init__(self, book: MockBook):
        self.book = book
        self._tables = book.table_rows()

    def test_connection(self) -> ConnectionTestResult:
        return ConnectionTestResult(success=True, latency_ms=0)

    def list_schemas(self) -> list[str]:
        return [self.schema]

    def list_tables(self, schema: str) -> list[str]:
        return sorted(self._tables) if schema == self.schema else []

    def list_columns(self, schema: str, table: str) -> list[dict[str, Any]]:
        rows = self._tables.get(table) if schema == self.schema else None
        if not rows:
            return []
        return [
            {"name": name, "type": type(value).__name__, "nullable": value is None}
            for name, value in rows[0].items()
        ]

    def run_query(self, query: str, params: Optional[tuple] = None) -> QueryResult:
        match = _SELECT_ALL.match(query)
        if not match:
            raise QueryExecutionError("Mock source only supports SELECT * FROM <table>", query=query)
        table = match.group(2)
        if table not in self._tables:
            raise QueryExecutionError(f'relation "{table}" does not exist', query=query)
        rows = [dict(row) for row in self._tables[table]]
        return QueryResult(rows=rows, row_count=len(rows))


def create_data_source(config: ConnectionConfig) -> DataSource:
    """
    Build the data source for a connection config.

    Raises:
        UnsupportedConnectionTypeError: For engines without a driver (mssql)
    """
    if config.connection_type == ConnectionType.POSTGRESQL:
        return PostgresDataSource(config)
    raise UnsupportedConnectionTypeError(f"Connection type {config.connection_type.value} is not supported")


__all__ = [
    "DataSource",
    "PostgresDataSource",
    "MockDataSource",
    "create_data_source",
]
