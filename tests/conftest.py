"""Shared test fixtures for dynarecord."""

import os
from collections.abc import Generator, Sequence
from typing import Any

import pytest

from dynarecord import DatabaseConnection, ExecutionResult, Record, SQLAlchemyGateway, record_type

POSTS_DDL = """
    CREATE TABLE posts (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        url TEXT,
        votes INTEGER
    )
"""

USERS_DDL = """
    CREATE TABLE users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT,
        age INTEGER,
        score REAL
    )
"""


class RecordingGateway:
    """In-memory gateway that records every statement it is asked to run.

    SELECTs return ``rows``; inserts report ``next_identity``.
    """

    def __init__(self, placeholder: str = "?", supports_returning: bool = False) -> None:
        self.placeholder = placeholder
        self.supports_returning = supports_returning
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.rows: list[dict[str, Any]] = []
        self.next_identity: Any = 1

    def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecutionResult:
        self.calls.append((sql, tuple(params)))
        if sql.startswith("SELECT"):
            return ExecutionResult(rows=[dict(row) for row in self.rows], rowcount=-1)
        if sql.startswith("INSERT"):
            return ExecutionResult(rowcount=1, inserted_identity=self.next_identity)
        return ExecutionResult(rowcount=1)

    def last_insert_identity(self) -> Any:
        return self.next_identity

    @property
    def last_call(self) -> tuple[str, tuple[Any, ...]]:
        return self.calls[-1]


def _psycopg_available() -> bool:
    """Check if psycopg is installed."""
    try:
        import psycopg  # noqa: F401

        return True
    except ImportError:
        return False


def _postgresql_connectable(url: str) -> bool:
    """Check if we can connect to PostgreSQL."""
    if not _psycopg_available():
        return False
    try:
        conn = DatabaseConnection(url)
        result = conn.test_connection()
        conn.close()
        return result
    except Exception:
        return False


@pytest.fixture
def postgresql_url() -> str:
    """Get PostgreSQL URL from TEST_DATABASE_URL, skipping when unreachable."""
    url = os.environ.get("TEST_DATABASE_URL", "postgresql://localhost/dynarecord_test")

    if not _psycopg_available():
        pytest.skip("psycopg not installed")

    if not _postgresql_connectable(url):
        pytest.skip(f"Cannot connect to PostgreSQL at {url}")

    return url


@pytest.fixture
def recording_gateway() -> RecordingGateway:
    """Fake gateway capturing (sql, params) pairs."""
    return RecordingGateway()


@pytest.fixture
def memory_connection() -> Generator[DatabaseConnection, None, None]:
    """SQLite in-memory connection."""
    connection = DatabaseConnection("sqlite:///:memory:")
    yield connection
    connection.close()


@pytest.fixture
def gateway(memory_connection: DatabaseConnection) -> SQLAlchemyGateway:
    """Gateway over an in-memory database holding empty posts and users tables."""
    gw = memory_connection.gateway()
    gw.execute(POSTS_DDL)
    gw.execute(USERS_DDL)
    return gw


@pytest.fixture
def Post(gateway: SQLAlchemyGateway) -> type[Record]:
    """Post record type bound to the in-memory gateway."""
    return record_type("Post", gateway=gateway)


@pytest.fixture
def User(gateway: SQLAlchemyGateway) -> type[Record]:
    """User record type bound to the in-memory gateway."""
    return record_type("User", gateway=gateway)
