"""Tests for database connection."""

import pytest

from dynarecord import DatabaseConnection, SQLAlchemyGateway
from dynarecord.core.connection import _normalize_postgresql_url
from dynarecord.exceptions import ConnectionError


class TestDatabaseConnection:
    """Tests for DatabaseConnection class."""

    def test_sqlite_supported(self):
        conn = DatabaseConnection("sqlite:///:memory:")
        assert conn.engine is not None
        assert conn.dialect == "sqlite"
        conn.close()

    def test_engine_created_lazily(self):
        conn = DatabaseConnection("sqlite:///:memory:")
        assert conn._engine is None
        _ = conn.engine
        assert conn._engine is not None
        conn.close()

    def test_gateway_is_shared(self, memory_connection: DatabaseConnection):
        gateway = memory_connection.gateway()
        assert isinstance(gateway, SQLAlchemyGateway)
        assert memory_connection.gateway() is gateway

    def test_context_manager(self):
        with DatabaseConnection("sqlite:///:memory:") as conn:
            assert conn.test_connection() is True
        assert conn._engine is None

    def test_close_disposes_engine_and_gateway(self):
        conn = DatabaseConnection("sqlite:///:memory:")
        _ = conn.gateway()
        conn.close()
        assert conn._engine is None
        assert conn._gateway is None

    def test_invalid_url(self):
        conn = DatabaseConnection("invalid://not-a-real-db")
        with pytest.raises(ConnectionError):
            conn.test_connection()

    def test_postgresql_connection(self, postgresql_url: str):
        conn = DatabaseConnection(postgresql_url)
        assert conn.test_connection() is True
        assert conn.dialect == "postgresql"
        assert conn.gateway().placeholder == "%s"
        assert conn.gateway().supports_returning is True
        conn.close()


class TestNormalizePostgresqlUrl:
    """Tests for psycopg3 URL normalization."""

    def test_plain_url(self):
        assert (
            _normalize_postgresql_url("postgresql://u:p@localhost/db")
            == "postgresql+psycopg://u:p@localhost/db"
        )

    def test_explicit_driver_kept(self):
        url = "postgresql+psycopg2://u:p@localhost/db"
        assert _normalize_postgresql_url(url) == url
