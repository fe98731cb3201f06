"""Tests for the SQLAlchemy gateway."""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from dynarecord import Gateway, SQLAlchemyGateway, StorageError


class TestSQLAlchemyGateway:
    """Tests for SQLAlchemyGateway over in-memory SQLite."""

    def test_satisfies_protocol(self, gateway: SQLAlchemyGateway):
        assert isinstance(gateway, Gateway)

    def test_sqlite_dialect_details(self, gateway: SQLAlchemyGateway):
        assert gateway.placeholder == "?"
        assert gateway.supports_returning is False

    def test_insert_reports_identity(self, gateway: SQLAlchemyGateway):
        first = gateway.execute('INSERT INTO "posts" ("title") VALUES (?)', ["A"])
        assert first.rowcount == 1
        assert gateway.last_insert_identity() == 1

        gateway.execute('INSERT INTO "posts" ("title") VALUES (?)', ["B"])
        assert gateway.last_insert_identity() == 2

    def test_insert_result_carries_identity(self, gateway: SQLAlchemyGateway):
        first = gateway.execute('INSERT INTO "posts" ("title") VALUES (?)', ["A"])
        second = gateway.execute('INSERT INTO "posts" ("title") VALUES (?)', ["B"])
        update = gateway.execute('UPDATE "posts" SET "title" = ? WHERE "id" = ?', ["C", 1])

        assert first.inserted_identity == 1
        assert second.inserted_identity == 2
        assert update.inserted_identity is None

    def test_select_returns_dict_rows(self, gateway: SQLAlchemyGateway):
        gateway.execute('INSERT INTO "users" ("name", "age", "score") VALUES (?, ?, ?)', ["Rafa", 22, 9.5])

        result = gateway.execute('SELECT * FROM "users" WHERE "id" = ?', [1])

        assert result.rows == [{"id": 1, "name": "Rafa", "age": 22, "score": 9.5}]
        assert result.first == {"id": 1, "name": "Rafa", "age": 22, "score": 9.5}

    def test_select_without_rows(self, gateway: SQLAlchemyGateway):
        result = gateway.execute('SELECT * FROM "users"')
        assert result.rows == []
        assert result.first is None

    def test_select_does_not_change_last_identity(self, gateway: SQLAlchemyGateway):
        gateway.execute('INSERT INTO "posts" ("title") VALUES (?)', ["A"])
        gateway.execute('SELECT * FROM "posts"')
        assert gateway.last_insert_identity() == 1

    def test_update_rowcount(self, gateway: SQLAlchemyGateway):
        gateway.execute('INSERT INTO "posts" ("title") VALUES (?)', ["A"])
        result = gateway.execute('UPDATE "posts" SET "title" = ? WHERE "id" = ?', ["B", 1])
        assert result.rowcount == 1

    def test_constraint_violation_raises_storage_error(self, gateway: SQLAlchemyGateway):
        sql = 'INSERT INTO "posts" ("url") VALUES (?)'
        with pytest.raises(StorageError) as exc_info:
            gateway.execute(sql, ["lewagon.com"])
        assert isinstance(exc_info.value.__cause__, IntegrityError)
        assert exc_info.value.sql == sql
        assert exc_info.value.context == {"sql": sql}

    def test_unknown_column_raises_storage_error(self, gateway: SQLAlchemyGateway):
        with pytest.raises(StorageError) as exc_info:
            gateway.execute('INSERT INTO "posts" ("nope") VALUES (?)', ["x"])
        assert isinstance(exc_info.value.__cause__, OperationalError)

    def test_usable_after_failure(self, gateway: SQLAlchemyGateway):
        with pytest.raises(StorageError):
            gateway.execute('INSERT INTO "posts" ("url") VALUES (?)', ["x"])

        gateway.execute('INSERT INTO "posts" ("title") VALUES (?)', ["A"])
        assert gateway.execute('SELECT * FROM "posts"').rows[0]["title"] == "A"

    def test_connection_is_shared(self, gateway: SQLAlchemyGateway):
        assert gateway.connection is gateway.connection

    def test_close_is_idempotent(self, memory_connection):
        gw = memory_connection.gateway()
        _ = gw.connection
        gw.close()
        assert gw._connection is None
        gw.close()
