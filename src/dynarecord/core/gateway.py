"""Persistence gateway: runs parameterized SQL and reports insert identities.

Records never talk to SQLAlchemy directly. They depend on the ``Gateway``
protocol, and ``SQLAlchemyGateway`` is the implementation used in practice.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from sqlalchemy.exc import SQLAlchemyError

from dynarecord.core.types import ExecutionResult, Value
from dynarecord.exceptions import StorageError

if TYPE_CHECKING:
    from sqlalchemy import Connection, Engine

logger = logging.getLogger(__name__)


@runtime_checkable
class Gateway(Protocol):
    """What a record needs from the database."""

    @property
    def placeholder(self) -> str:
        """Parameter marker understood by the driver (``?`` or ``%s``)."""
        ...

    @property
    def supports_returning(self) -> bool:
        """Whether inserts should ask for the identity with ``RETURNING``."""
        ...

    def execute(self, sql: str, params: Sequence[Value] = ()) -> ExecutionResult:
        """Run one statement, binding ``params`` positionally.

        For an INSERT the result carries the generated identity in
        ``inserted_identity``, read before any other statement can run.
        """
        ...

    def last_insert_identity(self) -> Value:
        """Identity generated by the most recent insert on this gateway."""
        ...


_PLACEHOLDERS = {
    "qmark": "?",
    "format": "%s",
    "pyformat": "%s",
}


def _is_insert(sql: str) -> bool:
    return sql.lstrip()[:6].upper() == "INSERT"


class SQLAlchemyGateway:
    """Gateway over a single SQLAlchemy connection.

    The connection is opened on first use and shared by every statement.
    Each statement is committed on success and rolled back on failure, so
    atomicity is per statement. Calls are serialised with a lock because the
    underlying DBAPI connection is not safe to use from two threads at once.
    """

    def __init__(self, engine: Engine) -> None:
        """Initialize the gateway.

        Args:
            engine: SQLAlchemy engine

        Raises:
            StorageError: If the driver's parameter style cannot be bound positionally
        """
        self._engine = engine
        self._connection: Connection | None = None
        self._lock = threading.Lock()
        self._last_insert_identity: Value = None

        paramstyle = engine.dialect.paramstyle
        if paramstyle not in _PLACEHOLDERS:
            raise StorageError(
                f"Unsupported driver parameter style '{paramstyle}'. "
                f"Supported: {', '.join(_PLACEHOLDERS)}"
            )
        self._placeholder = _PLACEHOLDERS[paramstyle]

    @property
    def placeholder(self) -> str:
        return self._placeholder

    @property
    def supports_returning(self) -> bool:
        # Same rule SQLAlchemy applies: fall back to RETURNING only where
        # the driver has no usable lastrowid.
        dialect = self._engine.dialect
        return bool(dialect.insert_returning) and not dialect.postfetch_lastrowid

    @property
    def connection(self) -> Connection:
        """Get or open the shared connection."""
        if self._connection is None:
            self._connection = self._engine.connect()
            logger.info("Opened %s connection", self._engine.dialect.name)
        return self._connection

    def execute(self, sql: str, params: Sequence[Value] = ()) -> ExecutionResult:
        """Run one statement and commit it.

        Args:
            sql: SQL text using this gateway's placeholder
            params: Values bound to the placeholders, in order

        Returns:
            ExecutionResult with rows (for SELECT/RETURNING) and the row count

        Raises:
            StorageError: If the database rejects the statement
        """
        bound = tuple(params)
        logger.debug("Executing %s [%d parameter(s)]", sql, len(bound))

        with self._lock:
            conn = self.connection
            try:
                if bound:
                    result = conn.exec_driver_sql(sql, bound)
                else:
                    result = conn.exec_driver_sql(sql)

                rows = []
                if result.returns_rows:
                    columns = list(result.keys())
                    rows = [dict(zip(columns, row, strict=True)) for row in result.fetchall()]

                inserted_identity = None
                if _is_insert(sql):
                    if rows:
                        inserted_identity = next(iter(rows[0].values()))
                    else:
                        inserted_identity = result.lastrowid
                    self._last_insert_identity = inserted_identity

                rowcount = result.rowcount
                conn.commit()
            except SQLAlchemyError as e:
                conn.rollback()
                raise StorageError(f"Statement failed: {e}", sql=sql) from e

        return ExecutionResult(rows=rows, rowcount=rowcount, inserted_identity=inserted_identity)

    def last_insert_identity(self) -> Value:
        return self._last_insert_identity

    def close(self) -> None:
        """Close the shared connection if open."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            logger.info("Closed %s connection", self._engine.dialect.name)
