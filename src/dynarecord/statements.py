"""SQL generation from a record's current attribute snapshot.

The builder never consults a schema. Whatever attributes the record holds
when a statement is requested become the columns of that statement.
"""

from __future__ import annotations

from collections.abc import Mapping

from dynarecord.core.types import Statement, StatementKind, Value
from dynarecord.exceptions import EmptyUpdateError, InvalidIdentifierError, MissingIdentityError


def quote_identifier(name: str, kind: str = "column") -> str:
    """Validate and double-quote a table or column name.

    Any name Python accepts as an identifier is allowed, so non-ASCII
    letters such as ``título`` pass.

    Args:
        name: Identifier to quote
        kind: "table" or "column", used in the error message

    Returns:
        Quoted identifier

    Raises:
        InvalidIdentifierError: If the name is not a plain SQL identifier
    """
    if not isinstance(name, str) or not name.isidentifier():
        raise InvalidIdentifierError(str(name), kind)
    return f'"{name}"'


class StatementBuilder:
    """Builds the five statements a record needs for one table.

    Example:
        >>> builder = StatementBuilder("users")
        >>> stmt = builder.update({"id": 3, "name": "Rafa", "age": 22})
        >>> stmt.sql
        'UPDATE "users" SET "name" = ?, "age" = ? WHERE "id" = ?'
        >>> stmt.params
        ('Rafa', 22, 3)
    """

    def __init__(
        self,
        table: str,
        identity: str = "id",
        placeholder: str = "?",
        returning: bool = False,
    ) -> None:
        """Initialize the builder.

        Args:
            table: Target table name
            identity: Name of the identity (primary key) attribute
            placeholder: Driver parameter marker
            returning: Append ``RETURNING <identity>`` to inserts
        """
        self.table = table
        self.identity = identity
        self.placeholder = placeholder
        self.returning = returning
        self._table_sql = quote_identifier(table, "table")
        self._identity_sql = quote_identifier(identity)

    def _statement(self, kind: StatementKind, sql: str, params: tuple[Value, ...] = ()) -> Statement:
        return Statement(kind=kind, table=self.table, sql=sql, params=params)

    def insert(self, attributes: Mapping[str, Value]) -> Statement:
        """INSERT for every bound attribute.

        An identity attribute holding ``None`` is left out so storage can
        assign one.

        Args:
            attributes: Ordered attribute snapshot

        Returns:
            Insert statement
        """
        # One pass fixes the order of columns, placeholders and values.
        pairs = [
            (name, value)
            for name, value in attributes.items()
            if not (name == self.identity and value is None)
        ]

        if pairs:
            columns = ", ".join(quote_identifier(name) for name, _ in pairs)
            marks = ", ".join([self.placeholder] * len(pairs))
            sql = f"INSERT INTO {self._table_sql} ({columns}) VALUES ({marks})"
        else:
            sql = f"INSERT INTO {self._table_sql} DEFAULT VALUES"

        if self.returning:
            sql = f"{sql} RETURNING {self._identity_sql}"

        return self._statement(StatementKind.INSERT, sql, tuple(value for _, value in pairs))

    def update(self, attributes: Mapping[str, Value]) -> Statement:
        """UPDATE every non-identity attribute, filtered on the identity.

        Args:
            attributes: Ordered attribute snapshot, identity included

        Returns:
            Update statement whose last parameter is the identity value

        Raises:
            MissingIdentityError: If the snapshot has no identity value
            EmptyUpdateError: If there is nothing besides the identity to set
        """
        identity_value = attributes.get(self.identity)
        if identity_value is None:
            raise MissingIdentityError("update", self.table, self.identity)

        pairs = [(name, value) for name, value in attributes.items() if name != self.identity]
        if not pairs:
            raise EmptyUpdateError(self.table, self.identity)

        assignments = ", ".join(f"{quote_identifier(name)} = {self.placeholder}" for name, _ in pairs)
        sql = (
            f"UPDATE {self._table_sql} SET {assignments} "
            f"WHERE {self._identity_sql} = {self.placeholder}"
        )
        params = tuple(value for _, value in pairs) + (identity_value,)
        return self._statement(StatementKind.UPDATE, sql, params)

    def select_one(self, identity_value: Value) -> Statement:
        """Point lookup on the identity."""
        sql = f"SELECT * FROM {self._table_sql} WHERE {self._identity_sql} = {self.placeholder}"
        return self._statement(StatementKind.SELECT_ONE, sql, (identity_value,))

    def select_all(self) -> Statement:
        """Full table scan."""
        return self._statement(StatementKind.SELECT_ALL, f"SELECT * FROM {self._table_sql}")

    def delete(self, identity_value: Value) -> Statement:
        """Delete the row matching the identity."""
        sql = f"DELETE FROM {self._table_sql} WHERE {self._identity_sql} = {self.placeholder}"
        return self._statement(StatementKind.DELETE, sql, (identity_value,))
