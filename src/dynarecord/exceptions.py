"""Custom exceptions for dynarecord.

Every error carries an actionable message and a ``context`` dict so callers
(and the CLI's ``--json`` mode) can inspect what went wrong.
"""

from __future__ import annotations

from typing import Any


class DynaRecordError(Exception):
    """Base exception for all dynarecord errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Return error as JSON-serializable dict."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class ConnectionError(DynaRecordError):
    """Failed to connect to the database."""

    pass


class AttributeNotFoundError(DynaRecordError, AttributeError, KeyError):
    """Attribute is not bound on the record.

    Subclasses ``AttributeError`` and ``KeyError`` so ``hasattr``,
    ``getattr(record, name, default)`` and mapping-style access keep their
    usual Python semantics.
    """

    def __init__(
        self, attribute_name: str, type_name: str, available_attributes: list[str] | None = None
    ) -> None:
        available = available_attributes or []
        if available:
            message = (
                f"Attribute '{attribute_name}' is not bound on '{type_name}'. "
                f"Bound attributes: {', '.join(available)}"
            )
        else:
            message = f"Attribute '{attribute_name}' is not bound on '{type_name}'. No attributes bound."

        super().__init__(
            message,
            {
                "attribute_name": attribute_name,
                "type_name": type_name,
                "available_attributes": available,
            },
        )
        self.attribute_name = attribute_name
        self.type_name = type_name
        self.available_attributes = available


class MissingIdentityError(DynaRecordError):
    """An identity-keyed operation was invoked on a record without an identity."""

    def __init__(self, operation: str, type_name: str, identity: str) -> None:
        message = (
            f"Cannot {operation} '{type_name}': identity attribute '{identity}' is not set. "
            f"Save the record first or construct it with '{identity}'."
        )
        super().__init__(
            message, {"operation": operation, "type_name": type_name, "identity": identity}
        )
        self.operation = operation
        self.type_name = type_name
        self.identity = identity


class EmptyUpdateError(DynaRecordError):
    """Update requested for a record holding only its identity attribute."""

    def __init__(self, table_name: str, identity: str) -> None:
        message = (
            f"Nothing to update in '{table_name}': the record has no attributes "
            f"besides '{identity}'."
        )
        super().__init__(message, {"table_name": table_name, "identity": identity})
        self.table_name = table_name
        self.identity = identity


class InvalidIdentifierError(DynaRecordError):
    """A table or column name cannot be safely placed into SQL text."""

    def __init__(self, identifier: str, kind: str = "column") -> None:
        message = (
            f"Invalid {kind} name '{identifier}'. Names must start with a letter or "
            f"underscore and contain only letters, digits and underscores (Unicode letters allowed)."
        )
        super().__init__(message, {"identifier": identifier, "kind": kind})
        self.identifier = identifier
        self.kind = kind


class GatewayNotBoundError(DynaRecordError):
    """No persistence gateway is reachable from the record or its type."""

    def __init__(self, type_name: str) -> None:
        message = (
            f"No gateway bound for '{type_name}'. Call {type_name}.bind(gateway), "
            f"pass gateway= to the constructor, or pass gateway= to the class method."
        )
        super().__init__(message, {"type_name": type_name})
        self.type_name = type_name


class StorageError(DynaRecordError):
    """The database rejected or failed to run a statement."""

    def __init__(self, message: str, sql: str | None = None) -> None:
        super().__init__(message, {"sql": sql} if sql else {})
        self.sql = sql
