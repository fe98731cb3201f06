"""Core types for dynarecord.

Statements and execution results are JSON-serializable pydantic models so
they can be printed by the CLI or logged as-is.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Whatever the driver binds natively: None, int, float, str.
Value = Any
Row = dict[str, Value]


class StatementKind(StrEnum):
    """The statements the builder knows how to render."""

    INSERT = "insert"
    UPDATE = "update"
    SELECT_ONE = "select_one"
    SELECT_ALL = "select_all"
    DELETE = "delete"


class Statement(BaseModel):
    """SQL text plus the parameters to bind, in placeholder order."""

    kind: StatementKind = Field(..., description="Which operation this statement performs")
    table: str = Field(..., description="Target table name")
    sql: str = Field(..., description="SQL text with driver placeholders")
    params: tuple[Value, ...] = Field(default=(), description="Bound parameter values")

    model_config = ConfigDict(frozen=True)

    @property
    def param_count(self) -> int:
        """Number of placeholders in the statement."""
        return len(self.params)


class ExecutionResult(BaseModel):
    """What the gateway hands back after running one statement."""

    rows: list[Row] = Field(default_factory=list, description="Result rows as name-value dicts")
    rowcount: int = Field(default=-1, description="Affected rows, -1 when unknown")
    inserted_identity: Value = Field(
        default=None, description="Identity generated by this statement when it is an INSERT"
    )

    @property
    def first(self) -> Row | None:
        """First row or None."""
        return self.rows[0] if self.rows else None
