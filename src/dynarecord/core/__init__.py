"""Core components for dynarecord."""

from dynarecord.core.connection import DatabaseConnection
from dynarecord.core.gateway import Gateway, SQLAlchemyGateway
from dynarecord.core.types import ExecutionResult, Row, Statement, StatementKind, Value

__all__ = [
    "DatabaseConnection",
    "Gateway",
    "SQLAlchemyGateway",
    "ExecutionResult",
    "Row",
    "Statement",
    "StatementKind",
    "Value",
]
