"""dynarecord - schema-less records over relational tables.

A record type is a ``Record`` subclass. Its name gives the table
(``Post`` -> ``posts``) and each instance carries whatever attributes it
was built with. Statements are derived from those attributes on every call.

Example:
    from dynarecord import DatabaseConnection, Record

    class User(Record):
        pass

    db = DatabaseConnection("sqlite:///app.db")
    User.bind(db.gateway())

    user = User({"name": "Rafa", "age": 22})
    user.save()                 # insert, sets user.id
    user.age = 23
    user.save()                 # update
    User.find(user.id).age      # 23
    User.all()                  # [User(id=1, name='Rafa', age=23)]
    user.destroy()
"""

from dynarecord.core.connection import DatabaseConnection
from dynarecord.core.gateway import Gateway, SQLAlchemyGateway
from dynarecord.core.types import ExecutionResult, Statement, StatementKind
from dynarecord.exceptions import (
    AttributeNotFoundError,
    ConnectionError,
    DynaRecordError,
    EmptyUpdateError,
    GatewayNotBoundError,
    InvalidIdentifierError,
    MissingIdentityError,
    StorageError,
)
from dynarecord.naming import NamingPolicy, pluralize, table_lookup
from dynarecord.record import Record, record_type
from dynarecord.statements import StatementBuilder, quote_identifier

__version__ = "0.1.0"

__all__ = [
    # Main classes
    "Record",
    "record_type",
    "DatabaseConnection",
    # Gateway
    "Gateway",
    "SQLAlchemyGateway",
    "ExecutionResult",
    # Statements
    "Statement",
    "StatementKind",
    "StatementBuilder",
    "quote_identifier",
    # Naming
    "NamingPolicy",
    "pluralize",
    "table_lookup",
    # Exceptions
    "DynaRecordError",
    "AttributeNotFoundError",
    "ConnectionError",
    "EmptyUpdateError",
    "GatewayNotBoundError",
    "InvalidIdentifierError",
    "MissingIdentityError",
    "StorageError",
]
