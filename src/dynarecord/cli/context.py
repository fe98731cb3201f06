"""CLI context management for database connections and shared state."""

import os
from dataclasses import dataclass, field

from dynarecord import DatabaseConnection, Record, record_type

DEFAULT_DATABASE_URL = "sqlite:///./dynarecord.db"


def get_database_url(url: str | None) -> str:
    """Resolve database URL from CLI arg, environment variable, or default.

    Priority:
    1. Explicit URL argument
    2. DYNARECORD_URL environment variable
    3. Default: sqlite:///./dynarecord.db
    """
    if url:
        return url
    if env_url := os.getenv("DYNARECORD_URL"):
        return env_url
    return DEFAULT_DATABASE_URL


@dataclass
class CLIContext:
    """Shared context for CLI commands.

    Manages database connection lifecycle and output preferences.
    """

    database_url: str
    echo: bool
    json_output: bool
    _connection: DatabaseConnection | None = field(default=None, init=False, repr=False)

    def get_connection(self) -> DatabaseConnection:
        """Get or create database connection (lazy initialization)."""
        if self._connection is None:
            self._connection = DatabaseConnection(self.database_url, echo=self.echo)
        return self._connection

    def record_type(self, type_name: str, identity: str = "id") -> type[Record]:
        """Build a record type bound to this context's gateway.

        Args:
            type_name: Type name as typed on the command line (e.g., "Post")
            identity: Identity attribute name

        Returns:
            Record subclass named ``type_name``
        """
        return record_type(type_name, identity=identity, gateway=self.get_connection().gateway())

    def close(self) -> None:
        """Close database connection if open."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
