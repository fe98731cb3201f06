"""Dynamically-attributed records.

A record is an ordered bag of attributes fixed at construction time. Its
type decides the table (through a naming policy) and the identity column;
its current attributes decide the columns of every statement it issues.

Example:
    from dynarecord import DatabaseConnection, Record

    class Post(Record):
        pass

    db = DatabaseConnection("sqlite:///blog.db")
    Post.bind(db.gateway())

    post = Post({"title": "Le Wagon"})
    post.save()             # INSERT INTO "posts" ("title") VALUES (?)
    post.title = "Le Wagon Paris"
    post.save()             # UPDATE "posts" SET "title" = ? WHERE "id" = ?
    Post.find(post.id)      # Post(id=1, title='Le Wagon Paris')
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any, ClassVar, Self

from dynarecord.core.gateway import Gateway
from dynarecord.core.types import Statement, StatementKind, Value
from dynarecord.exceptions import AttributeNotFoundError, GatewayNotBoundError, MissingIdentityError
from dynarecord.naming import NamingPolicy, pluralize
from dynarecord.statements import StatementBuilder

logger = logging.getLogger(__name__)


class Record:
    """One row of the table derived from the subclass name.

    Subclass it once per logical type. Class-level knobs:

    - ``__identity__``: identity attribute name (default ``"id"``)
    - ``__table_naming__``: naming policy (default :func:`pluralize`)
    - ``__tablename__``: explicit table name, overrides the policy

    Attributes are read and written with attribute syntax
    (``post.title``) or item syntax (``post["title"]``). Item syntax always
    reaches the attribute, even when its name matches a method such as
    ``save``. Names that were not supplied at construction raise
    ``AttributeNotFoundError``.
    """

    __identity__: ClassVar[str] = "id"
    __table_naming__: ClassVar[NamingPolicy] = pluralize
    __tablename__: ClassVar[str | None] = None

    _gateway: ClassVar[Gateway | None] = None

    def __init__(
        self,
        attributes: Mapping[str, Value] | None = None,
        /,
        *,
        gateway: Gateway | None = None,
        **kwargs: Value,
    ) -> None:
        """Bind one attribute per supplied name.

        Args:
            attributes: Name-value mapping, bound in iteration order
            gateway: Gateway for this instance, overrides the class binding
            **kwargs: More attributes, bound after ``attributes``

        Raises:
            TypeError: If an attribute name is not a string or starts with ``_``
        """
        bound: dict[str, Value] = {}
        for source in (attributes or {}, kwargs):
            for name, value in source.items():
                if not isinstance(name, str):
                    raise TypeError(f"Attribute names must be strings, got {name!r}")
                if name.startswith("_"):
                    raise TypeError(f"Attribute names starting with '_' are reserved, got '{name}'")
                bound[name] = value

        object.__setattr__(self, "_attributes", bound)
        object.__setattr__(self, "_instance_gateway", gateway)

    # === Accessors ===

    def __getattr__(self, name: str) -> Value:
        # Only reached when normal lookup fails.
        if name.startswith("__"):
            raise AttributeError(name)
        attributes = self.__dict__.get("_attributes", {})
        if name in attributes:
            return attributes[name]
        raise AttributeNotFoundError(name, type(self).__name__, list(attributes))

    def __setattr__(self, name: str, value: Value) -> None:
        self.set_attribute(name, value)

    def __getitem__(self, name: str) -> Value:
        return self.get_attribute(name)

    def __setitem__(self, name: str, value: Value) -> None:
        self.set_attribute(name, value)

    def get_attribute(self, name: str) -> Value:
        """Read a bound attribute.

        Raises:
            AttributeNotFoundError: If ``name`` was not bound at construction
        """
        if name not in self._attributes:
            raise AttributeNotFoundError(name, type(self).__name__, list(self._attributes))
        return self._attributes[name]

    def set_attribute(self, name: str, value: Value) -> None:
        """Overwrite a bound attribute. The attribute set itself is closed.

        Raises:
            AttributeNotFoundError: If ``name`` was not bound at construction
        """
        if name not in self._attributes:
            raise AttributeNotFoundError(name, type(self).__name__, list(self._attributes))
        self._attributes[name] = value

    def __contains__(self, name: object) -> bool:
        return name in self._attributes

    def __iter__(self) -> Iterator[str]:
        return iter(self._attributes)

    def keys(self) -> list[str]:
        """Bound attribute names in binding order."""
        return list(self._attributes)

    @property
    def attribute_names(self) -> list[str]:
        """Bound attribute names in binding order."""
        return list(self._attributes)

    def to_dict(self) -> dict[str, Value]:
        """Copy of the attribute mapping."""
        return dict(self._attributes)

    @property
    def identity_value(self) -> Value:
        """Identity value, or None when the record was never persisted."""
        return self._attributes.get(type(self).__identity__)

    @property
    def is_persisted(self) -> bool:
        return self.identity_value is not None

    def __copy__(self) -> Self:
        return type(self)(self._attributes, gateway=self._instance_gateway)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return type(self) is type(other) and self._attributes == other._attributes

    def __repr__(self) -> str:
        pairs = ", ".join(f"{name}={value!r}" for name, value in self._attributes.items())
        return f"{type(self).__name__}({pairs})"

    # === Type-level configuration ===

    @classmethod
    def bind(cls, gateway: Gateway | None) -> None:
        """Bind a gateway to this type and its subclasses. ``None`` unbinds."""
        cls._gateway = gateway

    @classmethod
    def table_name(cls) -> str:
        """Table holding rows of this type."""
        if cls.__tablename__:
            return cls.__tablename__
        return cls.__table_naming__(cls.__name__)

    @classmethod
    def statements(cls, gateway: Gateway) -> StatementBuilder:
        """Statement builder for this type, using the gateway's dialect details."""
        return StatementBuilder(
            cls.table_name(),
            identity=cls.__identity__,
            placeholder=gateway.placeholder,
            returning=gateway.supports_returning,
        )

    @classmethod
    def _resolve_gateway(cls, gateway: Gateway | None = None) -> Gateway:
        resolved = gateway if gateway is not None else cls._gateway
        if resolved is None:
            raise GatewayNotBoundError(cls.__name__)
        return resolved

    @property
    def gateway(self) -> Gateway:
        """Gateway this record persists through.

        Raises:
            GatewayNotBoundError: If neither the instance nor its type has one
        """
        return type(self)._resolve_gateway(self._instance_gateway)

    # === Persistence ===

    def save_statement(self, gateway: Gateway | None = None) -> Statement:
        """The statement ``save()`` would issue right now.

        Args:
            gateway: Gateway whose placeholder style to use (default: the record's)

        Returns:
            Insert when the identity is absent or None, update otherwise
        """
        builder = type(self).statements(gateway if gateway is not None else self.gateway)
        if self.identity_value is None:
            return builder.insert(self._attributes)
        return builder.update(self._attributes)

    def save(self) -> None:
        """Insert the record if it has no identity, update it otherwise.

        On insert the identity attribute is set from the identity the
        gateway reports for that statement. Gateway errors propagate
        unchanged.

        Raises:
            EmptyUpdateError: If an update would have nothing to set
            StorageError: If the database rejects the statement
        """
        gateway = self.gateway
        statement = self.save_statement(gateway)
        logger.debug(
            "Saving %s: %s, %d value(s)", statement.table, statement.kind, statement.param_count
        )
        result = gateway.execute(statement.sql, statement.params)

        if statement.kind is StatementKind.INSERT:
            identity = type(self).__identity__
            self._attributes[identity] = result.inserted_identity
            logger.debug("Inserted %s %s=%r", statement.table, identity, result.inserted_identity)

    def destroy(self) -> None:
        """Delete the row keyed by this record's identity.

        In-memory attributes are left untouched.

        Raises:
            MissingIdentityError: If the record has no identity value
            StorageError: If the database rejects the statement
        """
        identity_value = self.identity_value
        if identity_value is None:
            raise MissingIdentityError("destroy", type(self).__name__, type(self).__identity__)

        gateway = self.gateway
        statement = type(self).statements(gateway).delete(identity_value)
        gateway.execute(statement.sql, statement.params)

    @classmethod
    def find(cls, identity_value: Value, *, gateway: Gateway | None = None) -> Self | None:
        """Look a row up by identity.

        Identity is expected to be unique. Should storage return several
        rows anyway, the first is used and a warning is logged.

        Args:
            identity_value: Identity to match
            gateway: Gateway for this call, overrides the class binding

        Returns:
            Hydrated record, or None if no row matches
        """
        resolved = cls._resolve_gateway(gateway)
        statement = cls.statements(resolved).select_one(identity_value)
        result = resolved.execute(statement.sql, statement.params)

        row = result.first
        if row is None:
            return None
        if len(result.rows) > 1:
            logger.warning(
                "%s.find(%r) matched %d rows in '%s'; using the first",
                cls.__name__,
                identity_value,
                len(result.rows),
                statement.table,
            )
        return cls(row, gateway=gateway)

    @classmethod
    def all(cls, *, gateway: Gateway | None = None) -> list[Self]:
        """Hydrate every row of the table, in storage order."""
        resolved = cls._resolve_gateway(gateway)
        statement = cls.statements(resolved).select_all()
        rows = resolved.execute(statement.sql, statement.params).rows
        return [cls(row, gateway=gateway) for row in rows]


def record_type(
    type_name: str,
    *,
    identity: str = "id",
    gateway: Gateway | None = None,
    table_naming: NamingPolicy | None = None,
) -> type[Record]:
    """Create a ``Record`` subclass at runtime.

    Args:
        type_name: Class name, which the naming policy turns into a table name
        identity: Identity attribute name
        gateway: Gateway to bind to the new type
        table_naming: Naming policy (default: inherited :func:`pluralize`)

    Returns:
        The new record type
    """
    namespace: dict[str, Any] = {"__identity__": identity}
    if table_naming is not None:
        namespace["__table_naming__"] = table_naming
    cls = type(type_name, (Record,), namespace)
    if gateway is not None:
        cls.bind(gateway)
    return cls
