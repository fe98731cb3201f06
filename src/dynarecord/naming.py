"""Table naming policies.

A policy is any callable taking a type name and returning a table name.
Record types pick one with ``__table_naming__``; the default is
:func:`pluralize`.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping

NamingPolicy = Callable[[str], str]


def pluralize(type_name: str) -> str:
    """Lower-case the type name and append ``s``.

    No irregular plurals: ``Person`` becomes ``persons``.

    Args:
        type_name: Simple class name (e.g., "Post")

    Returns:
        Table name (e.g., "posts")
    """
    return f"{type_name.lower()}s"


def table_lookup(tables: Mapping[str, str], fallback: NamingPolicy = pluralize) -> NamingPolicy:
    """Build a policy that looks names up in a fixed table.

    Args:
        tables: Type name to table name
        fallback: Policy used for type names missing from ``tables``

    Returns:
        Naming policy
    """
    known = dict(tables)

    def policy(type_name: str) -> str:
        if type_name in known:
            return known[type_name]
        return fallback(type_name)

    return policy
