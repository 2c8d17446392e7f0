"""Read declarative annotations from types and member descriptors."""

from __future__ import annotations

from typing import Any, Iterable, TypeVar

from .annotations import Table

A = TypeVar('A')


def find_annotation(metadata: Iterable[Any], kind: type[A]) -> A | None:
    """Return the first annotation of *kind* in *metadata*, or None.

    *metadata* is the ``Annotated`` extras captured on a member descriptor.
    """
    for item in metadata:
        if isinstance(item, kind):
            return item
    return None


def has_annotation(metadata: Iterable[Any], kind: type) -> bool:
    return find_annotation(metadata, kind) is not None


def read_table(cls: type) -> Table | None:
    """Return the table annotation for *cls*, including inherited ones.

    Looks for a :class:`Table` in ``__table__`` (set by ``@table``), then for
    ``__tablename__`` / ``__tableschema__`` class attributes.
    """
    found = getattr(cls, '__table__', None)
    if isinstance(found, Table):
        return found

    tablename = getattr(cls, '__tablename__', None)
    if isinstance(tablename, str) and tablename:
        schema = getattr(cls, '__tableschema__', None)
        return Table(name=tablename, schema=schema if isinstance(schema, str) else None)

    return None
