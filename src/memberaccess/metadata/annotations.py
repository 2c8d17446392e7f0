"""Declarative mapping annotations for types and members.

Member annotations are attached with ``typing.Annotated`` on a field
annotation or on a property getter's return annotation::

    @table('orders', schema='sales')
    @dataclass
    class Order:
        id: Annotated[int, Key(), DatabaseGenerated()]
        customer: Annotated[str, Column('customer_name', order=1)]
        total: Decimal
        cache: Annotated[dict, NotMapped()] = None
"""

from __future__ import annotations

import dataclasses
import enum
from typing import Any, Callable, TypeVar

T = TypeVar('T', bound=type)


class DatabaseGeneratedOption(enum.Enum):
    """How the store produces a value for a generated member."""
    NONE = 'none'
    IDENTITY = 'identity'
    COMPUTED = 'computed'


@dataclasses.dataclass(frozen=True, slots=True)
class Table:
    """Maps a type to a table.

    Attributes
    ----------
    name : str
        Table name.
    schema : str | None
        Optional schema the table lives in.
    """
    name: str
    schema: str | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class Column:
    """Maps a member to a column.

    Attributes
    ----------
    name : str | None
        Column name; the member name is used when omitted.
    type_name : str | None
        Provider-specific column type (e.g. ``"varchar(64)"``).
    order : int | None
        Zero-based column order.
    """
    name: str | None = None
    type_name: str | None = None
    order: int | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class Key:
    """Marks a member as (part of) the primary key."""


@dataclasses.dataclass(frozen=True, slots=True)
class NotMapped:
    """Excludes a member from mapping."""


@dataclasses.dataclass(frozen=True, slots=True)
class ConcurrencyCheck:
    """Marks a member as an optimistic concurrency token."""


@dataclasses.dataclass(frozen=True, slots=True)
class DatabaseGenerated:
    """Marks a member whose value is produced by the store."""
    option: DatabaseGeneratedOption = DatabaseGeneratedOption.IDENTITY


@dataclasses.dataclass(frozen=True, slots=True)
class ForeignKey:
    """Names the navigation or key member this member relates to."""
    name: str


ANNOTATION_TYPES: tuple[type, ...] = (
    Column, Key, NotMapped, ConcurrencyCheck, DatabaseGenerated, ForeignKey,
)


def table(name: str, schema: str | None = None) -> Callable[[T], T]:
    """Class decorator attaching a :class:`Table` annotation.

    Usage::

        @table('orders', schema='sales')
        class Order:
            ...
    """
    def decorate(cls: T) -> T:
        cls.__table__ = Table(name=name, schema=schema)  # type: ignore[attr-defined]
        return cls
    return decorate


def is_annotation(value: Any) -> bool:
    """Return True if *value* is one of the member annotation markers."""
    return isinstance(value, ANNOTATION_TYPES)
