"""Property and field accessors.

A member accessor wraps one :class:`~.members.PropertyInfo` or
:class:`~.members.FieldInfo`.  Its getter and setter delegates are compiled
on first use and then reused; its declarative column metadata is read on
first access and cached the same way.
"""

from __future__ import annotations

import abc
import dataclasses
from typing import Any, Callable

from .._concurrent import Lazy
from ..exc import InvalidOperationError
from ..metadata.annotations import (
    Column, ConcurrencyCheck, DatabaseGenerated, DatabaseGeneratedOption,
    ForeignKey, Key, NotMapped,
)
from ..metadata.reader import find_annotation
from . import factory
from .members import FieldInfo, PropertyInfo


@dataclasses.dataclass(frozen=True, slots=True)
class ColumnMetadata:
    """Declarative mapping metadata of one member."""
    column: str
    column_type: str | None = None
    column_order: int | None = None
    is_key: bool = False
    is_not_mapped: bool = False
    is_concurrency_check: bool = False
    is_database_generated: bool = False
    foreign_key: str | None = None


def read_column_metadata(name: str, metadata: tuple[Any, ...]) -> ColumnMetadata:
    """Build :class:`ColumnMetadata` from a member's ``Annotated`` extras."""
    column = find_annotation(metadata, Column)
    generated = find_annotation(metadata, DatabaseGenerated)
    foreign_key = find_annotation(metadata, ForeignKey)
    return ColumnMetadata(
        column=column.name if column is not None and column.name else name,
        column_type=column.type_name if column is not None else None,
        column_order=column.order if column is not None else None,
        is_key=find_annotation(metadata, Key) is not None,
        is_not_mapped=find_annotation(metadata, NotMapped) is not None,
        is_concurrency_check=find_annotation(metadata, ConcurrencyCheck) is not None,
        is_database_generated=(
            generated is not None and generated.option is not DatabaseGeneratedOption.NONE
        ),
        foreign_key=foreign_key.name if foreign_key is not None else None,
    )


class MemberAccessor(abc.ABC):
    """Get/set access to one property or field, plus its column metadata."""

    kind: str = "Member"

    def __init__(self, member_info: PropertyInfo | FieldInfo, *, widen: bool = True) -> None:
        self._info = member_info
        self._getter: Lazy[Callable[[Any], Any] | None] = Lazy(
            lambda: factory.create_get(member_info)
        )
        self._setter: Lazy[Callable[[Any, Any], None] | None] = Lazy(
            lambda: factory.create_set(member_info, widen=widen)
        )
        self._metadata: Lazy[ColumnMetadata] = Lazy(
            lambda: read_column_metadata(member_info.name, member_info.metadata)
        )

    # ── Descriptor ─────────────────────────────────────────────────

    @property
    def member_info(self) -> PropertyInfo | FieldInfo:
        return self._info

    @property
    def name(self) -> str:
        return self._info.name

    @property
    def member_type(self) -> Any:
        return self._info.member_type

    @property
    def declaring_type(self) -> type:
        return self._info.declaring_type

    @property
    def is_static(self) -> bool:
        return self._info.is_static

    @property
    @abc.abstractmethod
    def has_getter(self) -> bool: ...

    @property
    @abc.abstractmethod
    def has_setter(self) -> bool: ...

    # ── Metadata ───────────────────────────────────────────────────

    @property
    def metadata(self) -> ColumnMetadata:
        return self._metadata.value

    @property
    def column(self) -> str:
        """Logical column name; the member name unless a ``Column`` renames it."""
        return self._metadata.value.column

    @property
    def column_type(self) -> str | None:
        return self._metadata.value.column_type

    @property
    def column_order(self) -> int | None:
        return self._metadata.value.column_order

    @property
    def is_key(self) -> bool:
        return self._metadata.value.is_key

    @property
    def is_not_mapped(self) -> bool:
        return self._metadata.value.is_not_mapped

    @property
    def is_concurrency_check(self) -> bool:
        return self._metadata.value.is_concurrency_check

    @property
    def is_database_generated(self) -> bool:
        return self._metadata.value.is_database_generated

    @property
    def foreign_key(self) -> str | None:
        return self._metadata.value.foreign_key

    # ── Access ─────────────────────────────────────────────────────

    def get_value(self, instance: Any) -> Any:
        """Read the member from *instance* (ignored for static members)."""
        return self._delegate(self._getter, "getter")(instance)

    def set_value(self, instance: Any, value: Any) -> None:
        """Write *value* to the member of *instance* (ignored for static members)."""
        self._delegate(self._setter, "setter")(instance, value)

    def _delegate(self, slot: Lazy[Any], what: str) -> Any:
        try:
            delegate = slot.value
        except Exception as e:
            raise InvalidOperationError(
                f"Could not compile the {what} for {self.kind.lower()} '{self.name}': {e}"
            ) from e
        if delegate is None:
            raise InvalidOperationError(f"{self.kind} '{self.name}' does not have a {what}.")
        return delegate

    # ── Identity ───────────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MemberAccessor):
            return NotImplemented
        return self._info == other._info

    def __hash__(self) -> int:
        return hash(self._info)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.declaring_type.__name__}.{self.name})"


class PropertyAccessor(MemberAccessor):
    """Accessor for a ``property``; reads and writes go through fget / fset."""

    kind = "Property"

    @property
    def has_getter(self) -> bool:
        return self._info.can_read

    @property
    def has_setter(self) -> bool:
        return self._info.can_write


class FieldAccessor(MemberAccessor):
    """Accessor for direct storage: an annotated attribute, a slot, or class data.

    Writable unless the field is immutable after construction (``Final``,
    frozen dataclass, ``NamedTuple``).
    """

    kind = "Field"

    @property
    def has_getter(self) -> bool:
        return True

    @property
    def has_setter(self) -> bool:
        return not self._info.read_only

    @property
    def is_read_only(self) -> bool:
        return self._info.read_only
