"""Per-type façade: resolves and caches member, method and constructor accessors."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Sequence

from .._concurrent import ConcurrentCache, Lazy
from ..exc import InvalidArgumentError, InvalidOperationError
from ..metadata.annotations import Column, Table
from ..metadata.reader import find_annotation, read_table
from . import factory, members
from .binding import DEFAULT_METHOD, DEFAULT_NON_PUBLIC, DEFAULT_PROPERTIES, DEFAULT_PUBLIC, Binding
from .coerce import is_assignable
from .expressions import member_name_of
from .member import FieldAccessor, MemberAccessor, PropertyAccessor
from .method import MethodAccessor

if TYPE_CHECKING:
    from ..registry import RegistryOptions

log = logging.getLogger("memberaccess")


def _check_name(name: Any) -> str:
    if not isinstance(name, str) or not name:
        raise InvalidArgumentError("A non-empty member name is required.")
    return name


class TypeAccessor:
    """Resolve members of one class by name and access them through compiled delegates.

    Every lookup is cached: a name (or signature) is resolved once and the
    resulting accessor, or ``None`` when nothing matched, is returned on
    every later call with the same arguments.  Each member descriptor is
    wrapped by exactly one accessor, so accessors found through different
    lookups are the same object.

    Usage::

        accessor = TypeAccessor(Order)
        total = accessor.find('total')
        total.set_value(order, 10)
        accessor.find_method('add_line', (str, int)).invoke(order, 'widget', 2)

    Instances are normally obtained from an
    :class:`~memberaccess.registry.AccessorRegistry`, which keeps one per class.
    """

    def __init__(self, cls: type, options: RegistryOptions | None = None) -> None:
        if not isinstance(cls, type):
            raise InvalidArgumentError(f"Expected a class, got {cls!r}.")
        self._type = cls
        self._ignore_case = options.ignore_case if options is not None else True
        self._widen = options.widen_numbers if options is not None else True

        self._members: ConcurrentCache[tuple[Any, ...], MemberAccessor | None] = ConcurrentCache()
        self._methods: ConcurrentCache[tuple[Any, ...], MethodAccessor | None] = ConcurrentCache()
        self._property_sets: ConcurrentCache[Binding, tuple[PropertyAccessor, ...]] = ConcurrentCache()
        self._accessors: ConcurrentCache[Any, Any] = ConcurrentCache()

        self._constructor: Lazy[Callable[[], Any] | None] = Lazy(
            lambda: factory.create_constructor(cls)
        )
        self._constructor_with: Lazy[Callable[[Sequence[Any]], Any] | None] = Lazy(
            lambda: factory.create_constructor_with(members.constructor_info(cls), widen=self._widen)
        )
        self._table: Lazy[Table | None] = Lazy(lambda: read_table(cls))

    # ── Type ───────────────────────────────────────────────────────

    @property
    def type(self) -> type:
        return self._type

    @property
    def name(self) -> str:
        return self._type.__name__

    @property
    def table_name(self) -> str:
        """Table name from ``@table`` / ``__tablename__``, else the class name."""
        table = self._table.value
        return table.name if table is not None else self._type.__name__

    @property
    def table_schema(self) -> str | None:
        table = self._table.value
        return table.schema if table is not None else None

    # ── Construction ───────────────────────────────────────────────

    def create(self) -> Any:
        """Create an instance with the parameterless constructor."""
        constructor = self._constructor.value
        if constructor is None:
            raise InvalidOperationError(f"Could not find constructor for '{self.name}'.")
        return constructor()

    def create_with(self, *arguments: Any) -> Any:
        """Create an instance passing *arguments* positionally to the constructor."""
        constructor = self._constructor_with.value
        if constructor is None:
            raise InvalidOperationError(f"Could not find constructor for '{self.name}'.")
        return constructor(arguments)

    # ── Accessor identity ──────────────────────────────────────────

    def _accessor_for(self, info: Any) -> Any:
        """The single accessor wrapping *info*."""
        return self._accessors.get_or_add(info, self._new_accessor)

    def _new_accessor(self, info: Any) -> Any:
        if isinstance(info, members.PropertyInfo):
            accessor: Any = PropertyAccessor(info, widen=self._widen)
        elif isinstance(info, members.FieldInfo):
            accessor = FieldAccessor(info, widen=self._widen)
        else:
            accessor = MethodAccessor(info, widen=self._widen)
        log.debug("Created %r", accessor)
        return accessor

    # ── Members ────────────────────────────────────────────────────

    def find(self, name: str, binding: Binding = DEFAULT_PUBLIC) -> MemberAccessor | None:
        """Find a property, or failing that a field, named *name*.

        Exact names win over case-insensitive matches within each kind.
        """
        _check_name(name)
        return self._members.get_or_add(('find', name, binding), self._resolve_member)

    def _resolve_member(self, key: tuple[Any, ...]) -> MemberAccessor | None:
        _, name, binding = key
        info = members.find_property(self._type, name, binding, self._ignore_case)
        if info is None:
            info = members.find_field(self._type, name, binding, self._ignore_case)
        return self._accessor_for(info) if info is not None else None

    def find_property(
        self,
        name: str | property | Callable[[Any], Any],
        binding: Binding = DEFAULT_PUBLIC,
    ) -> PropertyAccessor | None:
        """Find a property by name or by a member reference.

        *name* may be a string, a ``property`` object, or a callable such as
        ``lambda o: o.total`` that reads exactly one attribute.
        """
        if isinstance(name, property):
            return self._members.get_or_add(('property-ref', name, binding), self._resolve_property_ref)
        if name is not None and not isinstance(name, str):
            return self._find_property_by_expression(name, binding)
        _check_name(name)
        return self._members.get_or_add(('property', name, binding), self._resolve_property)

    def _resolve_property(self, key: tuple[Any, ...]) -> PropertyAccessor | None:
        _, name, binding = key
        info = members.find_property(self._type, name, binding, self._ignore_case)
        return self._accessor_for(info) if info is not None else None

    def _resolve_property_ref(self, key: tuple[Any, ...]) -> PropertyAccessor | None:
        _, prop, binding = key
        for info in members.get_properties(self._type, binding):
            if info.descriptor is prop:
                return self._accessor_for(info)
        return None

    def _find_property_by_expression(
        self, expression: Callable[[Any], Any], binding: Binding,
    ) -> PropertyAccessor | None:
        name = member_name_of(expression)
        found = self.find_property(name, binding)
        if found is not None:
            return found
        if members.get_methods(self._type, DEFAULT_METHOD, name):
            raise InvalidArgumentError(
                f"The member expression refers to method '{name}', not a property."
            )
        field = members.find_field(self._type, name, DEFAULT_NON_PUBLIC | Binding.STATIC, self._ignore_case)
        if field is not None:
            raise InvalidArgumentError(
                f"The member expression refers to field '{field.name}', not a property."
            )
        return None

    def find_field(self, name: str, binding: Binding = DEFAULT_NON_PUBLIC) -> FieldAccessor | None:
        """Find a field named *name*; non-public fields are included by default."""
        _check_name(name)
        return self._members.get_or_add(('field', name, binding), self._resolve_field)

    def _resolve_field(self, key: tuple[Any, ...]) -> FieldAccessor | None:
        _, name, binding = key
        info = members.find_field(self._type, name, binding, self._ignore_case)
        return self._accessor_for(info) if info is not None else None

    def find_column(self, name: str, binding: Binding = DEFAULT_PUBLIC) -> MemberAccessor | None:
        """Find the member mapped to column *name*.

        Members whose ``Column`` annotation names *name* win; otherwise the
        member name is matched.  Comparisons are case-insensitive, and
        properties are scanned before fields.
        """
        _check_name(name)
        return self._members.get_or_add(('column', name, binding), self._resolve_column)

    def _resolve_column(self, key: tuple[Any, ...]) -> MemberAccessor | None:
        _, name, binding = key
        candidates: list[members.PropertyInfo | members.FieldInfo] = [
            *members.get_properties(self._type, binding),
            *members.get_fields(self._type, binding),
        ]
        folded = name.casefold()
        for info in candidates:
            column = find_annotation(info.metadata, Column)
            if column is not None and column.name and column.name.casefold() == folded:
                return self._accessor_for(info)
        for info in candidates:
            if info.name.casefold() == folded:
                return self._accessor_for(info)
        return None

    def get_properties(self, binding: Binding = DEFAULT_PROPERTIES) -> tuple[PropertyAccessor, ...]:
        """All properties visible under *binding*, in MRO and declaration order."""
        return self._property_sets.get_or_add(binding, self._collect_properties)

    def _collect_properties(self, binding: Binding) -> tuple[PropertyAccessor, ...]:
        return tuple(self._accessor_for(info) for info in members.get_properties(self._type, binding))

    def get_fields(self, binding: Binding = DEFAULT_NON_PUBLIC) -> tuple[FieldAccessor, ...]:
        """All fields visible under *binding*."""
        return tuple(self._accessor_for(info) for info in members.get_fields(self._type, binding))

    # ── Methods ────────────────────────────────────────────────────

    def find_method(
        self,
        name: str,
        parameter_types: Sequence[Any] = (),
        binding: Binding = DEFAULT_METHOD,
    ) -> MethodAccessor | None:
        """Find the overload of *name* that best fits *parameter_types*.

        Resolution order: an exact signature match; the only method with
        that name; the only overload with that many parameters; the
        overload with the most parameters assignable from
        *parameter_types* (the first one wins a tie).
        """
        _check_name(name)
        if parameter_types is None:
            parameter_types = ()
        key = (MethodAccessor.get_key(name, parameter_types), binding)
        return self._methods.get_or_add(key, self._resolve_method)

    def _resolve_method(self, key: tuple[Any, ...]) -> MethodAccessor | None:
        (name, parameter_types), binding = key
        info = self._best_overload(name, parameter_types, binding)
        return self._accessor_for(info) if info is not None else None

    def _best_overload(
        self, name: str, parameter_types: tuple[Any, ...], binding: Binding,
    ) -> members.MethodInfo | None:
        candidates = members.get_methods(self._type, binding, name)
        for info in candidates:
            if info.parameter_types == parameter_types:
                return info

        if not candidates:
            return None
        if len(candidates) == 1:
            return candidates[0]

        by_count = [c for c in candidates if len(c.parameters) == len(parameter_types)]
        if len(by_count) == 1:
            return by_count[0]

        best = by_count[0] if by_count else None
        best_score = 0
        for info in by_count:
            score = sum(
                1 for declared, requested in zip(info.parameter_types, parameter_types)
                if is_assignable(declared, requested)
            )
            if score > best_score:
                best, best_score = info, score
        return best

    def get_methods(self, binding: Binding = DEFAULT_METHOD) -> tuple[MethodAccessor, ...]:
        """Every method overload visible under *binding*."""
        return tuple(self._accessor_for(info) for info in members.get_methods(self._type, binding))

    def __repr__(self) -> str:
        return f"TypeAccessor({self._type.__module__}.{self._type.__qualname__})"
