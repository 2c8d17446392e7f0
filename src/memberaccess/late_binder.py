"""One-shot, name-based member access without holding an accessor.

Every function accepts either a class or an instance as *target*; for an
instance, its class is used for the lookup.  When a class is given, static
members are searched as well and no instance is passed on.

Usage::

    from memberaccess import late_binder

    late_binder.set(order, 'customer', 'Acme')
    late_binder.get(order, 'customer')                 # 'Acme'
    late_binder.invoke_method(order, 'add_line', 'widget', 2)
    late_binder.create_instance(Order)

Lookups that resolve to nothing raise :class:`MemberNotFoundError` before
anything is read, written or called.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence

from .exc import InvalidArgumentError, MemberNotFoundError
from .reflection.binding import DEFAULT_METHOD, DEFAULT_NON_PUBLIC, DEFAULT_PUBLIC, Binding
from .reflection.member import FieldAccessor, MemberAccessor, PropertyAccessor
from .reflection.method import MethodAccessor
from .reflection.type_accessor import TypeAccessor
from .registry import AccessorRegistry, default_registry

__all__ = [
    'DEFAULT_PUBLIC', 'DEFAULT_NON_PUBLIC',
    'find', 'find_property', 'find_field', 'find_method',
    'get', 'get_property', 'get_field',
    'set', 'set_property', 'set_field',
    'invoke_method', 'create_instance',
]


def _split(target: Any) -> tuple[type, Any]:
    """Return ``(cls, instance)``; *instance* is None when *target* is a class."""
    if target is None:
        raise InvalidArgumentError("A target class or instance is required.")
    if isinstance(target, type):
        return target, None
    return type(target), target


def _accessor(cls: type, registry: AccessorRegistry | None) -> TypeAccessor:
    return (registry if registry is not None else default_registry).type_accessor(cls)


def _check_name(name: Any) -> None:
    if not isinstance(name, str) or not name:
        raise InvalidArgumentError("A non-empty member name is required.")


def _binding_for(instance: Any, binding: Binding) -> Binding:
    return binding if instance is not None else binding | Binding.STATIC


def _require(found: Any, description: str, name: str, cls: type) -> Any:
    if found is None:
        raise MemberNotFoundError(
            f"Could not find {description} in type '{cls.__name__}'.",
            name=name, type_name=cls.__name__,
        )
    return found


# ── Find ───────────────────────────────────────────────────────────

def find(
    target: Any, name: str, binding: Binding = DEFAULT_NON_PUBLIC,
    *, registry: AccessorRegistry | None = None,
) -> MemberAccessor | None:
    """Find a property or field on *target*'s class."""
    cls, instance = _split(target)
    _check_name(name)
    return _accessor(cls, registry).find(name, _binding_for(instance, binding))


def find_property(
    target: Any, name: str | property | Callable[[Any], Any], binding: Binding = DEFAULT_PUBLIC,
    *, registry: AccessorRegistry | None = None,
) -> PropertyAccessor | None:
    """Find a property by name or member reference (``lambda o: o.total``)."""
    cls, instance = _split(target)
    if isinstance(name, str):
        _check_name(name)
    return _accessor(cls, registry).find_property(name, _binding_for(instance, binding))


def find_field(
    target: Any, name: str, binding: Binding = DEFAULT_NON_PUBLIC,
    *, registry: AccessorRegistry | None = None,
) -> FieldAccessor | None:
    cls, instance = _split(target)
    _check_name(name)
    return _accessor(cls, registry).find_field(name, _binding_for(instance, binding))


def find_method(
    target: Any, name: str, parameter_types: Sequence[Any] = (), binding: Binding = DEFAULT_METHOD,
    *, registry: AccessorRegistry | None = None,
) -> MethodAccessor | None:
    cls, _ = _split(target)
    _check_name(name)
    return _accessor(cls, registry).find_method(name, tuple(parameter_types), binding)


# ── Get / set ──────────────────────────────────────────────────────

def get(
    target: Any, name: str, binding: Binding = DEFAULT_PUBLIC,
    *, registry: AccessorRegistry | None = None,
) -> Any:
    """Read the property or field *name* of *target*."""
    cls, instance = _split(target)
    member = _require(
        find(target, name, binding, registry=registry),
        f"a property or field with a name of '{name}'", name, cls,
    )
    return member.get_value(instance)


def get_property(
    target: Any, name: str, binding: Binding = DEFAULT_PUBLIC,
    *, registry: AccessorRegistry | None = None,
) -> Any:
    cls, instance = _split(target)
    member = _require(find_property(target, name, binding, registry=registry), f"property '{name}'", name, cls)
    return member.get_value(instance)


def get_field(
    target: Any, name: str, binding: Binding = DEFAULT_PUBLIC,
    *, registry: AccessorRegistry | None = None,
) -> Any:
    cls, instance = _split(target)
    member = _require(find_field(target, name, binding, registry=registry), f"field '{name}'", name, cls)
    return member.get_value(instance)


def set(
    target: Any, name: str, value: Any, binding: Binding = DEFAULT_PUBLIC,
    *, registry: AccessorRegistry | None = None,
) -> None:
    """Write *value* to the property or field *name* of *target*."""
    cls, instance = _split(target)
    member = _require(
        find(target, name, binding, registry=registry),
        f"a property or field with a name of '{name}'", name, cls,
    )
    member.set_value(instance, value)


def set_property(
    target: Any, name: str, value: Any, binding: Binding = DEFAULT_PUBLIC,
    *, registry: AccessorRegistry | None = None,
) -> None:
    cls, instance = _split(target)
    member = _require(find_property(target, name, binding, registry=registry), f"property '{name}'", name, cls)
    member.set_value(instance, value)


def set_field(
    target: Any, name: str, value: Any, binding: Binding = DEFAULT_PUBLIC,
    *, registry: AccessorRegistry | None = None,
) -> None:
    cls, instance = _split(target)
    member = _require(find_field(target, name, binding, registry=registry), f"field '{name}'", name, cls)
    member.set_value(instance, value)


# ── Invoke / create ────────────────────────────────────────────────

def invoke_method(
    target: Any, name: str, *arguments: Any,
    registry: AccessorRegistry | None = None,
) -> Any:
    """Call method *name* on *target*, resolving the overload from the argument types.

    ``None`` arguments count as ``object`` for overload resolution.  With a
    class as *target* only static methods and classmethods can be called.
    """
    cls, instance = _split(target)
    argument_types = tuple(type(a) if a is not None else object for a in arguments)
    method = _require(
        find_method(cls, name, argument_types, registry=registry), f"method '{name}'", name, cls,
    )
    return method.invoke(instance, *arguments)


def create_instance(cls: type, *arguments: Any, registry: AccessorRegistry | None = None) -> Any:
    """Create an instance of *cls*, with the parameterless constructor when no *arguments* are given."""
    if not isinstance(cls, type):
        raise InvalidArgumentError(f"Expected a class, got {cls!r}.")
    accessor = _accessor(cls, registry)
    if arguments:
        return accessor.create_with(*arguments)
    return accessor.create()
