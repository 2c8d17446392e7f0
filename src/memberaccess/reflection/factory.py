"""Compiled-accessor factory.

Turns a member descriptor into a plain callable that reads, writes, invokes
or constructs without further metadata lookups.  Building is comparatively
expensive (signature inspection, closure setup), so callers build once and
keep the result; every accessor in this package memoizes what it gets here.

All delegates share the same conventions:

- instance members reject a ``None`` instance with :class:`InvalidArgumentError`
  and an instance of the wrong type with :class:`InvalidCastError`;
- static members ignore the instance argument entirely;
- arguments and assigned values are coerced to the declared types;
- exceptions raised by the member itself propagate unchanged.
"""

from __future__ import annotations

import logging
import operator
from typing import Any, Callable, Sequence

from ..exc import ArgumentCountError, InvalidArgumentError, InvalidCastError, InvalidOperationError
from .coerce import coerce
from .members import ConstructorInfo, FieldInfo, MethodInfo, PropertyInfo, constructor_info

log = logging.getLogger("memberaccess.factory")

Getter = Callable[[Any], Any]
Setter = Callable[[Any, Any], None]
Invoker = Callable[[Any, Sequence[Any]], Any]
Constructor = Callable[[], Any]
ParameterizedConstructor = Callable[[Sequence[Any]], Any]


def _require(info: Any, kind: str) -> None:
    if info is None:
        raise InvalidArgumentError(f"A {kind} descriptor is required.")


def _unset(owner: type, name: str) -> InvalidOperationError:
    return InvalidOperationError(f"Field '{name}' of '{owner.__name__}' has no value.")


def _instance_guard(owner: type, name: str) -> Callable[[Any], None]:
    def guard(instance: Any) -> None:
        if instance is None:
            raise InvalidArgumentError(
                f"Member '{name}' of '{owner.__name__}' requires an instance."
            )
        if not isinstance(instance, owner):
            raise InvalidCastError(type(instance), owner)
    return guard


def _expected_count(required: int, maximum: int | None) -> str:
    if maximum is None:
        return f"at least {required}"
    if maximum == required:
        return str(required)
    return f"{required} to {maximum}"


# ── Get / set ──────────────────────────────────────────────────────

def create_get(info: PropertyInfo | FieldInfo) -> Getter | None:
    """Build a getter ``get(instance) -> value``.

    Returns None for a property without ``fget``.
    """
    _require(info, "member")
    owner, name = info.declaring_type, info.name

    if isinstance(info, PropertyInfo):
        fget = info.descriptor.fget
        if fget is None:
            return None
        guard = _instance_guard(owner, name)

        def get_property(instance: Any) -> Any:
            guard(instance)
            return fget(instance)

        log.debug("Compiled getter for property %s.%s", owner.__name__, name)
        return get_property

    if isinstance(info, FieldInfo):
        if info.is_static:
            def get_static(instance: Any) -> Any:
                try:
                    return getattr(owner, name)
                except AttributeError:
                    raise _unset(owner, name) from None

            log.debug("Compiled getter for static field %s.%s", owner.__name__, name)
            return get_static

        read = info.slot.__get__ if info.slot is not None else operator.attrgetter(name)
        guard = _instance_guard(owner, name)

        def get_field(instance: Any) -> Any:
            guard(instance)
            try:
                return read(instance)
            except AttributeError:
                raise _unset(owner, name) from None

        log.debug("Compiled getter for field %s.%s", owner.__name__, name)
        return get_field

    raise InvalidArgumentError(f"Unsupported member descriptor: {info!r}")


def create_set(info: PropertyInfo | FieldInfo, *, widen: bool = True) -> Setter | None:
    """Build a setter ``set(instance, value)``.

    Returns None when the member cannot be written (property without
    ``fset``, immutable field), so callers can check ``has_setter`` first.
    ``None`` is always assignable; other values are coerced to the member type.
    """
    _require(info, "member")
    owner, name, member_type = info.declaring_type, info.name, info.member_type

    if isinstance(info, PropertyInfo):
        fset = info.descriptor.fset
        if fset is None:
            return None
        guard = _instance_guard(owner, name)

        def set_property(instance: Any, value: Any) -> None:
            guard(instance)
            fset(instance, coerce(value, member_type, allow_none=True, widen=widen))

        log.debug("Compiled setter for property %s.%s", owner.__name__, name)
        return set_property

    if isinstance(info, FieldInfo):
        if info.read_only:
            return None

        if info.is_static:
            def set_static(instance: Any, value: Any) -> None:
                setattr(owner, name, coerce(value, member_type, allow_none=True, widen=widen))

            log.debug("Compiled setter for static field %s.%s", owner.__name__, name)
            return set_static

        if info.slot is not None:
            write: Callable[[Any, Any], None] = info.slot.__set__
        else:
            def write(instance: Any, value: Any) -> None:
                setattr(instance, name, value)
        guard = _instance_guard(owner, name)

        def set_field(instance: Any, value: Any) -> None:
            guard(instance)
            write(instance, coerce(value, member_type, allow_none=True, widen=widen))

        log.debug("Compiled setter for field %s.%s", owner.__name__, name)
        return set_field

    raise InvalidArgumentError(f"Unsupported member descriptor: {info!r}")


# ── Methods ────────────────────────────────────────────────────────

def _argument_binder(
    parameters: Sequence[Any],
    required: int,
    maximum: int | None,
    widen: bool,
    target: str = '',
) -> Callable[[Sequence[Any]], list[Any]]:
    expected = _expected_count(required, maximum)
    converters = tuple(
        (p.annotation, p.has_default and p.default is None) for p in parameters
    )
    declared = len(converters)

    def bind(arguments: Sequence[Any]) -> list[Any]:
        count = len(arguments)
        if count < required or (maximum is not None and count > maximum):
            raise ArgumentCountError(expected, count, target)
        bound = [
            coerce(value, annotation, allow_none=allow_none, widen=widen)
            for value, (annotation, allow_none) in zip(arguments, converters)
        ]
        if count > declared:
            bound.extend(arguments[declared:])
        return bound

    return bind


def create_method(info: MethodInfo, *, widen: bool = True) -> Invoker:
    """Build an invoker ``invoke(instance, arguments) -> result``.

    The argument count is checked against the declared positional
    parameters (parameters with defaults may be omitted).  Methods without
    a return value yield ``None``.
    """
    _require(info, "method")
    func, owner, name = info.function, info.declaring_type, info.name
    bind = _argument_binder(info.parameters, info.required_count, info.max_count, widen)

    if info.binds_class:
        def invoke_classmethod(instance: Any, arguments: Sequence[Any] = ()) -> Any:
            cls = type(instance) if isinstance(instance, owner) else owner
            return func(cls, *bind(arguments))

        log.debug("Compiled classmethod %s.%s%s", owner.__name__, name, info.parameter_types)
        return invoke_classmethod

    if info.is_static:
        def invoke_static(instance: Any, arguments: Sequence[Any] = ()) -> Any:
            return func(*bind(arguments))

        log.debug("Compiled staticmethod %s.%s%s", owner.__name__, name, info.parameter_types)
        return invoke_static

    guard = _instance_guard(owner, name)

    def invoke(instance: Any, arguments: Sequence[Any] = ()) -> Any:
        guard(instance)
        return func(instance, *bind(arguments))

    log.debug("Compiled method %s.%s%s", owner.__name__, name, info.parameter_types)
    return invoke


# ── Constructors ───────────────────────────────────────────────────

def create_constructor(cls: type) -> Constructor | None:
    """Build a parameterless constructor, or None if *cls* has no usable one."""
    if cls is None:
        raise InvalidArgumentError("A type is required.")
    if not constructor_info(cls).is_parameterless:
        return None

    def construct() -> Any:
        return cls()

    log.debug("Compiled constructor for %s", cls.__name__)
    return construct


def create_constructor_with(info: ConstructorInfo, *, widen: bool = True) -> ParameterizedConstructor | None:
    """Build ``construct(arguments)`` for a parameterized constructor.

    Returns None for abstract classes or classes requiring keyword-only
    arguments.
    """
    _require(info, "constructor")
    if info.is_abstract or info.required_keywords:
        return None
    cls = info.declaring_type
    bind = _argument_binder(
        info.parameters, info.required_count, info.max_count, widen, target="Constructor",
    )

    def construct(arguments: Sequence[Any] = ()) -> Any:
        return cls(*bind(arguments))

    log.debug("Compiled parameterized constructor for %s", cls.__name__)
    return construct
