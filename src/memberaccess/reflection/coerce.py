"""Argument coercion and type assignability for compiled accessors.

Maps a run-time value onto a declared annotation the way a typed call site
would: exact instances pass through, numbers widen along the numeric tower,
``None`` is only accepted where the annotation allows it.
"""

from __future__ import annotations

import decimal
import types
from typing import Any, TypeVar, Union, get_args, get_origin

from ..exc import InvalidCastError

# ── Numeric widening: source type -> target types it converts to ───
_WIDENING: dict[type, tuple[type, ...]] = {
    int: (float, complex, decimal.Decimal),
    float: (complex,),
}

_NONE_TYPE = type(None)
_ANY_NAMES = frozenset({'Any', 'typing.Any'})
_NO_MATCH: Any = object()


def _is_any(annotation: Any) -> bool:
    return annotation is Any or annotation is object or repr(annotation) in _ANY_NAMES


def _union_members(annotation: Any) -> tuple[Any, ...] | None:
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        return get_args(annotation)
    return None


def is_assignable(target: Any, source: type) -> bool:
    """Return True if a value of type *source* can be passed where *target* is declared.

    Unions accept any of their members.  Non-class annotations (generics,
    unresolved forward references) only accept ``object`` / ``Any`` sources.
    """
    if _is_any(target):
        return True
    members = _union_members(target)
    if members is not None:
        return any(is_assignable(m, source) for m in members)
    if source is _NONE_TYPE:
        return target is _NONE_TYPE or target is None
    origin = get_origin(target)
    if isinstance(origin, type):
        target = origin
    if isinstance(target, type) and isinstance(source, type):
        try:
            return issubclass(source, target)
        except TypeError:
            return False
    return False


def _accepts_none(annotation: Any) -> bool:
    if _is_any(annotation) or annotation is None or annotation is _NONE_TYPE:
        return True
    if isinstance(annotation, (str, TypeVar)):
        return True
    members = _union_members(annotation)
    return members is not None and any(m is _NONE_TYPE for m in members)


def coerce(value: Any, annotation: Any, *, allow_none: bool = False, widen: bool = True) -> Any:
    """Convert *value* to *annotation*, or raise :class:`InvalidCastError`.

    Parameters
    ----------
    value : Any
        The run-time argument.
    annotation : Any
        The declared parameter or member type.
    allow_none : bool
        Accept ``None`` even when the annotation does not (e.g. the
        parameter defaults to ``None``).
    widen : bool
        Allow numeric widening (``int`` -> ``float`` / ``complex`` /
        ``Decimal``).  ``bool`` never widens.
    """
    if value is None:
        if allow_none or _accepts_none(annotation):
            return None
        raise InvalidCastError(_NONE_TYPE, annotation)

    if _is_any(annotation):
        return value

    members = _union_members(annotation)
    if members is not None:
        concrete = [m for m in members if m is not _NONE_TYPE]
        for member in concrete:
            if _check_instance(value, member):
                return value
        for member in concrete:
            converted = _widen(value, member, widen)
            if converted is not _NO_MATCH:
                return converted
        raise InvalidCastError(type(value), annotation)

    origin = get_origin(annotation)
    target = origin if isinstance(origin, type) else annotation
    if not isinstance(target, type):
        # Forward references, TypeVars, Literal[...] and friends are not checked
        return value

    if _check_instance(value, target):
        return value

    converted = _widen(value, target, widen)
    if converted is not _NO_MATCH:
        return converted
    raise InvalidCastError(type(value), annotation)


def _check_instance(value: Any, target: Any) -> bool:
    origin = get_origin(target)
    if isinstance(origin, type):
        target = origin
    if not isinstance(target, type):
        return True
    try:
        return isinstance(value, target)
    except TypeError:
        return True


def _widen(value: Any, target: Any, widen: bool) -> Any:
    if not widen or isinstance(value, bool):
        return _NO_MATCH
    for source, targets in _WIDENING.items():
        if type(value) is source and target in targets:
            return target(value)
    return _NO_MATCH
