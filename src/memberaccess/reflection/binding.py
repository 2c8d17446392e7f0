"""Binding visibility flags used to filter member lookups."""

from __future__ import annotations

import enum


class Binding(enum.Flag):
    """Which members a lookup considers.

    A member matches when its access level (``PUBLIC`` / ``NON_PUBLIC``) and
    its kind (``INSTANCE`` / ``STATIC``) are both present in the set.
    Inherited members are included unless ``DECLARED_ONLY`` is given.
    """
    NONE = 0
    PUBLIC = enum.auto()
    NON_PUBLIC = enum.auto()
    INSTANCE = enum.auto()
    STATIC = enum.auto()
    DECLARED_ONLY = enum.auto()


# ── Defaults ───────────────────────────────────────────────────────
DEFAULT_PUBLIC = Binding.PUBLIC | Binding.INSTANCE
DEFAULT_NON_PUBLIC = Binding.PUBLIC | Binding.NON_PUBLIC | Binding.INSTANCE
DEFAULT_METHOD = Binding.PUBLIC | Binding.INSTANCE | Binding.STATIC
DEFAULT_PROPERTIES = Binding.PUBLIC | Binding.INSTANCE | Binding.STATIC


def is_public_name(name: str) -> bool:
    """Dunder names count as public; other leading-underscore names do not."""
    if name.startswith('__') and name.endswith('__'):
        return True
    return not name.startswith('_')


def matches(binding: Binding, name: str, is_static: bool) -> bool:
    """Return True if a member with this name and kind is visible under *binding*."""
    if is_public_name(name):
        if not binding & Binding.PUBLIC:
            return False
    elif not binding & Binding.NON_PUBLIC:
        return False

    if is_static:
        return bool(binding & Binding.STATIC)
    return bool(binding & Binding.INSTANCE)
