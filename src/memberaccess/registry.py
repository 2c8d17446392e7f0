"""Process-wide registry of type accessors."""

from __future__ import annotations

import dataclasses
import logging
import os
from typing import Any

from ._concurrent import ConcurrentCache
from .exc import InvalidArgumentError
from .reflection.type_accessor import TypeAccessor

log = logging.getLogger("memberaccess.registry")

_TRUE = frozenset({'1', 'true', 'yes', 'on'})
_FALSE = frozenset({'0', 'false', 'no', 'off'})


@dataclasses.dataclass(frozen=True, slots=True)
class RegistryOptions:
    """Behaviour shared by every accessor a registry creates.

    Attributes
    ----------
    ignore_case : bool
        Fall back to a case-insensitive match when no member has the exact name.
    widen_numbers : bool
        Let ``int`` arguments and values widen to ``float`` / ``complex`` /
        ``Decimal`` (and ``float`` to ``complex``) during coercion.
    """
    ignore_case: bool = True
    widen_numbers: bool = True


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise InvalidArgumentError(f"Invalid boolean for {name}: {value!r}")


class AccessorRegistry:
    """Keeps exactly one :class:`TypeAccessor` per class.

    Usage::

        registry = AccessorRegistry()
        accessor = registry.type_accessor(Order)
        assert registry.type_accessor(Order) is accessor

    Accessors are created on first request and never evicted.  A module-level
    :data:`default_registry` backs :func:`type_accessor`; construct a separate
    registry to keep tests or differently configured callers isolated.
    """

    def __init__(self, options: RegistryOptions | None = None) -> None:
        self._options = options if options is not None else RegistryOptions()
        self._accessors: ConcurrentCache[type, TypeAccessor] = ConcurrentCache()

    @property
    def options(self) -> RegistryOptions:
        return self._options

    def type_accessor(self, cls: type) -> TypeAccessor:
        """Return the accessor for *cls*, creating it on first use."""
        if not isinstance(cls, type):
            raise InvalidArgumentError(f"Expected a class, got {cls!r}.")
        return self._accessors.get_or_add(cls, self._create)

    get_accessor = type_accessor

    def _create(self, cls: type) -> TypeAccessor:
        log.debug("Creating type accessor for %s.%s", cls.__module__, cls.__qualname__)
        return TypeAccessor(cls, self._options)

    def clear(self) -> None:
        """Drop every cached accessor."""
        self._accessors.clear()

    @property
    def types(self) -> list[type]:
        """Classes that currently have an accessor."""
        return list(self._accessors)

    def __contains__(self, cls: object) -> bool:
        return cls in self._accessors

    def __len__(self) -> int:
        return len(self._accessors)

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> AccessorRegistry:
        """Build a registry from a config dict of :class:`RegistryOptions` fields::

            AccessorRegistry.from_config({"ignore_case": False})
        """
        known = {f.name for f in dataclasses.fields(RegistryOptions)}
        unknown = sorted(set(config) - known)
        if unknown:
            raise InvalidArgumentError(
                f"Unknown registry option(s): {', '.join(unknown)}. "
                f"Available: {', '.join(sorted(known))}"
            )
        options = RegistryOptions(**{
            name: _parse_bool(name, value) for name, value in config.items()
        })
        return cls(options)

    @classmethod
    def from_env(cls, prefix: str = "MEMBERACCESS") -> AccessorRegistry:
        """Build a registry from environment variables.

        Reads ``{PREFIX}_IGNORE_CASE`` and ``{PREFIX}_WIDEN_NUMBERS``; unset
        variables keep their defaults::

            # MEMBERACCESS_IGNORE_CASE=false
            AccessorRegistry.from_env()
        """
        config: dict[str, Any] = {}
        for field in dataclasses.fields(RegistryOptions):
            value = os.environ.get(f"{prefix}_{field.name.upper()}")
            if value is not None:
                config[field.name] = value
        return cls.from_config(config)

    def __repr__(self) -> str:
        return f"AccessorRegistry({len(self)} types, {self._options!r})"


default_registry = AccessorRegistry()


def type_accessor(cls: type) -> TypeAccessor:
    """Return the accessor for *cls* from :data:`default_registry`."""
    return default_registry.type_accessor(cls)


get_accessor = type_accessor
