"""Method accessor: a compiled invoker for one method overload."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Sequence

from .._concurrent import Lazy
from . import factory
from .members import MethodInfo

MethodKey = tuple[str, tuple[Any, ...]]


class MethodAccessor:
    """Invoke one method (or one ``singledispatchmethod`` overload) by reference.

    Usage::

        accessor = type_accessor(Calculator).find_method('add', (int, int))
        accessor.invoke(calc, 2, 3)   # 5
    """

    def __init__(self, method_info: MethodInfo, *, widen: bool = True) -> None:
        self._info = method_info
        self._invoker: Lazy[Callable[[Any, Sequence[Any]], Any]] = Lazy(
            lambda: factory.create_method(method_info, widen=widen)
        )

    @staticmethod
    def get_key(name: str, parameter_types: Iterable[Any] = ()) -> MethodKey:
        """Signature key used to cache method lookups: ``(name, parameter_types)``."""
        return name, tuple(parameter_types)

    @property
    def method_info(self) -> MethodInfo:
        return self._info

    @property
    def name(self) -> str:
        return self._info.name

    @property
    def declaring_type(self) -> type:
        return self._info.declaring_type

    @property
    def parameter_types(self) -> tuple[Any, ...]:
        return self._info.parameter_types

    @property
    def return_type(self) -> Any:
        return self._info.return_type

    @property
    def is_static(self) -> bool:
        return self._info.is_static

    @property
    def key(self) -> MethodKey:
        return self.get_key(self._info.name, self._info.parameter_types)

    def invoke(self, instance: Any, *arguments: Any) -> Any:
        """Call the method on *instance* with positional *arguments*.

        *instance* is ignored for static methods and classmethods.  Raises
        :class:`~memberaccess.exc.ArgumentCountError` on a wrong argument
        count and :class:`~memberaccess.exc.InvalidCastError` when an
        argument cannot be coerced.  Exceptions from the method itself
        propagate unchanged.
        """
        return self._invoker.value(instance, arguments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MethodAccessor):
            return NotImplemented
        return self._info == other._info

    def __hash__(self) -> int:
        return hash(self._info)

    def __repr__(self) -> str:
        params = ", ".join(getattr(t, '__name__', repr(t)) for t in self.parameter_types)
        return f"MethodAccessor({self.declaring_type.__name__}.{self.name}({params}))"
