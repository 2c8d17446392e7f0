"""Compute-once primitives shared by the registry and the accessors.

``Lazy`` is a single-assignment slot and ``ConcurrentCache`` is a map with
get-or-add semantics.  Both use double-checked locking: the fast path is a
plain read, the slow path takes the lock, re-checks, then computes.  Racing
first callers therefore converge on one value, and the factory runs at most
once per slot or key.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Generic, Hashable, Iterator, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

_UNSET: Any = object()


class Lazy(Generic[T]):
    """Value computed on first read and then reused.

    A factory that raises leaves the slot empty, so the next read retries.
    """

    __slots__ = ('_factory', '_value', '_lock')

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory: Callable[[], T] | None = factory
        self._value: Any = _UNSET
        self._lock = threading.Lock()

    @property
    def value(self) -> T:
        value = self._value
        if value is not _UNSET:
            return value
        with self._lock:
            if self._value is _UNSET:
                self._value = self._factory()  # type: ignore[misc]
                self._factory = None
            return self._value

    @property
    def is_value_created(self) -> bool:
        return self._value is not _UNSET

    def __repr__(self) -> str:
        if self._value is _UNSET:
            return "Lazy(<pending>)"
        return f"Lazy({self._value!r})"


class ConcurrentCache(Generic[K, V]):
    """Thread-safe map whose entries are created once and never evicted.

    ``None`` is a legitimate cached value (used for "not found" results).
    """

    def __init__(self) -> None:
        self._data: dict[K, V] = {}
        # Reentrant: a factory may populate a different key of the same cache.
        self._lock = threading.RLock()

    def get_or_add(self, key: K, factory: Callable[[K], V]) -> V:
        """Return the value for *key*, computing and storing it on first use."""
        try:
            return self._data[key]
        except KeyError:
            pass
        with self._lock:
            try:
                return self._data[key]
            except KeyError:
                value = factory(key)
                self._data[key] = value
                return value

    def get(self, key: K, default: V | None = None) -> V | None:
        return self._data.get(key, default)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def values(self) -> list[V]:
        with self._lock:
            return list(self._data.values())

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[K]:
        with self._lock:
            return iter(list(self._data))
