"""Resolve a typed member reference to the member name it touches.

A member reference is a callable that receives a stand-in for an instance and
reads exactly one attribute from it::

    member_name_of(lambda o: o.total)          # 'total'
    member_name_of(lambda o: float(o.quantity)) # 'quantity'
    member_name_of(operator.attrgetter('id'))  # 'id'

The stand-in records what the callable does.  A numeric conversion wrapped
around the access (``int()``, ``float()``) is ignored; anything else (a call,
a nested path, arithmetic) is rejected.
"""

from __future__ import annotations

from typing import Any, Callable

from ..exc import InvalidArgumentError


class _UnsupportedExpression(Exception):
    pass


class _Recording:
    __slots__ = ('names', 'converted')

    def __init__(self) -> None:
        self.names: list[str] = []
        self.converted = False


class _RecordedValue:
    """What the stand-in hands back for the single attribute read."""

    __slots__ = ('_recording',)

    def __init__(self, recording: _Recording) -> None:
        object.__setattr__(self, '_recording', recording)

    def __getattr__(self, name: str) -> Any:
        raise _UnsupportedExpression(f"nested member access '.{name}'")

    def __setattr__(self, name: str, value: Any) -> None:
        raise _UnsupportedExpression("assignment")

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        raise _UnsupportedExpression("method call")

    def _convert(self, value: Any) -> Any:
        object.__getattribute__(self, '_recording').converted = True
        return value

    def __int__(self) -> int:
        return self._convert(0)

    def __index__(self) -> int:
        return self._convert(0)

    def __float__(self) -> float:
        return self._convert(0.0)


class _Instance:
    """Stand-in instance passed to the member reference."""

    __slots__ = ('_recording',)

    def __init__(self, recording: _Recording) -> None:
        object.__setattr__(self, '_recording', recording)

    def __getattr__(self, name: str) -> Any:
        recording = object.__getattribute__(self, '_recording')
        recording.names.append(name)
        if len(recording.names) > 1:
            raise _UnsupportedExpression("more than one member access")
        return _RecordedValue(recording)

    def __setattr__(self, name: str, value: Any) -> None:
        raise _UnsupportedExpression("assignment")

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        raise _UnsupportedExpression("call on the instance")


def member_name_of(expression: Callable[[Any], Any]) -> str:
    """Return the name of the single member *expression* reads.

    Raises :class:`InvalidArgumentError` when *expression* is not a simple
    member access.
    """
    if expression is None:
        raise InvalidArgumentError("A member expression is required.")
    if not callable(expression):
        raise InvalidArgumentError(
            f"Expected a member expression, got {type(expression).__name__}."
        )

    recording = _Recording()
    try:
        result = expression(_Instance(recording))
    except _UnsupportedExpression as e:
        raise InvalidArgumentError(
            f"Member expression must be a simple member access, not a {e}."
        ) from None
    except Exception as e:
        raise InvalidArgumentError(
            f"Member expression must be a simple member access: {e}"
        ) from e

    if len(recording.names) != 1:
        raise InvalidArgumentError("Member expression must access exactly one member.")
    if not isinstance(result, _RecordedValue) and not recording.converted:
        raise InvalidArgumentError("Member expression must return the accessed member.")
    return recording.names[0]
