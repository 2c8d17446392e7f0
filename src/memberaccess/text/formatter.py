"""Named-placeholder formatting backed by the accessor registry."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..registry import AccessorRegistry, default_registry


def format_name(template: str, source: Any, *, registry: AccessorRegistry | None = None) -> str:
    """Replace ``{name}`` placeholders in *template* with values from *source*.

    Placeholders may name a dotted member path (``{customer.name}``) and carry
    a format spec (``{total:.2f}``, ``{created:%Y-%m-%d}``).  Mappings are
    looked up by key; other objects are walked member by member.  Missing
    members and ``None`` values render as an empty string.  ``{{`` and
    ``}}`` produce literal braces.

    Usage::

        format_name("{customer} owes {total:.2f}", order)   # 'Acme owes 10.00'

    Raises
    ------
    ValueError
        If a placeholder is not closed or a ``}`` appears on its own.
    """
    if template is None:
        raise ValueError("template must not be None")
    if not template:
        return ""
    if source is None:
        return template

    registry = registry if registry is not None else default_registry
    result: list[str] = []
    i, n = 0, len(template)
    while i < n:
        ch = template[i]
        if ch == '{':
            if i + 1 < n and template[i + 1] == '{':
                result.append('{')
                i += 2
                continue
            end = template.find('}', i + 1)
            if end == -1:
                raise ValueError(f"Unterminated placeholder at position {i} in {template!r}")
            expression = template[i + 1:end]
            if '{' in expression:
                raise ValueError(f"Unexpected '{{' inside placeholder at position {i} in {template!r}")
            result.append(_evaluate(source, expression, registry))
            i = end + 1
        elif ch == '}':
            if i + 1 < n and template[i + 1] == '}':
                result.append('}')
                i += 2
                continue
            raise ValueError(f"Single '}}' at position {i} in {template!r}")
        else:
            result.append(ch)
            i += 1
    return ''.join(result)


def _evaluate(source: Any, expression: str, registry: AccessorRegistry) -> str:
    if not expression:
        return ""
    path, _, spec = expression.partition(':')
    if isinstance(source, Mapping):
        value = source.get(path)
    else:
        value = _walk(source, path, registry)
    if value is None:
        return ""
    return format(value, spec) if spec else str(value)


def _walk(target: Any, path: str, registry: AccessorRegistry) -> Any:
    current = target
    for part in path.split('.'):
        if current is None:
            return None
        member = registry.type_accessor(type(current)).find(part)
        if member is None:
            return None
        current = member.get_value(current)
    return current
