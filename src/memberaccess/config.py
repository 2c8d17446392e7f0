"""Registry options from configuration files.

Options may sit at the top level of a dedicated file::

    # memberaccess.yaml
    ignore_case: false
    widen_numbers: true

or in a table of a larger file, selected with a dotted *section*, such as
``[tool.memberaccess]`` in ``pyproject.toml``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

from .exc import InvalidArgumentError
from .registry import AccessorRegistry

PYPROJECT_SECTION = "tool.memberaccess"


def load_config(path: str | Path) -> dict[str, Any]:
    """Read *path* into a dict, choosing the parser by extension.

    ``.json``, ``.toml``, ``.yaml`` and ``.yml`` are understood.  An empty
    YAML document reads as ``{}``; any other non-mapping document is
    rejected.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    loader = _LOADERS.get(path.suffix.lower())
    if loader is None:
        raise ValueError(
            f"Unsupported config file extension {path.suffix.lower()!r}. "
            f"Use {', '.join(sorted(_LOADERS))}."
        )

    data = loader(path)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidArgumentError(
            f"Config file {path} must contain a mapping, got {type(data).__name__}."
        )
    return data


def select_section(data: dict[str, Any], section: str | None) -> dict[str, Any]:
    """Return the table at dotted *section* (``"tool.memberaccess"``).

    A missing table yields ``{}`` so that defaults apply.
    """
    if not section:
        return data
    current: Any = data
    for part in section.split('.'):
        if not isinstance(current, dict):
            return {}
        current = current.get(part)
    if current is None:
        return {}
    if not isinstance(current, dict):
        raise InvalidArgumentError(f"Config section {section!r} must be a table, got {current!r}.")
    return current


def registry_from_config(path: str | Path, section: str | None = None) -> AccessorRegistry:
    """Build an :class:`AccessorRegistry` from the options in *path*.

    Usage::

        registry_from_config("memberaccess.json")
        registry_from_config("settings.yaml", section="reflection.accessors")
    """
    return AccessorRegistry.from_config(select_section(load_config(path), section))


def registry_from_pyproject(path: str | Path = "pyproject.toml") -> AccessorRegistry:
    """Build an :class:`AccessorRegistry` from ``[tool.memberaccess]``."""
    return registry_from_config(path, section=PYPROJECT_SECTION)


# ── Parsers ───────────────────────────────────────────────────────

def _read_json(path: Path) -> Any:
    with open(path) as f:
        return json.load(f)


def _read_toml(path: Path) -> Any:
    """TOML through ``tomllib`` (3.11+), else the ``tomli`` backport."""
    try:
        import tomllib  # type: ignore[import-not-found]
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore[no-redef]
        except ModuleNotFoundError:
            raise ImportError(
                f"Reading {path.name} needs Python 3.11+ or the 'tomli' package. "
                "Install with: pip install memberaccess[toml]"
            )
    with open(path, 'rb') as f:
        return tomllib.load(f)


def _read_yaml(path: Path) -> Any:
    """YAML through ``pyyaml``'s safe loader."""
    try:
        import yaml
    except ModuleNotFoundError:
        raise ImportError(
            f"Reading {path.name} needs the 'pyyaml' package. "
            "Install with: pip install memberaccess[yaml]"
        )
    with open(path) as f:
        return yaml.safe_load(f)


_LOADERS: dict[str, Callable[[Path], Any]] = {
    '.json': _read_json,
    '.toml': _read_toml,
    '.yaml': _read_yaml,
    '.yml': _read_yaml,
}
