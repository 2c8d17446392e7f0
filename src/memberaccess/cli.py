"""Command-line interface for memberaccess.

Usage::

    memberaccess inspect myapp.models:Order [--non-public] [--static] [--methods]
    memberaccess inspect myapp.models:Order --config memberaccess.toml
    memberaccess inspect myapp.models:Order --config pyproject.toml --section tool.memberaccess
"""

from __future__ import annotations

import argparse
import importlib
import sys
from typing import Any

from .reflection.binding import Binding
from .registry import AccessorRegistry


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="memberaccess",
        description="memberaccess CLI: inspect how classes resolve through the accessor layer.",
    )
    sub = parser.add_subparsers(dest="command")

    inspect_cmd = sub.add_parser(
        "inspect",
        help="List the properties, fields and methods resolved for a class.",
    )
    inspect_cmd.add_argument(
        "target",
        help="Class to inspect, as 'package.module:ClassName'.",
    )
    inspect_cmd.add_argument(
        "--non-public", action="store_true", default=False,
        help="Include members whose names start with an underscore.",
    )
    inspect_cmd.add_argument(
        "--static", action="store_true", default=False,
        help="Include static fields, staticmethods and classmethods.",
    )
    inspect_cmd.add_argument(
        "--methods", action="store_true", default=False,
        help="Also list methods and their signatures.",
    )
    inspect_cmd.add_argument(
        "--config",
        help="Registry options file (.json, .toml, .yaml).",
    )
    inspect_cmd.add_argument(
        "--section",
        help="Dotted table inside --config holding the options, e.g. 'tool.memberaccess'.",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "inspect":
        return _cmd_inspect(args)

    return 0


def _load_class(target: str) -> type:
    module_name, sep, qualname = target.partition(':')
    if not sep or not module_name or not qualname:
        raise ValueError(f"target must look like 'package.module:ClassName', got {target!r}")
    obj: Any = importlib.import_module(module_name)
    for part in qualname.split('.'):
        obj = getattr(obj, part)
    if not isinstance(obj, type):
        raise ValueError(f"{target!r} is not a class")
    return obj


def _type_name(annotation: Any) -> str:
    if isinstance(annotation, type):
        return annotation.__name__
    return str(annotation).replace('typing.', '')


def _flags(member: Any) -> str:
    flags = []
    if member.column != member.name:
        flags.append(f"column={member.column}")
    if member.column_type:
        flags.append(f"type={member.column_type}")
    if member.is_key:
        flags.append("key")
    if member.is_database_generated:
        flags.append("generated")
    if member.is_concurrency_check:
        flags.append("concurrency")
    if member.foreign_key:
        flags.append(f"fk={member.foreign_key}")
    if member.is_not_mapped:
        flags.append("not-mapped")
    return " ".join(flags)


def _cmd_inspect(args: argparse.Namespace) -> int:
    try:
        cls = _load_class(args.target)
    except (ImportError, AttributeError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.config:
        from .config import registry_from_config
        try:
            registry = registry_from_config(args.config, section=args.section)
        except (OSError, ValueError, ImportError) as e:
            print(f"error: {e}", file=sys.stderr)
            return 1
    else:
        registry = AccessorRegistry()

    binding = Binding.PUBLIC | Binding.INSTANCE
    if args.non_public:
        binding |= Binding.NON_PUBLIC
    if args.static:
        binding |= Binding.STATIC

    accessor = registry.type_accessor(cls)
    header = f"{accessor.name} (table: {accessor.table_name}"
    if accessor.table_schema:
        header += f", schema: {accessor.table_schema}"
    print(header + ")")

    rows = [("property", p) for p in accessor.get_properties(binding)]
    rows += [("field", f) for f in accessor.get_fields(binding)]
    for kind, member in rows:
        access = ("r" if member.has_getter else "-") + ("w" if member.has_setter else "-")
        scope = " static" if member.is_static else ""
        line = f"  {kind:<9}{member.name:<24}{_type_name(member.member_type):<16}{access}{scope}"
        flags = _flags(member)
        print(f"{line}  {flags}".rstrip())

    if args.methods:
        for method in accessor.get_methods(binding):
            params = ", ".join(_type_name(t) for t in method.parameter_types)
            scope = " static" if method.is_static else ""
            print(f"  method   {method.name}({params}) -> {_type_name(method.return_type)}{scope}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
