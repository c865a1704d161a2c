"""CLI for openclaw tool settings.

Usage:
    openclaw settings list                         Show all settings sections
    openclaw settings get <section.key>            Print effective value
    openclaw settings set [--global] <key> <value> Write a settings value
    openclaw settings reset [--global] <key>       Remove an override
    openclaw settings show                         Dump all effective settings
    openclaw settings path [--global]              Print the settings file
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path

import openclaw.settings


class _UsageError(Exception):
    pass


def _ensure_registry() -> None:
    """Import every module that registers a settings section."""
    import openclaw.config.io
    import openclaw.infra.install_source  # noqa: F401


def _parse_key(key: str) -> tuple[str, str]:
    section, dot, field = key.partition(".")
    if not (section and dot and field):
        raise _UsageError(f"Invalid key format: {key!r} (expected section.key)")
    return section, field


def _scope(global_flag: bool) -> openclaw.settings.Scope:
    return "global" if global_flag else "local"


def _type_label(annotation: object) -> str:
    if isinstance(annotation, str):
        return annotation
    return getattr(annotation, "__name__", repr(annotation))


def cmd_list() -> int:
    """Print every registered section with field types and defaults."""
    _ensure_registry()
    for name, cls in sorted(openclaw.settings.list_sections().items()):
        lines = [f"[{name}]"]
        lines += [
            f"  {f.name}: {_type_label(f.type)} = {f.default!r}"
            for f in dataclasses.fields(cls)
        ]
        print("\n".join(lines), end="\n\n")
    return 0


def cmd_get(key: str, root: Path) -> int:
    _ensure_registry()
    try:
        section, field = _parse_key(key)
        print(openclaw.settings.get_effective(section, field, root))
    except (_UsageError, KeyError, AttributeError) as exc:
        print(exc.args[0] if exc.args else exc, file=sys.stderr)
        return 1
    return 0


def cmd_set(key: str, value: str, *, global_flag: bool, root: Path) -> int:
    _ensure_registry()
    scope = _scope(global_flag)
    try:
        section, field = _parse_key(key)
        openclaw.settings.set_value(section, field, value, scope=scope, root=root)
    except (_UsageError, KeyError, ValueError) as exc:
        print(exc.args[0] if exc.args else exc, file=sys.stderr)
        return 1
    print(f"Set {key} = {value} ({scope})")
    return 0


def cmd_reset(key: str, *, global_flag: bool, root: Path) -> int:
    scope = _scope(global_flag)
    try:
        section, field = _parse_key(key)
    except _UsageError as exc:
        print(exc, file=sys.stderr)
        return 1
    openclaw.settings.reset_value(section, field, scope=scope, root=root)
    print(f"Reset {key} ({scope})")
    return 0


def cmd_show(root: Path) -> int:
    """Dump the merged value of every field in every section."""
    _ensure_registry()
    for name in sorted(openclaw.settings.list_sections()):
        values = dataclasses.asdict(openclaw.settings.load(name, root))
        print(f"[{name}]")
        for field, value in values.items():
            print(f"  {field} = {value!r}")
        print()
    return 0


def cmd_path(*, global_flag: bool, root: Path) -> int:
    print(openclaw.settings.settings_path(_scope(global_flag), root))
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="openclaw settings",
        description="Tool settings for openclaw (cache policy, npm pack).",
    )
    sub = parser.add_subparsers(dest="subcmd")

    where = argparse.ArgumentParser(add_help=False)
    where.add_argument("--path", dest="root", type=Path, default=Path.cwd())
    scoped = argparse.ArgumentParser(add_help=False, parents=[where])
    scoped.add_argument("--global", dest="global_flag", action="store_true")

    sub.add_parser("list", help="Show all settings sections").set_defaults(
        run=lambda a: cmd_list()
    )

    p = sub.add_parser("get", parents=[where], help="Print effective value")
    p.add_argument("key", help="section.key")
    p.set_defaults(run=lambda a: cmd_get(a.key, a.root))

    p = sub.add_parser("set", parents=[scoped], help="Set a settings value")
    p.add_argument("key", help="section.key")
    p.add_argument("value", help="New value")
    p.set_defaults(
        run=lambda a: cmd_set(a.key, a.value, global_flag=a.global_flag, root=a.root)
    )

    p = sub.add_parser("reset", parents=[scoped], help="Remove an override")
    p.add_argument("key", help="section.key")
    p.set_defaults(
        run=lambda a: cmd_reset(a.key, global_flag=a.global_flag, root=a.root)
    )

    sub.add_parser(
        "show", parents=[where], help="Dump all effective settings"
    ).set_defaults(run=lambda a: cmd_show(a.root))

    sub.add_parser(
        "path", parents=[scoped], help="Print the settings file location"
    ).set_defaults(run=lambda a: cmd_path(global_flag=a.global_flag, root=a.root))

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for ``openclaw settings``."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    run = getattr(args, "run", None)
    if run is None:
        parser.print_help()
        return 1
    return run(args)
