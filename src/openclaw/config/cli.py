"""CLI for the OpenClaw config document.

Usage:
    openclaw config path                  Print the config file location
    openclaw config get <dotted.key>      Print a value (JSON-encoded)
    openclaw config set <dotted.key> <v>  Set a value (parsed as JSON if possible)
    openclaw config unset <dotted.key>    Remove a value
    openclaw config show                  Dump the cached document
    openclaw config snapshot              Dump a fresh read with path and hash
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

import openclaw.config.io
import openclaw.config.store

_MISSING = object()


def _split_key(key: str) -> list[str]:
    parts = key.split(".")
    if not all(parts):
        raise ValueError(f"Invalid key format: {key!r} (expected dotted.path)")
    return parts


def _get_nested(data: dict[str, Any], parts: list[str]) -> Any:
    current: Any = data
    for part in parts:
        if not isinstance(current, dict) or part not in current:
            return _MISSING
        current = current[part]
    return current


def _set_nested(data: dict[str, Any], parts: list[str], value: Any) -> None:
    current = data
    for part in parts[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]
    current[parts[-1]] = value


def _unset_nested(data: dict[str, Any], parts: list[str]) -> bool:
    parent = _get_nested(data, parts[:-1]) if len(parts) > 1 else data
    if not isinstance(parent, dict) or parts[-1] not in parent:
        return False
    del parent[parts[-1]]
    return True


def _parse_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def cmd_path(io: openclaw.config.io.ConfigIO) -> int:
    print(io.config_path)
    return 0


def cmd_get(io: openclaw.config.io.ConfigIO, key: str) -> int:
    """Print the value at *key*."""
    try:
        parts = _split_key(key)
        value = _get_nested(io.load_config(), parts)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    if value is _MISSING:
        print(f"Config path not found: {key}", file=sys.stderr)
        return 1
    print(value if isinstance(value, str) else json.dumps(value, indent=2))
    return 0


def cmd_set(io: openclaw.config.io.ConfigIO, key: str, raw_value: str) -> int:
    """Set *key* to *raw_value* and write the file."""
    try:
        parts = _split_key(key)
        snapshot = asyncio.run(io.read_config_file_snapshot())
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    document = snapshot.config
    value = _parse_value(raw_value)
    _set_nested(document, parts, value)
    asyncio.run(io.write_config_file(document))
    print(f"Set {key} = {json.dumps(value)}")
    return 0


def cmd_unset(io: openclaw.config.io.ConfigIO, key: str) -> int:
    """Remove *key* from the file."""
    try:
        parts = _split_key(key)
        snapshot = asyncio.run(io.read_config_file_snapshot())
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    document = snapshot.config
    if not _unset_nested(document, parts):
        print(f"Config path not found: {key}", file=sys.stderr)
        return 1
    asyncio.run(io.write_config_file(document))
    print(f"Removed {key}")
    return 0


def cmd_show(io: openclaw.config.io.ConfigIO) -> int:
    try:
        document = io.load_config()
    except openclaw.config.store.ConfigParseError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    print(json.dumps(document, indent=2))
    return 0


def cmd_snapshot(io: openclaw.config.io.ConfigIO) -> int:
    try:
        snapshot = asyncio.run(io.read_config_file_snapshot())
    except openclaw.config.store.ConfigParseError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    print(f"path:   {snapshot.path}")
    print(f"exists: {snapshot.exists}")
    print(f"hash:   {snapshot.hash or '-'}")
    print(json.dumps(snapshot.config, indent=2))
    return 0


def main(
    argv: list[str] | None = None,
    io: openclaw.config.io.ConfigIO | None = None,
) -> int:
    """Entry point for ``openclaw config``."""
    parser = argparse.ArgumentParser(
        prog="openclaw config",
        description="Read and edit ~/.openclaw/openclaw.json.",
    )
    sub = parser.add_subparsers(dest="subcmd")

    sub.add_parser("path", help="Print the config file location")

    p_get = sub.add_parser("get", help="Print a value")
    p_get.add_argument("key", help="dotted.key")

    p_set = sub.add_parser("set", help="Set a value")
    p_set.add_argument("key", help="dotted.key")
    p_set.add_argument("value", help="New value (JSON or plain string)")

    p_unset = sub.add_parser("unset", help="Remove a value")
    p_unset.add_argument("key", help="dotted.key")

    sub.add_parser("show", help="Dump the effective document")
    sub.add_parser("snapshot", help="Dump a fresh read with metadata")

    args = parser.parse_args(argv)

    if args.subcmd is None:
        parser.print_help()
        return 1

    if io is None:
        io = openclaw.config.io.create_config_io()

    if args.subcmd == "path":
        return cmd_path(io)
    elif args.subcmd == "get":
        return cmd_get(io, args.key)
    elif args.subcmd == "set":
        return cmd_set(io, args.key, args.value)
    elif args.subcmd == "unset":
        return cmd_unset(io, args.key)
    elif args.subcmd == "show":
        return cmd_show(io)
    elif args.subcmd == "snapshot":
        return cmd_snapshot(io)
    else:
        parser.print_help()
        return 1
