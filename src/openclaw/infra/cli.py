"""CLI for install-source resolution.

Usage:
    openclaw install-source resolve <path>   Validate a local archive
    openclaw install-source pack <spec>      Run npm pack and locate the tarball
    openclaw install-source fetch <source>   Path or spec, whichever applies
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

import openclaw.infra.install_source
import openclaw.settings


def _report(result: openclaw.infra.install_source.ArchiveResult) -> int:
    if not result.ok:
        print(result.error, file=sys.stderr)
        return 1
    print(result.path)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for ``openclaw install-source``."""
    settings = openclaw.settings.load("install")

    parser = argparse.ArgumentParser(
        prog="openclaw install-source",
        description="Resolve plugin install sources to archive files.",
    )
    sub = parser.add_subparsers(dest="subcmd")

    p_resolve = sub.add_parser("resolve", help="Validate a local archive path")
    p_resolve.add_argument("path")

    for name, help_text in (
        ("pack", "Pack an npm spec into an archive"),
        ("fetch", "Resolve a path or npm spec"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("source")
        p.add_argument(
            "--timeout-ms",
            type=int,
            default=settings.pack_timeout_ms,
            help="npm pack timeout (never below 300000)",
        )
        p.add_argument("--cwd", type=Path, default=Path.cwd())

    args = parser.parse_args(argv)

    if args.subcmd is None:
        parser.print_help()
        return 1

    if args.subcmd == "resolve":
        result = openclaw.infra.install_source.resolve_archive_source_path(args.path)
    elif args.subcmd == "pack":
        result = asyncio.run(
            openclaw.infra.install_source.pack_npm_spec_to_archive(
                args.source,
                args.timeout_ms,
                args.cwd,
                npm_command=settings.npm_command,
            )
        )
    else:
        result = asyncio.run(
            openclaw.infra.install_source.resolve_install_source(
                args.source,
                timeout_ms=args.timeout_ms,
                cwd=args.cwd,
                npm_command=settings.npm_command,
            )
        )
    return _report(result)
