"""OpenClaw CLI — config persistence and install sources.

Usage:
    openclaw config <cmd>          Read and edit ~/.openclaw/openclaw.json
    openclaw settings <cmd>        Tool settings (get/set/list/show)
    openclaw install-source <cmd>  Resolve archive paths and npm specs

Environment:
    OPENCLAW_CONFIG_PATH           Use another config file
    OPENCLAW_DISABLE_CONFIG_CACHE  Re-read the config file on every load
    OPENCLAW_LOG_LEVEL             DEBUG, INFO, WARNING (default), ERROR
"""

from __future__ import annotations

import logging
import os
import sys


def _setup_logging() -> None:
    level_name = os.environ.get("OPENCLAW_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(message)s",
    )


def _cmd_config(args: list[str]) -> int:
    """Config document commands."""
    import openclaw.config.cli
    import openclaw.config.io
    import openclaw.settings

    io_settings = openclaw.settings.load("config")
    # The env toggle still wins when the settings file leaves caching on.
    cache_disabled = io_settings.cache_disabled or None
    io = openclaw.config.io.create_config_io(cache_disabled=cache_disabled)
    return openclaw.config.cli.main(args, io=io)


def _cmd_settings(args: list[str]) -> int:
    """Tool settings."""
    import openclaw.settings_cli

    return openclaw.settings_cli.main(args)


def _cmd_install_source(args: list[str]) -> int:
    """Install-source archive resolution."""
    import openclaw.infra.cli

    return openclaw.infra.cli.main(args)


def main() -> None:
    args = sys.argv[1:]
    if not args:
        print(__doc__)
        sys.exit(1)

    _setup_logging()
    cmd = args[0]
    rest = args[1:]

    if cmd == "config":
        sys.exit(_cmd_config(rest))
    elif cmd == "settings":
        sys.exit(_cmd_settings(rest))
    elif cmd == "install-source":
        sys.exit(_cmd_install_source(rest))
    else:
        print(__doc__)
        sys.exit(1)


if __name__ == "__main__":
    main()
