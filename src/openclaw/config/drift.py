"""One-shot warnings for config files written by a newer release."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import openclaw.config.version

_DEFAULT_LOGGER = logging.getLogger("openclaw.config.drift")

FUTURE_VERSION_PHRASE = "Config was last written by a newer OpenClaw"


class WarningLogger(Protocol):
    def warning(self, msg: str, /) -> object: ...

    def error(self, msg: str, /) -> object: ...


def log_message(logger: Any, level: str, msg: str) -> None:
    """Call ``logger.warning`` or ``logger.error`` with *msg*.

    Hosts that expose ``warn`` instead of ``warning`` are accepted too.
    """
    method = getattr(logger, level, None)
    if method is None and level == "warning":
        method = logger.warn
    method(msg)


def touched_version(document: dict[str, Any] | None) -> str | None:
    """Return ``meta.lastTouchedVersion`` if it is a string, else ``None``."""
    if not isinstance(document, dict):
        return None
    meta = document.get("meta")
    if not isinstance(meta, dict):
        return None
    value = meta.get("lastTouchedVersion")
    return value if isinstance(value, str) else None


class DriftWarningTracker:
    """Remembers the last touched version a warning was emitted for.

    A tracker lives as long as the ConfigIO that owns it. Repeated reads of
    the same newer version stay silent; a different newer version warns once
    more. Reads of an equal or older version leave the memory untouched.
    """

    def __init__(self, logger: WarningLogger | None = None) -> None:
        self.logger: WarningLogger = logger if logger is not None else _DEFAULT_LOGGER
        self.last_warned_version: str | None = None

    def check_and_maybe_warn(
        self, current_version: str, document_touched_version: str | None
    ) -> bool:
        """Warn if *document_touched_version* is newer than *current_version*.

        Returns True when a warning was emitted by this call.
        """
        if document_touched_version is None:
            return False
        if not openclaw.config.version.is_newer(
            document_touched_version, current_version
        ):
            return False
        if self.last_warned_version == document_touched_version:
            return False

        log_message(
            self.logger,
            "warning",
            f"{FUTURE_VERSION_PHRASE} ({document_touched_version}); "
            f"current version is {current_version}. "
            "Newer settings may be ignored or rewritten by this release.",
        )
        self.last_warned_version = document_touched_version
        return True
