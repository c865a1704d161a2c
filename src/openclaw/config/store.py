"""On-disk JSON storage for the OpenClaw config document.

The file lives at ``<home>/.openclaw/openclaw.json``. Reads report a missing
file as ``None`` and raise ``ConfigParseError`` for anything that is not a
JSON object. Writes go through a temp file in the same directory followed by
``os.replace`` so readers never observe a half-written document.
"""

from __future__ import annotations

import json
import logging
import os
import pathlib
import shutil
import tempfile
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

logger = logging.getLogger("openclaw.config.store")

STATE_DIRNAME = ".openclaw"
CONFIG_FILENAME = "openclaw.json"
BACKUP_SUFFIX = ".bak"
CONFIG_PATH_ENV = "OPENCLAW_CONFIG_PATH"


class ConfigParseError(ValueError):
    """Raised when the config file exists but does not hold a JSON object."""

    def __init__(self, path: pathlib.Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to parse config at {path}: {reason}")


def resolve_config_path(
    env: Mapping[str, str],
    homedir: Callable[[], pathlib.Path | str],
) -> pathlib.Path:
    """Return the config file path for the given environment and home."""
    override = env.get(CONFIG_PATH_ENV, "").strip()
    if override:
        return pathlib.Path(override).expanduser()
    return pathlib.Path(homedir()) / STATE_DIRNAME / CONFIG_FILENAME


class ConfigFileStore:
    """Plain file I/O for one config path. No caching, no warnings."""

    def __init__(self, path: pathlib.Path) -> None:
        self.path = path

    @property
    def backup_path(self) -> pathlib.Path:
        return self.path.with_name(self.path.name + BACKUP_SUFFIX)

    def fingerprint(self) -> tuple[int, int] | None:
        """Return ``(mtime_ns, size)`` of the file, or ``None`` if absent."""
        try:
            st = self.path.stat()
        except FileNotFoundError:
            return None
        return (st.st_mtime_ns, st.st_size)

    def read_raw(self) -> str | None:
        try:
            data = self.path.read_bytes()
        except FileNotFoundError:
            return None
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ConfigParseError(self.path, str(exc)) from exc

    def parse(self, raw: str) -> dict[str, Any]:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigParseError(self.path, str(exc)) from exc
        if not isinstance(data, dict):
            raise ConfigParseError(
                self.path, f"expected a JSON object, got {type(data).__name__}"
            )
        return data

    def read(self) -> dict[str, Any] | None:
        """Parse the file, returning ``None`` when it does not exist."""
        raw = self.read_raw()
        if raw is None:
            return None
        return self.parse(raw)

    def write(self, document: dict[str, Any]) -> None:
        """Atomically replace the file with *document* (2-space JSON)."""
        content = json.dumps(document, indent=2, ensure_ascii=False) + "\n"
        self.path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        tmp_path = pathlib.Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(content)
                fh.flush()
                os.fsync(fh.fileno())
            tmp_path.chmod(0o600)
            if self.path.exists():
                shutil.copy2(self.path, self.backup_path)
            os.replace(tmp_path, self.path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        logger.debug("Wrote config to %s (%d bytes)", self.path, len(content))
