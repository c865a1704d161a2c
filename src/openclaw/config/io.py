"""Config IO facade: cached loads, fresh snapshots, atomic writes.

Every read hands the document's ``meta.lastTouchedVersion`` to a
``DriftWarningTracker`` so a file written by a newer release produces one
warning per distinct version, whether the document came from the cache or
straight from disk.

Usage::

    io = openclaw.config.io.create_config_io()
    cfg = io.load_config()
    await io.write_config_file({**cfg, "gateway": {"mode": "local"}})
    snapshot = await io.read_config_file_snapshot()
"""

from __future__ import annotations

import asyncio
import copy
import dataclasses
import datetime
import hashlib
import logging
import os
import pathlib
from typing import TYPE_CHECKING, Any

import openclaw
import openclaw.config.cache
import openclaw.config.drift
import openclaw.config.store
import openclaw.settings

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

logger = logging.getLogger("openclaw.config.io")

DISABLE_CACHE_ENV = "OPENCLAW_DISABLE_CONFIG_CACHE"
_TRUTHY = ("1", "true", "yes", "on")


@openclaw.settings.configurable("config")
@dataclasses.dataclass
class ConfigIOSettings:
    cache_disabled: bool = False


@dataclasses.dataclass(frozen=True)
class ConfigSnapshot:
    """Result of a cache-bypassing read."""

    path: pathlib.Path
    exists: bool
    raw: str | None
    config: dict[str, Any]
    hash: str | None


def cache_disabled_from_env(env: Mapping[str, str]) -> bool:
    return env.get(DISABLE_CACHE_ENV, "").strip().lower() in _TRUTHY


class ConfigIO:
    def __init__(
        self,
        store: openclaw.config.store.ConfigFileStore,
        cache: openclaw.config.cache.ConfigCache,
        tracker: openclaw.config.drift.DriftWarningTracker,
        *,
        version: str,
        logger: openclaw.config.drift.WarningLogger,
    ) -> None:
        self.store = store
        self.cache = cache
        self.tracker = tracker
        self.version = version
        self.logger = logger

    @property
    def config_path(self) -> pathlib.Path:
        return self.store.path

    def _check_drift(self, document: dict[str, Any]) -> None:
        self.tracker.check_and_maybe_warn(
            self.version, openclaw.config.drift.touched_version(document)
        )

    def _read_or_default(self) -> dict[str, Any]:
        document = self.store.read()
        return document if document is not None else {}

    def load_config(self) -> dict[str, Any]:
        """Return the current document, from the cache when it is still valid."""
        try:
            document = self.cache.get_or_load(
                self._read_or_default, self.store.fingerprint()
            )
        except openclaw.config.store.ConfigParseError as exc:
            openclaw.config.drift.log_message(self.logger, "error", str(exc))
            raise
        self._check_drift(document)
        return document

    async def read_config_file_snapshot(self) -> ConfigSnapshot:
        """Read straight from disk, ignoring whatever the cache holds."""
        try:
            raw = await asyncio.to_thread(self.store.read_raw)
            document = {} if raw is None else self.store.parse(raw)
        except openclaw.config.store.ConfigParseError as exc:
            openclaw.config.drift.log_message(self.logger, "error", str(exc))
            raise
        digest = None
        if raw is not None:
            digest = hashlib.sha256(raw.encode("utf-8")).hexdigest()

        self._check_drift(document)
        return ConfigSnapshot(
            path=self.store.path,
            exists=raw is not None,
            raw=raw,
            config=document,
            hash=digest,
        )

    async def write_config_file(self, document: dict[str, Any]) -> None:
        """Stamp *document* with this release's version and persist it."""
        stamped = copy.deepcopy(document)
        meta = stamped.get("meta")
        if not isinstance(meta, dict):
            meta = stamped["meta"] = {}
        meta["lastTouchedVersion"] = self.version
        meta["lastTouchedAt"] = datetime.datetime.now(tz=datetime.UTC).isoformat()

        try:
            await asyncio.to_thread(self.store.write, stamped)
        finally:
            # A failed write may still have replaced the file.
            self.cache.invalidate()
        logger.debug("Config written to %s", self.store.path)


def create_config_io(
    *,
    env: Mapping[str, str] | None = None,
    homedir: Callable[[], pathlib.Path | str] | None = None,
    logger: openclaw.config.drift.WarningLogger | None = None,
    cache_disabled: bool | None = None,
    version: str | None = None,
    tracker: openclaw.config.drift.DriftWarningTracker | None = None,
) -> ConfigIO:
    """Build a ConfigIO from injectable collaborators.

    Args:
        env: Environment mapping (default: ``os.environ``). Consulted for
            ``OPENCLAW_CONFIG_PATH`` and, when *cache_disabled* is None,
            ``OPENCLAW_DISABLE_CONFIG_CACHE``.
        homedir: Returns the home directory (default: ``Path.home``).
        logger: Anything with ``warning(msg)`` and ``error(msg)``. Hosts
            whose logger spells the first one ``warn(msg)`` work as well.
        cache_disabled: Force every ``load_config`` to re-read the file.
        version: Running release (default: ``openclaw.__version__``).
        tracker: Share a drift tracker between several facades.
    """
    env = os.environ if env is None else env
    homedir = pathlib.Path.home if homedir is None else homedir
    io_logger = logging.getLogger("openclaw.config.io") if logger is None else logger
    if cache_disabled is None:
        cache_disabled = cache_disabled_from_env(env)
    if tracker is None:
        tracker = openclaw.config.drift.DriftWarningTracker(io_logger)

    store = openclaw.config.store.ConfigFileStore(
        openclaw.config.store.resolve_config_path(env, homedir)
    )
    return ConfigIO(
        store,
        openclaw.config.cache.ConfigCache(disabled=cache_disabled),
        tracker,
        version=version or openclaw.__version__,
        logger=io_logger,
    )
