"""Host runtime handed to channel plugins.

Only the ``config`` half lives here. It delegates to a single ConfigIO so a
plugin calling ``runtime.config.load_config()`` gets the same caching and
future-version warnings as the host itself. Reply dispatch and routing are
provided by the host process, not by this package.
"""

from __future__ import annotations

import dataclasses
import pathlib
from typing import Any

import openclaw.config.io


class RuntimeConfig:
    def __init__(self, io: openclaw.config.io.ConfigIO) -> None:
        self._io = io

    @property
    def config_path(self) -> pathlib.Path:
        return self._io.config_path

    def load_config(self) -> dict[str, Any]:
        return self._io.load_config()

    async def write_config_file(self, document: dict[str, Any]) -> None:
        await self._io.write_config_file(document)

    async def read_config_file_snapshot(self) -> openclaw.config.io.ConfigSnapshot:
        return await self._io.read_config_file_snapshot()


@dataclasses.dataclass
class PluginRuntime:
    config: RuntimeConfig


def create_plugin_runtime(
    io: openclaw.config.io.ConfigIO | None = None,
) -> PluginRuntime:
    """Wrap *io* (or a default ConfigIO) in a plugin-facing runtime."""
    if io is None:
        io = openclaw.config.io.create_config_io()
    return PluginRuntime(config=RuntimeConfig(io))
