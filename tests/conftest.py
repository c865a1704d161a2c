"""Shared test fixtures for openclaw tests."""

from __future__ import annotations

import json
import pathlib
import unittest.mock

import pytest

import openclaw.config.drift
import openclaw.settings


@pytest.fixture
def home(tmp_path: pathlib.Path) -> pathlib.Path:
    """A throwaway home directory."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def config_path(home: pathlib.Path) -> pathlib.Path:
    return home / ".openclaw" / "openclaw.json"


@pytest.fixture
def write_config(config_path: pathlib.Path):
    """Factory writing a config document the way an external process would."""

    def _write(
        document: dict | None = None,
        touched_version: str | None = None,
    ) -> pathlib.Path:
        if document is None:
            document = {"gateway": {"mode": "local"}}
        if touched_version is not None:
            document = {**document, "meta": {"lastTouchedVersion": touched_version}}
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        return config_path

    return _write


@pytest.fixture
def logger() -> unittest.mock.Mock:
    """Stand-in for the injected ``warning``/``error`` logger."""
    return unittest.mock.Mock(spec=["warning", "error"])


@pytest.fixture
def future_warnings(logger: unittest.mock.Mock):
    """Return the future-version warning messages logged so far."""

    def _collect() -> list[str]:
        return [
            call.args[0]
            for call in logger.warning.call_args_list
            if isinstance(call.args[0], str)
            and openclaw.config.drift.FUTURE_VERSION_PHRASE in call.args[0]
        ]

    return _collect


@pytest.fixture
def isolated_settings(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch):
    """Point global settings at tmp_path and run from a clean project dir."""
    global_toml = tmp_path / "global" / "settings.toml"
    monkeypatch.setattr(openclaw.settings, "_global_path", lambda: global_toml)
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.chdir(project)
    return project
