"""Tests for openclaw.config.cli — ``openclaw config`` commands."""

from __future__ import annotations

import json
import pathlib

import pytest

import openclaw.config.cli
import openclaw.config.io


@pytest.fixture
def io(home: pathlib.Path, logger) -> openclaw.config.io.ConfigIO:
    return openclaw.config.io.create_config_io(
        env={}, homedir=lambda: home, logger=logger, version="2026.1.29"
    )


class TestGet:
    def test_nested_value(self, io, write_config, capsys) -> None:
        write_config({"gateway": {"mode": "local", "port": 18789}})
        assert openclaw.config.cli.main(["get", "gateway.mode"], io=io) == 0
        assert capsys.readouterr().out.strip() == "local"

        assert openclaw.config.cli.main(["get", "gateway"], io=io) == 0
        assert json.loads(capsys.readouterr().out) == {"mode": "local", "port": 18789}

    def test_missing_key(self, io, write_config, capsys) -> None:
        write_config()
        assert openclaw.config.cli.main(["get", "gateway.nope"], io=io) == 1
        assert "Config path not found" in capsys.readouterr().err

    def test_invalid_key(self, io, capsys) -> None:
        assert openclaw.config.cli.main(["get", "gateway..mode"], io=io) == 1
        assert "Invalid key format" in capsys.readouterr().err

    def test_corrupt_file(self, io, config_path, capsys) -> None:
        config_path.parent.mkdir(parents=True)
        config_path.write_text("{", encoding="utf-8")
        assert openclaw.config.cli.main(["get", "gateway.mode"], io=io) == 1
        assert "Failed to parse config" in capsys.readouterr().err


class TestSetAndUnset:
    def test_set_parses_json_and_stamps(self, io, config_path, capsys) -> None:
        assert openclaw.config.cli.main(["set", "gateway.port", "18789"], io=io) == 0
        assert openclaw.config.cli.main(["set", "gateway.mode", "local"], io=io) == 0
        assert "Set gateway.mode" in capsys.readouterr().out

        written = json.loads(config_path.read_text(encoding="utf-8"))
        assert written["gateway"] == {"port": 18789, "mode": "local"}
        assert written["meta"]["lastTouchedVersion"] == "2026.1.29"

    def test_set_replaces_scalar_parent(self, io, write_config, config_path) -> None:
        write_config({"gateway": "legacy"})
        assert openclaw.config.cli.main(["set", "gateway.mode", "local"], io=io) == 0
        written = json.loads(config_path.read_text(encoding="utf-8"))
        assert written["gateway"] == {"mode": "local"}

    def test_unset(self, io, write_config, config_path) -> None:
        write_config({"gateway": {"mode": "local", "port": 1}})
        assert openclaw.config.cli.main(["unset", "gateway.port"], io=io) == 0
        written = json.loads(config_path.read_text(encoding="utf-8"))
        assert written["gateway"] == {"mode": "local"}

    def test_unset_missing(self, io, write_config, capsys) -> None:
        write_config()
        assert openclaw.config.cli.main(["unset", "nothing.here"], io=io) == 1
        assert "Config path not found" in capsys.readouterr().err


class TestShowPathSnapshot:
    def test_path(self, io, config_path, capsys) -> None:
        assert openclaw.config.cli.main(["path"], io=io) == 0
        assert capsys.readouterr().out.strip() == str(config_path)

    def test_show(self, io, write_config, capsys) -> None:
        write_config({"gateway": {"mode": "local"}})
        assert openclaw.config.cli.main(["show"], io=io) == 0
        assert json.loads(capsys.readouterr().out) == {"gateway": {"mode": "local"}}

    def test_snapshot(self, io, write_config, capsys) -> None:
        write_config()
        assert openclaw.config.cli.main(["snapshot"], io=io) == 0
        out = capsys.readouterr().out
        assert "exists: True" in out
        assert '"mode": "local"' in out

    def test_no_subcommand(self, io) -> None:
        assert openclaw.config.cli.main([], io=io) == 1


class TestUndecodableFile:
    @pytest.fixture
    def undecodable(self, config_path: pathlib.Path) -> pathlib.Path:
        config_path.parent.mkdir(parents=True)
        config_path.write_bytes(b'{"gateway": {"mode": "\xff\xfe"}}')
        return config_path

    def test_show(self, io, undecodable, capsys) -> None:
        assert openclaw.config.cli.main(["show"], io=io) == 1
        assert "Failed to parse config" in capsys.readouterr().err

    def test_snapshot(self, io, undecodable, capsys) -> None:
        assert openclaw.config.cli.main(["snapshot"], io=io) == 1
        assert "Failed to parse config" in capsys.readouterr().err

    def test_get(self, io, undecodable, capsys) -> None:
        assert openclaw.config.cli.main(["get", "gateway.mode"], io=io) == 1
        assert "Failed to parse config" in capsys.readouterr().err
