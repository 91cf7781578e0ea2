"""Tests for config file discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from menv.config.discovery import default_config_path, find_config


class TestDiscovery:
    def test_default_location(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        assert default_config_path(tmp_path) == tmp_path / ".config/menv/menv.toml"

    def test_xdg_config_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
        assert default_config_path(tmp_path) == tmp_path / "xdg/menv/menv.toml"

    def test_finds_default_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MENV_CONFIG", raising=False)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        config = tmp_path / ".config/menv/menv.toml"
        config.parent.mkdir(parents=True)
        config.write_text("", encoding="utf-8")
        assert find_config(tmp_path) == config

    def test_env_var_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        explicit = tmp_path / "elsewhere.toml"
        explicit.write_text("", encoding="utf-8")
        monkeypatch.setenv("MENV_CONFIG", str(explicit))
        assert find_config(tmp_path) == explicit

    def test_dangling_env_var_disables_discovery(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("MENV_CONFIG", str(tmp_path / "missing.toml"))
        assert find_config(tmp_path) is None
