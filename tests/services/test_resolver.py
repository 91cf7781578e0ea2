"""Tests for VariableResolver."""

from __future__ import annotations

import plistlib
from pathlib import Path

from menv.config.settings import MenvSettings
from menv.domain.types import SourceKind
from menv.infrastructure.environment import Environment
from menv.services.resolver import VariableResolver
from tests.conftest import FakeLaunchctl, write_profile


class TestResolve:
    def test_inherited_only(self, env: Environment) -> None:
        record = VariableResolver(env).resolve("SHELL")
        assert record.sources == frozenset({SourceKind.INHERITED})
        assert record.resolved_value == "/bin/zsh"

    def test_unknown_name(self, env: Environment) -> None:
        record = VariableResolver(env).resolve("NOPE")
        assert record.sources == frozenset()
        assert record.resolved_value is None

    def test_managed_source_excludes_inherited(
        self, env: Environment, launchctl: FakeLaunchctl
    ) -> None:
        launchctl.env["SHELL"] = "/bin/bash"
        record = VariableResolver(env).resolve("SHELL")
        assert record.sources == frozenset({SourceKind.SESSION})
        assert SourceKind.INHERITED not in record.sources

    def test_session_value_wins(
        self, env: Environment, launchctl: FakeLaunchctl, home: Path
    ) -> None:
        launchctl.env["EDITOR"] = "vim"
        write_profile(home, ".profile", "export EDITOR=nano\n")
        record = VariableResolver(env).resolve("EDITOR")
        assert record.resolved_value == "vim"
        assert record.ordered_sources == [SourceKind.SESSION, SourceKind.SHELL_PROFILE]
        assert record.per_source_value[SourceKind.SHELL_PROFILE] == "nano"

    def test_profile_value_when_session_unset(self, env: Environment, home: Path) -> None:
        write_profile(home, ".bashrc", "export EDITOR=nano\n")
        assert VariableResolver(env).resolve("EDITOR").resolved_value == "nano"

    def test_legacy_only_falls_back_to_process(self, env: Environment, home: Path) -> None:
        env.legacy.path.parent.mkdir(parents=True)
        env.legacy.path.write_bytes(plistlib.dumps({"PATH": "/legacy"}))
        record = VariableResolver(env).resolve("PATH")
        assert record.sources == frozenset({SourceKind.LEGACY_DESCRIPTOR})
        assert record.resolved_value == "/usr/bin:/bin"


class TestResolveAll:
    def test_inventory_unions_every_store(
        self, env: Environment, launchctl: FakeLaunchctl, home: Path
    ) -> None:
        launchctl.env["FROM_SESSION"] = "1"
        write_profile(home, ".zshrc", "export FROM_PROFILE=2\n")
        env.login_agent.write("FROM_AGENT", "3")
        names = [r.name for r in VariableResolver(env).resolve_all()]
        assert names == sorted(names)
        assert {"FROM_SESSION", "FROM_PROFILE", "FROM_AGENT", "HOME", "SHELL"} <= set(names)

    def test_invalid_names_are_skipped(self, home: Path, launchctl: FakeLaunchctl) -> None:
        env = Environment.from_settings(
            MenvSettings.from_cli(home=home), environ={"OK": "1", "BAD-NAME": "2"}
        )
        assert [r.name for r in VariableResolver(env).resolve_all()] == ["OK"]
