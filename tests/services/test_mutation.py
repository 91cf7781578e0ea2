"""Tests for MutationCoordinator — set, add-path, remove-path, delete."""

from __future__ import annotations

import plistlib
from pathlib import Path

from menv.config.settings import MenvSettings
from menv.domain.pathlist import PathMode
from menv.domain.types import SourceKind
from menv.infrastructure.environment import Environment
from menv.services.mutation import MutationCoordinator
from menv.services.resolver import VariableResolver
from tests.conftest import FakeLaunchctl, ScriptedPrompter, backups_of, write_profile


def _forced(env: Environment) -> MutationCoordinator:
    return MutationCoordinator(env, None, interactive=False)


def _interactive(env: Environment, prompter: ScriptedPrompter) -> MutationCoordinator:
    return MutationCoordinator(env, prompter, interactive=True)


# ---------------------------------------------------------------------------
# set
# ---------------------------------------------------------------------------


class TestSetVariable:
    def test_regular_name_writes_session_and_profile(
        self, env: Environment, launchctl: FakeLaunchctl, home: Path
    ) -> None:
        result = _forced(env).set_variable("EDITOR", "vim")
        assert result.ok
        assert launchctl.env["EDITOR"] == "vim"
        assert (home / ".profile").read_text(encoding="utf-8") == 'export EDITOR="vim"\n'
        sources = [o["source"] for o in result.data["outcomes"]]
        assert sources == ["session", "shell-profile"]

    def test_path_like_never_touches_profiles(
        self, env: Environment, launchctl: FakeLaunchctl, home: Path
    ) -> None:
        result = _forced(env).set_variable("PATH", "/opt/x")
        assert result.ok
        assert launchctl.env["PATH"] == "/usr/bin:/bin:/opt/x"
        assert not (home / ".profile").exists()
        assert [o["source"] for o in result.data["outcomes"]] == ["session"]

    def test_invalid_name_has_no_side_effect(
        self, env: Environment, launchctl: FakeLaunchctl, home: Path
    ) -> None:
        result = _forced(env).set_variable("1BAD", "x")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_NAME"
        assert launchctl.commands("setenv") == []
        assert not (home / ".profile").exists()

    def test_interactive_prepend(self, env: Environment, launchctl: FakeLaunchctl) -> None:
        prompter = ScriptedPrompter(choices=["2"])
        result = _interactive(env, prompter).set_variable("PATH", "/opt/x")
        assert result.ok
        assert launchctl.env["PATH"] == "/opt/x:/usr/bin:/bin"
        assert result.data["mode"] == "prepend"

    def test_replace_needs_second_confirmation(
        self, env: Environment, launchctl: FakeLaunchctl
    ) -> None:
        prompter = ScriptedPrompter(choices=["3"], confirms=[False])
        result = _interactive(env, prompter).set_variable("PATH", "/opt/x")
        assert result.ok
        assert result.cancelled
        assert "PATH" not in launchctl.env

    def test_replace_confirmed(self, env: Environment, launchctl: FakeLaunchctl) -> None:
        prompter = ScriptedPrompter(choices=["3"], confirms=[True])
        _interactive(env, prompter).set_variable("PATH", "/opt/x")
        assert launchctl.env["PATH"] == "/opt/x"

    def test_profile_with_foreign_bytes_is_not_clobbered(
        self, env: Environment, home: Path
    ) -> None:
        profile = home / ".profile"
        profile.write_bytes(b"# caf\xe9 settings\nalias ll='ls -l'\nexport FOO=bar\n")
        result = _forced(env).set_variable("EDITOR", "vim")
        assert result.ok
        assert profile.read_bytes().startswith(b"# caf\xe9 settings\nalias ll='ls -l'\n")
        assert env.profiles.read("FOO") == "bar"
        assert env.profiles.read("EDITOR") == "vim"

    def test_path_like_combines_with_process_value(
        self, env: Environment, launchctl: FakeLaunchctl, home: Path
    ) -> None:
        write_profile(home, ".zshrc", 'export PATH="/opt/a:$PATH"\n')
        result = _forced(env).set_variable("PATH", "/opt/x", mode=PathMode.PREPEND)
        assert launchctl.env["PATH"] == "/opt/x:/usr/bin:/bin"
        assert "$PATH" not in result.data["value"]

    def test_explicit_mode_skips_prompt(self, env: Environment, launchctl: FakeLaunchctl) -> None:
        prompter = ScriptedPrompter()
        _interactive(env, prompter).set_variable("PATH", "/opt/x", mode=PathMode.PREPEND)
        assert prompter.asked == []
        assert launchctl.env["PATH"] == "/opt/x:/usr/bin:/bin"

    def test_mode_ignored_for_regular_name(self, env: Environment) -> None:
        result = _forced(env).set_variable("EDITOR", "vim", mode=PathMode.PREPEND)
        assert result.ok
        assert result.data["mode"] is None
        assert any("not PATH-like" in w for w in result.warnings)

    def test_idempotent(self, env: Environment, home: Path) -> None:
        coordinator = _forced(env)
        coordinator.set_variable("EDITOR", "vim")
        coordinator.set_variable("EDITOR", "vim")
        assert (home / ".profile").read_text(encoding="utf-8") == 'export EDITOR="vim"\n'

    def test_backup_taken_before_rewrite(self, env: Environment, home: Path) -> None:
        profile = write_profile(home, ".profile", "export EDITOR=nano\n")
        result = _forced(env).set_variable("EDITOR", "vim")
        backups = backups_of(profile)
        assert len(backups) == 1
        assert backups[0].read_text(encoding="utf-8") == "export EDITOR=nano\n"
        assert result.data["outcomes"][1]["backups"] == [str(backups[0])]

    def test_session_failure_becomes_warning(
        self, env: Environment, launchctl: FakeLaunchctl, home: Path
    ) -> None:
        launchctl.failing.add("setenv")
        result = _forced(env).set_variable("EDITOR", "vim")
        assert result.ok
        assert any(w.startswith("session:") for w in result.warnings)
        assert (home / ".profile").exists()
        assert [o["ok"] for o in result.data["outcomes"]] == [False, True]

    def test_every_store_failing_is_an_error(
        self, env: Environment, launchctl: FakeLaunchctl
    ) -> None:
        launchctl.failing.add("setenv")
        result = _forced(env).set_variable("PATH", "/opt/x")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "STORE_WRITE_FAILED"

    def test_persist_on_set_writes_agent(
        self, home: Path, launchctl: FakeLaunchctl, process_env: dict[str, str]
    ) -> None:
        settings = MenvSettings.from_cli(home=home, agent={"persist_on_set": True})
        env = Environment.from_settings(settings, environ=process_env)
        result = _forced(env).set_variable("EDITOR", "vim")
        assert result.ok
        assert env.login_agent.read("EDITOR") == "vim"


# ---------------------------------------------------------------------------
# add-path
# ---------------------------------------------------------------------------


class TestAddPath:
    def test_appends_to_session_only(
        self, env: Environment, launchctl: FakeLaunchctl, home: Path
    ) -> None:
        result = _forced(env).add_path("PATH", "/opt/x")
        assert result.ok
        assert result.data["value"] == "/usr/bin:/bin:/opt/x"
        assert launchctl.env["PATH"] == "/usr/bin:/bin:/opt/x"
        assert not (home / ".profile").exists()

    def test_rejects_regular_variable(self, env: Environment, launchctl: FakeLaunchctl) -> None:
        result = _forced(env).add_path("EDITOR", "/opt/x")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_PATH_LIKE"
        assert launchctl.commands("setenv") == []

    def test_duplicate_declined(self, env: Environment, launchctl: FakeLaunchctl) -> None:
        prompter = ScriptedPrompter(confirms=[False])
        result = _interactive(env, prompter).add_path("PATH", "/bin")
        assert result.cancelled
        assert "PATH" not in launchctl.env

    def test_duplicate_forced(self, env: Environment, launchctl: FakeLaunchctl) -> None:
        result = _forced(env).add_path("PATH", "/bin")
        assert result.ok
        assert launchctl.env["PATH"] == "/usr/bin:/bin:/bin"
        assert any("already exists" in w for w in result.warnings)

    def test_profile_declaration_is_not_the_base(
        self, env: Environment, launchctl: FakeLaunchctl, home: Path
    ) -> None:
        write_profile(home, ".zshrc", 'export PATH="/opt/a:$PATH"\n')
        result = _forced(env).add_path("PATH", "/opt/x")
        assert launchctl.env["PATH"] == "/usr/bin:/bin:/opt/x"
        assert result.data["previous"] == "/usr/bin:/bin"

    def test_session_value_is_the_base(
        self, env: Environment, launchctl: FakeLaunchctl, home: Path
    ) -> None:
        launchctl.env["PATH"] = "/sbin"
        write_profile(home, ".profile", 'export PATH="$HOME/bin:$PATH"\n')
        _forced(env).add_path("PATH", "/opt/x")
        assert launchctl.env["PATH"] == "/sbin:/opt/x"


# ---------------------------------------------------------------------------
# remove-path
# ---------------------------------------------------------------------------


class TestRemovePath:
    def test_rewrites_every_contributor(
        self, env: Environment, launchctl: FakeLaunchctl, home: Path
    ) -> None:
        launchctl.env["PATH"] = "/opt/x:/usr/bin:/opt/x"
        zshrc = write_profile(home, ".zshrc", 'export PATH="/opt/x:$PATH"\n')
        env.legacy.path.parent.mkdir(parents=True)
        env.legacy.path.write_bytes(plistlib.dumps({"PATH": "/opt/x:/sbin"}))

        result = _forced(env).remove_path("PATH", "/opt/x")

        assert result.ok
        assert result.data["positions"] == [1, 3]
        assert launchctl.env["PATH"] == "/usr/bin"
        assert zshrc.read_text(encoding="utf-8") == 'export PATH="$PATH"\n'
        assert plistlib.loads(env.legacy.path.read_bytes()) == {"PATH": "/sbin"}
        assert len(backups_of(zshrc)) == 1
        assert str(zshrc) in result.data["contributors"]

    def test_unsets_session_when_nothing_left(
        self, env: Environment, launchctl: FakeLaunchctl
    ) -> None:
        launchctl.env["PATH"] = "/opt/x"
        _forced(env).remove_path("PATH", "/opt/x")
        assert "PATH" not in launchctl.env

    def test_positions_come_from_live_value(
        self, env: Environment, launchctl: FakeLaunchctl, home: Path
    ) -> None:
        write_profile(home, ".zshrc", 'export PATH="/opt/a:$PATH"\n')
        result = _forced(env).remove_path("PATH", "/bin")
        assert result.data["positions"] == [2]
        assert result.data["value"] == "/usr/bin"
        assert launchctl.commands("setenv") == []

    def test_missing_entry_declined(self, env: Environment) -> None:
        prompter = ScriptedPrompter(confirms=[False])
        result = _interactive(env, prompter).remove_path("PATH", "/nowhere")
        assert result.cancelled

    def test_entry_only_inherited(self, env: Environment, launchctl: FakeLaunchctl) -> None:
        result = _forced(env).remove_path("PATH", "/bin")
        assert result.ok
        assert result.data["contributors"] == []
        assert any("inherited" in w for w in result.warnings)
        assert launchctl.commands("setenv") == []

    def test_rejects_regular_variable(self, env: Environment) -> None:
        result = _forced(env).remove_path("EDITOR", "/x")
        assert result.error is not None
        assert result.error.code == "NOT_PATH_LIKE"


# ---------------------------------------------------------------------------
# delete
# ---------------------------------------------------------------------------


class TestDeleteVariable:
    def test_removes_from_session_and_profile(
        self, env: Environment, launchctl: FakeLaunchctl, home: Path
    ) -> None:
        launchctl.env["EDITOR"] = "vim"
        write_profile(home, ".profile", "export EDITOR=vim\nexport PAGER=less\n")
        result = _forced(env).delete_variable("EDITOR")
        assert result.ok
        assert result.data["removed_from"] == ["session", "shell-profile"]
        record = VariableResolver(env).resolve("EDITOR")
        assert not record.managed
        assert (home / ".profile").read_text(encoding="utf-8") == "export PAGER=less\n"

    def test_still_inherited_after_delete(
        self, env: Environment, launchctl: FakeLaunchctl, process_env: dict[str, str]
    ) -> None:
        launchctl.env["SHELL"] = "/bin/bash"
        _forced(env).delete_variable("SHELL")
        record = VariableResolver(env).resolve("SHELL")
        assert record.sources == frozenset({SourceKind.INHERITED})

    def test_inherited_only_is_not_managed(self, env: Environment) -> None:
        result = _forced(env).delete_variable("SHELL")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_MANAGED"
        assert result.error.detail["inherited_value"] == "/bin/zsh"

    def test_unknown_is_not_found(self, env: Environment) -> None:
        result = _forced(env).delete_variable("NOPE")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_confirmation_declined(self, env: Environment, launchctl: FakeLaunchctl) -> None:
        launchctl.env["EDITOR"] = "vim"
        prompter = ScriptedPrompter(confirms=[False])
        result = _interactive(env, prompter).delete_variable("EDITOR")
        assert result.cancelled
        assert launchctl.env["EDITOR"] == "vim"

    def test_continues_past_store_failure(
        self, env: Environment, launchctl: FakeLaunchctl, home: Path
    ) -> None:
        launchctl.env["EDITOR"] = "vim"
        launchctl.failing.add("unsetenv")
        write_profile(home, ".profile", "export EDITOR=vim\n")
        result = _forced(env).delete_variable("EDITOR")
        assert result.ok
        assert result.data["removed_from"] == ["shell-profile"]
        assert any(w.startswith("session:") for w in result.warnings)

    def test_path_like_forced_removes_whole_variable(
        self, env: Environment, launchctl: FakeLaunchctl
    ) -> None:
        launchctl.env["PYTHONPATH"] = "/lib/py"
        result = _forced(env).delete_variable("PYTHONPATH")
        assert result.ok
        assert "PYTHONPATH" not in launchctl.env

    def test_path_like_interactive_removes_one_entry(
        self, env: Environment, launchctl: FakeLaunchctl
    ) -> None:
        launchctl.env["PYTHONPATH"] = "/lib/a:/lib/b"
        prompter = ScriptedPrompter(choices=["1"], answers=["/lib/a"])
        result = _interactive(env, prompter).delete_variable("PYTHONPATH")
        assert result.ok
        assert result.op == "remove_path"
        assert launchctl.env["PYTHONPATH"] == "/lib/b"

    def test_path_like_interactive_whole_variable(
        self, env: Environment, launchctl: FakeLaunchctl
    ) -> None:
        launchctl.env["PYTHONPATH"] = "/lib/a"
        prompter = ScriptedPrompter(choices=["2"], confirms=[True])
        result = _interactive(env, prompter).delete_variable("PYTHONPATH")
        assert result.ok
        assert len(prompter.asked) == 2
        assert "PYTHONPATH" not in launchctl.env

    def test_legacy_descriptor_deleted(self, env: Environment) -> None:
        env.legacy.path.parent.mkdir(parents=True)
        env.legacy.path.write_bytes(plistlib.dumps({"EDITOR": "vim"}))
        result = _forced(env).delete_variable("EDITOR")
        assert result.ok
        assert not env.legacy.path.exists()
        assert len(backups_of(env.legacy.path)) == 1
