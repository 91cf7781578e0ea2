"""Shared pytest fixtures and test helpers for menv tests."""

from __future__ import annotations

import subprocess
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from menv.config.settings import MenvSettings
from menv.infrastructure.environment import Environment

_real_run = subprocess.run


class FakeLaunchctl:
    """In-memory stand-in for ``launchctl`` installed over ``subprocess.run``.

    Any other command (the fresh-shell probe) is passed to the real
    ``subprocess.run``.
    """

    def __init__(self) -> None:
        self.env: dict[str, str] = {}
        self.calls: list[list[str]] = []
        self.available = True
        self.failing: set[str] = set()

    def __call__(self, args: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        if Path(args[0]).name != "launchctl":
            return _real_run(args, **kwargs)
        if not self.available:
            raise FileNotFoundError(2, "No such file or directory", args[0])

        self.calls.append(list(args))
        command, rest = args[1], args[2:]
        if command in self.failing:
            return self._done(args, returncode=1, stderr="Operation not permitted")
        if command == "getenv":
            return self._done(args, stdout=f"{self.env[rest[0]]}\n" if rest[0] in self.env else "")
        if command == "setenv":
            self.env[rest[0]] = rest[1]
            return self._done(args)
        if command == "unsetenv":
            self.env.pop(rest[0], None)
            return self._done(args)
        if command == "print":
            body = "".join(f"\t\t{k} => {v}\n" for k, v in sorted(self.env.items()))
            return self._done(args, stdout=f"gui/501 = {{\n\tenvironment = {{\n{body}\t}}\n}}\n")
        return self._done(args)

    @staticmethod
    def _done(
        args: list[str], *, returncode: int = 0, stdout: str = "", stderr: str = ""
    ) -> subprocess.CompletedProcess[str]:
        return subprocess.CompletedProcess(args, returncode, stdout=stdout, stderr=stderr)

    def commands(self, name: str) -> list[list[str]]:
        return [call[1:] for call in self.calls if call[1] == name]


class ScriptedPrompter:
    """Prompter that replays canned answers and records every question."""

    def __init__(
        self,
        *,
        choices: list[str] | None = None,
        confirms: list[bool] | None = None,
        answers: list[str] | None = None,
    ) -> None:
        self._choices = list(choices or [])
        self._confirms = list(confirms or [])
        self._answers = list(answers or [])
        self.asked: list[str] = []

    def choose(self, message: str, choices: list[tuple[str, str]], default: str) -> str:
        self.asked.append(message)
        return self._choices.pop(0) if self._choices else default

    def confirm(self, message: str) -> bool:
        self.asked.append(message)
        return self._confirms.pop(0) if self._confirms else False

    def ask(self, message: str) -> str:
        self.asked.append(message)
        return self._answers.pop(0) if self._answers else ""


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty home directory that every store resolves against.

    ``MENV_CONFIG`` points at a missing file so no real config is loaded.
    """
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("MENV_HOME", str(home_dir))
    monkeypatch.setenv("MENV_CONFIG", str(tmp_path / "absent.toml"))
    for flag in ("MENV_FORCE", "MENV_VERBOSE", "MENV_JSON_OUTPUT", "MENV_LOG_JSON"):
        monkeypatch.delenv(flag, raising=False)
    return home_dir


@pytest.fixture
def launchctl(monkeypatch: pytest.MonkeyPatch) -> Iterator[FakeLaunchctl]:
    fake = FakeLaunchctl()
    monkeypatch.setattr("menv.infrastructure.session.subprocess.run", fake)
    yield fake


@pytest.fixture
def process_env(home: Path) -> dict[str, str]:
    """The environment the resolver treats as inherited."""
    return {"HOME": str(home), "SHELL": "/bin/zsh", "PATH": "/usr/bin:/bin"}


@pytest.fixture
def settings(home: Path) -> MenvSettings:
    return MenvSettings.from_cli(home=home)


@pytest.fixture
def env(settings: MenvSettings, launchctl: FakeLaunchctl, process_env: dict[str, str]) -> Environment:
    """Environment over a temp home, a fake launchctl and a fake process env."""
    return Environment.from_settings(settings, environ=process_env)


@pytest.fixture
def forced_env(home: Path, launchctl: FakeLaunchctl, process_env: dict[str, str]) -> Environment:
    settings = MenvSettings.from_cli(home=home, force=True)
    return Environment.from_settings(settings, environ=process_env)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def write_profile(home: Path, name: str, text: str) -> Path:
    """Write a profile file below *home* and return its path."""
    path = home / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def backups_of(path: Path) -> list[Path]:
    return sorted(path.parent.glob(f"{path.name}.backup.*"))
