"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``MENV_*`` prefix (``MENV_BACKUP__MAX_COUNT`` for nesting)
  3. TOML file    — ``--config`` path, ``$MENV_CONFIG``, or ``~/.config/menv/menv.toml``
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import os
import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from menv.config.discovery import find_config
from menv.config.models import (
    AgentConfig,
    BackupConfig,
    ProbeConfig,
    ProfilesConfig,
    SessionConfig,
    VariablesConfig,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a discovered ``menv.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class MenvSettings(BaseSettings):
    """Settings for one menv invocation, frozen after construction.

    Attributes:
        home: Directory that profile and descriptor paths are relative to.
        config_path: The TOML file that was loaded, if any.
        force: Skip every interactive prompt, taking the default answer
            (PATH-like set appends, delete removes the whole variable).
    """

    model_config = {
        "frozen": True,
        "env_prefix": "MENV_",
        "env_nested_delimiter": "__",
    }

    home: Path = Field(default_factory=Path.home)
    config_path: Path | None = None

    # --- CLI flags ---
    force: bool = False
    verbose: bool = False
    json_output: bool = False
    log_json: bool = False

    # --- TOML sections ---
    profiles: ProfilesConfig = Field(default_factory=ProfilesConfig)
    agent: AgentConfig = Field(default_factory=AgentConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    variables: VariablesConfig = Field(default_factory=VariablesConfig)
    backup: BackupConfig = Field(default_factory=BackupConfig)
    probe: ProbeConfig = Field(default_factory=ProbeConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        home: Path | None = None,
        **cli_flags: Any,
    ) -> MenvSettings:
        """Construct settings from a CLI invocation.

        An explicit *config_path* that does not exist is ignored, matching
        discovery, so a typo never blocks the command.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path).expanduser()
            if p.is_file():
                toml_path = p
        else:
            env_home = os.environ.get("MENV_HOME")
            toml_path = find_config(home or (Path(env_home) if env_home else None))

        kwargs: dict[str, Any] = {"config_path": toml_path, **cli_flags}
        if home is not None:
            kwargs["home"] = home

        _tls.toml_path = toml_path
        try:
            return cls(**kwargs)
        finally:
            _tls.toml_path = None

    def resolve(self, relative: str) -> Path:
        """Resolve a ``$HOME``-relative config path."""
        p = Path(relative).expanduser()
        return p if p.is_absolute() else self.home / p

    def is_path_like(self, name: str) -> bool:
        return name in self.variables.path_like
