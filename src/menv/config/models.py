"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, ``menv.toml`` only contains
overrides. Paths are relative to the user's home directory unless absolute.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from menv.domain.descriptor import DEFAULT_LABEL, DEFAULT_LAUNCHCTL
from menv.domain.pathlist import DEFAULT_PATH_LIKE

# Sourcing priority: the first file declaring a variable wins on read.
DEFAULT_PROFILES: tuple[str, ...] = (
    ".zshrc",
    ".bash_profile",
    ".bashrc",
    ".profile",
    ".zshenv",
    ".bash_login",
    ".zprofile",
)


class ProfilesConfig(BaseModel):
    """[profiles] section."""

    model_config = {"frozen": True}

    candidates: list[str] = Field(default_factory=lambda: list(DEFAULT_PROFILES))
    canonical: str = ".profile"
    fish: str = ".config/fish/config.fish"


class AgentConfig(BaseModel):
    """[agent] section."""

    model_config = {"frozen": True}

    descriptor: str = "Library/LaunchAgents/environment.plist"
    legacy_descriptor: str = ".MacOSX/environment.plist"
    label: str = DEFAULT_LABEL
    persist_on_set: bool = False


class SessionConfig(BaseModel):
    """[session] section."""

    model_config = {"frozen": True}

    launchctl: str = DEFAULT_LAUNCHCTL
    timeout: float = 10.0


class VariablesConfig(BaseModel):
    """[variables] section."""

    model_config = {"frozen": True}

    path_like: list[str] = Field(default_factory=lambda: list(DEFAULT_PATH_LIKE))


class BackupConfig(BaseModel):
    """[backup] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    max_count: int = 10


class ProbeConfig(BaseModel):
    """[probe] section — the fresh shell used by ``menv test``."""

    model_config = {"frozen": True}

    shell: str = "/bin/sh"
    timeout: float = 10.0
    profiles: list[str] = Field(
        default_factory=lambda: [".profile", ".bash_profile", ".bashrc", ".zshrc"]
    )
