"""Environment — the bundle of stores injected into every service.

Built once per invocation from :class:`~menv.config.settings.MenvSettings`.
Services receive an ``Environment`` the way they would a repository: they
never construct stores or resolve file paths themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from menv.domain.types import SourceKind
from menv.infrastructure.backup import create_backup
from menv.infrastructure.descriptors import (
    LegacyEnvironmentDescriptorStore,
    LoginAgentDescriptorStore,
)
from menv.infrastructure.inherited import InheritedProcessEnvironment
from menv.infrastructure.profiles import ShellProfileStore
from menv.infrastructure.session import SessionEnvironmentStore

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from menv.config.settings import MenvSettings
    from menv.infrastructure.base import VariableStore

logger = logging.getLogger(__name__)


@dataclass
class Environment:
    """Every backing store plus the settings they were built from."""

    settings: MenvSettings
    session: SessionEnvironmentStore
    login_agent: LoginAgentDescriptorStore
    profiles: ShellProfileStore
    legacy: LegacyEnvironmentDescriptorStore
    inherited: InheritedProcessEnvironment

    @classmethod
    def from_settings(
        cls, settings: MenvSettings, *, environ: Mapping[str, str] | None = None
    ) -> Environment:
        launchctl = settings.session.launchctl
        return cls(
            settings=settings,
            session=SessionEnvironmentStore(launchctl, timeout=settings.session.timeout),
            login_agent=LoginAgentDescriptorStore(
                settings.resolve(settings.agent.descriptor),
                label=settings.agent.label,
                launchctl=launchctl,
            ),
            profiles=ShellProfileStore(
                [settings.resolve(p) for p in settings.profiles.candidates],
                settings.resolve(settings.profiles.canonical),
                settings.resolve(settings.profiles.fish),
            ),
            legacy=LegacyEnvironmentDescriptorStore(
                settings.resolve(settings.agent.legacy_descriptor),
                label=settings.agent.label,
                launchctl=launchctl,
            ),
            inherited=InheritedProcessEnvironment(environ),
        )

    @property
    def managed_stores(self) -> list[VariableStore]:
        """Managed stores in probe order."""
        return [self.session, self.login_agent, self.profiles, self.legacy]

    def store(self, kind: SourceKind) -> VariableStore:
        stores: dict[SourceKind, VariableStore] = {
            SourceKind.SESSION: self.session,
            SourceKind.LOGIN_AGENT: self.login_agent,
            SourceKind.SHELL_PROFILE: self.profiles,
            SourceKind.LEGACY_DESCRIPTOR: self.legacy,
            SourceKind.INHERITED: self.inherited,
        }
        return stores[kind]

    def is_path_like(self, name: str) -> bool:
        return self.settings.is_path_like(name)

    def backup(self, path: Path) -> Path | None:
        """Back up *path* before it is rewritten (no-op when disabled)."""
        if not self.settings.backup.enabled:
            return None
        return create_backup(path, max_count=self.settings.backup.max_count)
