"""Descriptor stores — property-list files that persist bindings across reboot.

Both the login-agent descriptor and the legacy ``environment.plist`` are
single files. A write replaces the whole file with a launch-agent
descriptor carrying exactly one binding, so setting a second variable
through the same file discards the first; the outcome names what was
discarded.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from menv.domain import descriptor
from menv.domain.errors import StoreWriteError
from menv.domain.pathlist import remove_entry, value_contains
from menv.domain.types import SourceKind, StoreOutcome
from menv.infrastructure.base import VariableStore

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class DescriptorStore(VariableStore):
    """A plist descriptor file holding ``{NAME: VALUE}`` bindings."""

    kind = SourceKind.LOGIN_AGENT

    def __init__(
        self,
        path: Path,
        *,
        label: str = descriptor.DEFAULT_LABEL,
        launchctl: str = descriptor.DEFAULT_LAUNCHCTL,
    ) -> None:
        self.path = path
        self._label = label
        self._launchctl = launchctl

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _load(self) -> dict[str, Any] | None:
        if not self.path.is_file():
            return None
        try:
            return descriptor.loads(self.path.read_bytes())
        except (OSError, ValueError) as exc:
            logger.debug("Cannot read descriptor %s: %s", self.path, exc)
            return None

    def bindings(self) -> dict[str, str]:
        data = self._load()
        return descriptor.bindings_from_plist(data) if data is not None else {}

    def exists(self, name: str) -> bool:
        return name in self.bindings()

    def read(self, name: str) -> str | None:
        return self.bindings().get(name)

    def enumerate_names(self) -> set[str]:
        return set(self.bindings())

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def write_targets(self, name: str) -> list[Path]:
        return [self.path] if self.path.is_file() else []

    def remove_targets(self, name: str) -> list[Path]:
        return [self.path] if self.exists(name) else []

    def write(self, name: str, value: str) -> StoreOutcome:
        discarded = sorted(k for k in self.bindings() if k != name)
        data = descriptor.build_agent_descriptor(
            name, value, label=self._label, launchctl=self._launchctl
        )
        self._save(data)
        warnings = [
            f"{self.path} holds one binding; previous binding for {other} was discarded"
            for other in discarded
        ]
        return StoreOutcome(
            source=self.kind,
            action="write",
            detail="descriptor replaced",
            paths=[str(self.path)],
            warnings=warnings,
        )

    def remove(self, name: str) -> StoreOutcome:
        data = self._load()
        if data is None or name not in descriptor.bindings_from_plist(data):
            return StoreOutcome(source=self.kind, action="remove", detail="not present")
        remaining = {k: v for k, v in descriptor.bindings_from_plist(data).items() if k != name}
        if not remaining:
            self._unlink()
            return StoreOutcome(
                source=self.kind,
                action="remove",
                detail="descriptor deleted",
                paths=[str(self.path)],
            )
        self._save(descriptor.plist_with_bindings(data, remaining))
        return StoreOutcome(
            source=self.kind,
            action="remove",
            detail="binding removed",
            paths=[str(self.path)],
        )

    def remove_path_entry(self, name: str, entry: str) -> StoreOutcome:
        """Strip *entry* from the binding of *name*, keeping the other entries."""
        data = self._load()
        bindings = descriptor.bindings_from_plist(data) if data is not None else {}
        if data is None or not value_contains(bindings.get(name), entry):
            return StoreOutcome(source=self.kind, action="remove-entry", detail="not present")
        bindings[name] = remove_entry(bindings[name], entry)
        self._save(descriptor.plist_with_bindings(data, bindings))
        return StoreOutcome(
            source=self.kind,
            action="remove-entry",
            detail="binding rewritten",
            paths=[str(self.path)],
        )

    def _save(self, data: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_bytes(descriptor.dumps(data))
        except OSError as exc:
            msg = f"Cannot write {self.path}: {exc}"
            raise StoreWriteError(msg, detail={"path": str(self.path)}) from exc
        logger.debug("Descriptor updated: %s", self.path)

    def _unlink(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            msg = f"Cannot delete {self.path}: {exc}"
            raise StoreWriteError(msg, detail={"path": str(self.path)}) from exc
        logger.debug("Removed descriptor: %s", self.path)


class LoginAgentDescriptorStore(DescriptorStore):
    """``~/Library/LaunchAgents/environment.plist``."""

    kind = SourceKind.LOGIN_AGENT


class LegacyEnvironmentDescriptorStore(DescriptorStore):
    """The deprecated ``~/.MacOSX/environment.plist``."""

    kind = SourceKind.LEGACY_DESCRIPTOR
