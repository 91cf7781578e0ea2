"""MutationCoordinator — multi-store set, delete, and PATH entry edits.

Pipeline for every mutation: VALIDATE → RESOLVE → (PROMPT) → BACKUP → WRITE → REPORT

There is no cross-store transaction. Each store write is attempted on its
own; a failure is recorded on its outcome and surfaced as a warning while
the remaining stores are still processed. Re-running the same command
converges on the same end state.

PATH-like variables are written to the session store only, never into a
shell profile, so GUI and terminal contexts do not accumulate the same
entries twice.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from menv.domain import pathlist
from menv.domain.errors import (
    MenvError,
    NotFoundError,
    NotManagedError,
    NotPathLikeError,
    StoreWriteError,
    UserCancelled,
)
from menv.domain.names import validate_name
from menv.domain.pathlist import PathMode
from menv.domain.types import SourceKind, StoreOutcome, VariableRecord, ordered
from menv.services.base import BaseService
from menv.services.resolver import VariableResolver
from menv.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from pathlib import Path

    from menv.infrastructure.environment import Environment
    from menv.services.prompts import Prompter

logger = logging.getLogger(__name__)

_MODE_CHOICES: list[tuple[str, str]] = [
    ("1", "Append to the existing value (recommended)"),
    ("2", "Prepend to the existing value"),
    ("3", "Replace the entire value (dangerous!)"),
]
_MODE_BY_CHOICE = {"1": PathMode.APPEND, "2": PathMode.PREPEND, "3": PathMode.REPLACE}

_DELETE_CHOICES: list[tuple[str, str]] = [
    ("1", "Remove a specific path entry"),
    ("2", "Remove the entire variable (dangerous!)"),
]


class MutationCoordinator(BaseService):
    """Orchestrates writes and removals across the backing stores."""

    def __init__(
        self,
        env: Environment,
        prompter: Prompter | None = None,
        *,
        interactive: bool | None = None,
    ) -> None:
        super().__init__(env)
        self._resolver = VariableResolver(env)
        self._prompter = prompter
        if interactive is None:
            interactive = prompter is not None and not env.settings.force
        self._interactive = interactive

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def set_variable(self, name: str, value: str, *, mode: PathMode | None = None) -> ServiceResult:
        """Set *name* in the session store and, unless PATH-like, the shell profile.

        For PATH-like names *value* is an entry combined with the current
        value per *mode* (asked interactively when None, append when forced).
        """
        op = "set"
        warnings: list[str] = []
        try:
            name = validate_name(name)
            record = self._resolver.resolve(name)
            path_like = self._env.is_path_like(name)
            final = value
            live: str | None = None
            if path_like:
                mode = mode or self._choose_mode(name)
                if mode is PathMode.REPLACE:
                    self._require(f"This will completely replace {name}! Are you sure?")
                live = self._resolver.live_value(record)
                final = pathlist.combine(live or "", value, mode)
                logger.debug("%s %s to %s", mode, value, name)
            elif mode is not None:
                warnings.append(f"{name} is not PATH-like; ignoring --{mode}")
                mode = None

            targets = [SourceKind.SESSION]
            if not path_like:
                targets.append(SourceKind.SHELL_PROFILE)
            if self._env.settings.agent.persist_on_set:
                targets.append(SourceKind.LOGIN_AGENT)

            outcomes = [self._write(kind, name, final, warnings) for kind in targets]
        except UserCancelled as exc:
            return self._cancelled(op, exc, warnings)
        except MenvError as exc:
            return self._failure(op, exc)

        data: dict[str, Any] = {
            "name": name,
            "value": final,
            "previous": live if path_like else record.resolved_value,
            "path_like": path_like,
            "mode": str(mode) if mode else None,
        }
        return self._report(op, data, outcomes, warnings)

    def add_path(self, name: str, entry: str) -> ServiceResult:
        """Append *entry* to a PATH-like variable (session store only)."""
        op = "add_path"
        warnings: list[str] = []
        try:
            name = self._validate_path_like(name, hint="Use 'add' instead.")
            record = self._resolver.resolve(name)
            current = self._resolver.live_value(record) or ""
            if pathlist.contains_entry(pathlist.parse(current), entry):
                warnings.append(f"Path entry already exists in {name}: {entry}")
                self._require("Add anyway?")
            final = pathlist.combine(current, entry, PathMode.APPEND)
            outcomes = [self._write(SourceKind.SESSION, name, final, warnings)]
        except UserCancelled as exc:
            return self._cancelled(op, exc, warnings)
        except MenvError as exc:
            return self._failure(op, exc)

        data = {
            "name": name,
            "entry": entry,
            "value": final,
            "previous": current or None,
            "path_like": True,
            "mode": str(PathMode.APPEND),
        }
        return self._report(op, data, outcomes, warnings)

    def remove_path(self, name: str, entry: str) -> ServiceResult:
        """Remove every occurrence of *entry* from every store that contributes it."""
        op = "remove_path"
        warnings: list[str] = []
        try:
            name = self._validate_path_like(name, hint="Use 'delete' instead.")
            return self._remove_entry(op, name, entry, warnings)
        except UserCancelled as exc:
            return self._cancelled(op, exc, warnings)
        except MenvError as exc:
            return self._failure(op, exc)

    def delete_variable(self, name: str) -> ServiceResult:
        """Remove *name* from every managed store that declares it."""
        op = "delete"
        warnings: list[str] = []
        try:
            name = validate_name(name)
            confirmed = False
            if self._env.is_path_like(name) and self._interactive:
                warnings.append(f"Attempting to delete PATH-like variable: {name}")
                choice = self._ask_choice(
                    f"{name} is PATH-like. What do you want to do?", _DELETE_CHOICES, "1"
                )
                if choice == "1":
                    entry = self._ask(f"Enter the path entry to remove from {name}")
                    if not entry:
                        raise UserCancelled("No path entry specified")
                    return self._remove_entry("remove_path", name, entry, warnings)
                self._require(f"This will completely remove {name}! Are you sure?")
                confirmed = True

            record = self._resolver.resolve(name)
            self._ensure_managed(record)
            managed = ordered(record.managed)
            if not confirmed:
                where = ", ".join(str(kind) for kind in managed)
                self._require(f"Delete {name} (defined in: {where})?")

            outcomes = [self._remove(kind, name, warnings) for kind in managed]
        except UserCancelled as exc:
            return self._cancelled(op, exc, warnings)
        except MenvError as exc:
            return self._failure(op, exc)

        data = {
            "name": name,
            "removed_from": [str(o.source) for o in outcomes if o.ok],
            "path_like": self._env.is_path_like(name),
        }
        return self._report(op, data, outcomes, warnings)

    # ------------------------------------------------------------------
    # PATH entry removal
    # ------------------------------------------------------------------

    def _remove_entry(
        self, op: str, name: str, entry: str, warnings: list[str]
    ) -> ServiceResult:
        record = self._resolver.resolve(name)
        current = self._resolver.live_value(record) or ""
        positions = pathlist.positions_of(pathlist.parse(current), entry)
        if not positions:
            warnings.append(f"Path entry not found in current {name}: {entry}")
            self._require("Continue anyway?")

        outcomes: list[StoreOutcome] = []
        contributors: list[str] = []

        session_value = record.per_source_value.get(SourceKind.SESSION)
        if pathlist.value_contains(session_value, entry):
            contributors.append(str(SourceKind.SESSION))
            remaining = pathlist.remove_entry(session_value or "", entry)
            if remaining:
                outcomes.append(self._write(SourceKind.SESSION, name, remaining, warnings))
            else:
                outcomes.append(self._remove(SourceKind.SESSION, name, warnings))

        profile_files = self._env.profiles.path_entry_targets(name, entry)
        if profile_files:
            contributors.extend(str(p) for p in profile_files)
            outcomes.append(
                self._apply(
                    SourceKind.SHELL_PROFILE,
                    profile_files,
                    lambda: self._env.profiles.remove_path_entry(name, entry),
                    "remove-entry",
                    warnings,
                )
            )

        for store in (self._env.login_agent, self._env.legacy):
            if pathlist.value_contains(record.per_source_value.get(store.kind), entry):
                contributors.append(str(store.path))
                outcomes.append(
                    self._apply(
                        store.kind,
                        [store.path],
                        lambda store=store: store.remove_path_entry(name, entry),
                        "remove-entry",
                        warnings,
                    )
                )

        if not contributors:
            warnings.append(
                f"No managed store contributes {entry} to {name}; it is likely "
                "inherited from the system or an application"
            )

        data = {
            "name": name,
            "entry": entry,
            "positions": positions,
            "contributors": contributors,
            "value": pathlist.remove_entry(current, entry),
            "previous": current or None,
            "path_like": True,
        }
        return self._report(op, data, outcomes, warnings, require_success=bool(outcomes))

    # ------------------------------------------------------------------
    # Store application helpers
    # ------------------------------------------------------------------

    def _write(self, kind: SourceKind, name: str, value: str, warnings: list[str]) -> StoreOutcome:
        store = self._env.store(kind)
        return self._apply(
            kind, store.write_targets(name), lambda: store.write(name, value), "write", warnings
        )

    def _remove(self, kind: SourceKind, name: str, warnings: list[str]) -> StoreOutcome:
        store = self._env.store(kind)
        return self._apply(
            kind, store.remove_targets(name), lambda: store.remove(name), "remove", warnings
        )

    def _apply(
        self,
        kind: SourceKind,
        targets: list[Path],
        action: Callable[[], StoreOutcome],
        action_name: str,
        warnings: list[str],
    ) -> StoreOutcome:
        """Back up every target file, then run *action*; failures become warnings."""
        backups: list[str] = []
        try:
            for path in targets:
                try:
                    backup = self._env.backup(path)
                except OSError as exc:
                    msg = f"Backup of {path} failed, not rewriting it: {exc}"
                    raise StoreWriteError(msg, detail={"path": str(path)}) from exc
                if backup is not None:
                    backups.append(str(backup))
            outcome = action()
        except StoreWriteError as exc:
            warnings.append(f"{kind}: {exc.message}")
            logger.warning("store %s failed: %s", kind, exc.message)
            return StoreOutcome(
                source=kind, action=action_name, ok=False, detail=exc.message, backups=backups
            )
        warnings.extend(outcome.warnings)
        return outcome.with_backups(backups)

    @staticmethod
    def _report(
        op: str,
        data: dict[str, Any],
        outcomes: list[StoreOutcome],
        warnings: list[str],
        *,
        require_success: bool = True,
    ) -> ServiceResult:
        payload = {**data, "outcomes": [o.model_dump(mode="json") for o in outcomes]}
        if require_success and outcomes and not any(o.ok for o in outcomes):
            return ServiceResult(
                ok=False,
                op=op,
                data=payload,
                warnings=warnings,
                error=ServiceError(
                    code=StoreWriteError.code,
                    message=f"No store accepted the change to {data.get('name')}",
                ),
            )
        return ServiceResult(ok=True, op=op, data=payload, warnings=warnings)

    # ------------------------------------------------------------------
    # Validation and prompting
    # ------------------------------------------------------------------

    def _validate_path_like(self, name: str, *, hint: str) -> str:
        name = validate_name(name)
        if not self._env.is_path_like(name):
            raise NotPathLikeError(
                f"{name} is not a PATH-like variable. {hint}", detail={"name": name}
            )
        return name

    @staticmethod
    def _ensure_managed(record: VariableRecord) -> None:
        if record.is_managed:
            return
        if record.is_inherited:
            raise NotManagedError(
                f"Variable '{record.name}' is not managed by menv",
                detail={
                    "inherited_value": record.resolved_value,
                    "hint": "It may be inherited from the system or set elsewhere",
                },
            )
        raise NotFoundError(f"Variable '{record.name}' not found", detail={"name": record.name})

    def _choose_mode(self, name: str) -> PathMode:
        if not self._interactive:
            return PathMode.APPEND
        choice = self._ask_choice(
            f"How do you want to handle the PATH-like variable {name}?", _MODE_CHOICES, "1"
        )
        return _MODE_BY_CHOICE[choice]

    def _ask_choice(self, message: str, choices: list[tuple[str, str]], default: str) -> str:
        assert self._prompter is not None
        return self._prompter.choose(message, choices, default)

    def _ask(self, message: str) -> str:
        assert self._prompter is not None
        return self._prompter.ask(message).strip()

    def _require(self, message: str) -> None:
        """Ask for confirmation when interactive; forced runs proceed."""
        if not self._interactive:
            return
        assert self._prompter is not None
        if not self._prompter.confirm(message):
            raise UserCancelled("Operation cancelled")
