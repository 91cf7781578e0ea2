"""InspectService — read-only reporting: list, info, test, analyze."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from menv.domain import pathlist
from menv.domain.errors import MenvError, NotFoundError, NotPathLikeError
from menv.domain.names import validate_name
from menv.domain.types import SourceKind
from menv.infrastructure.shell import probe_fresh_shell
from menv.services.base import BaseService
from menv.services.resolver import VariableResolver
from menv.services.result import ServiceResult

if TYPE_CHECKING:
    from menv.infrastructure.environment import Environment
    from menv.infrastructure.shell import ProbeResult

logger = logging.getLogger(__name__)


class InspectService(BaseService):
    """Reports on variables without touching any store."""

    def __init__(self, env: Environment) -> None:
        super().__init__(env)
        self._resolver = VariableResolver(env)

    def list_variables(self) -> ServiceResult:
        """Every known variable with its resolved value and sources."""
        warnings = self._availability_warnings()
        records = self._resolver.resolve_all()
        managed = sum(1 for r in records if r.is_managed)
        rows = [r.to_dict() for r in records]
        return ServiceResult(
            ok=True,
            op="list",
            data={
                "items": rows,
                "summary": {
                    "total": len(rows),
                    "managed": managed,
                    "inherited": len(rows) - managed,
                },
            },
            warnings=warnings,
        )

    def info(self, name: str) -> ServiceResult:
        """Per-store detail for *name* plus what a fresh shell would see."""
        op = "info"
        try:
            name = validate_name(name)
        except MenvError as exc:
            return self._failure(op, exc)

        warnings = self._availability_warnings()
        record = self._resolver.resolve(name)
        profiles = [
            {
                "path": str(hit.file.path),
                "value": hit.declaration.value,
                "dialect": str(hit.file.dialect),
            }
            for hit in self._env.profiles.hits(name)
        ]
        descriptors = {
            str(store.kind): {"path": str(store.path), "value": store.read(name)}
            for store in (self._env.login_agent, self._env.legacy)
        }
        probe = self._probe(name)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "name": name,
                "path_like": self._env.is_path_like(name),
                "value": record.resolved_value,
                "sources": [str(kind) for kind in record.ordered_sources],
                "process": self._env.inherited.read(name),
                "session": record.per_source_value.get(SourceKind.SESSION),
                "profiles": profiles,
                "descriptors": descriptors,
                "fresh_shell": _probe_dict(probe),
            },
            warnings=warnings,
        )

    def test(self, name: str) -> ServiceResult:
        """Check visibility in a new terminal and in the session store."""
        op = "test"
        try:
            name = validate_name(name)
        except MenvError as exc:
            return self._failure(op, exc)

        warnings: list[str] = []
        probe = self._probe(name)
        if probe.error:
            warnings.append(f"Could not start a fresh shell: {probe.error}")
        elif not probe.visible:
            warnings.append(f"{name} is not visible in a new terminal")

        session = self._env.session.read(name)
        if session is None:
            warnings.append(f"{name} is not set in the launchctl session")

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "name": name,
                "fresh_shell": _probe_dict(probe),
                "session": {"visible": session is not None, "value": session},
            },
            warnings=warnings,
        )

    def analyze(self, name: str) -> ServiceResult:
        """Composition report for a PATH-like variable."""
        op = "analyze"
        try:
            name = validate_name(name)
            if not self._env.is_path_like(name):
                raise NotPathLikeError(
                    f"{name} is not a PATH-like variable", detail={"name": name}
                )
            record = self._resolver.resolve(name)
            value = self._resolver.live_value(record) or ""
            if not value:
                raise NotFoundError(f"{name} is not set or empty", detail={"name": name})
        except MenvError as exc:
            return self._failure(op, exc)

        entries = pathlist.parse(value)
        summary = pathlist.analyze(entries)
        duplicates = [
            {
                "entry": text,
                "positions": positions,
                "contributors": self._contributors(name, text, record.per_source_value),
            }
            for text, positions in summary.duplicate_groups.items()
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "name": name,
                "value": value,
                "entries": pathlist.entry_rows(entries),
                "summary": summary.model_dump(exclude={"duplicate_groups"}),
                "duplicates": duplicates,
                "potential_sources": self._potential_sources(name, record.per_source_value),
                "recommendations": summary.recommendations(),
                "clean": summary.is_clean,
            },
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _contributors(
        self, name: str, entry: str, per_source: dict[SourceKind, str]
    ) -> list[str]:
        found: list[str] = []
        if pathlist.value_contains(per_source.get(SourceKind.SESSION), entry):
            found.append(str(SourceKind.SESSION))
        found.extend(str(p) for p in self._env.profiles.path_entry_targets(name, entry))
        for store in (self._env.login_agent, self._env.legacy):
            if pathlist.value_contains(per_source.get(store.kind), entry):
                found.append(str(store.path))
        return found

    def _potential_sources(self, name: str, per_source: dict[SourceKind, str]) -> list[str]:
        sources: list[str] = []
        if SourceKind.SESSION in per_source:
            sources.append(str(SourceKind.SESSION))
        sources.extend(str(p) for p in self._env.profiles.files_mentioning(name))
        for store in (self._env.login_agent, self._env.legacy):
            if store.kind in per_source:
                sources.append(str(store.path))
        return sources

    def _probe(self, name: str) -> ProbeResult:
        settings = self._env.settings
        return probe_fresh_shell(
            name,
            [settings.resolve(p) for p in settings.probe.profiles],
            home=settings.home,
            shell=settings.probe.shell,
            timeout=settings.probe.timeout,
        )

    def _availability_warnings(self) -> list[str]:
        if self._env.session.available():
            return []
        launchctl = self._env.settings.session.launchctl
        logger.debug("session store skipped, %s unavailable", launchctl)
        return [f"launchctl not available at {launchctl}; session values are not shown"]


def _probe_dict(probe: ProbeResult) -> dict[str, Any]:
    return {"visible": probe.visible, "value": probe.value, "error": probe.error}
