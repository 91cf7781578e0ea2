"""Source kinds, variable snapshots, and per-store outcomes."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class SourceKind(StrEnum):
    """Where a variable binding can live.

    Declaration order is the probe order and the display order.
    """

    SESSION = "session"
    LOGIN_AGENT = "login-agent"
    SHELL_PROFILE = "shell-profile"
    LEGACY_DESCRIPTOR = "legacy-descriptor"
    INHERITED = "inherited"

    @property
    def managed(self) -> bool:
        return self is not SourceKind.INHERITED


SOURCE_ORDER: tuple[SourceKind, ...] = tuple(SourceKind)


def ordered(sources: frozenset[SourceKind] | set[SourceKind]) -> list[SourceKind]:
    """Return *sources* sorted into the stable display order."""
    return [kind for kind in SOURCE_ORDER if kind in sources]


class VariableRecord(BaseModel):
    """Snapshot of one variable across every store, computed per invocation."""

    model_config = {"frozen": True}

    name: str
    resolved_value: str | None = None
    sources: frozenset[SourceKind] = frozenset()
    per_source_value: dict[SourceKind, str] = Field(default_factory=dict)

    @property
    def managed(self) -> frozenset[SourceKind]:
        return frozenset(kind for kind in self.sources if kind.managed)

    @property
    def is_managed(self) -> bool:
        return bool(self.managed)

    @property
    def is_inherited(self) -> bool:
        return self.sources == frozenset({SourceKind.INHERITED})

    @property
    def ordered_sources(self) -> list[SourceKind]:
        return ordered(self.sources)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "value": self.resolved_value,
            "sources": [str(kind) for kind in self.ordered_sources],
            "per_source": {str(k): v for k, v in self.per_source_value.items()},
        }


class StoreOutcome(BaseModel):
    """Result of a single store write or removal."""

    model_config = {"frozen": True}

    source: SourceKind
    action: str
    ok: bool = True
    detail: str = ""
    paths: list[str] = Field(default_factory=list)
    backups: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    def with_backups(self, backups: list[str]) -> StoreOutcome:
        return self.model_copy(update={"backups": [*self.backups, *backups]})
