"""VariableResolver — one coherent view of a variable across every store.

Each :meth:`VariableResolver.resolve` call is an independent, read-only
snapshot; nothing is cached between calls.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from menv.domain.names import is_valid_name
from menv.domain.types import SourceKind, VariableRecord

if TYPE_CHECKING:
    from menv.infrastructure.environment import Environment

logger = logging.getLogger(__name__)

# First non-empty value in this order is displayed.
VALUE_PRECEDENCE: tuple[SourceKind, ...] = (
    SourceKind.SESSION,
    SourceKind.LOGIN_AGENT,
    SourceKind.SHELL_PROFILE,
)


class VariableResolver:
    """Computes :class:`VariableRecord` snapshots from an :class:`Environment`."""

    def __init__(self, env: Environment) -> None:
        self._env = env

    def resolve(self, name: str) -> VariableRecord:
        per_source: dict[SourceKind, str] = {}
        for store in self._env.managed_stores:
            value = store.read(name)
            if value is not None:
                per_source[store.kind] = value

        process_value = self._env.inherited.read(name)
        if not per_source:
            if process_value is None:
                return VariableRecord(name=name)
            return VariableRecord(
                name=name,
                resolved_value=process_value,
                sources=frozenset({SourceKind.INHERITED}),
                per_source_value={SourceKind.INHERITED: process_value},
            )

        resolved = next(
            (per_source[kind] for kind in VALUE_PRECEDENCE if per_source.get(kind)),
            process_value,
        )
        record = VariableRecord(
            name=name,
            resolved_value=resolved,
            sources=frozenset(per_source),
            per_source_value=per_source,
        )
        logger.debug("resolved %s from %s", name, [str(k) for k in record.ordered_sources])
        return record

    def live_value(self, record: VariableRecord) -> str | None:
        """The value a running program sees: session store, else the process.

        Profile and descriptor declarations are unexpanded source text
        (``$PATH``, ``$HOME``) and are never used here.
        """
        session = record.per_source_value.get(SourceKind.SESSION)
        if session:
            return session
        return self._env.inherited.read(record.name)

    def inventory(self) -> set[str]:
        """Every valid name any store (including the process) knows about."""
        names: set[str] = set(self._env.inherited.enumerate_names())
        for store in self._env.managed_stores:
            names |= store.enumerate_names()
        return {name for name in names if is_valid_name(name)}

    def resolve_all(self) -> list[VariableRecord]:
        """Resolve every inventoried name, sorted by name."""
        records = (self.resolve(name) for name in sorted(self.inventory()))
        return [record for record in records if record.sources]
