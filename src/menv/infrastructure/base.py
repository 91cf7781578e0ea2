"""Common contract for every backing store.

Stores answer questions about one kind of binding and perform the
writes. They never prompt, never back up files themselves, and raise
:class:`~menv.domain.errors.StoreWriteError` when a write fails. The
coordinator asks :meth:`VariableStore.write_targets` /
:meth:`VariableStore.remove_targets` which existing files a mutation
would rewrite so it can back them up first.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from menv.domain.types import SourceKind, StoreOutcome


class VariableStore(ABC):
    """One place where a variable binding can live."""

    kind: SourceKind

    @abstractmethod
    def exists(self, name: str) -> bool: ...

    @abstractmethod
    def read(self, name: str) -> str | None: ...

    @abstractmethod
    def write(self, name: str, value: str) -> StoreOutcome: ...

    @abstractmethod
    def remove(self, name: str) -> StoreOutcome: ...

    @abstractmethod
    def enumerate_names(self) -> set[str]:
        """Best-effort inventory of every name this store declares."""

    def write_targets(self, name: str) -> list[Path]:
        return []

    def remove_targets(self, name: str) -> list[Path]:
        return []
