"""Inherited process environment — read-only view of ``os.environ``."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from menv.domain.errors import StoreWriteError
from menv.domain.types import SourceKind, StoreOutcome
from menv.infrastructure.base import VariableStore

if TYPE_CHECKING:
    from collections.abc import Mapping


class InheritedProcessEnvironment(VariableStore):
    """Values the running process observes from outside every managed store.

    :meth:`exists` only answers for the process itself; the resolver is
    what restricts it to names no managed store claims.
    """

    kind = SourceKind.INHERITED

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ if environ is not None else os.environ

    def read(self, name: str) -> str | None:
        value = self._environ.get(name)
        return value or None

    def exists(self, name: str) -> bool:
        return self.read(name) is not None

    def enumerate_names(self) -> set[str]:
        return set(self._environ)

    def write(self, name: str, value: str) -> StoreOutcome:
        msg = f"{name} is inherited from the parent process and cannot be written here"
        raise StoreWriteError(msg, detail={"source": str(self.kind)})

    def remove(self, name: str) -> StoreOutcome:
        msg = f"{name} is inherited from the parent process and cannot be removed here"
        raise StoreWriteError(msg, detail={"source": str(self.kind)})
