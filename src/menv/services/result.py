"""Result types returned by every public service method.

The CLI is the only place that turns a result into an exit code or text.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Why an operation failed, with a stable ``code`` for scripting."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one menv operation.

    Attributes:
        ok: False only when the operation as a whole failed. A declined
            prompt and a write that failed on some stores are both ``ok``.
        op: Operation name (``"set"``, ``"remove_path"``, ``"analyze"``...).
        data: Operation payload; mutations carry per-store ``outcomes``.
        warnings: Non-fatal issues, one line each.
        error: Set when ``ok`` is False.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None

    @property
    def cancelled(self) -> bool:
        return bool(self.data.get("cancelled"))

    @property
    def outcomes(self) -> list[dict[str, Any]]:
        """Per-store outcomes of a mutation (empty for read-only ops)."""
        return list(self.data.get("outcomes", []))
