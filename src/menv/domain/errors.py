"""Error taxonomy shared by stores, services, and commands.

Every error carries a stable ``code`` so services can translate it into a
:class:`~menv.services.result.ServiceError` without string matching.
"""

from __future__ import annotations

from typing import Any


class MenvError(Exception):
    """Base class for all expected menv failures."""

    code = "MENV_ERROR"

    def __init__(self, message: str, *, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail or {}


class InvalidNameError(MenvError):
    """The variable name does not match ``[A-Za-z_][A-Za-z0-9_]*``."""

    code = "INVALID_NAME"


class NotPathLikeError(MenvError):
    """A PATH-only command was invoked on a regular variable."""

    code = "NOT_PATH_LIKE"


class NotManagedError(MenvError):
    """The variable is absent from every managed store."""

    code = "NOT_MANAGED"


class NotFoundError(MenvError):
    """The variable is absent everywhere, including the inherited environment."""

    code = "NOT_FOUND"


class StoreWriteError(MenvError):
    """A single store failed to persist a write or removal."""

    code = "STORE_WRITE_FAILED"


class UserCancelled(MenvError):
    """An interactive prompt was declined."""

    code = "CANCELLED"
