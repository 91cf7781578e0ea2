"""BaseService — foundation for all menv services.

Every service receives an :class:`Environment` at construction time. The
environment owns the stores; services own the orchestration and turn
:class:`~menv.domain.errors.MenvError` into a failed :class:`ServiceResult`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from menv.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from menv.domain.errors import MenvError, UserCancelled
    from menv.infrastructure.environment import Environment

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class MutationCoordinator(BaseService):
            def set_variable(self, name: str, value: str) -> ServiceResult:
                try:
                    ...
                except MenvError as exc:
                    return self._failure("set", exc)
    """

    def __init__(self, env: Environment) -> None:
        self._env = env

    @staticmethod
    def _failure(op: str, exc: MenvError) -> ServiceResult:
        logger.debug("%s failed: %s (%s)", op, exc.message, exc.code)
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=exc.code, message=exc.message, detail=exc.detail),
        )

    @staticmethod
    def _cancelled(op: str, exc: UserCancelled, warnings: list[str] | None = None) -> ServiceResult:
        return ServiceResult(
            ok=True,
            op=op,
            data={"cancelled": True, "reason": exc.message},
            warnings=warnings or [],
        )
