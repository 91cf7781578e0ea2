"""structlog configuration for menv.

Every record, whether it comes from ``structlog.get_logger`` or from a
plain ``logging.getLogger(__name__)`` in a store or service, is rendered by
one stderr handler:

- console (default): colored when stderr is a terminal
- JSON lines (``--log-json``)

The invoked subcommand is bound as context so each line says which
command produced it.
"""

from __future__ import annotations

import logging
import sys

import structlog

_PACKAGE_LOGGER = "menv"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route structlog and stdlib logging through a single stderr handler.

    Args:
        verbose: DEBUG for ``menv.*`` loggers (subprocess calls, file
            rewrites, backups); WARNING otherwise.
        log_json: Emit JSON lines instead of console output.
    """
    shared = _shared_processors()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)
    logging.getLogger(_PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)


def bind_invocation(command: str | None, *, force: bool) -> None:
    """Attach the subcommand name and prompt mode to every later log line."""
    structlog.contextvars.clear_contextvars()
    if command:
        structlog.contextvars.bind_contextvars(command=command, force=force)
