"""Rich/JSON output selection.

The CLI renders ServiceResult for humans (Rich tables and status lines) or
for machines (``--json``). This module only picks the mode.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from menv.services.result import ServiceResult


class OutputSettings(BaseModel):
    """Output knobs taken from :class:`~menv.config.settings.MenvSettings`."""

    model_config = {"frozen": True}

    json_output: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)

    from menv.output.renderers import render_result

    return render_result(result, verbose=settings.verbose)
