"""Command: list every known variable and where it comes from."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from menv.commands._base import MenvCommand

if TYPE_CHECKING:
    from menv.commands._context import AppContext


@click.command(
    "list",
    cls=MenvCommand,
    examples="""\
  menv list
  menv -v list
  menv --json list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List variables with their value and sources (sorted by name)."""
    from menv.services.inspect import InspectService

    app.emit(InspectService(app.environment).list_variables())
