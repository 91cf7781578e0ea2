"""Command: delete a variable (``del`` and ``remove`` are aliases)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from menv.commands._base import MenvCommand

if TYPE_CHECKING:
    from menv.commands._context import AppContext


@click.command(
    cls=MenvCommand,
    examples="""\
  menv delete EDITOR
  menv del JAVA_HOME
  menv -f remove EDITOR""",
)
@click.argument("name")
@click.pass_obj
def delete(app: AppContext, name: str) -> None:
    """Remove NAME from every store menv manages."""
    app.emit(app.mutations().delete_variable(name))
