"""Command: set a variable (``add`` is an alias)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from menv.commands._base import MenvCommand
from menv.domain.pathlist import PathMode

if TYPE_CHECKING:
    from menv.commands._context import AppContext


@click.command(
    "set",
    cls=MenvCommand,
    examples="""\
  menv set EDITOR vim
  menv add JAVA_HOME /Library/Java/Home
  menv set PATH /opt/tools/bin
  menv set PATH /opt/tools/bin --mode prepend
  menv -f set PATH /opt/tools/bin""",
)
@click.argument("name")
@click.argument("value")
@click.option(
    "--mode",
    type=click.Choice([m.value for m in PathMode]),
    default=None,
    help="How a PATH-like value is combined (asked interactively when omitted).",
)
@click.pass_obj
def set_cmd(app: AppContext, name: str, value: str, mode: str | None) -> None:
    """Set NAME to VALUE in the session and the shell profile.

    PATH-like variables are only written to the launchctl session and the
    value is combined with the current one.
    """
    result = app.mutations().set_variable(
        name, value, mode=PathMode(mode) if mode else None
    )
    app.emit(result)
