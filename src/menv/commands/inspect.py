"""Commands: per-variable diagnostics."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from menv.commands._base import MenvCommand

if TYPE_CHECKING:
    from menv.commands._context import AppContext


@click.command(
    cls=MenvCommand,
    examples="""\
  menv info EDITOR
  menv --json info PATH""",
)
@click.argument("name")
@click.pass_obj
def info(app: AppContext, name: str) -> None:
    """Show NAME in the process, the session, each profile and descriptor."""
    from menv.services.inspect import InspectService

    app.emit(InspectService(app.environment).info(name))


@click.command(
    cls=MenvCommand,
    examples="""\
  menv test EDITOR
  menv test JAVA_HOME""",
)
@click.argument("name")
@click.pass_obj
def test(app: AppContext, name: str) -> None:
    """Check whether a new terminal and new GUI apps would see NAME."""
    from menv.services.inspect import InspectService

    app.emit(InspectService(app.environment).test(name))
