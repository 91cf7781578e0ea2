"""Commands: edit and analyze PATH-like variables."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from menv.commands._base import MenvCommand

if TYPE_CHECKING:
    from menv.commands._context import AppContext


@click.command(
    "add-path",
    cls=MenvCommand,
    examples="""\
  menv add-path PATH /opt/homebrew/bin
  menv add-path PYTHONPATH ~/lib/python
  menv -f add-path PATH /usr/local/bin""",
)
@click.argument("name")
@click.argument("entry")
@click.pass_obj
def add_path(app: AppContext, name: str, entry: str) -> None:
    """Append ENTRY to the PATH-like variable NAME."""
    app.emit(app.mutations().add_path(name, entry))


@click.command(
    "remove-path",
    cls=MenvCommand,
    examples="""\
  menv remove-path PATH /opt/old/bin
  menv -f remove-path LIBRARY_PATH /usr/local/lib""",
)
@click.argument("name")
@click.argument("entry")
@click.pass_obj
def remove_path(app: AppContext, name: str, entry: str) -> None:
    """Remove every occurrence of ENTRY from NAME in every store that has it."""
    app.emit(app.mutations().remove_path(name, entry))


@click.command(
    cls=MenvCommand,
    examples="""\
  menv analyze PATH
  menv --json analyze MANPATH""",
)
@click.argument("name")
@click.pass_obj
def analyze(app: AppContext, name: str) -> None:
    """Show duplicates, empty entries and missing directories in NAME."""
    from menv.services.inspect import InspectService

    app.emit(InspectService(app.environment).analyze(name))
