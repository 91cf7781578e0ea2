"""Subcommand modules for menv.

Provides register_commands() which uses deferred imports to keep
``menv --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every command, including the historical aliases.

    ``add`` and ``set`` are the same command, as are ``delete``, ``del``
    and ``remove``.
    """
    from menv.commands.delete import delete
    from menv.commands.help_cmd import help_cmd
    from menv.commands.inspect import info, test
    from menv.commands.list_cmd import list_cmd
    from menv.commands.path import add_path, analyze, remove_path
    from menv.commands.set_cmd import set_cmd

    cli.add_command(list_cmd)
    cli.add_command(set_cmd, name="add")
    cli.add_command(set_cmd, name="set")
    for alias in ("delete", "del", "remove"):
        cli.add_command(delete, name=alias)
    cli.add_command(add_path)
    cli.add_command(remove_path)
    cli.add_command(info)
    cli.add_command(test)
    cli.add_command(analyze)
    cli.add_command(help_cmd)
