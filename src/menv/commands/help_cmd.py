"""Command: help (same output as ``menv --help``)."""

from __future__ import annotations

import click

from menv.commands._base import MenvCommand


@click.command("help", cls=MenvCommand)
@click.argument("command", required=False)
@click.pass_context
def help_cmd(ctx: click.Context, command: str | None) -> None:
    """Show help for menv or for one COMMAND."""
    root = ctx.parent
    assert root is not None
    if command is None:
        click.echo(root.get_help())
        return

    group = root.command
    assert isinstance(group, click.Group)
    sub = group.get_command(root, command)
    if sub is None:
        raise click.UsageError(f"No such command '{command}'.", ctx=ctx)
    with click.Context(sub, info_name=command, parent=root) as sub_ctx:
        click.echo(sub.get_help(sub_ctx))
