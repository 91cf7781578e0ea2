"""Root CLI group for menv with global flags and command registration."""

from __future__ import annotations

from typing import Any

import click

from menv import __version__
from menv.commands import register_commands
from menv.commands._base import HELP_OPTION_NAMES, MenvGroup
from menv.commands._context import AppContext
from menv.config.logging import bind_invocation
from menv.config.settings import MenvSettings


@click.group(
    cls=MenvGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": HELP_OPTION_NAMES},
    examples="""\
  menv list
  menv set EDITOR vim
  menv add-path PATH /opt/homebrew/bin
  menv -f delete EDITOR
  menv analyze PATH""",
)
@click.version_option(version=__version__, prog_name="menv")
@click.option(
    "-f",
    "--force",
    is_flag=True,
    help="Skip prompts and proceed. PATH-like set appends; delete removes the whole variable.",
)
@click.option("-v", "--verbose", is_flag=True, help="Debug trace and full values.")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    force: bool,
    verbose: bool,
    json_output: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """menv — manage macOS user environment variables."""
    # Only flags that were given override MENV_* env vars and the TOML file.
    flags: dict[str, Any] = {
        key: True
        for key, value in {
            "force": force,
            "verbose": verbose,
            "json_output": json_output,
            "log_json": log_json,
        }.items()
        if value
    }
    settings = MenvSettings.from_cli(config_path=config_path, **flags)
    ctx.obj = AppContext(settings)
    bind_invocation(ctx.invoked_subcommand, force=settings.force)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
