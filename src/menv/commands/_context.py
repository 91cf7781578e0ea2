"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy Environment construction, the prompter
used by interactive flows, and centralized result emission (stdout/stderr
routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from menv.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from menv.config.settings import MenvSettings
    from menv.infrastructure.environment import Environment
    from menv.services.mutation import MutationCoordinator
    from menv.services.prompts import Prompter
    from menv.services.result import ServiceResult


class ClickPrompter:
    """Prompter backed by ``click.prompt`` / ``click.confirm`` on the terminal."""

    def choose(self, message: str, choices: list[tuple[str, str]], default: str) -> str:
        click.echo(message, err=True)
        for key, label in choices:
            click.echo(f"  {key}) {label}", err=True)
        return click.prompt(
            "Choose",
            type=click.Choice([key for key, _ in choices]),
            default=default,
            err=True,
        )

    def confirm(self, message: str) -> bool:
        return click.confirm(message, default=False, err=True)

    def ask(self, message: str) -> str:
        return click.prompt(message, default="", show_default=False, err=True)


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The environment is built lazily on first use so ``--help`` and
    ``--version`` never probe any store.
    """

    def __init__(self, settings: MenvSettings, *, prompter: Prompter | None = None) -> None:
        self.settings = settings
        self._environment: Environment | None = None
        self._prompter = prompter

        from menv.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def environment(self) -> Environment:
        """The store bundle (created lazily on first access)."""
        if self._environment is None:
            from menv.infrastructure.environment import Environment

            self._environment = Environment.from_settings(self.settings)
        return self._environment

    @property
    def prompter(self) -> Prompter | None:
        """None under ``--force``; every prompt then takes its forced default."""
        if self.settings.force:
            return None
        if self._prompter is None:
            self._prompter = ClickPrompter()
        return self._prompter

    def mutations(self) -> MutationCoordinator:
        """A coordinator that prompts on the terminal unless forced."""
        from menv.services import mutation

        prompter = self.prompter
        return mutation.MutationCoordinator(
            self.environment, prompter, interactive=prompter is not None
        )

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``, including cancellation): writes to stdout.
          Warnings go to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
            click.echo(output, err=True)
            raise SystemExit(1)
