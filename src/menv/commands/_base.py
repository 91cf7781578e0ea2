"""Click command and group classes shared by every menv command.

Both accept ``examples=`` and turn it into an eager ``--examples`` flag,
so ``--help`` stays short. Both also accept ``-h`` for help.
"""

from __future__ import annotations

from typing import Any

import click

HELP_OPTION_NAMES = ["-h", "--help"]


def _print_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    examples = getattr(ctx.command, "examples", None) or ""
    click.echo(f"Examples for '{ctx.command_path}':\n")
    click.echo(examples.rstrip("\n"))
    ctx.exit(0)


class _ExamplesMixin:
    """Stores ``examples`` and registers the ``--examples`` flag when present."""

    examples: str | None

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if examples:
            self.params.append(  # type: ignore[attr-defined]
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=_print_examples,
                    help="Show usage examples.",
                )
            )


def _with_help_names(kwargs: dict[str, Any]) -> dict[str, Any]:
    settings = dict(kwargs.get("context_settings") or {})
    settings.setdefault("help_option_names", HELP_OPTION_NAMES)
    kwargs["context_settings"] = settings
    return kwargs


class MenvCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **_with_help_names(kwargs))
        self._init_examples(examples)


class MenvGroup(_ExamplesMixin, click.Group):
    """Group whose ``@group.command`` subcommands are :class:`MenvCommand`."""

    command_class = MenvCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **_with_help_names(kwargs))
        self._init_examples(examples)
