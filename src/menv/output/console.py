"""Rich Console factory and theme for menv output.

Consoles render into a StringIO buffer so renderers keep a plain
``render_result() -> str`` contract. Rich drops color codes on its own when
the output is not a terminal (pipes, CliRunner).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

MENV_THEME = Theme(
    {
        "menv.ok": "bold green",
        "menv.error": "bold red",
        "menv.warning": "bold yellow",
        "menv.op": "bold cyan",
        "menv.key": "dim",
        "menv.name": "bold blue",
        "menv.path": "dim",
        "menv.value": "none",
        "menv.missing": "red",
        "menv.source.session": "green",
        "menv.source.login-agent": "magenta",
        "menv.source.shell-profile": "cyan",
        "menv.source.legacy-descriptor": "yellow",
        "menv.source.inherited": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (keeps test output stable).
    """
    return Console(
        file=StringIO(),
        theme=MENV_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_source(source: str) -> str:
    """Return the Rich style name for a source kind."""
    return f"menv.source.{source}" if source else ""
