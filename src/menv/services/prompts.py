"""Prompter protocol — how services ask the operator questions.

Services only prompt when running interactively; ``--force`` takes the
documented non-interactive path in the service itself, so a prompter is
never consulted in forced mode.
"""

from __future__ import annotations

from typing import Protocol


class Prompter(Protocol):
    def choose(self, message: str, choices: list[tuple[str, str]], default: str) -> str:
        """Pick one key from ``(key, label)`` *choices*."""
        ...

    def confirm(self, message: str) -> bool: ...

    def ask(self, message: str) -> str: ...

