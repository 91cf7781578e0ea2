"""Variable name validation."""

from __future__ import annotations

import re

from menv.domain.errors import InvalidNameError

NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def is_valid_name(raw: str) -> bool:
    """Check whether *raw* is a usable environment variable name."""
    return NAME_PATTERN.fullmatch(raw) is not None


def validate_name(raw: str) -> str:
    """Return *raw* unchanged if it is a valid name, else raise :class:`InvalidNameError`."""
    if not raw:
        raise InvalidNameError("Variable name cannot be empty")
    if not is_valid_name(raw):
        raise InvalidNameError(
            f"Invalid variable name: {raw!r}. Names must start with a letter or "
            "underscore and contain only letters, numbers, and underscores.",
            detail={"name": raw},
        )
    return raw
