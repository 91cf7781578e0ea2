"""Config file discovery.

Looks for ``menv.toml`` in ``$MENV_CONFIG`` first, then under the user's
XDG config directory (``~/.config/menv/menv.toml``).
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "menv.toml"
CONFIG_ENV_VAR = "MENV_CONFIG"


def default_config_path(home: Path) -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else home / ".config"
    return base / "menv" / CONFIG_FILENAME


def find_config(home: Path | None = None) -> Path | None:
    """Return the config file to load, or None if there is none.

    ``$MENV_CONFIG`` wins when set; a dangling value disables discovery.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    candidate = default_config_path(home or Path.home())
    if candidate.is_file():
        return candidate
    return None
