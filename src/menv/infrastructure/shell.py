"""Fresh-shell probe used by ``menv test`` and ``menv info``.

Starts ``/bin/sh`` with a minimal environment, sources the POSIX profiles
in order, and prints the variable. This shows what a new terminal would
see, independent of the environment menv itself was launched with.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_PROBE_SCRIPT = """\
name="$1"; shift
for profile in "$@"; do
    if [ -f "$profile" ]; then
        . "$profile" >/dev/null 2>&1 || true
    fi
done
printenv "$name"
"""

_BASE_PATH = "/usr/bin:/bin:/usr/sbin:/sbin"


@dataclass(frozen=True)
class ProbeResult:
    visible: bool
    value: str | None = None
    error: str | None = None


def probe_fresh_shell(
    name: str,
    profiles: list[Path],
    *,
    home: Path,
    shell: str = "/bin/sh",
    timeout: float = 10.0,
) -> ProbeResult:
    """Report whether a freshly started shell would see *name*."""
    env = {"HOME": str(home), "PATH": _BASE_PATH}
    try:
        proc = subprocess.run(
            [shell, "-c", _PROBE_SCRIPT, "menv-probe", name, *(str(p) for p in profiles)],
            capture_output=True,
            text=True,
            check=False,
            env=env,
            cwd=str(home),
            timeout=timeout,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("Fresh shell probe failed: %s", exc)
        return ProbeResult(visible=False, error=str(exc))

    value = proc.stdout.rstrip("\n")
    if proc.returncode != 0 or not value:
        return ProbeResult(visible=False)
    return ProbeResult(visible=True, value=value)
