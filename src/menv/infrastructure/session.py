"""Session store — the per-user ``launchctl`` environment.

Values set here are visible to graphical applications launched afterwards
but do not survive a reboot on their own. Every call goes through
``launchctl`` so a missing binary (non-macOS hosts) degrades reads to
"not set" and turns writes into :class:`StoreWriteError`.
"""

from __future__ import annotations

import logging
import os
import re
import subprocess

from menv.domain.errors import StoreWriteError
from menv.domain.types import SourceKind, StoreOutcome
from menv.infrastructure.base import VariableStore

logger = logging.getLogger(__name__)

_ENV_LINE = re.compile(r"^\s+(?P<name>[A-Za-z_][A-Za-z0-9_]*) => (?P<value>.*)$")


class SessionEnvironmentStore(VariableStore):
    """Reads and writes through ``launchctl getenv/setenv/unsetenv``."""

    kind = SourceKind.SESSION

    def __init__(self, launchctl: str = "/bin/launchctl", *, timeout: float = 10.0) -> None:
        self._launchctl = launchctl
        self._timeout = timeout

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def read(self, name: str) -> str | None:
        try:
            proc = self._run("getenv", name)
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("launchctl getenv %s failed: %s", name, exc)
            return None
        value = proc.stdout.rstrip("\n")
        if proc.returncode != 0 or value == "":
            return None
        return value

    def exists(self, name: str) -> bool:
        return self.read(name) is not None

    def available(self) -> bool:
        """True when the launchctl binary can be executed at all."""
        try:
            self._run("version")
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("launchctl unavailable: %s", exc)
            return False
        return True

    def enumerate_names(self) -> set[str]:
        """Names from the ``environment`` block of ``launchctl print gui/<uid>``."""
        try:
            proc = self._run("print", f"gui/{os.getuid()}")
        except (OSError, subprocess.SubprocessError, AttributeError) as exc:
            logger.debug("launchctl print failed: %s", exc)
            return set()
        if proc.returncode != 0:
            return set()

        names: set[str] = set()
        in_block = False
        for line in proc.stdout.splitlines():
            stripped = line.strip()
            if not in_block:
                in_block = stripped == "environment = {"
                continue
            if stripped == "}":
                break
            match = _ENV_LINE.match(line)
            if match:
                names.add(match.group("name"))
        return names

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def write(self, name: str, value: str) -> StoreOutcome:
        logger.debug("launchctl setenv %s", name)
        self._mutate("setenv", name, value)
        return StoreOutcome(source=self.kind, action="write", detail="set in launchctl")

    def remove(self, name: str) -> StoreOutcome:
        logger.debug("launchctl unsetenv %s", name)
        self._mutate("unsetenv", name)
        return StoreOutcome(source=self.kind, action="remove", detail="unset in launchctl")

    # ------------------------------------------------------------------
    # launchctl subprocess helpers
    # ------------------------------------------------------------------

    def _run(self, *args: str) -> subprocess.CompletedProcess[str]:
        return subprocess.run(
            [self._launchctl, *args],
            capture_output=True,
            text=True,
            check=False,
            timeout=self._timeout,
        )

    def _mutate(self, *args: str) -> None:
        try:
            proc = self._run(*args)
        except (OSError, subprocess.SubprocessError) as exc:
            msg = f"launchctl {args[0]} failed: {exc}"
            raise StoreWriteError(msg, detail={"source": str(self.kind)}) from exc
        if proc.returncode != 0:
            msg = f"launchctl {args[0]} exited {proc.returncode}: {proc.stderr.strip()}"
            raise StoreWriteError(msg, detail={"source": str(self.kind)})
