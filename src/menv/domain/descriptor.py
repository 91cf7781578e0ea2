"""Login-agent descriptor format (property lists).

A launch-agent descriptor re-applies a session binding at login by
running ``launchctl setenv NAME VALUE``::

    <dict>
        <key>Label</key>            <string>environment.variables</string>
        <key>ProgramArguments</key> <array>
            <string>/bin/launchctl</string> <string>setenv</string>
            <string>NAME</string>           <string>VALUE</string>
        </array>
        <key>RunAtLoad</key>        <true/>
    </dict>

The legacy ``~/.MacOSX/environment.plist`` is a flat ``{NAME: VALUE}``
dictionary. :func:`bindings_from_plist` understands both shapes.
"""

from __future__ import annotations

import plistlib
from enum import StrEnum
from typing import Any
from xml.parsers.expat import ExpatError

DEFAULT_LABEL = "environment.variables"
DEFAULT_LAUNCHCTL = "/bin/launchctl"

_AGENT_KEYS = frozenset({"Label", "ProgramArguments", "RunAtLoad"})


class DescriptorShape(StrEnum):
    AGENT = "agent"
    FLAT = "flat"


def build_agent_descriptor(
    name: str,
    value: str,
    *,
    label: str = DEFAULT_LABEL,
    launchctl: str = DEFAULT_LAUNCHCTL,
) -> dict[str, Any]:
    """A descriptor holding exactly one ``setenv`` binding."""
    return {
        "Label": label,
        "ProgramArguments": [launchctl, "setenv", name, value],
        "RunAtLoad": True,
    }


def shape_of(data: dict[str, Any]) -> DescriptorShape:
    if "ProgramArguments" in data or "Label" in data:
        return DescriptorShape.AGENT
    return DescriptorShape.FLAT


def bindings_from_plist(data: dict[str, Any]) -> dict[str, str]:
    """Extract ``{NAME: VALUE}`` bindings from either descriptor shape."""
    if shape_of(data) is DescriptorShape.AGENT:
        args = data.get("ProgramArguments") or []
        bindings: dict[str, str] = {}
        # launchctl setenv accepts repeated NAME VALUE pairs
        if len(args) >= 4 and str(args[1]) == "setenv":
            pairs = [str(a) for a in args[2:]]
            for i in range(0, len(pairs) - 1, 2):
                bindings[pairs[i]] = pairs[i + 1]
        return bindings
    return {str(k): str(v) for k, v in data.items() if k not in _AGENT_KEYS and _is_scalar(v)}


def plist_with_bindings(
    original: dict[str, Any], bindings: dict[str, str]
) -> dict[str, Any]:
    """Rebuild *original* so it carries exactly *bindings*, keeping its shape."""
    if shape_of(original) is DescriptorShape.FLAT:
        extra = {k: v for k, v in original.items() if not _is_scalar(v)}
        return {**extra, **bindings}
    args = list(original.get("ProgramArguments") or [DEFAULT_LAUNCHCTL, "setenv"])
    head = args[:2] if len(args) >= 2 else [DEFAULT_LAUNCHCTL, "setenv"]
    flat: list[str] = []
    for key, val in bindings.items():
        flat.extend([key, val])
    return {**original, "ProgramArguments": [*head, *flat]}


def dumps(data: dict[str, Any]) -> bytes:
    return plistlib.dumps(data, fmt=plistlib.FMT_XML)


def loads(raw: bytes) -> dict[str, Any]:
    try:
        data = plistlib.loads(raw)
    except (plistlib.InvalidFileException, ExpatError) as exc:
        msg = f"unreadable descriptor: {exc}"
        raise ValueError(msg) from exc
    if not isinstance(data, dict):
        msg = "descriptor root is not a dictionary"
        raise ValueError(msg)
    return data


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool))
