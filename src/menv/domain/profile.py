"""Shell-profile grammar: parse, edit, and render export declarations.

A profile file is parsed into an ordered list of :class:`ProfileLine`,
each holding the raw text and, when the line declares an exported
variable, a parsed :class:`Declaration`. Edits operate on that list and
replace whole lines, so unrelated content and ordering survive untouched.

Two dialects are understood:

- POSIX (``sh``/``bash``/``zsh``): ``export NAME=VALUE`` with optional
  single or double quotes and an optional trailing comment.
- fish: ``set --export NAME VALUE...`` (also ``set -x`` / ``set -gx``).

Only the POSIX form is ever emitted for new declarations.
"""

from __future__ import annotations

import re
import shlex
from dataclasses import dataclass, replace
from enum import StrEnum

from menv.domain.pathlist import SEPARATOR, split_value


class Dialect(StrEnum):
    POSIX = "posix"
    FISH = "fish"


_POSIX_DECL = re.compile(r"^(?P<prefix>\s*export\s+(?P<name>[A-Za-z_][A-Za-z0-9_]*)=)(?P<rest>.*)$")
_FISH_DECL = re.compile(
    r"^(?P<prefix>\s*set\s+(?P<flags>(?:-{1,2}[A-Za-z-]+\s+)+)"
    r"(?P<name>[A-Za-z_][A-Za-z0-9_]*))(?P<rest>(?:\s.*)?)$"
)
_DQ_ESCAPABLE = frozenset('"\\$`')
_NEEDS_QUOTES = re.compile(r"[\s#;&|<>()'\"]")
_FISH_BARE = re.compile(r"^[\w@%+=:,./$~{}-]+$")


@dataclass(frozen=True)
class Declaration:
    """An exported variable declared on one profile line."""

    name: str
    value: str
    dialect: Dialect
    prefix: str
    quote: str = ""
    suffix: str = ""
    items: tuple[str, ...] = ()

    def path_items(self) -> list[str]:
        """Entries of a PATH-like declaration (fish lists or colon-joined text)."""
        if self.dialect is Dialect.FISH:
            entries: list[str] = []
            for item in self.items:
                entries.extend(split_value(item))
            return entries
        return split_value(self.value)


@dataclass(frozen=True)
class ProfileLine:
    raw: str
    declaration: Declaration | None = None


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _parse_posix_value(rest: str) -> tuple[str, str, str]:
    """Split the text after ``NAME=`` into ``(value, quote, suffix)``."""
    if rest.startswith('"'):
        chars: list[str] = []
        i = 1
        while i < len(rest):
            ch = rest[i]
            if ch == "\\" and i + 1 < len(rest):
                nxt = rest[i + 1]
                chars.append(nxt if nxt in _DQ_ESCAPABLE else ch + nxt)
                i += 2
                continue
            if ch == '"':
                return "".join(chars), '"', rest[i + 1 :]
            chars.append(ch)
            i += 1
        # Unterminated: multi-line values are not supported, keep what we saw.
        return "".join(chars), '"', ""
    if rest.startswith("'"):
        end = rest.find("'", 1)
        if end == -1:
            return rest[1:], "'", ""
        return rest[1:end], "'", rest[end + 1 :]
    match = re.match(r"(\S*)(.*)$", rest)
    assert match is not None
    return match.group(1), "", match.group(2)


def _is_export_flag(flags: str) -> bool:
    for flag in flags.split():
        if flag == "--export":
            return True
        if not flag.startswith("--") and "x" in flag[1:]:
            return True
    return False


def _fish_items(rest: str) -> tuple[str, ...]:
    text = rest.split(" #", 1)[0].strip()
    if not text:
        return ()
    try:
        return tuple(shlex.split(text, comments=False))
    except ValueError:
        return tuple(text.split())


def parse_line(raw: str, dialect: Dialect = Dialect.POSIX) -> ProfileLine:
    """Parse one line; non-declarations keep ``declaration=None``."""
    if dialect is Dialect.FISH:
        match = _FISH_DECL.match(raw)
        if match is None or not _is_export_flag(match.group("flags")):
            return ProfileLine(raw)
        items = _fish_items(match.group("rest"))
        decl = Declaration(
            name=match.group("name"),
            value=" ".join(items),
            dialect=dialect,
            prefix=match.group("prefix"),
            items=items,
        )
        return ProfileLine(raw, decl)

    match = _POSIX_DECL.match(raw)
    if match is None:
        return ProfileLine(raw)
    value, quote, suffix = _parse_posix_value(match.group("rest"))
    decl = Declaration(
        name=match.group("name"),
        value=value,
        dialect=dialect,
        prefix=match.group("prefix"),
        quote=quote,
        suffix=suffix.rstrip(),
    )
    return ProfileLine(raw, decl)


def parse_profile(text: str, dialect: Dialect = Dialect.POSIX) -> list[ProfileLine]:
    return [parse_line(raw, dialect) for raw in text.splitlines()]


def render_profile(lines: list[ProfileLine]) -> str:
    if not lines:
        return ""
    return "\n".join(line.raw for line in lines) + "\n"


def declarations(lines: list[ProfileLine], name: str | None = None) -> list[Declaration]:
    """All declarations in file order, optionally restricted to *name*."""
    return [
        line.declaration
        for line in lines
        if line.declaration is not None and (name is None or line.declaration.name == name)
    ]


def find_declaration(lines: list[ProfileLine], name: str) -> Declaration | None:
    found = declarations(lines, name)
    return found[0] if found else None


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def quote_posix(value: str, quote: str = '"') -> str:
    """Quote *value* for a POSIX export, keeping ``$VAR`` expansions live."""
    if quote == "'" and "'" not in value:
        return f"'{value}'"
    if quote == "" and value and not _NEEDS_QUOTES.search(value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def export_line(name: str, value: str) -> str:
    """The canonical line menv writes for a new declaration."""
    return f"export {name}={quote_posix(value)}"


def _quote_fish(item: str) -> str:
    """Leave plain words and $VAR references bare; quote anything else."""
    return item if _FISH_BARE.match(item) else shlex.quote(item)


def _rewrite(decl: Declaration, value: str, items: tuple[str, ...] = ()) -> ProfileLine:
    if decl.dialect is Dialect.FISH:
        rendered = " ".join(_quote_fish(item) for item in items)
        raw = f"{decl.prefix} {rendered}" if rendered else decl.prefix
        return ProfileLine(raw, replace(decl, value=" ".join(items), items=items))
    raw = f"{decl.prefix}{quote_posix(value, decl.quote)}{decl.suffix}"
    return ProfileLine(raw, replace(decl, value=value))


# ---------------------------------------------------------------------------
# Edits
# ---------------------------------------------------------------------------


def set_declaration(lines: list[ProfileLine], name: str, value: str) -> tuple[list[ProfileLine], bool]:
    """Declare ``name=value`` once, replacing the first existing declaration.

    Later duplicate declarations of *name* are dropped. Returns the new
    lines and whether an existing declaration was replaced in place.
    """
    result: list[ProfileLine] = []
    replaced = False
    new_line = ProfileLine(
        export_line(name, value),
        Declaration(name=name, value=value, dialect=Dialect.POSIX, prefix=f"export {name}=", quote='"'),
    )
    for line in lines:
        decl = line.declaration
        if decl is not None and decl.name == name:
            if not replaced:
                result.append(new_line)
                replaced = True
            continue
        result.append(line)
    if not replaced:
        result.append(new_line)
    return result, replaced


def drop_declarations(lines: list[ProfileLine], name: str) -> tuple[list[ProfileLine], int]:
    """Remove every declaration of *name*; returns new lines and count removed."""
    kept = [line for line in lines if line.declaration is None or line.declaration.name != name]
    return kept, len(lines) - len(kept)


def remove_path_entry(
    lines: list[ProfileLine], name: str, entry: str
) -> tuple[list[ProfileLine], int]:
    """Strip *entry* from every declaration of *name* that lists it.

    Returns the new lines and the number of declarations rewritten.
    """
    result: list[ProfileLine] = []
    changed = 0
    for line in lines:
        decl = line.declaration
        if decl is None or decl.name != name or entry not in decl.path_items():
            result.append(line)
            continue
        changed += 1
        if decl.dialect is Dialect.FISH:
            items: list[str] = []
            for item in decl.items:
                parts = split_value(item)
                if entry in parts:
                    kept = [p for p in parts if p != entry]
                    if kept:
                        items.append(SEPARATOR.join(kept))
                else:
                    items.append(item)
            result.append(_rewrite(decl, "", tuple(items)))
        else:
            kept_value = SEPARATOR.join(p for p in split_value(decl.value) if p != entry)
            result.append(_rewrite(decl, kept_value))
    return result, changed
