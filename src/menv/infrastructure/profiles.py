"""Shell-profile store — export declarations across several startup files.

Reads scan the POSIX profiles in sourcing priority order and then the
fish config; the first declaration found wins. Writes always land in one
canonical file, so a declaration in a higher-priority file stays in place
and shadows the new value. That shadowing is reported as a warning on the
outcome rather than silently edited.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from menv.domain.errors import StoreWriteError
from menv.domain.profile import (
    Declaration,
    Dialect,
    ProfileLine,
    declarations,
    drop_declarations,
    find_declaration,
    parse_profile,
    remove_path_entry,
    render_profile,
    set_declaration,
)
from menv.domain.types import SourceKind, StoreOutcome
from menv.infrastructure.base import VariableStore

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfileFile:
    """A candidate profile file and the grammar it is written in."""

    path: Path
    dialect: Dialect = Dialect.POSIX

    def load(self, *, for_update: bool = False) -> list[ProfileLine] | None:
        """Parsed lines, or None when the file is absent.

        Bytes that are not UTF-8 survive a load and save unchanged. An
        unreadable file reads as absent, except *for_update*, where it
        raises :class:`StoreWriteError` so the file is never overwritten.
        """
        if not self.path.is_file():
            return None
        try:
            text = self.path.read_text(encoding="utf-8", errors="surrogateescape")
        except OSError as exc:
            if for_update:
                msg = f"Cannot read {self.path}: {exc}"
                raise StoreWriteError(msg, detail={"path": str(self.path)}) from exc
            logger.debug("Cannot read profile %s: %s", self.path, exc)
            return None
        return parse_profile(text, self.dialect)

    def save(self, lines: list[ProfileLine]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                render_profile(lines), encoding="utf-8", errors="surrogateescape"
            )
        except OSError as exc:
            msg = f"Cannot write {self.path}: {exc}"
            raise StoreWriteError(msg, detail={"path": str(self.path)}) from exc
        logger.debug("Updated shell profile: %s", self.path)


@dataclass(frozen=True)
class ProfileHit:
    """A declaration together with the file it was found in."""

    file: ProfileFile
    declaration: Declaration


class ShellProfileStore(VariableStore):
    """Priority-ordered POSIX profiles plus the fish config."""

    kind = SourceKind.SHELL_PROFILE

    def __init__(self, candidates: list[Path], canonical: Path, fish: Path | None = None) -> None:
        self._posix = [ProfileFile(p) for p in candidates]
        self._canonical = ProfileFile(canonical)
        self._fish = ProfileFile(fish, Dialect.FISH) if fish is not None else None

    @property
    def canonical(self) -> Path:
        return self._canonical.path

    @property
    def files(self) -> list[ProfileFile]:
        """POSIX files in priority order, then the fish file."""
        files = list(self._posix)
        if self._fish is not None:
            files.append(self._fish)
        return files

    def _loaded(
        self, *, for_update: bool = False
    ) -> Iterator[tuple[ProfileFile, list[ProfileLine]]]:
        for pf in self.files:
            lines = pf.load(for_update=for_update)
            if lines is not None:
                yield pf, lines

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def hits(self, name: str) -> list[ProfileHit]:
        """Every declaration of *name*, in read-priority order."""
        return [
            ProfileHit(pf, decl) for pf, lines in self._loaded() for decl in declarations(lines, name)
        ]

    def first(self, name: str) -> ProfileHit | None:
        for pf, lines in self._loaded():
            decl = find_declaration(lines, name)
            if decl is not None:
                return ProfileHit(pf, decl)
        return None

    def exists(self, name: str) -> bool:
        return self.first(name) is not None

    def read(self, name: str) -> str | None:
        hit = self.first(name)
        return hit.declaration.value if hit else None

    def enumerate_names(self) -> set[str]:
        return {decl.name for _, lines in self._loaded() for decl in declarations(lines)}

    def files_mentioning(self, text: str) -> list[Path]:
        """Existing files whose raw content contains *text* anywhere."""
        found: list[Path] = []
        for pf, lines in self._loaded():
            if any(text in line.raw for line in lines):
                found.append(pf.path)
        return found

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def write_targets(self, name: str) -> list[Path]:
        return [self.canonical] if self.canonical.is_file() else []

    def remove_targets(self, name: str) -> list[Path]:
        return [pf.path for pf, lines in self._loaded() if declarations(lines, name)]

    def write(self, name: str, value: str) -> StoreOutcome:
        lines = self._canonical.load(for_update=True) or []
        updated, replaced = set_declaration(lines, name, value)
        self._canonical.save(updated)

        warnings = [
            f"{hit.file.path} also declares {name} and takes precedence over {self.canonical}"
            for hit in self._shadowing(name)
        ]
        return StoreOutcome(
            source=self.kind,
            action="write",
            detail="replaced existing export" if replaced else "appended export",
            paths=[str(self.canonical)],
            warnings=warnings,
        )

    def _shadowing(self, name: str) -> list[ProfileHit]:
        """Declarations in files read before the canonical one."""
        shadows: list[ProfileHit] = []
        for pf in self._posix:
            if pf.path == self.canonical:
                break
            lines = pf.load()
            if lines is not None:
                shadows.extend(ProfileHit(pf, d) for d in declarations(lines, name))
        return shadows

    def remove(self, name: str) -> StoreOutcome:
        touched: list[str] = []
        for pf, lines in list(self._loaded(for_update=True)):
            kept, removed = drop_declarations(lines, name)
            if removed:
                pf.save(kept)
                touched.append(str(pf.path))
        return StoreOutcome(
            source=self.kind,
            action="remove",
            detail=f"removed from {len(touched)} file(s)",
            paths=touched,
        )

    def path_entry_targets(self, name: str, entry: str) -> list[Path]:
        return [
            pf.path
            for pf, lines in self._loaded()
            if any(entry in d.path_items() for d in declarations(lines, name))
        ]

    def remove_path_entry(self, name: str, entry: str) -> StoreOutcome:
        """Strip *entry* from every declaration of *name* in every file."""
        touched: list[str] = []
        for pf, lines in list(self._loaded(for_update=True)):
            updated, changed = remove_path_entry(lines, name, entry)
            if changed:
                pf.save(updated)
                touched.append(str(pf.path))
        return StoreOutcome(
            source=self.kind,
            action="remove-entry",
            detail=f"rewrote {len(touched)} file(s)",
            paths=touched,
        )
