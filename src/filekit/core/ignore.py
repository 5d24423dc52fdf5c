"""Ignore-file rules (``.gitignore`` / ``.ignore``).

Each ignore file is compiled into one ``pathspec`` spec using gitignore
("gitwildmatch") syntax, and paths are matched relative to the directory
that holds the file.

Files are evaluated outermost first and, inside one directory,
``.gitignore`` before ``.ignore``.  The last pattern that matches decides,
so a deeper file can re-include (``!pattern``) what a parent excluded.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import pathspec

_logger = logging.getLogger(__name__)

IGNORE_FILENAMES: tuple[str, ...] = (".gitignore", ".ignore")


def _absolute(path: Path) -> Path:
    return path if path.is_absolute() else Path(os.path.abspath(path))


@dataclass(frozen=True)
class IgnoreFile:
    """The compiled patterns of one ignore file and the directory they apply to."""

    base: Path
    spec: pathspec.PathSpec
    source: Path | None = None

    def verdict(self, path: Path, is_dir: bool) -> bool | None:
        """``True`` ignored, ``False`` re-included, ``None`` no pattern matched."""
        try:
            rel = _absolute(path).relative_to(self.base).as_posix()
        except ValueError:
            return None
        if is_dir:
            rel += "/"
        result: bool | None = None
        for pattern in self.spec.patterns:
            if pattern.include is None:
                continue
            if pattern.match_file(rel) is not None:
                result = pattern.include
        return result


def parse_ignore_lines(
    lines: Iterable[str], base: Path, *, source: Path | None = None
) -> IgnoreFile:
    """Compile ignore-file *lines* whose patterns are relative to *base*.

    Raises ``ValueError`` for a pattern gitignore syntax does not allow.
    """
    spec = pathspec.PathSpec.from_lines(
        "gitwildmatch", (line.rstrip("\r\n") for line in lines)
    )
    return IgnoreFile(base=_absolute(base), spec=spec, source=source)


def load_ignore_rules(directory: Path) -> list[IgnoreFile]:
    """Read every ignore file in *directory* (not its parents)."""
    loaded: list[IgnoreFile] = []
    for name in IGNORE_FILENAMES:
        path = directory / name
        try:
            with open(path, "r", encoding="utf-8", errors="replace") as fh:
                loaded.append(parse_ignore_lines(fh, directory, source=path))
        except FileNotFoundError:
            continue
        except (OSError, ValueError) as exc:
            _logger.warning("%s: cannot use ignore file (%s)", path, exc)
    return loaded


def load_ancestor_rules(root: Path) -> list[IgnoreFile]:
    """Ignore files of every directory above *root*, outermost first."""
    loaded: list[IgnoreFile] = []
    for directory in reversed(_absolute(root).parents):
        loaded.extend(load_ignore_rules(directory))
    return loaded


def is_ignored(path: Path, is_dir: bool, rules: Iterable[IgnoreFile]) -> bool:
    ignored = False
    for ignore_file in rules:
        verdict = ignore_file.verdict(path, is_dir)
        if verdict is not None:
            ignored = verdict
    return ignored
