"""Indented listing of every walked entry."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

from filekit.model.entry import FilterPolicy, WalkEntry
from filekit.model.outcome import ErrorLog
from filekit.model.report import TreeReport, TreeRow

_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_size(size: int, human_readable: bool = False) -> str:
    """``format_size(1024, True) == "1.00 KB"``; plain mode is ``"1024 B"``."""
    if not human_readable:
        return f"{size} B"
    value = float(size)
    unit = 0
    while value >= 1024.0 and unit < len(_UNITS) - 1:
        value /= 1024.0
        unit += 1
    return f"{value:.2f} {_UNITS[unit]}"


class TreeOperation:
    """Lists directories and files alike, relative to the root."""

    id: str = "tree"
    files_only: bool = False

    def __init__(self, root: Path, *, default_policy: FilterPolicy | None = None):
        self.root = root
        self.default_policy = default_policy or FilterPolicy(
            include_hidden=False, respect_ignore_files=True
        )

    def display_path(self, entry: WalkEntry) -> str:
        if entry.depth == 0:
            return "."
        try:
            return entry.path.relative_to(self.root).as_posix()
        except ValueError:
            return entry.path.as_posix()

    def visit(self, entry: WalkEntry, errors: ErrorLog) -> Iterator[TreeRow]:
        yield TreeRow(
            display_path=self.display_path(entry),
            depth=entry.depth,
            is_dir=entry.is_dir,
            size=entry.size,
        )

    def collect(self, root: Path, records: Iterable[TreeRow], errors: ErrorLog) -> TreeReport:
        rows = list(records)
        return TreeReport(root=root, rows=rows, errors=list(errors.errors))


def render_row(row: TreeRow, *, human_readable: bool = False) -> str:
    size = "DIR" if row.is_dir else format_size(row.size, human_readable)
    indent = " " * (row.depth * 2)
    return f"{indent}├─ {row.display_path} ({size})"
