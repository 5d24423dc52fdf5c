"""Operation records and the reports assembled from them.

Every report has a ``to_dict()`` shaped to satisfy the matching schema in
``filekit/data/schemas/``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from filekit.model import ReplaceAction
from filekit.model.outcome import EntryError


@dataclass(frozen=True, slots=True)
class MatchSpan:
    """Half-open ``[start, end)`` range of one match inside a line."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid span [{self.start}, {self.end})")


@dataclass(frozen=True, slots=True)
class Segment:
    """A run of line text, flagged when it is part of a match."""

    text: str
    matched: bool


def split_segments(line: str, spans: tuple[MatchSpan, ...] | list[MatchSpan]) -> list[Segment]:
    """Cut *line* into alternating plain and matched segments.

    Concatenating ``seg.text`` for every segment gives back *line*.
    Empty plain runs are dropped; empty matches are kept so a caller can
    still see them.
    """
    out: list[Segment] = []
    last = 0
    for span in spans:
        if span.start > last:
            out.append(Segment(line[last:span.start], False))
        out.append(Segment(line[span.start:span.end], True))
        last = span.end
    if last < len(line):
        out.append(Segment(line[last:], False))
    return out


# ── search ──────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class SearchHit:
    """A line that matched, with every match span on it."""

    path: Path
    line_number: int
    line: str
    spans: tuple[MatchSpan, ...]

    @property
    def segments(self) -> list[Segment]:
        return split_segments(self.line, self.spans)

    def to_dict(self) -> dict:
        return {
            "path": self.path.as_posix(),
            "line_number": self.line_number,
            "line": self.line,
            "spans": [[s.start, s.end] for s in self.spans],
        }


@dataclass(slots=True)
class SearchReport:
    root: Path
    filename_pattern: str
    content_pattern: str
    hits: list[SearchHit] = field(default_factory=list)
    errors: list[EntryError] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "schema_version": "search_report_v1",
            "root": self.root.as_posix(),
            "filename_pattern": self.filename_pattern,
            "content_pattern": self.content_pattern,
            "hits": [h.to_dict() for h in self.hits],
            "errors": [e.to_dict() for e in self.errors],
        }


# ── count ───────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class FileCount:
    path: Path
    count: int


@dataclass(slots=True)
class CountReport:
    """Per-file matching-line counts plus the grand total.

    Files without matches never appear in ``per_file``; ``total`` is
    always the sum of ``per_file`` values.
    """

    root: Path
    pattern: str
    per_file: dict[Path, int] = field(default_factory=dict)
    errors: list[EntryError] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(self.per_file.values())

    def add(self, record: FileCount) -> None:
        if record.count > 0:
            self.per_file[record.path] = self.per_file.get(record.path, 0) + record.count

    def to_dict(self) -> dict:
        return {
            "schema_version": "count_report_v1",
            "root": self.root.as_posix(),
            "pattern": self.pattern,
            "files": [
                {"path": p.as_posix(), "count": c} for p, c in self.per_file.items()
            ],
            "total": self.total,
            "errors": [e.to_dict() for e in self.errors],
        }


# ── replace ─────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class FileAction:
    """What happened to one file during a replace run."""

    path: Path
    action: ReplaceAction
    occurrences: int = 0
    backup_path: Path | None = None
    detail: str = ""

    def to_dict(self) -> dict:
        d: dict = {
            "path": self.path.as_posix(),
            "action": self.action.value,
            "occurrences": self.occurrences,
        }
        if self.backup_path is not None:
            d["backup_path"] = self.backup_path.as_posix()
        if self.detail:
            d["detail"] = self.detail
        return d


@dataclass(slots=True)
class ReplaceReport:
    root: Path
    old: str
    new: str
    dry_run: bool = False
    backup: bool = False
    actions: list[FileAction] = field(default_factory=list)
    errors: list[EntryError] = field(default_factory=list)

    def by_path(self) -> dict[Path, ReplaceAction]:
        return {a.path: a.action for a in self.actions}

    def with_action(self, action: ReplaceAction) -> list[FileAction]:
        return [a for a in self.actions if a.action is action]

    def to_dict(self) -> dict:
        return {
            "schema_version": "replace_report_v1",
            "root": self.root.as_posix(),
            "old": self.old,
            "new": self.new,
            "dry_run": self.dry_run,
            "backup": self.backup,
            "actions": [a.to_dict() for a in self.actions],
            "errors": [e.to_dict() for e in self.errors],
        }


# ── tree ────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class TreeRow:
    display_path: str
    depth: int
    is_dir: bool
    size: int

    def to_dict(self) -> dict:
        return {
            "path": self.display_path,
            "depth": self.depth,
            "is_dir": self.is_dir,
            "size": self.size,
        }


@dataclass(slots=True)
class TreeReport:
    root: Path
    rows: list[TreeRow] = field(default_factory=list)
    errors: list[EntryError] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "schema_version": "tree_report_v1",
            "root": self.root.as_posix(),
            "rows": [r.to_dict() for r in self.rows],
            "errors": [e.to_dict() for e in self.errors],
        }
