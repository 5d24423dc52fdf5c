"""Walk-level data: the filter policy and the entries the walker yields."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path


@dataclass(frozen=True, slots=True)
class FilterPolicy:
    """Which entries a traversal lets through.

    Immutable for the duration of one walk.
    """

    include_hidden: bool = False
    max_depth: int | None = None
    respect_ignore_files: bool = False

    def with_overrides(self, **changes: object) -> FilterPolicy:
        """Return a copy with every non-``None`` keyword applied."""
        kept = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **kept) if kept else self


@dataclass(frozen=True, slots=True)
class WalkEntry:
    """One filesystem object discovered during traversal."""

    path: Path
    depth: int
    is_dir: bool
    is_symlink: bool
    size: int = 0
    modified: float = 0.0

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def is_file(self) -> bool:
        """Regular file: the only kind content operations look inside."""
        return not self.is_dir and not self.is_symlink
