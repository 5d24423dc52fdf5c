"""Scan operations consume the shared walker.

Every operation is a small strategy object exposing:

- ``id`` — command name, also used for config lookups
- ``default_policy`` — the per-command filter defaults
- ``files_only`` — ``True`` when only regular files are handed over
- ``visit(entry, errors)`` — lazily yields the records for one entry
- ``collect(root, records, errors)`` — assembles the final report

``core.runner`` owns the walk and feeds entries to ``visit``.

Available operations:
    - SearchOperation: matching lines with highlighted spans
    - CountOperation: matching-line counts per file and in total
    - ReplaceOperation: literal substring rewrite with dry-run / backup
    - TreeOperation: indented listing of every walked entry
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Iterator, Protocol

from filekit.model.entry import FilterPolicy, WalkEntry
from filekit.model.outcome import ErrorLog


class ScanOperation(Protocol):
    """Every operation must expose ``id``, its defaults and ``visit()``."""

    id: str
    default_policy: FilterPolicy
    files_only: bool

    def visit(self, entry: WalkEntry, errors: ErrorLog) -> Iterator[Any]:
        """Yield the records produced by *entry*."""
        ...

    def collect(self, root: Path, records: Iterable[Any], errors: ErrorLog) -> Any:
        """Build the operation's report from every record of a run."""
        ...


def __getattr__(name: str):
    if name == "SearchOperation":
        from .search import SearchOperation
        return SearchOperation
    if name == "CountOperation":
        from .count import CountOperation
        return CountOperation
    if name == "ReplaceOperation":
        from .replace import ReplaceOperation
        return ReplaceOperation
    if name == "TreeOperation":
        from .tree import TreeOperation
        return TreeOperation
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
