"""Number of matching lines per file and in total."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

from filekit.core.patterns import CompiledPattern
from filekit.core.scanner import DEFAULT_ENCODING, scan_lines
from filekit.model.entry import FilterPolicy, WalkEntry
from filekit.model.outcome import ErrorLog
from filekit.model.report import CountReport, FileCount


class CountOperation:
    """Whole-line boolean test: a line with three matches counts once."""

    id: str = "count"
    files_only: bool = True

    def __init__(
        self,
        pattern: CompiledPattern,
        *,
        encoding: str = DEFAULT_ENCODING,
        default_policy: FilterPolicy | None = None,
    ):
        self.pattern = pattern
        self.encoding = encoding
        self.default_policy = default_policy or FilterPolicy(include_hidden=True)

    def visit(self, entry: WalkEntry, errors: ErrorLog) -> Iterator[FileCount]:
        count = sum(
            1
            for _, text in scan_lines(entry.path, encoding=self.encoding, errors=errors)
            if self.pattern.is_match(text)
        )
        yield FileCount(path=entry.path, count=count)

    def collect(
        self, root: Path, records: Iterable[FileCount], errors: ErrorLog
    ) -> CountReport:
        report = CountReport(root=root, pattern=self.pattern.source)
        for record in records:
            report.add(record)
        report.errors = list(errors.errors)
        return report
