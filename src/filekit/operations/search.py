"""Search: lines matching a content pattern, with spans."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

from filekit.core.patterns import CompiledPattern
from filekit.core.scanner import DEFAULT_ENCODING, scan_lines
from filekit.model.entry import FilterPolicy, WalkEntry
from filekit.model.outcome import ErrorLog
from filekit.model.report import SearchHit, SearchReport


class SearchOperation:
    """Reports every line where *content* matches at least once.

    Only files whose name matches *filename* (when given) are opened.
    """

    id: str = "search"
    files_only: bool = True

    def __init__(
        self,
        content: CompiledPattern,
        filename: CompiledPattern | None = None,
        *,
        encoding: str = DEFAULT_ENCODING,
        default_policy: FilterPolicy | None = None,
    ):
        self.content = content
        self.filename = filename
        self.encoding = encoding
        self.default_policy = default_policy or FilterPolicy(include_hidden=False)

    def wants(self, entry: WalkEntry) -> bool:
        return self.filename is None or self.filename.is_match(entry.name)

    def visit(self, entry: WalkEntry, errors: ErrorLog) -> Iterator[SearchHit]:
        if not self.wants(entry):
            return
        for line_no, text in scan_lines(entry.path, encoding=self.encoding, errors=errors):
            spans = self.content.find_spans(text)
            if not spans:
                continue
            yield SearchHit(
                path=entry.path,
                line_number=line_no,
                line=text,
                spans=tuple(spans),
            )

    def collect(
        self, root: Path, records: Iterable[SearchHit], errors: ErrorLog
    ) -> SearchReport:
        hits = list(records)
        return SearchReport(
            root=root,
            filename_pattern=self.filename.source if self.filename else "*",
            content_pattern=self.content.source,
            hits=hits,
            errors=list(errors.errors),
        )
