"""Console rendering for the CLI.

Colored output goes through ``rich``; with color off lines are written to
the stream untouched, so a search line prints exactly as it is on disk.
"""

from __future__ import annotations

import sys
from typing import IO

from rich.console import Console
from rich.text import Text

from filekit.model import ReplaceAction
from filekit.model.report import CountReport, FileAction, SearchHit, TreeRow
from filekit.operations.tree import render_row

MATCH_STYLE = "bold red"
LOCATION_STYLE = "cyan"
DIR_STYLE = "blue"
FILE_STYLE = "green"


class Renderer:
    """Writes records for one command to *stream* (stdout by default)."""

    def __init__(self, *, color: bool = False, stream: IO[str] | None = None):
        self.color = color
        self.stream = stream if stream is not None else sys.stdout
        self._console: Console | None = None

    @property
    def console(self) -> Console:
        if self._console is None:
            self._console = Console(
                file=self.stream,
                force_terminal=True,
                highlight=False,
                markup=False,
                emoji=False,
                soft_wrap=True,
            )
        return self._console

    def _plain(self, line: str) -> None:
        self.stream.write(line + "\n")

    def search_hit(self, hit: SearchHit) -> None:
        location = f"{hit.path}:{hit.line_number}: "
        if not self.color:
            self._plain(location + hit.line)
            return
        text = Text(location, style=LOCATION_STYLE)
        for seg in hit.segments:
            text.append(seg.text, style=MATCH_STYLE if seg.matched else None)
        self.console.print(text)

    def count_report(self, report: CountReport) -> None:
        for path, count in report.per_file.items():
            self._plain(f"{path}: {count}")
        self._plain(f"Total matches across all files: {report.total}")

    def file_action(self, action: FileAction, old: str, *, verbose: bool = False) -> None:
        kind = action.action
        if kind is ReplaceAction.REPLACED:
            self._plain(f"Replaced '{old}' in {action.path}")
        elif kind is ReplaceAction.WOULD_REPLACE:
            self._plain(
                f"Would replace '{old}' in {action.path} ({action.occurrences} occurrence(s))"
            )
        elif kind is ReplaceAction.SKIPPED:
            if verbose:
                self._plain(f"Skipped {action.path} (no match)")
        else:
            print(f"error: {kind.value} for {action.path} ({action.detail})", file=sys.stderr)

    def tree_row(self, row: TreeRow, *, human_readable: bool = False) -> None:
        line = render_row(row, human_readable=human_readable)
        if not self.color:
            self._plain(line)
            return
        self.console.print(Text(line, style=DIR_STYLE if row.is_dir else FILE_STYLE))
