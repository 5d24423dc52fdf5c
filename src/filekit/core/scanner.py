"""Decode a file one line at a time.

The file is read through a buffered binary handle and every line is
decoded on its own, so a bad byte sequence costs one line, not the file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from filekit.model.outcome import ErrorLog

DEFAULT_ENCODING = "utf-8"


def _strip_eol(raw: bytes) -> bytes:
    if raw.endswith(b"\r\n"):
        return raw[:-2]
    if raw.endswith(b"\n"):
        return raw[:-1]
    return raw


def scan_lines(
    path: Path,
    *,
    encoding: str = DEFAULT_ENCODING,
    errors: ErrorLog | None = None,
) -> Iterator[tuple[int, str]]:
    """Yield ``(line_number, text)`` pairs, 1-based, terminators stripped.

    A file that cannot be opened is recorded in *errors* and yields
    nothing.  A line that does not decode is recorded with its line number
    and skipped.  A read failure part-way through ends the file.
    """
    log = errors if errors is not None else ErrorLog()
    try:
        fh = open(path, "rb")
    except OSError as exc:
        log.record_exception(path, exc)
        return

    with fh:
        line_no = 0
        while True:
            try:
                raw = fh.readline()
            except OSError as exc:
                log.record_exception(path, exc, line=line_no + 1)
                return
            if not raw:
                return
            line_no += 1
            try:
                text = _strip_eol(raw).decode(encoding)
            except UnicodeDecodeError as exc:
                log.record_exception(path, exc, line=line_no)
                continue
            yield line_no, text
