"""Per-entry outcomes.

A walk never stops because one file misbehaves.  The failure is turned
into an :class:`EntryError`, appended to the run's :class:`ErrorLog`
and logged as a warning naming the file and the cause.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from filekit.model import EntryStatus

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EntryError:
    """Why a file, a directory or a single line was skipped."""

    path: Path
    status: EntryStatus
    message: str
    line: int | None = None

    def describe(self) -> str:
        where = f"{self.path}:{self.line}" if self.line is not None else str(self.path)
        return f"{where}: {self.status.value} ({self.message})"

    def to_dict(self) -> dict:
        d: dict = {
            "path": self.path.as_posix(),
            "status": self.status.value,
            "message": self.message,
        }
        if self.line is not None:
            d["line"] = self.line
        return d


def classify_error(exc: BaseException) -> EntryStatus:
    """Map an exception raised while touching an entry to its status."""
    if isinstance(exc, PermissionError):
        return EntryStatus.PERMISSION_DENIED
    if isinstance(exc, FileNotFoundError):
        return EntryStatus.NOT_FOUND
    if isinstance(exc, UnicodeDecodeError):
        return EntryStatus.DECODE_ERROR
    return EntryStatus.OTHER


def _exc_message(exc: BaseException) -> str:
    if isinstance(exc, OSError) and exc.strerror:
        return exc.strerror
    return str(exc) or type(exc).__name__


@dataclass(slots=True)
class ErrorLog:
    """Collects the per-entry errors of one operation run."""

    errors: list[EntryError] = field(default_factory=list)

    def record(self, error: EntryError) -> None:
        self.errors.append(error)
        _logger.warning("%s", error.describe())

    def record_exception(
        self, path: Path, exc: BaseException, *, line: int | None = None
    ) -> EntryError:
        error = EntryError(
            path=path,
            status=classify_error(exc),
            message=_exc_message(exc),
            line=line,
        )
        self.record(error)
        return error

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self):
        return iter(self.errors)
