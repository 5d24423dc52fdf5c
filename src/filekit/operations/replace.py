"""Replace operation — literal substring rewrite, in place.

The whole file is read as text with line endings preserved.  Files that
do not contain the old substring are left alone and reported
``skipped``.  With ``backup`` the original is copied next to itself (the
extension replaced by ``.bak``) before anything is written.  A backup
never overwrites an existing file: when the backup path is already taken
(by a user file or by the backup of a sibling such as ``a.txt`` and
``a.log``) the file is reported ``backup-failed`` and left
untouched.  A dry run writes nothing at all.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Iterable, Iterator

from filekit.core.scanner import DEFAULT_ENCODING
from filekit.errors import FatalSetupError
from filekit.model import ReplaceAction
from filekit.model.entry import FilterPolicy, WalkEntry
from filekit.model.outcome import ErrorLog
from filekit.model.report import FileAction, ReplaceReport

_logger = logging.getLogger(__name__)

DEFAULT_BACKUP_SUFFIX = ".bak"


def backup_path_for(path: Path, suffix: str = DEFAULT_BACKUP_SUFFIX) -> Path:
    """``notes.txt`` -> ``notes.bak``; ``.env`` -> ``.env.bak``."""
    return path.with_suffix(suffix)


def write_backup(path: Path, backup_path: Path) -> None:
    """Copy *path* to *backup_path* with its metadata.

    Raises ``FileExistsError`` when *backup_path* already exists.
    """
    with open(path, "rb") as src:
        dst = open(backup_path, "xb")
        try:
            with dst:
                shutil.copyfileobj(src, dst)
            shutil.copystat(path, backup_path)
        except OSError:
            backup_path.unlink(missing_ok=True)
            raise


class ReplaceOperation:
    """Replaces every non-overlapping occurrence of *old* with *new*."""

    id: str = "replace"
    files_only: bool = True

    def __init__(
        self,
        old: str,
        new: str,
        *,
        dry_run: bool = False,
        backup: bool = False,
        backup_suffix: str = DEFAULT_BACKUP_SUFFIX,
        encoding: str = DEFAULT_ENCODING,
        default_policy: FilterPolicy | None = None,
    ):
        if not old:
            raise FatalSetupError("the string to replace must not be empty")
        self.old = old
        self.new = new
        self.dry_run = dry_run
        self.backup = backup
        self.backup_suffix = backup_suffix
        self.encoding = encoding
        self.default_policy = default_policy or FilterPolicy(include_hidden=True)
        # Backups written during this run; never rewrite them.
        self._created_backups: set[Path] = set()

    def visit(self, entry: WalkEntry, errors: ErrorLog) -> Iterator[FileAction]:
        path = entry.path
        if path in self._created_backups:
            return

        try:
            with open(path, "r", encoding=self.encoding, newline="") as fh:
                content = fh.read()
        except (OSError, UnicodeDecodeError) as exc:
            err = errors.record_exception(path, exc)
            yield FileAction(path, ReplaceAction.READ_FAILED, detail=err.status.value)
            return

        occurrences = content.count(self.old)
        if occurrences == 0:
            yield FileAction(path, ReplaceAction.SKIPPED)
            return

        if self.dry_run:
            yield FileAction(path, ReplaceAction.WOULD_REPLACE, occurrences=occurrences)
            return

        backup_path: Path | None = None
        if self.backup:
            backup_path = backup_path_for(path, self.backup_suffix)
            try:
                write_backup(path, backup_path)
            except OSError as exc:
                err = errors.record_exception(path, exc)
                yield FileAction(
                    path,
                    ReplaceAction.BACKUP_FAILED,
                    occurrences=occurrences,
                    backup_path=backup_path,
                    detail=err.status.value,
                )
                return
            self._created_backups.add(backup_path)
            _logger.debug("backed up %s to %s", path, backup_path)

        try:
            with open(path, "w", encoding=self.encoding, newline="") as fh:
                fh.write(content.replace(self.old, self.new))
        except OSError as exc:
            err = errors.record_exception(path, exc)
            yield FileAction(
                path,
                ReplaceAction.WRITE_FAILED,
                occurrences=occurrences,
                backup_path=backup_path,
                detail=err.status.value,
            )
            return

        yield FileAction(
            path,
            ReplaceAction.REPLACED,
            occurrences=occurrences,
            backup_path=backup_path,
        )

    def collect(
        self, root: Path, records: Iterable[FileAction], errors: ErrorLog
    ) -> ReplaceReport:
        actions = list(records)
        return ReplaceReport(
            root=root,
            old=self.old,
            new=self.new,
            dry_run=self.dry_run,
            backup=self.backup,
            actions=actions,
            errors=list(errors.errors),
        )
