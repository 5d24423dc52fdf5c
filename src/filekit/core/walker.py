"""Tree walker — lazy, depth-first, pre-order traversal.

Only one ``os.scandir`` iterator per level of the current path is open at
any time, so memory stays proportional to the tree depth.  Entries come out
in directory-enumeration order; nothing is sorted.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from filekit.core.filter import EntryFilter
from filekit.core.ignore import IgnoreFile, load_ancestor_rules, load_ignore_rules
from filekit.errors import ScanRootError
from filekit.model.entry import FilterPolicy, WalkEntry
from filekit.model.outcome import ErrorLog

_logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Frame:
    """One open directory on the traversal stack."""

    directory: Path
    entries: Iterator[os.DirEntry]
    depth: int
    rules: tuple[IgnoreFile, ...]


def _root_entry(root: Path) -> WalkEntry:
    try:
        st = root.stat()
    except FileNotFoundError:
        raise ScanRootError(root, "no such file or directory") from None
    except PermissionError:
        raise ScanRootError(root, "permission denied") from None
    except OSError as exc:
        raise ScanRootError(root, exc.strerror or str(exc)) from exc

    is_dir = root.is_dir()
    mode = os.R_OK | os.X_OK if is_dir else os.R_OK
    if not os.access(root, mode):
        raise ScanRootError(root, "permission denied")

    return WalkEntry(
        path=root,
        depth=0,
        is_dir=is_dir,
        is_symlink=root.is_symlink(),
        size=st.st_size,
        modified=st.st_mtime,
    )


def _make_entry(dent: os.DirEntry, depth: int, errors: ErrorLog) -> WalkEntry | None:
    path = Path(dent.path)
    try:
        is_symlink = dent.is_symlink()
        is_dir = dent.is_dir(follow_symlinks=False)
        st = dent.stat(follow_symlinks=False)
    except OSError as exc:
        # Vanished or unreadable between enumeration and stat.
        errors.record_exception(path, exc)
        return None
    return WalkEntry(
        path=path,
        depth=depth,
        is_dir=is_dir,
        is_symlink=is_symlink,
        size=st.st_size,
        modified=st.st_mtime,
    )


def walk(
    root: str | Path,
    policy: FilterPolicy | None = None,
    *,
    errors: ErrorLog | None = None,
) -> Iterator[WalkEntry]:
    """Yield the filtered entries under *root*, root first (depth 0).

    Problems with the root raise :class:`ScanRootError` right away, before
    the first entry is requested.  Problems below the root are recorded in
    *errors* and the walk goes on.  Each call starts a fresh traversal.
    """
    root_p = Path(root)
    first = _root_entry(root_p)
    return _walk_from(
        first,
        EntryFilter(policy or FilterPolicy()),
        errors if errors is not None else ErrorLog(),
    )


def _walk_from(
    first: WalkEntry, entry_filter: EntryFilter, errors: ErrorLog
) -> Iterator[WalkEntry]:
    use_ignore = entry_filter.policy.respect_ignore_files

    def open_dir(directory: Path, depth: int, inherited: tuple[IgnoreFile, ...]) -> _Frame | None:
        rules = inherited
        if use_ignore:
            rules = inherited + tuple(load_ignore_rules(directory))
        try:
            it = os.scandir(directory)
        except OSError as exc:
            errors.record_exception(directory, exc)
            return None
        return _Frame(directory, it, depth, rules)

    yield first
    # An explicitly named root is entered even when it is a symlink.
    if not first.is_dir or first.depth == entry_filter.policy.max_depth:
        return

    stack: list[_Frame] = []
    try:
        inherited = tuple(load_ancestor_rules(first.path)) if use_ignore else ()
        frame = open_dir(first.path, 1, inherited)
        if frame is not None:
            stack.append(frame)

        while stack:
            top = stack[-1]
            it, depth, rules = top.entries, top.depth, top.rules
            try:
                dent = next(it)
            except StopIteration:
                it.close()
                stack.pop()
                continue
            except OSError as exc:
                _logger.debug("listing of %s aborted", top.directory)
                errors.record_exception(top.directory, exc)
                it.close()
                stack.pop()
                continue

            entry = _make_entry(dent, depth, errors)
            if entry is None or not entry_filter.admits(entry, rules):
                continue

            yield entry

            if entry_filter.descends_into(entry):
                frame = open_dir(entry.path, depth + 1, rules)
                if frame is not None:
                    stack.append(frame)
    finally:
        for leftover in stack:
            leftover.entries.close()
