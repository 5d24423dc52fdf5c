"""Drives one operation over one walk."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator

from filekit.core.filter import EntryFilter
from filekit.core.walker import walk
from filekit.model.entry import FilterPolicy
from filekit.model.outcome import ErrorLog

if TYPE_CHECKING:
    from filekit.operations import ScanOperation

_logger = logging.getLogger(__name__)


def stream(
    root: str | Path,
    operation: ScanOperation,
    *,
    policy: FilterPolicy | None = None,
    errors: ErrorLog | None = None,
) -> Iterator[Any]:
    """Lazily yield every record *operation* produces under *root*.

    The root is checked before this returns, so a missing or unreadable
    root raises here rather than on the first ``next()``.
    """
    log = errors if errors is not None else ErrorLog()
    effective = policy or operation.default_policy
    entries = walk(root, effective, errors=log)
    _logger.debug("%s: walking %s with %s", operation.id, root, effective)
    return _drive(entries, operation, log)


def _drive(entries, operation: ScanOperation, errors: ErrorLog) -> Iterator[Any]:
    for entry in entries:
        if operation.files_only and not EntryFilter.is_scannable(entry):
            continue
        yield from operation.visit(entry, errors)


def run_operation(
    root: str | Path,
    operation: ScanOperation,
    *,
    policy: FilterPolicy | None = None,
) -> Any:
    """Run *operation* to completion and return its report."""
    root_p = Path(root)
    errors = ErrorLog()
    records = stream(root_p, operation, policy=policy, errors=errors)
    return operation.collect(root_p, records, errors)
