"""Enums shared across the engine and the operations."""

from __future__ import annotations

from enum import Enum


class EntryStatus(str, Enum):
    """Outcome of touching one filesystem entry."""

    OK = "ok"
    PERMISSION_DENIED = "permission-denied"
    NOT_FOUND = "not-found"
    DECODE_ERROR = "decode-error"
    OTHER = "other"


class ReplaceAction(str, Enum):
    """What the replace operation did to one file."""

    REPLACED = "replaced"
    SKIPPED = "skipped"
    WOULD_REPLACE = "would-replace"
    BACKUP_FAILED = "backup-failed"
    WRITE_FAILED = "write-failed"
    READ_FAILED = "read-failed"


class PatternKind(str, Enum):
    """Filename wildcards are anchored; content patterns match anywhere."""

    FILENAME = "filename"
    CONTENT = "content"
