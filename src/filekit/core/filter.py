"""Decides whether a discovered entry takes part in a walk."""

from __future__ import annotations

from typing import Sequence

from filekit.core.ignore import IgnoreFile, is_ignored
from filekit.model.entry import FilterPolicy, WalkEntry

HIDDEN_PREFIX = "."


def is_hidden(name: str) -> bool:
    return name.startswith(HIDDEN_PREFIX) and name not in (".", "..")


class EntryFilter:
    """Applies a :class:`FilterPolicy` to walk entries.

    The scan root (depth 0) is always admitted; the hidden, ignore and
    depth rules only apply below it.
    """

    def __init__(self, policy: FilterPolicy):
        self.policy = policy

    def admits(self, entry: WalkEntry, rules: Sequence[IgnoreFile] = ()) -> bool:
        if entry.depth == 0:
            return True
        if not self.policy.include_hidden and is_hidden(entry.name):
            return False
        if self.policy.respect_ignore_files and rules:
            if is_ignored(entry.path, entry.is_dir, rules):
                return False
        if self.policy.max_depth is not None and entry.depth > self.policy.max_depth:
            return False
        return True

    def descends_into(self, entry: WalkEntry) -> bool:
        """Directories are entered up to and including ``max_depth``."""
        if not entry.is_dir or entry.is_symlink:
            return False
        limit = self.policy.max_depth
        return limit is None or entry.depth < limit

    @staticmethod
    def is_scannable(entry: WalkEntry) -> bool:
        """Content operations only look inside regular files."""
        return entry.is_file
