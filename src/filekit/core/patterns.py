"""Pattern engine — filename wildcards and content patterns.

Filename patterns are shell-style wildcards turned into anchored regexes::

    trc*      ->  ^trc.*$
    a?-b.log  ->  ^a.-b\\.log$

Content patterns are either raw regexes or, with ``regex=False``, literal
substrings (the whole string is escaped).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from filekit.errors import FatalSetupError, InvalidPattern
from filekit.model import PatternKind
from filekit.model.report import MatchSpan, Segment, split_segments


def wildcard_to_regex(pattern: str) -> str:
    """Translate a filename wildcard into an anchored regex string."""
    body = (
        re.escape(pattern)
        .replace(r"\*", ".*")
        .replace(r"\?", ".")
        .replace(r"\-", "-")
    )
    return f"^{body}$"


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """An immutable matcher built by :func:`compile_pattern`."""

    source: str
    kind: PatternKind
    case_insensitive: bool
    regex: re.Pattern[str]

    def is_match(self, text: str) -> bool:
        """Whole-line boolean test: does the pattern occur in *text*?"""
        return self.regex.search(text) is not None

    def find_spans(self, text: str) -> list[MatchSpan]:
        """Non-overlapping matches, left to right."""
        return [MatchSpan(m.start(), m.end()) for m in self.regex.finditer(text)]

    def segments(self, text: str) -> list[Segment]:
        return split_segments(text, self.find_spans(text))


def compile_pattern(
    pattern: str,
    kind: PatternKind = PatternKind.CONTENT,
    *,
    case_insensitive: bool = False,
    regex: bool = True,
) -> CompiledPattern:
    """Compile *pattern*; raise :class:`InvalidPattern` if it does not parse.

    ``regex`` only applies to content patterns.  Filename patterns are
    always wildcards.
    """
    if kind is PatternKind.FILENAME:
        expr = wildcard_to_regex(pattern)
    elif regex:
        expr = pattern
    else:
        expr = re.escape(pattern)

    flags = re.IGNORECASE if case_insensitive else 0
    try:
        compiled = re.compile(expr, flags)
    except re.error as exc:
        raise InvalidPattern(pattern, str(exc)) from exc

    return CompiledPattern(
        source=pattern,
        kind=kind,
        case_insensitive=case_insensitive,
        regex=compiled,
    )


def split_search_target(target: str) -> tuple[Path, str]:
    """Split ``dir/wildcard`` on its last ``/``.

    ``"/var/logs/trc*"`` gives ``(Path("/var/logs"), "trc*")``.  An empty
    directory part means the filesystem root and an empty wildcard part
    means every file.
    """
    if "/" not in target:
        raise FatalSetupError(
            f"invalid search target {target!r}: expected <dir>/<file pattern>, "
            "for example /var/logs/trc*"
        )
    directory, wildcard = target.rsplit("/", 1)
    return Path(directory or "/"), wildcard or "*"
