"""Tests for the pattern engine (filekit.core.patterns)."""

from __future__ import annotations

import random
from pathlib import Path

import pytest

from filekit.core.patterns import (
    compile_pattern,
    split_search_target,
    wildcard_to_regex,
)
from filekit.errors import FatalSetupError, InvalidPattern
from filekit.model import PatternKind
from filekit.model.report import MatchSpan


class TestWildcard:
    def test_translation(self):
        assert wildcard_to_regex("trc*") == "^trc.*$"
        assert wildcard_to_regex("a?.log") == r"^a.\.log$"

    def test_hyphen_kept_literal(self):
        assert wildcard_to_regex("my-file*") == "^my-file.*$"

    def test_anchored_not_substring(self):
        pat = compile_pattern("trc*", PatternKind.FILENAME)
        assert pat.is_match("trc1.log")
        assert pat.is_match("trc")
        assert not pat.is_match("xtrc1")

    def test_metacharacters_escaped(self):
        pat = compile_pattern("a+b(1).txt", PatternKind.FILENAME)
        assert pat.is_match("a+b(1).txt")
        assert not pat.is_match("aab1.txt")
        assert not pat.is_match("a+b(1)Xtxt")

    def test_question_mark_is_one_char(self):
        pat = compile_pattern("log?.txt", PatternKind.FILENAME)
        assert pat.is_match("log1.txt")
        assert not pat.is_match("log.txt")
        assert not pat.is_match("log12.txt")

    def test_filename_ignores_regex_flag(self):
        pat = compile_pattern("*.py", PatternKind.FILENAME, regex=False)
        assert pat.is_match("setup.py")


class TestContentPattern:
    def test_literal_escapes_everything(self):
        pat = compile_pattern("a.b", regex=False)
        assert pat.is_match("xa.by")
        assert not pat.is_match("axb")

    def test_regex_compiled_as_is(self):
        pat = compile_pattern(r"fo+\d", regex=True)
        assert pat.is_match("fooo7")

    def test_case_insensitive(self):
        pat = compile_pattern("hello", case_insensitive=True)
        assert pat.is_match("HeLLo there")
        assert not compile_pattern("hello").is_match("HELLO")

    def test_invalid_regex_raises(self):
        with pytest.raises(InvalidPattern) as exc_info:
            compile_pattern("(unbalanced")
        assert exc_info.value.pattern == "(unbalanced"
        assert isinstance(exc_info.value, FatalSetupError)

    def test_invalid_regex_fine_as_literal(self):
        pat = compile_pattern("(unbalanced", regex=False)
        assert pat.is_match("x (unbalanced y")


class TestFindSpans:
    def test_left_to_right_non_overlapping(self):
        pat = compile_pattern("aa")
        assert pat.find_spans("aaaa") == [MatchSpan(0, 2), MatchSpan(2, 4)]
        assert pat.find_spans("aaa") == [MatchSpan(0, 2)]

    def test_no_match(self):
        assert compile_pattern("zzz").find_spans("abc") == []

    def test_ordered_and_disjoint_for_random_inputs(self):
        rng = random.Random(1234)
        patterns = [compile_pattern(p) for p in ("a", "ab", "a+", "b*", "[ab]{2}", "x?")]
        for _ in range(200):
            text = "".join(rng.choice("abx ") for _ in range(rng.randint(0, 30)))
            for pat in patterns:
                spans = pat.find_spans(text)
                for prev, cur in zip(spans, spans[1:]):
                    assert prev.start <= cur.start
                    assert prev.end <= cur.start

    def test_segments_rebuild_line(self):
        pat = compile_pattern("o")
        line = "foo bar boo"
        segs = pat.segments(line)
        assert "".join(s.text for s in segs) == line
        assert [s.text for s in segs if s.matched] == ["o", "o", "o", "o"]

    def test_invalid_span_rejected(self):
        with pytest.raises(ValueError):
            MatchSpan(5, 2)


class TestSplitSearchTarget:
    def test_splits_on_last_slash(self):
        assert split_search_target("/var/logs/trc*") == (Path("/var/logs"), "trc*")
        assert split_search_target("a/b/c/*.txt") == (Path("a/b/c"), "*.txt")

    def test_empty_parts(self):
        assert split_search_target("/etc*") == (Path("/"), "etc*")
        assert split_search_target("logs/") == (Path("logs"), "*")

    def test_missing_slash_is_setup_error(self):
        with pytest.raises(FatalSetupError, match="/var/logs/trc"):
            split_search_target("trc*")
