"""CLI behaviour: output formats, flags and exit codes."""

from __future__ import annotations

import json
import logging
import os
import subprocess
import sys
from pathlib import Path

import pytest

from filekit.__main__ import main
from filekit.utils.exit_codes import ExitCode

REPO_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("FILEKIT_CONFIG", raising=False)
    monkeypatch.delenv("FILEKIT_ENCODING", raising=False)
    monkeypatch.delenv("FILEKIT_LOG_LEVEL", raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("TERM", "xterm-256color")
    root_logger = logging.getLogger()
    saved = (root_logger.handlers[:], root_logger.level)
    yield
    # main() reconfigures logging onto the captured stderr; put it back.
    root_logger.handlers[:], level = saved
    root_logger.setLevel(level)


def _target(root: Path, wildcard: str = "*") -> str:
    return f"{root.as_posix()}/{wildcard}"


class TestSearchCommand:
    def test_plain_output(self, corpus: Path, capsys):
        rc = main(["search", _target(corpus, "a.txt"), "hello"])
        out = capsys.readouterr().out
        assert rc == ExitCode.SUCCESS
        assert out.splitlines() == [
            f"{corpus / 'a.txt'}:1: hello world",
            f"{corpus / 'a.txt'}:2: hello rust",
        ]

    def test_cat_alias(self, corpus: Path, capsys):
        rc = main(["cat", _target(corpus, "a.txt"), "rust"])
        assert rc == ExitCode.SUCCESS
        assert capsys.readouterr().out.strip().endswith("hello rust")

    def test_hidden_flag(self, corpus: Path, capsys):
        main(["search", _target(corpus), "SECRET"])
        assert capsys.readouterr().out == ""
        main(["search", "-H", _target(corpus), "SECRET"])
        assert ".env" in capsys.readouterr().out

    def test_color_highlights_matches(self, corpus: Path, capsys):
        main(["search", "-c", _target(corpus, "a.txt"), "rust"])
        out = capsys.readouterr().out
        assert "\x1b[" in out
        assert "rust" in out

    def test_no_color_by_default(self, corpus: Path, capsys):
        main(["search", _target(corpus, "a.txt"), "rust"])
        assert "\x1b[" not in capsys.readouterr().out

    def test_json_output(self, corpus: Path, capsys):
        rc = main(["search", "--json", _target(corpus), "hello"])
        data = json.loads(capsys.readouterr().out)
        assert rc == ExitCode.SUCCESS
        assert data["schema_version"] == "search_report_v1"
        assert len(data["hits"]) == 3

    def test_target_without_slash(self, capsys):
        rc = main(["search", "trc*", "x"])
        assert rc == ExitCode.ERROR
        assert "error:" in capsys.readouterr().err

    def test_malformed_pattern(self, corpus: Path, capsys):
        rc = main(["search", _target(corpus), "(unclosed"])
        assert rc == ExitCode.ERROR
        assert "invalid pattern" in capsys.readouterr().err

    def test_missing_root(self, tmp_path: Path, capsys):
        rc = main(["search", _target(tmp_path / "missing"), "x"])
        assert rc == ExitCode.ERROR
        assert "cannot scan" in capsys.readouterr().err

    def test_per_file_errors_do_not_change_exit(self, tmp_path: Path, capsys):
        (tmp_path / "bad.txt").write_bytes(b"\xff hello\n")
        (tmp_path / "good.txt").write_text("hello\n", encoding="utf-8")
        rc = main(["search", _target(tmp_path, "*.txt"), "hello"])
        captured = capsys.readouterr()
        assert rc == ExitCode.SUCCESS
        assert "good.txt:1: hello" in captured.out
        assert "decode-error" in captured.err


class TestCountCommand:
    def test_per_file_and_total(self, corpus: Path, capsys):
        rc = main(["count", str(corpus / "sub"), "foo"])
        lines = capsys.readouterr().out.splitlines()
        assert rc == ExitCode.SUCCESS
        assert lines == [
            f"{corpus / 'sub' / 'c.txt'}: 3",
            "Total matches across all files: 3",
        ]

    def test_no_hidden(self, corpus: Path, capsys):
        main(["count", "--no-hidden", str(corpus), "hello"])
        out = capsys.readouterr().out
        assert ".env" not in out
        assert "Total matches across all files: 3" in out

    def test_regex_flag(self, tmp_path: Path, capsys):
        (tmp_path / "x.txt").write_text("a1\nb2\n", encoding="utf-8")
        main(["count", "-r", str(tmp_path), r"\d"])
        assert "Total matches across all files: 2" in capsys.readouterr().out

    def test_json(self, corpus: Path, capsys):
        main(["count", "--json", str(corpus), "hello"])
        data = json.loads(capsys.readouterr().out)
        assert data["total"] == 5


class TestReplaceCommand:
    def test_replaces_and_reports(self, corpus: Path, capsys):
        rc = main(["replace", str(corpus), "hello world", "bye"])
        out = capsys.readouterr().out
        assert rc == ExitCode.SUCCESS
        assert f"Replaced 'hello world' in {corpus / 'a.txt'}" in out
        assert "Skipped" not in out
        assert (corpus / "a.txt").read_text(encoding="utf-8") == "bye\nhello rust"

    def test_verbose_lists_skipped(self, corpus: Path, capsys):
        main(["-v", "replace", str(corpus), "hello world", "bye"])
        assert f"Skipped {corpus / 'b.log'} (no match)" in capsys.readouterr().out

    def test_dry_run(self, corpus: Path, capsys):
        main(["replace", "-D", str(corpus), "hello", "hi"])
        out = capsys.readouterr().out
        assert f"Would replace 'hello' in {corpus / 'a.txt'} (2 occurrence(s))" in out
        assert (corpus / "a.txt").read_text(encoding="utf-8") == "hello world\nhello rust"

    def test_backup(self, corpus: Path, capsys):
        main(["replace", "-b", str(corpus), "foo", "bar"])
        assert (corpus / "sub" / "c.bak").read_text(encoding="utf-8") == "foo\nfoo\nfoobar\n"
        assert (corpus / "sub" / "c.txt").read_text(encoding="utf-8") == "bar\nbar\nbarbar\n"

    def test_empty_old_is_error(self, corpus: Path, capsys):
        rc = main(["replace", str(corpus), "", "x"])
        assert rc == ExitCode.ERROR
        assert "must not be empty" in capsys.readouterr().err


class TestTreeCommand:
    def test_listing(self, corpus: Path, capsys):
        rc = main(["tree", str(corpus)])
        lines = capsys.readouterr().out.splitlines()
        assert rc == ExitCode.SUCCESS
        assert lines[0] == "├─ . (DIR)"
        assert "  ├─ b.log (7 B)" in lines
        assert "    ├─ sub/c.txt (15 B)" in lines

    def test_depth_and_all(self, corpus: Path, capsys):
        main(["tree", "-a", "-d", "1", str(corpus)])
        lines = capsys.readouterr().out.splitlines()
        assert "  ├─ .env (13 B)" in lines
        assert not any("c.txt" in line for line in lines)

    def test_negative_depth(self, corpus: Path, capsys):
        assert main(["tree", "-d", "-1", str(corpus)]) == ExitCode.ERROR

    def test_no_ignore(self, corpus: Path, capsys):
        (corpus / ".gitignore").write_text("*.log\n", encoding="utf-8")
        main(["tree", str(corpus)])
        assert "b.log" not in capsys.readouterr().out
        main(["tree", "--no-ignore", str(corpus)])
        assert "b.log" in capsys.readouterr().out


class TestGlobal:
    def test_no_command_prints_help(self, capsys):
        assert main([]) == ExitCode.ERROR
        assert "usage:" in capsys.readouterr().err

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "filekit 0.1.0" in capsys.readouterr().out

    def test_config_file_changes_defaults(self, corpus: Path, tmp_path: Path, capsys):
        cfg = tmp_path / "cfg.yaml"
        cfg.write_text("count:\n  include_hidden: false\n", encoding="utf-8")
        main(["--config", str(cfg), "count", str(corpus), "hello"])
        assert "Total matches across all files: 3" in capsys.readouterr().out

    def test_bad_config_is_error(self, corpus: Path, tmp_path: Path, capsys):
        cfg = tmp_path / "cfg.yaml"
        cfg.write_text("nonsense: 1\n", encoding="utf-8")
        rc = main(["--config", str(cfg), "count", str(corpus), "hello"])
        assert rc == ExitCode.ERROR
        assert "unknown config keys" in capsys.readouterr().err


def test_module_entrypoint_subprocess(corpus: Path) -> None:
    env = os.environ.copy()
    env["PYTHONPATH"] = str(REPO_ROOT / "src")
    env.pop("FILEKIT_CONFIG", None)
    r = subprocess.run(
        [sys.executable, "-m", "filekit", "count", "--json", str(corpus), "foo"],
        cwd=str(corpus),
        env=env,
        text=True,
        capture_output=True,
    )
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert json.loads(r.stdout)["total"] == 3
