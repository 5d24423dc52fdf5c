"""Shared fixtures for the filekit test-suite."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Ensure the src layout is importable without an install.
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

IS_ROOT = hasattr(os, "geteuid") and os.geteuid() == 0

# Permission bits do not stop the superuser.
needs_unprivileged = pytest.mark.skipif(
    IS_ROOT or sys.platform.startswith("win"),
    reason="permission checks are bypassed for root / unsupported on Windows",
)


@pytest.fixture()
def corpus(tmp_path: Path) -> Path:
    """A small tree with hidden entries, a nested dir and mixed content::

        root/
          a.txt          hello world / hello rust
          b.log          nothing
          .env           SECRET=hello
          sub/
            c.txt        foo / foo / foobar
            deep/
              d.txt      hello again
          .hidden_dir/
            e.txt        hello hidden
    """
    root = tmp_path / "root"
    (root / "sub" / "deep").mkdir(parents=True)
    (root / ".hidden_dir").mkdir()
    (root / "a.txt").write_text("hello world\nhello rust", encoding="utf-8")
    (root / "b.log").write_text("nothing", encoding="utf-8")
    (root / ".env").write_text("SECRET=hello\n", encoding="utf-8")
    (root / "sub" / "c.txt").write_text("foo\nfoo\nfoobar\n", encoding="utf-8")
    (root / "sub" / "deep" / "d.txt").write_text("hello again\n", encoding="utf-8")
    (root / ".hidden_dir" / "e.txt").write_text("hello hidden\n", encoding="utf-8")
    return root


def rel_names(root: Path, paths) -> set[str]:
    return {Path(p).relative_to(root).as_posix() for p in paths}
