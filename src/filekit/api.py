"""
filekit.api
===========

Programmatic entrypoints for the scanning engine.

Goals:
  - No argparse / console dependencies
  - Setup problems raise (``FatalSetupError``); per-file problems are
    returned in the report's ``errors`` list
  - JSON-friendly outputs validated against the bundled schemas

Usage::

    from filekit.api import count_matches, replace_text, search_files

    report, report_dict = count_matches(".", "TODO")
    for hit in iter_search("src/*.py", "def "):
        print(hit.path, hit.line_number)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator

from filekit.contracts.load import validate_instance
from filekit.core.config import FilekitConfig
from filekit.core.patterns import compile_pattern, split_search_target
from filekit.core.runner import run_operation, stream
from filekit.model import PatternKind
from filekit.model.entry import FilterPolicy
from filekit.model.outcome import ErrorLog
from filekit.model.report import (
    CountReport,
    ReplaceReport,
    SearchHit,
    SearchReport,
    TreeReport,
)
from filekit.operations.count import CountOperation
from filekit.operations.replace import ReplaceOperation
from filekit.operations.search import SearchOperation
from filekit.operations.tree import TreeOperation


def _config(config: FilekitConfig | None) -> FilekitConfig:
    return config if config is not None else FilekitConfig()


def _build_search(
    target: str,
    pattern: str,
    *,
    case_insensitive: bool,
    regex: bool,
    config: FilekitConfig,
) -> tuple[Path, SearchOperation]:
    root, wildcard = split_search_target(target)
    operation = SearchOperation(
        compile_pattern(pattern, PatternKind.CONTENT, case_insensitive=case_insensitive, regex=regex),
        compile_pattern(wildcard, PatternKind.FILENAME),
        encoding=config.encoding,
        default_policy=config.for_command("search").policy,
    )
    return root, operation


# ── search ──────────────────────────────────────────────────────────


def iter_search(
    target: str,
    pattern: str,
    *,
    case_insensitive: bool = False,
    regex: bool = True,
    policy: FilterPolicy | None = None,
    errors: ErrorLog | None = None,
    config: FilekitConfig | None = None,
) -> Iterator[SearchHit]:
    """Lazily yield search hits for ``"dir/wildcard"`` *target*.

    Root and pattern problems raise before the iterator is returned.
    """
    root, operation = _build_search(
        target, pattern, case_insensitive=case_insensitive, regex=regex, config=_config(config)
    )
    return stream(root, operation, policy=policy, errors=errors)


def search_files(
    target: str,
    pattern: str,
    *,
    case_insensitive: bool = False,
    regex: bool = True,
    policy: FilterPolicy | None = None,
    config: FilekitConfig | None = None,
) -> tuple[SearchReport, dict[str, Any]]:
    """Collect every search hit into a report.

    Returns
    -------
    ``(SearchReport, report_dict)``
        The dataclass and the schema-validated JSON dict.
    """
    root, operation = _build_search(
        target, pattern, case_insensitive=case_insensitive, regex=regex, config=_config(config)
    )
    report: SearchReport = run_operation(root, operation, policy=policy)
    report_dict = report.to_dict()
    validate_instance(report_dict, "search_report.schema.json")
    return report, report_dict


# ── count ───────────────────────────────────────────────────────────


def count_matches(
    root: str | Path,
    pattern: str,
    *,
    regex: bool = False,
    case_insensitive: bool = False,
    policy: FilterPolicy | None = None,
    config: FilekitConfig | None = None,
) -> tuple[CountReport, dict[str, Any]]:
    """Count matching lines under *root*; *pattern* is literal unless *regex*."""
    cfg = _config(config)
    operation = CountOperation(
        compile_pattern(pattern, PatternKind.CONTENT, case_insensitive=case_insensitive, regex=regex),
        encoding=cfg.encoding,
        default_policy=cfg.for_command("count").policy,
    )
    report: CountReport = run_operation(root, operation, policy=policy)
    report_dict = report.to_dict()
    validate_instance(report_dict, "count_report.schema.json")
    return report, report_dict


# ── replace ─────────────────────────────────────────────────────────


def replace_text(
    root: str | Path,
    old: str,
    new: str,
    *,
    dry_run: bool = False,
    backup: bool = False,
    policy: FilterPolicy | None = None,
    config: FilekitConfig | None = None,
) -> tuple[ReplaceReport, dict[str, Any]]:
    """Replace every literal *old* with *new* in the files under *root*.

    Not transactional: files already rewritten stay rewritten if the run is
    interrupted.
    """
    cfg = _config(config)
    operation = ReplaceOperation(
        old,
        new,
        dry_run=dry_run,
        backup=backup,
        backup_suffix=cfg.backup_suffix,
        encoding=cfg.encoding,
        default_policy=cfg.for_command("replace").policy,
    )
    report: ReplaceReport = run_operation(root, operation, policy=policy)
    report_dict = report.to_dict()
    validate_instance(report_dict, "replace_report.schema.json")
    return report, report_dict


# ── tree ────────────────────────────────────────────────────────────


def list_tree(
    root: str | Path,
    *,
    policy: FilterPolicy | None = None,
    config: FilekitConfig | None = None,
) -> tuple[TreeReport, dict[str, Any]]:
    """List every entry under *root* with its depth and size."""
    cfg = _config(config)
    root_p = Path(root)
    operation = TreeOperation(root_p, default_policy=cfg.for_command("tree").policy)
    report: TreeReport = run_operation(root_p, operation, policy=policy)
    report_dict = report.to_dict()
    validate_instance(report_dict, "tree_report.schema.json")
    return report, report_dict
