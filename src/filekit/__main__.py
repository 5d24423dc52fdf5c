"""CLI entry-point for filekit.

Usage:
    python -m filekit search <dir>/<file pattern> <content pattern> [-i] [-H] [-c] [-F] [--json]
    python -m filekit cat <dir>/<file pattern> <content pattern>    (alias of search)
    python -m filekit count <path> <pattern> [-r] [-i] [--no-hidden] [--json]
    python -m filekit replace <path> <old> <new> [-D] [-b] [--no-hidden] [--json]
    python -m filekit tree <path> [-d N] [-H] [-c] [-a] [--no-ignore] [--json]
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from filekit import __version__
from filekit.api import count_matches, iter_search, list_tree, replace_text, search_files
from filekit.core.config import FilekitConfig, load_config
from filekit.errors import FatalSetupError
from filekit.model.outcome import ErrorLog
from filekit.render import Renderer
from filekit.utils.exit_codes import ExitCode
from filekit.utils.json_norm import stable_json_dump

_logger = logging.getLogger("filekit")

ENV_LOG_LEVEL = "FILEKIT_LOG_LEVEL"


def _configure_logging(verbose: bool) -> None:
    level_name = os.getenv(ENV_LOG_LEVEL, "").upper()
    if verbose:
        level = logging.DEBUG
    elif level_name in logging.getLevelNamesMapping():
        level = logging.getLevelNamesMapping()[level_name]
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _add_ignore_flag(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--respect-ignore",
        dest="respect_ignore",
        action="store_true",
        default=None,
        help="Skip entries matched by .gitignore / .ignore files.",
    )


def _add_json_flag(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--json",
        dest="json_out",
        action="store_true",
        default=False,
        help="Print the full report as JSON to stdout.",
    )


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="filekit",
        description="File utility: recursive search, count, replace and tree listing.",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Debug logging; also list files replace left untouched.",
    )
    p.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML config file (default: $FILEKIT_CONFIG or ./.filekit.yaml).",
    )
    sub = p.add_subparsers(dest="command")

    # ── search ──────────────────────────────────────────────────────
    search_p = sub.add_parser(
        "search",
        aliases=["cat"],
        help="Search files containing a pattern.",
    )
    search_p.add_argument(
        "target",
        help="Directory and filename wildcard, split on the last '/', e.g. /var/logs/trc*",
    )
    search_p.add_argument("pattern", help="Content pattern (regex unless -F).")
    search_p.add_argument(
        "-i",
        "--case-insensitive",
        dest="case_insensitive",
        action="store_true",
        default=False,
    )
    search_p.add_argument(
        "-H",
        "--hidden",
        dest="hidden",
        action="store_true",
        default=None,
        help="Include hidden files and directories.",
    )
    search_p.add_argument(
        "-c",
        "--color",
        dest="color",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Highlight matches.",
    )
    search_p.add_argument(
        "-F",
        "--fixed-strings",
        dest="fixed_strings",
        action="store_true",
        default=False,
        help="Treat the content pattern as a literal string.",
    )
    _add_ignore_flag(search_p)
    _add_json_flag(search_p)
    search_p.set_defaults(handler=_handle_search)

    # ── count ───────────────────────────────────────────────────────
    count_p = sub.add_parser("count", help="Count lines matching a pattern.")
    count_p.add_argument("path", type=Path, help="Root directory (or file) to scan.")
    count_p.add_argument("pattern", help="Literal string, or regex with -r.")
    count_p.add_argument("-r", "--regex", action="store_true", default=False)
    count_p.add_argument(
        "-i",
        "--case-insensitive",
        dest="case_insensitive",
        action="store_true",
        default=False,
    )
    count_p.add_argument(
        "--no-hidden",
        dest="no_hidden",
        action="store_true",
        default=False,
        help="Skip hidden files and directories.",
    )
    _add_ignore_flag(count_p)
    _add_json_flag(count_p)
    count_p.set_defaults(handler=_handle_count)

    # ── replace ─────────────────────────────────────────────────────
    replace_p = sub.add_parser("replace", help="Replace a string in files.")
    replace_p.add_argument("path", type=Path, help="Root directory (or file) to rewrite.")
    replace_p.add_argument("old", help="Literal string to replace.")
    replace_p.add_argument("new", help="Replacement string.")
    replace_p.add_argument(
        "-D",
        "--dry-run",
        dest="dry_run",
        action="store_true",
        default=False,
        help="Report what would change without writing anything.",
    )
    replace_p.add_argument(
        "-b",
        "--backup",
        action="store_true",
        default=False,
        help="Copy each file to <name>.bak before rewriting it.",
    )
    replace_p.add_argument(
        "--no-hidden",
        dest="no_hidden",
        action="store_true",
        default=False,
        help="Skip hidden files and directories.",
    )
    _add_ignore_flag(replace_p)
    _add_json_flag(replace_p)
    replace_p.set_defaults(handler=_handle_replace)

    # ── tree ────────────────────────────────────────────────────────
    tree_p = sub.add_parser("tree", help="List files and directories with sizes.")
    tree_p.add_argument("path", type=Path, help="Root directory to list.")
    tree_p.add_argument("-d", "--depth", type=int, default=None, help="Maximum depth.")
    tree_p.add_argument(
        "-H",
        "--human-readable",
        dest="human_readable",
        action="store_true",
        default=False,
    )
    tree_p.add_argument(
        "-c",
        "--color",
        dest="color",
        action=argparse.BooleanOptionalAction,
        default=None,
    )
    tree_p.add_argument(
        "-a",
        "--all",
        dest="hidden",
        action="store_true",
        default=None,
        help="Include hidden files and directories.",
    )
    tree_p.add_argument(
        "--no-ignore",
        dest="no_ignore",
        action="store_true",
        default=False,
        help="List entries matched by .gitignore / .ignore files too.",
    )
    _add_json_flag(tree_p)
    tree_p.set_defaults(handler=_handle_tree)

    return p


# ── handlers ────────────────────────────────────────────────────────


def _handle_search(args: argparse.Namespace, config: FilekitConfig) -> int:
    defaults = config.for_command("search")
    policy = defaults.policy.with_overrides(
        include_hidden=args.hidden,
        respect_ignore_files=args.respect_ignore,
    )
    regex = not args.fixed_strings

    if args.json_out:
        _, report_dict = search_files(
            args.target,
            args.pattern,
            case_insensitive=args.case_insensitive,
            regex=regex,
            policy=policy,
            config=config,
        )
        stable_json_dump(report_dict, sys.stdout)
        return ExitCode.SUCCESS

    color = defaults.color if args.color is None else args.color
    renderer = Renderer(color=color)
    errors = ErrorLog()
    hits = iter_search(
        args.target,
        args.pattern,
        case_insensitive=args.case_insensitive,
        regex=regex,
        policy=policy,
        errors=errors,
        config=config,
    )
    for hit in hits:
        renderer.search_hit(hit)
    _logger.debug("search finished with %d per-entry error(s)", len(errors))
    return ExitCode.SUCCESS


def _handle_count(args: argparse.Namespace, config: FilekitConfig) -> int:
    policy = config.for_command("count").policy.with_overrides(
        include_hidden=False if args.no_hidden else None,
        respect_ignore_files=args.respect_ignore,
    )
    report, report_dict = count_matches(
        args.path,
        args.pattern,
        regex=args.regex,
        case_insensitive=args.case_insensitive,
        policy=policy,
        config=config,
    )
    if args.json_out:
        stable_json_dump(report_dict, sys.stdout)
    else:
        Renderer().count_report(report)
    return ExitCode.SUCCESS


def _handle_replace(args: argparse.Namespace, config: FilekitConfig) -> int:
    policy = config.for_command("replace").policy.with_overrides(
        include_hidden=False if args.no_hidden else None,
        respect_ignore_files=args.respect_ignore,
    )
    report, report_dict = replace_text(
        args.path,
        args.old,
        args.new,
        dry_run=args.dry_run,
        backup=args.backup,
        policy=policy,
        config=config,
    )
    if args.json_out:
        stable_json_dump(report_dict, sys.stdout)
    else:
        renderer = Renderer()
        for action in report.actions:
            renderer.file_action(action, args.old, verbose=args.verbose)
    return ExitCode.SUCCESS


def _handle_tree(args: argparse.Namespace, config: FilekitConfig) -> int:
    if args.depth is not None and args.depth < 0:
        raise FatalSetupError("--depth must be zero or positive")
    defaults = config.for_command("tree")
    policy = defaults.policy.with_overrides(
        include_hidden=args.hidden,
        max_depth=args.depth,
        respect_ignore_files=False if args.no_ignore else None,
    )
    report, report_dict = list_tree(args.path, policy=policy, config=config)
    if args.json_out:
        stable_json_dump(report_dict, sys.stdout)
        return ExitCode.SUCCESS

    color = defaults.color if args.color is None else args.color
    renderer = Renderer(color=color)
    for row in report.rows:
        renderer.tree_row(row, human_readable=args.human_readable)
    return ExitCode.SUCCESS


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help(sys.stderr)
        return ExitCode.ERROR

    try:
        config = load_config(args.config)
        return handler(args, config)
    except FatalSetupError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return ExitCode.ERROR


if __name__ == "__main__":
    raise SystemExit(main())
