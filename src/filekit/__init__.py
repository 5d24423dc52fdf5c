"""filekit: file-corpus scanning engine and file utility CLI."""

__all__ = [
    "__version__",
    "search_files",
    "iter_search",
    "count_matches",
    "replace_text",
    "list_tree",
    # Engine
    "walk",
    "scan_lines",
    "compile_pattern",
    "FilterPolicy",
    "WalkEntry",
]
__version__ = "0.1.0"

# Programmatic entrypoints.
from filekit.api import (  # noqa: E402, F401
    count_matches,
    iter_search,
    list_tree,
    replace_text,
    search_files,
)

from filekit.core.patterns import compile_pattern  # noqa: E402, F401
from filekit.core.scanner import scan_lines  # noqa: E402, F401
from filekit.core.walker import walk  # noqa: E402, F401
from filekit.model.entry import FilterPolicy, WalkEntry  # noqa: E402, F401
