"""Shared utilities for filekit."""

from filekit.utils.exit_codes import ExitCode
from filekit.utils.json_norm import stable_json_dump, stable_json_dumps

__all__ = [
    "ExitCode",
    "stable_json_dump",
    "stable_json_dumps",
]
