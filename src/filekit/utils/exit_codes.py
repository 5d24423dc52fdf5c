"""Exit-code contract for all CLI commands.

Code  Meaning
----  -------
  0   Success — per-file errors during a scan do not change this
  2   Error — usage error, unreadable root, malformed pattern or config
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    ERROR = 2
