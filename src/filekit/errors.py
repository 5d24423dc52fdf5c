"""Exception hierarchy for filekit.

Only *setup* failures are raised to callers: anything that goes wrong
with a single entry during a walk is recorded in an ``ErrorLog`` instead
(see ``filekit.model.outcome``).
"""

from __future__ import annotations

from pathlib import Path


class FilekitError(RuntimeError):
    """Base class for every error filekit raises on purpose."""


class FatalSetupError(FilekitError):
    """Raised before any work is done; the command cannot start."""


class ScanRootError(FatalSetupError):
    """The scan root is missing or cannot be read."""

    def __init__(self, root: Path, reason: str) -> None:
        self.root = root
        self.reason = reason
        super().__init__(f"cannot scan {root}: {reason}")


class InvalidPattern(FatalSetupError):
    """A filename wildcard or content pattern failed to compile."""

    def __init__(self, pattern: str, detail: str) -> None:
        self.pattern = pattern
        self.detail = detail
        super().__init__(f"invalid pattern {pattern!r}: {detail}")


class ConfigError(FatalSetupError):
    """The configuration file is unreadable or malformed."""
