"""Exception types raised by dupfind."""
from __future__ import annotations

from typing import Optional


class DupfindError(Exception):
    """Base class for errors reported to the user as a one-line message."""


class ConfigError(DupfindError):
    """Configuration file or environment override is invalid."""


class ScanCancelledError(DupfindError):
    """A scan stopped early because one of its file tasks failed.

    ``cause`` is the first failure observed; later failures are only counted.
    """

    def __init__(self, cause: BaseException, path: Optional[str] = None):
        self.cause = cause
        self.path = path
        where = f" ({path})" if path else ""
        super().__init__(
            f"scan cancelled after error{where}: {type(cause).__name__}: {cause}"
        )
