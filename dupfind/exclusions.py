"""Ignore-directory matching used while walking the search path."""

from __future__ import annotations

from typing import Iterable

# ---------------------------------------------------------------------------
# Directory names skipped when no ignore_dirs are configured
# ---------------------------------------------------------------------------
DEFAULT_IGNORE_DIRS: frozenset[str] = frozenset(
    [
        ".git",
        "node_modules",
    ]
)


def is_excluded_dir(dirname: str, ignore_dirs: Iterable[str]) -> bool:
    """Return True if dirname is one of the ignored names (exact match)."""
    return dirname in ignore_dirs
