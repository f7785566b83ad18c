"""dupfind find-dups: scan a directory into the catalog and export duplicates."""

from __future__ import annotations

import os
import sys
import time

from dupfind.commands import effective_config, emit_report, format_size, open_catalog
from dupfind.errors import DupfindError
from dupfind.scheduler import Scheduler, ScanStats


def _format_duration(seconds: float) -> str:
    s = int(seconds)
    h, rem = divmod(s, 3600)
    m, sec = divmod(rem, 60)
    if h:
        return f"{h}:{m:02d}:{sec:02d}"
    return f"{m}:{sec:02d}"


def _print_summary(stats: ScanStats, elapsed: float) -> None:
    cached_str = f", {stats.files_cached:,} unchanged" if stats.files_cached else ""
    empty_str = f", {stats.files_empty:,} empty" if stats.files_empty else ""
    print(
        f"Scan complete: {stats.files_scanned:,} files scanned, "
        f"{stats.files_hashed:,} hashed{cached_str}{empty_str}, "
        f"{format_size(stats.bytes_hashed)} hashed, "
        f"{_format_duration(elapsed)} elapsed",
        file=sys.stderr,
    )


def cmd_find_dups(args) -> None:
    cfg = effective_config(args)
    quiet = getattr(args, "quiet", False)
    root = os.path.realpath(os.path.expanduser(cfg.search_path))
    if not os.path.isdir(root):
        raise DupfindError(f"not a directory: {root}")

    open_catalog(cfg)
    if not quiet:
        print(f"Scanning {root} (concurrency {cfg.concurrency_limit})...", file=sys.stderr)

    scheduler = Scheduler(
        concurrency_limit=cfg.concurrency_limit,
        ignore_dirs=cfg.ignore_dirs,
    )
    start = time.monotonic()
    stats = scheduler.run(root)
    if not quiet:
        _print_summary(stats, time.monotonic() - start)

    emit_report(cfg, quiet=quiet)
