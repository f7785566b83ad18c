"""dupfind delete-files-not-found: drop catalog entries for vanished files."""

from __future__ import annotations

import sys

from catalog.queries import delete_not_found
from dupfind.commands import effective_config, emit_report, open_catalog


def cmd_delete_files_not_found(args) -> None:
    cfg = effective_config(args)
    quiet = getattr(args, "quiet", False)
    open_catalog(cfg)

    deleted = delete_not_found()
    if not quiet:
        for path in deleted:
            print(f"Deleted not found entry: {path}", file=sys.stderr)
        print(f"Removed {len(deleted):,} stale entries.", file=sys.stderr)

    emit_report(cfg, quiet=quiet)
