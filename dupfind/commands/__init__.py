import sys
from typing import Optional

from catalog import db
from catalog.queries import duplicate_summary, find_duplicates
from dupfind.config import Config, get_config
from dupfind.report import write_report


def effective_config(args) -> Config:
    """Return the loaded config with any command-line overrides applied."""
    cfg = get_config()
    overrides = {
        "storage_location": getattr(args, "db", None),
        "result_output_path": getattr(args, "output", None),
        "search_path": getattr(args, "path", None),
        "concurrency_limit": getattr(args, "concurrency", None),
    }
    update = {k: v for k, v in overrides.items() if v is not None}
    return cfg.model_copy(update=update) if update else cfg


def open_catalog(cfg: Config) -> None:
    db.init_db(cfg.storage_location)


def format_size(n: Optional[int]) -> str:
    if n is None:
        return "0 B"
    value = float(n)
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if value < 1024:
            return f"{value:.1f} {unit}" if unit != "B" else f"{int(value)} B"
        value /= 1024
    return f"{value:.1f} PB"


def emit_report(cfg: Config, quiet: bool = False) -> int:
    """Write the duplicate report to cfg.result_output_path and summarize it."""
    n = write_report(find_duplicates(), cfg.result_output_path)
    if not quiet:
        groups, files, wasted = duplicate_summary()
        if n:
            print(
                f"{groups:,} duplicate groups, {files:,} files, "
                f"{format_size(wasted)} reclaimable. "
                f"Report written to {cfg.result_output_path}",
                file=sys.stderr,
            )
        else:
            print(
                f"No duplicates found. Empty report written to {cfg.result_output_path}",
                file=sys.stderr,
            )
    return n
