"""CSV export of the duplicate report."""
from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Iterable

from catalog.models import DuplicateRow

logger = logging.getLogger("dupfind.report")

REPORT_COLUMNS: list[str] = list(DuplicateRow.model_fields)


def write_report(rows: Iterable[DuplicateRow], output_path: str | Path) -> int:
    """
    Write one header row then one row per duplicate-group member, in the
    order given. Returns the number of data rows written.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    n = 0
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(REPORT_COLUMNS)
        for row in rows:
            writer.writerow([getattr(row, col) for col in REPORT_COLUMNS])
            n += 1
    if n == 0:
        logger.info("no duplicates found; wrote header only to %s", output_path)
    return n
