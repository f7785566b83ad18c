"""Duplicate report query and filesystem reconciliation."""
from __future__ import annotations

import logging
import os
from typing import Callable

from catalog import db
from catalog.models import DuplicateRow
from catalog.store import FileIndex

logger = logging.getLogger("catalog.queries")

# Groups of file rows sharing a hash_id, restricted to groups of two or more.
DUPLICATES_SQL = """
WITH dup AS (
    SELECT hash_id, count(id) AS member_count
    FROM file
    GROUP BY hash_id
    HAVING count(id) > 1
)
SELECT
    f.id,
    f.path,
    f.size,
    f.modified_time,
    f.hash_id,
    h.size AS content_size,
    dup.member_count
FROM file f
JOIN dup ON f.hash_id = dup.hash_id
JOIN file_hash h ON f.hash_id = h.id
ORDER BY f.path ASC
"""


def find_duplicates() -> list[DuplicateRow]:
    rows = db.query(DUPLICATES_SQL)
    return [
        DuplicateRow(
            id=r[0],
            path=r[1],
            size=r[2],
            modified_time=r[3],
            hash_id=r[4],
            content_size=r[5],
            member_count=r[6],
        )
        for r in rows
    ]


def duplicate_summary() -> tuple[int, int, int]:
    """
    Return (groups, files, wasted_bytes) over all duplicate groups.
    wasted_bytes counts every copy beyond the first in each group.
    """
    row = db.query_one(
        """
        SELECT
            count(*),
            coalesce(sum(n), 0),
            coalesce(sum((n - 1) * h.size), 0)
        FROM (
            SELECT hash_id, count(*) AS n FROM file GROUP BY hash_id HAVING count(*) > 1
        ) g
        JOIN file_hash h ON g.hash_id = h.id
        """
    )
    return int(row[0]), int(row[1]), int(row[2])


def delete_not_found(
    index: FileIndex | None = None,
    exists: Callable[[str], bool] = os.path.exists,
) -> list[str]:
    """
    Drop every file row whose path no longer exists on disk.

    Hash rows are left alone; orphans are tolerated. Returns the deleted paths.
    """
    index = index or FileIndex()
    deleted: list[str] = []
    for record in index.all():
        if exists(record.path):
            continue
        index.delete(record.id)
        deleted.append(record.path)
        logger.info("deleted not found entry: %s", record.path)
    return deleted
