"""Content-addressed hash store and per-path file index."""
from __future__ import annotations

from typing import Optional

from catalog import db
from catalog.models import FileRecord, HashRecord

_FILE_COLUMNS = "id, path, size, modified_time, hash_id"


def _file_record(row: tuple) -> FileRecord:
    return FileRecord(
        id=row[0],
        path=row[1],
        size=row[2],
        modified_time=row[3],
        hash_id=row[4],
    )


class HashStore:
    """(size, digest) -> stable id. Rows are append-only."""

    def resolve_or_create(self, size: int, digest: str) -> int:
        """
        Return the id for (size, digest), inserting a row on first sight.

        Racing callers on the same key all get the single surviving id: the
        unique-constraint conflict is absorbed by ON CONFLICT DO NOTHING and
        the lookup runs in the same transaction.
        """
        with db.transaction() as conn:
            conn.execute(
                "INSERT INTO file_hash (size, digest) VALUES (?, ?) "
                "ON CONFLICT (size, digest) DO NOTHING",
                [size, digest],
            )
            row = conn.execute(
                "SELECT id FROM file_hash WHERE size = ? AND digest = ?",
                [size, digest],
            ).fetchone()
        return row[0]

    def get(self, hash_id: int) -> Optional[HashRecord]:
        row = db.query_one(
            "SELECT id, size, digest FROM file_hash WHERE id = ?", [hash_id]
        )
        if row is None:
            return None
        return HashRecord(id=row[0], size=row[1], digest=row[2])

    def count(self) -> int:
        return db.query_one("SELECT count(*) FROM file_hash")[0]


class FileIndex:
    """path -> (hash_id, size, modified_time), upserted on path."""

    def get(self, path: str) -> Optional[FileRecord]:
        row = db.query_one(
            f"SELECT {_FILE_COLUMNS} FROM file WHERE path = ?", [path]
        )
        return _file_record(row) if row else None

    def upsert(self, path: str, hash_id: int, size: int, modified_time: int) -> None:
        """Insert the record for path, or overwrite its content fields.

        hash_id must already exist in the HashStore.
        """
        db.execute(
            """
            INSERT INTO file (path, hash_id, size, modified_time)
            VALUES (?, ?, ?, ?)
            ON CONFLICT (path) DO UPDATE SET
                hash_id       = excluded.hash_id,
                size          = excluded.size,
                modified_time = excluded.modified_time
            """,
            [path, hash_id, size, modified_time],
        )

    def all(self) -> list[FileRecord]:
        rows = db.query(f"SELECT {_FILE_COLUMNS} FROM file ORDER BY path")
        return [_file_record(r) for r in rows]

    def delete(self, file_id: int) -> None:
        db.execute("DELETE FROM file WHERE id = ?", [file_id])

    def count(self) -> int:
        return db.query_one("SELECT count(*) FROM file")[0]
