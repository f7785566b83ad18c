"""DuckDB connection, schema DDL, thread-safe query helpers."""
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

import duckdb

logger = logging.getLogger("catalog.db")

_lock = threading.RLock()
_conn: duckdb.DuckDBPyConnection | None = None

SCHEMA_SQL = """
CREATE SEQUENCE IF NOT EXISTS file_hash_id_seq START 1;
CREATE SEQUENCE IF NOT EXISTS file_id_seq START 1;

CREATE TABLE IF NOT EXISTS file_hash (
    id      BIGINT  PRIMARY KEY DEFAULT nextval('file_hash_id_seq'),
    size    BIGINT  NOT NULL,
    digest  TEXT    NOT NULL,
    UNIQUE (size, digest)
);

CREATE TABLE IF NOT EXISTS file (
    id              BIGINT  PRIMARY KEY DEFAULT nextval('file_id_seq'),
    path            TEXT    NOT NULL UNIQUE,
    size            BIGINT  NOT NULL,
    modified_time   BIGINT  NOT NULL,
    hash_id         BIGINT  NOT NULL
);
"""


def get_connection() -> duckdb.DuckDBPyConnection:
    if _conn is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _conn


def init_db(db_path: str) -> None:
    global _conn
    with _lock:
        if _conn is not None:
            return
        path = db_path
        if path != ":memory:":
            path = str(Path(path).expanduser())
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        logger.debug("opening catalog at %s", path)
        _conn = duckdb.connect(path)
        for stmt in _split_statements(SCHEMA_SQL):
            _conn.execute(stmt)


def close_db() -> None:
    global _conn
    with _lock:
        if _conn is not None:
            _conn.close()
        _conn = None


def _split_statements(sql: str) -> list[str]:
    """Split SQL on semicolons, preserving statement integrity."""
    return [s.strip() for s in sql.split(";") if s.strip()]


@contextmanager
def transaction() -> Iterator[duckdb.DuckDBPyConnection]:
    """Hold the global lock for the duration of one explicit transaction.

    Statements issued on the yielded connection commit together, or roll
    back together if the block raises.
    """
    with _lock:
        conn = get_connection()
        conn.execute("BEGIN TRANSACTION")
        try:
            yield conn
        except BaseException:
            conn.execute("ROLLBACK")
            raise
        conn.execute("COMMIT")


def execute(sql: str, params: list[Any] | None = None) -> None:
    """Execute a write statement under the global lock."""
    with _lock:
        conn = get_connection()
        if params:
            conn.execute(sql, params)
        else:
            conn.execute(sql)


def query(sql: str, params: list[Any] | None = None) -> list[tuple]:
    """Execute a SELECT and return all rows under the global lock."""
    with _lock:
        conn = get_connection()
        if params:
            result = conn.execute(sql, params)
        else:
            result = conn.execute(sql)
        return result.fetchall()


def query_one(sql: str, params: list[Any] | None = None) -> tuple | None:
    """Execute a SELECT and return the first row, or None."""
    rows = query(sql, params)
    return rows[0] if rows else None
