"""Tests for catalog.db: opening the catalog file."""
import os

import catalog.db as db_module
from catalog.store import HashStore


class TestInitDb:
    def test_opens_given_path_and_creates_parents(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DUPFIND_DB_PATH", str(tmp_path / "from-env.duckdb"))
        target = tmp_path / "nested" / "dir" / "catalog.duckdb"
        db_module.close_db()

        db_module.init_db(str(target))
        HashStore().resolve_or_create(3, "c" * 16)

        assert target.exists()
        assert not os.path.exists(tmp_path / "from-env.duckdb")

    def test_second_init_keeps_existing_connection(self, tmp_path):
        conn = db_module.get_connection()
        db_module.init_db(str(tmp_path / "other.duckdb"))
        assert db_module.get_connection() is conn
        assert not (tmp_path / "other.duckdb").exists()
