"""
Fixtures shared by all tests.

Each test gets a fresh in-memory DuckDB: we reset the global _conn before
every test via the autouse `fresh_db` fixture, then pre-init with ":memory:"
so any later init_db() call hits the guard and skips.
"""
import os

import pytest

import catalog.db as db_module
import dupfind.config as config_module


@pytest.fixture(autouse=True)
def fresh_db():
    """Give every test a clean in-memory DuckDB."""
    db_module._conn = None
    db_module.init_db(":memory:")
    yield
    db_module.close_db()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Never read the real ~/.dupfind.config or DUPFIND_* variables."""
    for var in (
        "DUPFIND_CONFIG_PATH",
        "DUPFIND_DB_PATH",
        "DUPFIND_SEARCH_PATH",
        "DUPFIND_RESULT_PATH",
        "DUPFIND_CONCURRENCY",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("DUPFIND_CONFIG_PATH", str(tmp_path / "missing.config"))
    monkeypatch.setattr(config_module, "_config", None)
    yield


@pytest.fixture
def write_file(tmp_path):
    """Return a helper that creates tmp_path/tree/relpath and returns its path."""
    root = tmp_path.resolve() / "tree"
    root.mkdir()

    def _write(relpath: str, content: bytes = b"", mtime: int | None = None) -> str:
        path = os.path.join(str(root), relpath)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as f:
            f.write(content)
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    _write.root = str(root)
    return _write
