"""Unit tests for dupfind.hash_utils."""
import os
import tempfile

import pytest
import xxhash

from catalog.models import FileRecord
from dupfind.hash_utils import file_signature, hash_file, needs_rehash


class TestHashFile:
    def _write_tmp(self, content: bytes) -> str:
        f = tempfile.NamedTemporaryFile(delete=False)
        f.write(content)
        f.close()
        return f.name

    def test_known_content_returns_xxh3_digest(self):
        content = b"hello dupfind"
        path = self._write_tmp(content)
        try:
            assert hash_file(path) == xxhash.xxh3_64(content).hexdigest()
        finally:
            os.unlink(path)

    def test_returns_16_char_hex_string(self):
        path = self._write_tmp(b"test data")
        try:
            result = hash_file(path)
            assert isinstance(result, str)
            assert len(result) == 16
            assert all(c in "0123456789abcdef" for c in result)
        finally:
            os.unlink(path)

    def test_same_content_same_hash(self):
        path1 = self._write_tmp(b"consistent content")
        path2 = self._write_tmp(b"consistent content")
        try:
            assert hash_file(path1) == hash_file(path2)
        finally:
            os.unlink(path1)
            os.unlink(path2)

    def test_different_content_different_hash(self):
        path1 = self._write_tmp(b"content A")
        path2 = self._write_tmp(b"content B")
        try:
            assert hash_file(path1) != hash_file(path2)
        finally:
            os.unlink(path1)
            os.unlink(path2)

    def test_nonexistent_file_raises(self):
        with pytest.raises(OSError):
            hash_file("/nonexistent/path/to/file.txt")

    def test_multi_chunk_file_matches_one_shot_digest(self):
        # Spans several 8 KiB chunks plus a partial tail
        content = bytes(range(256)) * 100
        path = self._write_tmp(content)
        try:
            assert hash_file(path) == xxhash.xxh3_64(content).hexdigest()
            assert hash_file(path, chunk_size=100) == hash_file(path)
        finally:
            os.unlink(path)

    def test_does_not_modify_file(self):
        path = self._write_tmp(b"read only please")
        try:
            before = os.stat(path)
            hash_file(path)
            after = os.stat(path)
            assert (before.st_size, before.st_mtime) == (after.st_size, after.st_mtime)
        finally:
            os.unlink(path)


class TestFileSignature:
    def test_mtime_floored(self):
        class FakeStat:
            st_size = 42
            st_mtime = 1700000000.9

        assert file_signature(FakeStat()) == (42, 1700000000)


class TestNeedsRehash:
    def _cached(self, size=1024, mtime=1700000000):
        return FileRecord(id=1, path="/x", size=size, modified_time=mtime, hash_id=1)

    def test_no_cache_means_rehash(self):
        assert needs_rehash(1024, 1700000000, None) is True

    def test_matching_mtime_and_size_no_rehash(self):
        assert needs_rehash(1024, 1700000000, self._cached()) is False

    def test_changed_mtime_triggers_rehash(self):
        assert needs_rehash(1024, 1700000999, self._cached()) is True

    def test_changed_size_triggers_rehash(self):
        assert needs_rehash(2048, 1700000000, self._cached()) is True

    def test_empty_file_never_hashed(self):
        assert needs_rehash(0, 1700000000, None) is False

    def test_empty_file_skipped_even_if_previously_indexed(self):
        assert needs_rehash(0, 1700000999, self._cached()) is False
