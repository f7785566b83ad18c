"""Bounded-concurrency scan of a directory tree into the catalog."""

from __future__ import annotations

import logging
import os
import stat
import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from catalog.store import FileIndex, HashStore
from dupfind.errors import ScanCancelledError
from dupfind.exclusions import DEFAULT_IGNORE_DIRS, is_excluded_dir
from dupfind.hash_utils import file_signature, hash_file, needs_rehash

logger = logging.getLogger("dupfind.scan")

CONCURRENCY_LIMIT = 10


class CancelFlag:
    """
    Run-wide stop signal. Only ever moves from unset to set.

    The first error passed to fail() is kept; later ones are ignored, so
    any number of failing tasks can race to report.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self.error: Optional[BaseException] = None
        self.error_path: Optional[str] = None

    def is_set(self) -> bool:
        return self._event.is_set()

    def set(self) -> None:
        self._event.set()

    def fail(self, exc: BaseException, path: Optional[str] = None) -> bool:
        """Record exc if it is the first failure, then set the flag.
        Returns True for the first failure only."""
        with self._lock:
            first = self.error is None
            if first:
                self.error = exc
                self.error_path = path
        self._event.set()
        return first


@dataclass
class ScanStats:
    files_scanned: int = 0
    files_hashed: int = 0
    files_cached: int = 0
    files_empty: int = 0
    files_cancelled: int = 0
    bytes_hashed: int = 0
    errors: int = 0
    stopped: bool = False


def iter_files(root: str, ignore_dirs: Iterable[str] = DEFAULT_IGNORE_DIRS) -> Iterator[str]:
    """
    Yield regular files under root in a stable depth-first order.
    Symlinks are neither followed nor yielded; ignored directories are pruned
    by name; unreadable directories are skipped.
    """
    ignore = frozenset(ignore_dirs)

    def _onerror(e: OSError) -> None:
        logger.debug("cannot read directory: %s: %s", e.filename, e.strerror)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_onerror, followlinks=False):
        dirnames[:] = sorted(d for d in dirnames if not is_excluded_dir(d, ignore))
        for filename in sorted(filenames):
            path = os.path.join(dirpath, filename)
            try:
                st = os.lstat(path)
            except OSError as e:
                logger.debug("cannot stat %s: %s", path, e.strerror)
                continue
            if stat.S_ISREG(st.st_mode):
                yield path


class Scheduler:
    """
    Walks a tree and hashes changed files on a worker pool.

    At most ``concurrency_limit`` tasks are in flight at once; the walk blocks
    until one finishes before admitting another file. The first task failure
    sets the cancel flag: no further files are admitted, tasks that have not
    started yet return without doing work, and run() raises
    ScanCancelledError once everything in flight has drained.

    Each call to run() starts with a fresh cancel flag and fresh stats, so an
    instance can be reused after a failed or stopped run. stop() applies to
    the run in progress.
    """

    def __init__(
        self,
        concurrency_limit: int = CONCURRENCY_LIMIT,
        ignore_dirs: Iterable[str] = DEFAULT_IGNORE_DIRS,
        hash_store: Optional[HashStore] = None,
        file_index: Optional[FileIndex] = None,
    ) -> None:
        if concurrency_limit < 1:
            raise ValueError("concurrency_limit must be at least 1")
        self.concurrency_limit = concurrency_limit
        self.ignore_dirs = frozenset(ignore_dirs)
        self.hash_store = hash_store or HashStore()
        self.file_index = file_index or FileIndex()
        self.cancel = CancelFlag()
        self.stats = ScanStats()
        self._stats_lock = threading.Lock()
        self._stop_requested = False

    def stop(self) -> None:
        """Stop admitting files without treating the run as failed."""
        self._stop_requested = True
        self.cancel.set()

    def _count(self, **deltas: int) -> None:
        with self._stats_lock:
            for name, n in deltas.items():
                setattr(self.stats, name, getattr(self.stats, name) + n)

    # -- per-file task -------------------------------------------------------

    def _process(self, path: str) -> None:
        size, mtime = file_signature(os.stat(path))
        if size == 0:
            logger.debug("[empty]   %s", path)
            self._count(files_empty=1)
            return
        if not needs_rehash(size, mtime, self.file_index.get(path)):
            logger.debug("[cached]  %s", path)
            self._count(files_cached=1)
            return
        digest = hash_file(path)
        hash_id = self.hash_store.resolve_or_create(size, digest)
        self.file_index.upsert(path, hash_id, size, mtime)
        logger.debug("[hashed]  %s %s", digest, path)
        self._count(files_hashed=1, bytes_hashed=size)

    def _task(self, path: str) -> None:
        if self.cancel.is_set():
            self._count(files_cancelled=1)
            return
        try:
            self._process(path)
        except Exception as e:
            self._count(errors=1)
            if self.cancel.fail(e, path):
                logger.error("error processing %s: %s", path, e)
            else:
                logger.debug("further error after cancel: %s: %s", path, e)
            raise

    # -- driver --------------------------------------------------------------

    def run(self, root: str) -> ScanStats:
        self.cancel = CancelFlag()
        self.stats = ScanStats()
        self._stop_requested = False
        max_workers = max(1, min(self.concurrency_limit, os.cpu_count() or 1))
        in_flight: set[Future] = set()
        logger.debug(
            "scanning %s (limit=%d, workers=%d)", root, self.concurrency_limit, max_workers
        )
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="dupfind-hash") as pool:
            try:
                for path in iter_files(root, self.ignore_dirs):
                    self._count(files_scanned=1)
                    while len(in_flight) >= self.concurrency_limit:
                        # Failures were recorded by _task before its future completed.
                        _, in_flight = wait(in_flight, return_when=FIRST_COMPLETED)
                    if self.cancel.is_set():
                        self._count(files_cancelled=1)
                        logger.debug("cancel flag set, no longer admitting files")
                        break
                    in_flight.add(pool.submit(self._task, path))
            except KeyboardInterrupt:
                self.stop()
                wait(in_flight)
                raise
            wait(in_flight)

        self.stats.stopped = self._stop_requested
        if self.cancel.error is not None:
            raise ScanCancelledError(self.cancel.error, self.cancel.error_path) from self.cancel.error
        return self.stats
