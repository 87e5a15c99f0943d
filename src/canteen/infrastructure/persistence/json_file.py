"""Shared JSON file plumbing for the file-backed repositories.

Every CLI command is its own process, so a read-modify-write must hold a
lock that other processes see.  ``PathLock`` pairs an OS-level lock on a
``<file>.lock`` sidecar with a re-entrant thread lock shared by every
repository instance in the process.  Writes go to a fresh temporary file in
the same directory and are moved into place, so readers never see a
half-written file.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

from filelock import FileLock, Timeout

from canteen.domain.exceptions import ConnectivityError

LOCK_TIMEOUT_SECONDS = 10.0

_locks: dict[Path, PathLock] = {}
_locks_guard = threading.Lock()


class PathLock:
    """Inter-process lock for one data file; re-entrant within a thread."""

    def __init__(self, path: Path, timeout: float = LOCK_TIMEOUT_SECONDS) -> None:
        self.path = path
        self._thread_lock = threading.RLock()
        self._file_lock = FileLock(f"{path}.lock", timeout=timeout)

    def __enter__(self) -> PathLock:
        self._thread_lock.acquire()
        try:
            self._file_lock.acquire()
        except Timeout as exc:
            self._thread_lock.release()
            raise ConnectivityError(f"Timed out waiting for {self.path.name}") from exc
        return self

    def __exit__(self, *exc_info) -> None:
        try:
            self._file_lock.release()
        finally:
            self._thread_lock.release()


def lock_for(path: Path) -> PathLock:
    key = path.resolve()
    with _locks_guard:
        if key not in _locks:
            _locks[key] = PathLock(key)
        return _locks[key]


class JsonFile:

    def __init__(self, path: Path, empty: Any) -> None:
        self.path = path
        self._empty = empty
        self._ensure_dir()
        self.lock = lock_for(path)
        self._ensure_file()

    def read(self) -> Any:
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ConnectivityError(f"Cannot read {self.path.name}: {exc}") from exc

    def write(self, data: Any) -> None:
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(json.dumps(data, indent=2, ensure_ascii=False) + "\n")
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise ConnectivityError(f"Cannot write {self.path.name}: {exc}") from exc

    def _ensure_dir(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConnectivityError(f"Cannot create {self.path.parent}: {exc}") from exc

    def _ensure_file(self) -> None:
        with self.lock:
            if not self.path.exists():
                self.write(self._empty)
