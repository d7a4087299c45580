"""
FileStorage – JSON-document-backed storage for slink_local
==========================================================

The local equivalent of a browser's localStorage: every key/value pair lives in
a single JSON object on disk, so aliases and history survive process restarts.

Key Design Points
-----------------
- **Whole-document I/O**: each call reads the current document from disk, and
  each mutation rewrites it. Nothing is cached between calls.
- **Shared locking**: every instance opened on the same path shares one
  `PathLock`, a re-entrant thread lock plus an exclusive `flock` on a sidecar
  `<name>.lock` file. Threads, separate instances and separate processes
  therefore serialize their read-modify-write sequences.
- **Atomic replace**: writes go to a temporary file in the same directory that
  is then `os.replace`d over the target, so a crash never leaves a truncated
  document behind.
- **Corruption**: an unreadable or non-object document is logged and treated
  as empty; the next write replaces it.

Example
-------
>>> storage = FileStorage("/tmp/slink/store.json")
>>> storage.set("customMappings", "{}")
>>> storage.get("customMappings")
'{}'
"""

import contextlib
import fcntl
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, Optional, Union

from ..log import get_logger
from .base import BaseKeyValueStore

log = get_logger("storage.file")


class PathLock:
    """
    Re-entrant lock for one store document, shared across threads and processes.

    The outermost holder takes `fcntl.flock(LOCK_EX)` on the sidecar file;
    nested acquisitions by the same thread only bump a depth counter.
    """

    _registry: Dict[str, "PathLock"] = {}
    _registry_guard = threading.Lock()

    def __init__(self, lock_path: Path) -> None:
        self.lock_path = lock_path
        self._rlock = threading.RLock()
        self._depth = 0
        self._fh = None

    @classmethod
    def for_document(cls, path: Path) -> "PathLock":
        """Return the lock shared by every store opened on `path`."""
        key = str(path.expanduser().resolve())
        with cls._registry_guard:
            lock = cls._registry.get(key)
            if lock is None:
                resolved = Path(key)
                lock = cls._registry[key] = cls(resolved.with_name(resolved.name + ".lock"))
            return lock

    def __enter__(self) -> "PathLock":
        self._rlock.acquire()
        try:
            if self._depth == 0:
                self.lock_path.parent.mkdir(parents=True, exist_ok=True)
                fh = open(self.lock_path, "a+")
                try:
                    fcntl.flock(fh.fileno(), fcntl.LOCK_EX)
                except BaseException:
                    fh.close()
                    raise
                self._fh = fh
            self._depth += 1
        except BaseException:
            self._rlock.release()
            raise
        return self

    def __exit__(self, *exc_info) -> None:
        try:
            self._depth -= 1
            if self._depth == 0:
                fh, self._fh = self._fh, None
                try:
                    fcntl.flock(fh.fileno(), fcntl.LOCK_UN)
                finally:
                    fh.close()
        finally:
            self._rlock.release()


class FileStorage(BaseKeyValueStore):
    """Single-JSON-file implementation of the key-value contract.

    Parameters
    ----------
    path : str | Path
        Location of the JSON document. Parent directories are created the
        first time the document is locked.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__()
        self.path = Path(path)
        self._lock = PathLock.for_document(self.path)

    # ---- Internal helpers -------------------------------------------------

    def _read(self) -> Dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            log.warning("Cannot read %s, treating it as empty: %s", self.path, exc)
            return {}
        try:
            document = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as exc:
            log.warning("Corrupt store document %s, treating it as empty: %s", self.path, exc)
            return {}
        if not isinstance(document, dict):
            log.warning("Store document %s is not a JSON object, treating it as empty", self.path)
            return {}
        return {str(k): v for k, v in document.items() if isinstance(v, str)}

    def _write(self, document: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".store-", suffix=".json", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(document, fh, ensure_ascii=False, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise

    # ---- Contract methods -------------------------------------------------

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            document = self._read()
            document[key] = value
            self._write(document)

    def remove(self, key: str) -> None:
        with self._lock:
            document = self._read()
            if key in document:
                del document[key]
                self._write(document)
