"""
Base key-value interface for slink_local.

Purpose:
    Define a small, stable contract (get / set / remove of a whole string value
    under a string key) that multiple persistence media can implement. The
    alias map and the history list each live under one key, so neither store
    depends on the storage technology underneath.

Concurrency:
    Stores perform read-modify-write of a whole collection. Those sequences run
    inside `transaction()`, which by default holds a re-entrant lock shared by
    every caller of the same medium instance. FileStorage swaps in a lock
    shared by all instances on one path, and DBStorage adds a database
    transaction with an advisory lock.

Testing & Coverage:
    Abstract methods are not executed directly in tests and are annotated with
    `# pragma: no cover`.
"""

import contextlib
import threading
from abc import ABC, abstractmethod
from typing import Iterator, Optional


class BaseKeyValueStore(ABC):
    """Abstract base class for persistence media."""

    def __init__(self) -> None:
        self._lock = threading.RLock()

    @abstractmethod  # pragma: no cover
    def get(self, key: str) -> Optional[str]:
        """
        Return the raw string stored under `key`.

        Returns:
            Optional[str]: The stored value, or None if the key is absent.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def set(self, key: str, value: str) -> None:
        """Store `value` under `key`, replacing any previous value."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def remove(self, key: str) -> None:
        """Delete `key`. Removing an absent key is not an error."""
        raise NotImplementedError

    @contextlib.contextmanager
    def transaction(self) -> Iterator["BaseKeyValueStore"]:
        """
        Serialize a read-modify-write sequence against this medium.

        Example:
            >>> with storage.transaction():
            ...     raw = storage.get("urlHistory")
            ...     storage.set("urlHistory", raw)
        """
        with self._lock:
            yield self
