"""
Storage module for slink_local (in-memory implementation).

Responsibilities:
    - Keep raw string values by key for the lifetime of the instance
    - Satisfy the BaseKeyValueStore contract for tests and throwaway sessions

Design:
    - Intentionally simple to keep unit/integration tests fast and deterministic.
    - For data that must survive restarts use FileStorage or DBStorage.
"""

from typing import Dict, Optional

from .base import BaseKeyValueStore


class Storage(BaseKeyValueStore):
    def __init__(self):
        """
        Initialize an empty key-value dictionary.

        Internal schema:
            self.values = {key: raw_json_string}
        """
        super().__init__()
        self.values: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self.values[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self.values.pop(key, None)
