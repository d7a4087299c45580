"""
Mapping store for custom aliases.

Responsibilities:
    - Compose "{origin}/{alias}" short URLs
    - Persist the alias URL -> long URL map under one key of the medium
    - Look mappings up by alias or by full short URL

Rules:
    - Last write wins: saving an alias that already exists replaces the old
      target without complaint. Aliases are a local, single-user convenience.
    - A missing or unreadable map behaves as an empty one.
"""

import json
from typing import Dict, Optional

from ..exceptions import InvalidInput, PersistenceCorrupt
from ..log import get_logger
from .base import BaseKeyValueStore

MAPPINGS_KEY = "customMappings"

log = get_logger("mappings")


class MappingStore:
    def __init__(self, storage: BaseKeyValueStore, origin: str, key: str = MAPPINGS_KEY):
        """
        Args:
            storage (BaseKeyValueStore): Persistence medium.
            origin (str): Local origin prefixed to every alias.
            key (str): Medium key holding the JSON object.
        """
        self.storage = storage
        self.origin = origin.rstrip("/")
        self.key = key

    # ---------------------------------------------------------------------
    # Serialization
    # ---------------------------------------------------------------------
    def _decode(self, raw: Optional[str]) -> Dict[str, str]:
        if raw is None:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise PersistenceCorrupt(f"{self.key} is not valid JSON") from exc
        if not isinstance(data, dict):
            raise PersistenceCorrupt(f"{self.key} is not a JSON object")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _load(self) -> Dict[str, str]:
        try:
            return self._decode(self.storage.get(self.key))
        except PersistenceCorrupt as exc:
            log.warning("Ignoring corrupt alias map: %s", exc)
            return {}

    def _save(self, mappings: Dict[str, str]) -> None:
        self.storage.set(self.key, json.dumps(mappings, ensure_ascii=False))

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    def short_url_for(self, alias: str) -> str:
        """Compose the full short URL for an alias."""
        token = (alias or "").strip()
        if not token:
            raise InvalidInput("Alias must not be empty")
        return f"{self.origin}/{token}"

    def put(self, alias: str, long_url: str) -> str:
        """
        Map `alias` to `long_url`, overwriting any previous target.

        Returns:
            str: The composed short URL.

        Raises:
            InvalidInput: If the alias is empty after trimming.
        """
        short_url = self.short_url_for(alias)
        with self.storage.transaction():
            mappings = self._load()
            previous = mappings.get(short_url)
            mappings[short_url] = long_url
            self._save(mappings)
        if previous is not None and previous != long_url:
            log.info("Alias %s now points to %s (was %s)", short_url, long_url, previous)
        return short_url

    def get(self, alias: str) -> Optional[str]:
        """Return the long URL stored for `alias`, or None."""
        try:
            short_url = self.short_url_for(alias)
        except InvalidInput:
            return None
        return self.lookup(short_url)

    def lookup(self, short_url: str) -> Optional[str]:
        """Return the long URL stored for a full short URL, or None."""
        return self._load().get(short_url)

    def remove(self, alias: str) -> None:
        """Drop an alias. Removing an unknown alias is a no-op."""
        short_url = self.short_url_for(alias)
        with self.storage.transaction():
            mappings = self._load()
            if mappings.pop(short_url, None) is not None:
                self._save(mappings)

    def all(self) -> Dict[str, str]:
        """Snapshot of every short URL -> long URL mapping."""
        return dict(self._load())
