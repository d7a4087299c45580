"""
History module for slink_local.

Responsibilities:
    - Record every shortening event (long URL, short URL, timestamp, clicks)
    - Keep records most-recent-first under a single key of the medium
    - Count clicks on previously shortened URLs
    - Provide summary statistics

Persistence discipline:
    Every mutation reads the whole list, changes it and writes the whole list
    back, inside `storage.transaction()`. There is no incremental format.

    A missing or unparseable list reads as empty. Individual entries that fail
    validation are skipped (and dropped by the next write).
"""

import json
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from ..exceptions import PersistenceCorrupt
from ..log import get_logger
from ..storage.base import BaseKeyValueStore
from .base import BaseHistory
from .models import HistoryRecord

HISTORY_KEY = "urlHistory"

log = get_logger("history")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HistoryStore(BaseHistory):
    def __init__(
        self,
        storage: BaseKeyValueStore,
        key: str = HISTORY_KEY,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Args:
            storage (BaseKeyValueStore): Persistence medium.
            key (str): Medium key holding the JSON array.
            clock (Callable[[], datetime]): Source of creation timestamps.
        """
        self.storage = storage
        self.key = key
        self.clock = clock

    # ---------------------------------------------------------------------
    # Serialization
    # ---------------------------------------------------------------------
    def _decode(self, raw: Optional[str]) -> List[HistoryRecord]:
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise PersistenceCorrupt(f"{self.key} is not valid JSON") from exc
        if not isinstance(data, list):
            raise PersistenceCorrupt(f"{self.key} is not a JSON array")

        records: List[HistoryRecord] = []
        for item in data:
            try:
                records.append(HistoryRecord.model_validate(item))
            except ValidationError as exc:
                log.warning("Skipping malformed history entry %r: %s", item, exc.errors()[0]["msg"])
        return records

    def _load(self) -> List[HistoryRecord]:
        try:
            return self._decode(self.storage.get(self.key))
        except PersistenceCorrupt as exc:
            log.warning("Ignoring corrupt history: %s", exc)
            return []

    def _save(self, records: List[HistoryRecord]) -> None:
        self.storage.set(self.key, json.dumps([r.to_json() for r in records], ensure_ascii=False))

    def _next_id(self, records: List[HistoryRecord], now: datetime) -> int:
        # Millisecond timestamp, bumped past the newest id when the clock stalls.
        candidate = int(now.timestamp() * 1000)
        if records:
            candidate = max(candidate, max(r.id for r in records) + 1)
        return candidate

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    def append(self, long_url: str, short_url: str) -> HistoryRecord:
        """
        Create a record with zero clicks and put it at the front of the history.

        Returns:
            HistoryRecord: The stored record.
        """
        with self.storage.transaction():
            records = self._load()
            now = self.clock()
            record = HistoryRecord(
                id=self._next_id(records, now),
                long_url=long_url,
                short_url=short_url,
                created_at=now,
                clicks=0,
            )
            records.insert(0, record)
            self._save(records)
        log.debug("History record %s added for %s", record.id, short_url)
        return record

    def list(self) -> List[HistoryRecord]:
        return self._load()

    def get(self, record_id: int) -> Optional[HistoryRecord]:
        for record in self._load():
            if record.id == record_id:
                return record
        return None

    def remove(self, record_id: int) -> None:
        with self.storage.transaction():
            records = self._load()
            kept = [r for r in records if r.id != record_id]
            if len(kept) != len(records):
                self._save(kept)
                log.debug("History record %s removed", record_id)

    def clear(self) -> None:
        with self.storage.transaction():
            self.storage.remove(self.key)
        log.debug("History cleared")

    def record_click(self, short_url: str) -> Optional[HistoryRecord]:
        """
        Increment clicks on the most recent record whose short URL matches.

        Returns:
            Optional[HistoryRecord]: The updated record, or None when no record
            matches (the URL may not have come from this history).
        """
        with self.storage.transaction():
            records = self._load()
            for index, record in enumerate(records):
                if record.short_url == short_url:
                    records[index] = record.clicked()
                    self._save(records)
                    return records[index]
        return None

    def total_clicks(self) -> int:
        return sum(r.clicks for r in self._load())

    def summary(self) -> Dict[str, Any]:
        """
        Aggregate view of the history.

        Returns:
            Dict[str, Any]:
                - records: int
                - total_clicks: int
                - top: short URL of the most-clicked record (None when empty
                  or nothing has been clicked)
                - last_created: ISO timestamp of the newest record or None
        """
        records = self._load()
        top = max(records, key=lambda r: r.clicks, default=None)
        return {
            "records": len(records),
            "total_clicks": sum(r.clicks for r in records),
            "top": top.short_url if top is not None and top.clicks > 0 else None,
            "last_created": records[0].created_at.isoformat() if records else None,
        }
