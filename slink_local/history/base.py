"""
Abstract Base Class for history backends.

Responsibilities:
    - Define the operations the manager relies on for shortening history
    - Support substitution (e.g. a store over a different medium or a fake)
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .models import HistoryRecord

__all__ = ["BaseHistory"]


class BaseHistory(ABC):
    """Abstract base for pluggable history backends."""

    @abstractmethod
    def append(self, long_url: str, short_url: str) -> HistoryRecord:  # pragma: no cover
        """Record a new shortening event at the front of the history."""
        raise NotImplementedError

    @abstractmethod
    def list(self) -> List[HistoryRecord]:  # pragma: no cover
        """Return every record, most recent first. Never raises."""
        raise NotImplementedError

    @abstractmethod
    def remove(self, record_id: int) -> None:  # pragma: no cover
        """Delete a record by id; unknown ids are ignored."""
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:  # pragma: no cover
        """Delete every record."""
        raise NotImplementedError

    @abstractmethod
    def record_click(self, short_url: str) -> Optional[HistoryRecord]:  # pragma: no cover
        """Bump the click counter of the newest record with this short URL."""
        raise NotImplementedError

    def summary(self) -> Dict[str, Any]:
        """Record count and total clicks; backends may add more detail."""
        records = self.list()
        return {"records": len(records), "total_clicks": sum(r.clicks for r in records)}
