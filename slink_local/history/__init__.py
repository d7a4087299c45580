"""
Shortening history and click counters.
"""

from .base import BaseHistory
from .history import HISTORY_KEY, HistoryStore
from .models import HistoryRecord

__all__ = ["BaseHistory", "HISTORY_KEY", "HistoryRecord", "HistoryStore"]
