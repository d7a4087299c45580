"""
SlinkManager module for slink_local.

Responsibilities:
    - Validate long URLs before anything is stored
    - Route custom aliases to the mapping store, everything else to the
      provider chain
    - Record each successful shortening in the history
    - Expose click counting and history maintenance to the presentation layer

Design notes:
    - Storage, history and the provider chain are injected; the manager holds
      no global state.
    - Only InvalidInput escapes `shorten`. Provider and storage trouble is
      absorbed below this layer.
    - Clearing history needs an explicit confirmation from the caller.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..exceptions import InvalidInput
from ..history.base import BaseHistory
from ..history.models import HistoryRecord
from ..log import get_logger
from ..storage.mappings import MappingStore
from .providers import ProviderChain
from .validation import validate_url

log = get_logger("manager")


@dataclass(frozen=True)
class ShortenResult:
    """Short URL plus where it came from ("alias", a provider name or "fallback")."""

    short_url: str
    source: str
    record: HistoryRecord


class SlinkManager:
    """
    Coordinates validation, resolution and history for shortened links.
    """

    def __init__(self, mappings: MappingStore, history: BaseHistory, resolver: ProviderChain):
        """
        Args:
            mappings (MappingStore): Custom alias store.
            history (BaseHistory): Shortening history with click counters.
            resolver (ProviderChain): Provider chain with local fallback.
        """
        self.mappings = mappings
        self.history = history
        self.resolver = resolver

    # ---------------------------------------------------------------------
    # Validation
    # ---------------------------------------------------------------------
    def validate_url(self, url: str) -> bool:
        return validate_url(url)

    def _clean_url(self, url: Optional[str]) -> str:
        """
        Trim and validate a long URL.

        Raises:
            InvalidInput: If the URL is empty or malformed.
        """
        cleaned = (url or "").strip()
        if not cleaned:
            raise InvalidInput("Please enter a URL")
        if not validate_url(cleaned):
            raise InvalidInput("Please enter a valid URL")
        return cleaned

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    def shorten_with_details(self, long_url: str, alias: Optional[str] = "") -> ShortenResult:
        """
        Shorten a URL and report how the short form was obtained.

        Rules:
            - Validate the URL (empty / malformed -> InvalidInput).
            - Non-empty alias -> "{origin}/{alias}" in the mapping store
              (last write wins).
            - Otherwise ask the provider chain (falls back to a local token).
            - Append the result to the history.

        Raises:
            InvalidInput: On an empty or malformed URL.
        """
        url = self._clean_url(long_url)
        token = (alias or "").strip()

        if token:
            short_url = self.mappings.put(token, url)
            source = "alias"
        else:
            resolution = self.resolver.resolve(url)
            short_url = resolution.short_url
            source = resolution.source

        record = self.history.append(url, short_url)
        log.info("Shortened %s -> %s (%s)", url, short_url, source)
        return ShortenResult(short_url=short_url, source=source, record=record)

    def shorten(self, long_url: str, alias: Optional[str] = "") -> str:
        """
        Shorten a URL, optionally under a custom alias.

        Returns:
            str: The short URL.

        Raises:
            InvalidInput: On an empty or malformed URL.
        """
        return self.shorten_with_details(long_url, alias).short_url

    def record_click(self, short_url: str) -> bool:
        """Count a click on a short URL; False when no history record matches."""
        updated = self.history.record_click(short_url)
        if updated is None:
            log.debug("Click on %s not in history", short_url)
            return False
        return True

    def list_history(self) -> List[HistoryRecord]:
        return self.history.list()

    def delete_history_item(self, record_id: int) -> None:
        self.history.remove(record_id)

    def clear_history(self, confirmed: bool = False) -> bool:
        """
        Remove every history record, but only when the caller confirmed.

        Returns:
            bool: True if the history was cleared.
        """
        if not confirmed:
            return False
        self.history.clear()
        return True

    def lookup_alias(self, alias: str) -> Optional[str]:
        """Long URL currently mapped to `alias`, or None."""
        return self.mappings.get(alias)

    def history_summary(self) -> Dict[str, Any]:
        return self.history.summary()
