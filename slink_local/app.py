"""
Wiring for slink_local.

Architecture:
    - Factory (`create_manager`) builds a SlinkManager from explicit
      dependencies, falling back to configuration for anything not given.
      Tests call it with an in-memory Storage for isolation.
    - `get_manager()` returns the process-wide manager, created lazily on first
      access from settings and kept until `reset_manager()`.

Example:
    >>> from slink_local.app import get_manager
    >>> manager = get_manager()
    >>> manager.shorten("https://example.com/page")  # doctest: +SKIP
    'https://tinyurl.com/...'
"""

import threading
from typing import Optional, Sequence

import requests

from .config import settings
from .history.history import HistoryStore
from .log import configure_logging, get_logger
from .manager.providers import Provider, ProviderChain
from .manager.slink_manager import SlinkManager
from .storage.base import BaseKeyValueStore
from .storage.mappings import MappingStore
from .storage.storage_factory import get_storage

log = get_logger()

_manager: Optional[SlinkManager] = None
_manager_lock = threading.Lock()


def create_manager(
    storage: Optional[BaseKeyValueStore] = None,
    origin: Optional[str] = None,
    providers: Optional[Sequence[Provider]] = None,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> SlinkManager:
    """
    Build a SlinkManager with its stores and provider chain.

    Args:
        storage: Persistence medium; defaults to `get_storage()`.
        origin: Local origin for alias and fallback URLs; defaults to
            settings.LOCAL_ORIGIN.
        providers: Ordered providers; defaults to settings.PROVIDERS.
        session: HTTP session for provider calls.
        timeout: Per-call provider timeout in seconds.

    Raises:
        StorageConfigError: When the configured storage backend is unusable.
    """
    storage = storage if storage is not None else get_storage()
    origin = (origin or settings.LOCAL_ORIGIN).rstrip("/")
    resolver = ProviderChain(origin=origin, providers=providers, session=session, timeout=timeout)
    return SlinkManager(
        mappings=MappingStore(storage, origin),
        history=HistoryStore(storage),
        resolver=resolver,
    )


def get_manager() -> SlinkManager:
    """Process-wide manager, created on first call."""
    global _manager
    with _manager_lock:
        if _manager is None:
            configure_logging()
            _manager = create_manager()
            log.info(
                "slink_local ready (storage=%s, providers=%s)",
                settings.STORAGE_BACKEND,
                ",".join(p.name for p in _manager.resolver.providers) or "none",
            )
        return _manager


def reset_manager() -> None:
    """Forget the process-wide manager; the next get_manager() rebuilds it."""
    global _manager
    with _manager_lock:
        _manager = None
