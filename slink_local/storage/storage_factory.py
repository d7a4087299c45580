"""
Storage factory – pick the persistence medium from config
=========================================================

Centralizes selection of the key-value backend so the stores and the manager
stay ignorant of where data lives.

- Reads settings **at call time** to avoid stale values in tests.
- Imports the DB backend **only if** the selected backend is "postgres".

Environment variables
---------------------
- SLINK_STORAGE_BACKEND: "file" (default), "memory" or "postgres"
- SLINK_STORAGE_PATH:    JSON document path if backend=="file"
- SLINK_DB_DSN:          DSN string if backend=="postgres"
"""

from typing import Optional

from ..config import settings
from ..exceptions import StorageConfigError
from ..log import get_logger
from .base import BaseKeyValueStore
from .file_storage import FileStorage
from .storage import Storage

log = get_logger("storage")


def get_storage(backend: Optional[str] = None, **kwargs) -> BaseKeyValueStore:
    """
    Return a key-value medium based on configuration.

    Parameters
    ----------
    backend : str, optional
        "file", "memory" or "postgres". If omitted, reads SLINK_STORAGE_BACKEND.
    kwargs : dict
        Extra args for the backend: path="..." for file, dsn="..." for postgres.

    Raises
    ------
    StorageConfigError
        Unknown backend, or postgres selected without a DSN.
    """
    be = (backend or settings.STORAGE_BACKEND).strip().lower()
    log.debug("Selected storage backend: %r", be)

    if be == "memory":
        return Storage()

    if be == "file":
        path = kwargs.get("path") or settings.STORAGE_PATH
        return FileStorage(path)

    if be == "postgres":
        dsn = kwargs.get("dsn") or settings.DB_DSN
        if not dsn:
            raise StorageConfigError("DB_DSN is required for postgres backend (env SLINK_DB_DSN)")
        # Local import to avoid a hard dependency when not using postgres
        from .db_storage import DBStorage

        return DBStorage(dsn=dsn)

    raise StorageConfigError(f"Unknown storage backend: {be!r}")
