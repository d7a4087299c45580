"""
Error taxonomy for slink_local.

Only `InvalidInput` and `StorageConfigError` ever reach a caller. The others are
raised and absorbed inside the resolver and the stores, so that provider and
storage trouble degrades to a fallback value instead of an error.
"""

__all__ = [
    "SlinkError",
    "InvalidInput",
    "ProviderUnavailable",
    "PersistenceCorrupt",
    "StorageConfigError",
]


class SlinkError(Exception):
    """Base class for every slink_local error."""


class InvalidInput(SlinkError, ValueError):
    """Empty or syntactically invalid URL (or alias)."""


class ProviderUnavailable(SlinkError):
    """A single shortening provider failed; the chain moves on."""

    def __init__(self, provider: str, reason: str):
        super().__init__(f"{provider}: {reason}")
        self.provider = provider
        self.reason = reason


class PersistenceCorrupt(SlinkError):
    """A stored collection is missing or cannot be parsed."""


class StorageConfigError(SlinkError, ValueError):
    """Unknown storage backend or missing backend settings."""
