"""
Persistence media and the alias mapping store.
"""

from .base import BaseKeyValueStore
from .file_storage import FileStorage
from .mappings import MappingStore
from .storage import Storage
from .storage_factory import get_storage

__all__ = ["BaseKeyValueStore", "FileStorage", "MappingStore", "Storage", "get_storage"]
