"""
slink_local package initializer.
"""

from . import history
from . import manager
from . import storage
from .app import create_manager, get_manager, reset_manager
from .exceptions import InvalidInput

__all__ = [
    "history",
    "manager",
    "storage",
    "create_manager",
    "get_manager",
    "reset_manager",
    "InvalidInput",
]
