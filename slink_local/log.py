"""
Logging setup for slink_local.

Every module logs through a child of the "slink" logger. Applications that
configure logging themselves keep their setup; `configure_logging()` only adds a
console handler when the root logger has none.
"""

import logging
from typing import Optional

from .config import settings

LOGGER_NAME = "slink"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the "slink" logger or one of its children (e.g. "slink.providers")."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}" if name else LOGGER_NAME)


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    log = get_logger()
    # basic console logging (optional)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=(level or settings.LOG_LEVEL), format=LOG_FORMAT)
    elif level:
        log.setLevel(level)
    return log
