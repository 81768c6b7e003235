"""
utils/logger.py
---------------
Centralized logging configuration.
All modules should use `get_logger(__name__)` to obtain a logger instance.
The server's own loggers (uvicorn, uvicorn.error, uvicorn.access) are
routed through the same stdout handler so every line shares one format.
"""

import logging
import sys
from typing import Optional

from config import LOG_LEVEL

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

_handler: Optional[logging.Handler] = None


def configure_logging(level: str = LOG_LEVEL) -> None:
    """
    Install the stdout handler on the root logger (once) and apply `level`.
    Unknown level names fall back to INFO.
    """
    global _handler
    root = logging.getLogger()
    if _handler is None:
        _handler = logging.StreamHandler(sys.stdout)
        _handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
        root.addHandler(_handler)

    resolved = logging.getLevelName(level.upper())
    root.setLevel(resolved if isinstance(resolved, int) else logging.INFO)

    for name in _SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger instance.

    Args:
        name: Usually ``__name__`` of the calling module.
    """
    if _handler is None:
        configure_logging()
    return logging.getLogger(name)
