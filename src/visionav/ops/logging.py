"""
Logging setup.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import List, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Chatty third-party loggers capped at WARNING
QUIET_LOGGERS = ("comtypes", "uvicorn.access")


def setup_logging(log_path: Optional[str], log_level: str, max_bytes: int = 5_000_000, backups: int = 3) -> None:
    """
    Configure root logging to stderr and, when log_path is set, a rotating file.

    Args:
        log_path: Log file path; parent directories are created. None = console only.
        log_level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_path:
        log_dir = os.path.dirname(log_path)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        handlers.append(RotatingFileHandler(log_path, maxBytes=max_bytes, backupCount=backups))

    logging.basicConfig(
        level=getattr(logging, log_level),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
