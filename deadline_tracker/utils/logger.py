"""
Logging Configuration for Deadline Tracker.
Provides centralized logging setup for the API and the extraction pipeline.
"""

import os
import logging
import sys
from pathlib import Path
from typing import List, Optional
from logging.handlers import RotatingFileHandler

SERVICE_LOGGER = "deadline_tracker"
DEFAULT_LOG_FILE = "/tmp/logs/deadline_tracker.log"
DEFAULT_LOG_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "%(filename)s:%(lineno)d - %(message)s"
)

# Third-party loggers that are chatty at INFO when decoding uploads
QUIET_LOGGERS = ("pypdf", "multipart", "python_multipart")


def _resolve_level(level: str) -> int:
    numeric = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric, int):
        raise ValueError(f"Invalid log level: {level}")
    return numeric


def _build_handlers(log_file: str, max_bytes: int, backup_count: int) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if not log_file:
        return handlers

    # Create logs directory if it doesn't exist
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    handlers.append(RotatingFileHandler(
        log_file,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    ))
    return handlers


def setup_logging(
    level: Optional[str] = None,
    log_format: Optional[str] = None,
    log_file: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5
) -> logging.Logger:
    """
    Set up logging for the service.

    Level and file default to the ``LOG_LEVEL`` and ``LOG_FILE`` environment
    variables. Setting ``LOG_FILE`` to an empty string logs to stdout only.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: Custom log format string
        log_file: Path to log file (default: /tmp/logs/deadline_tracker.log)
        max_bytes: Size at which the log file rotates
        backup_count: Number of rotated files kept

    Returns:
        The ``deadline_tracker`` logger

    Raises:
        ValueError: If the level name is unknown
    """
    level = level or os.getenv("LOG_LEVEL", "INFO")
    if log_file is None:
        log_file = os.getenv("LOG_FILE", DEFAULT_LOG_FILE)

    logging.basicConfig(
        level=_resolve_level(level),
        format=log_format or DEFAULT_LOG_FORMAT,
        handlers=_build_handlers(log_file, max_bytes, backup_count),
        force=True
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(SERVICE_LOGGER)
    logger.info(f"Logging configured at {level.upper()} level")
    logger.info(f"Log file: {log_file or 'disabled'}")

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the service namespace."""
    return logging.getLogger(f"{SERVICE_LOGGER}.{name}")
