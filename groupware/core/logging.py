"""Logging setup for the groupware service.

``setup_logger`` is called once at startup for the ``groupware`` logger.
Modules log through ``logging.getLogger(__name__)`` and inherit its
handlers: console output, optional rotating file output, ISO 8601 times.
"""

import logging
import logging.handlers
import os
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
ISO_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _resolve_level(level: str) -> int:
    name = level.upper()
    if name not in LEVEL_NAMES:
        raise ValueError(f"Invalid log level: {level}. Must be one of: {', '.join(LEVEL_NAMES)}")
    return getattr(logging, name)


def setup_logger(
    name: str = "groupware",
    log_dir: str = "logs",
    level: str = "INFO",
    log_format: Optional[str] = None,
    date_format: Optional[str] = None,
    file_logging: bool = False,
    console_logging: bool = True,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """Configure and return the logger called ``name``.

    Args:
        name: Logger name; the package name so child loggers inherit it
        log_dir: Directory for ``<name>.log`` when file logging is on
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (any case)
        log_format: Record format, defaults to ``DEFAULT_FORMAT``
        date_format: Timestamp format, defaults to ISO 8601
        file_logging: Add a size-rotated file handler
        console_logging: Add a stderr handler
        max_bytes: Rotate the log file at this size
        backup_count: Rotated files to keep

    Calling it again only updates the level; handlers are added once.
    """
    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level(level))

    if logger.handlers:
        return logger

    formatter = logging.Formatter(log_format or DEFAULT_FORMAT, datefmt=date_format or ISO_DATE_FORMAT)
    handlers: list[logging.Handler] = []

    if file_logging:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            os.path.join(log_dir, f"{name}.log"),
            maxBytes=max_bytes,
            backupCount=backup_count,
        ))
    if console_logging:
        handlers.append(logging.StreamHandler())

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
