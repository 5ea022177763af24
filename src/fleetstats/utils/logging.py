"""Logger setup for the fleetstats service.

Component modules log through children of the "fleetstats" logger
("fleetstats.breakdown", "fleetstats.ticks", ...); configuring the parent
once at startup routes all of them to the same handlers.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Union

from fleetstats.config.settings import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def resolve_level(level: Union[int, str]) -> int:
    """Accept a numeric level or a level name ("debug", "INFO", ...).

    Raises:
        ValueError: If the name is not a logging level
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def setup_logger(
    name: str = "fleetstats",
    log_file: str = "./logs/fleetstats.log",
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 3,
    level: Union[int, str] = logging.INFO,
) -> logging.Logger:
    """Attach a rotating file handler and a console handler to a logger.

    Calling it again for an already configured logger only updates the
    level, so handlers are never duplicated.

    Args:
        name: Logger name
        log_file: Path to log file (parent directories are created)
        max_bytes: Max size before rotation
        backup_count: Number of rotated files to keep
        level: Numeric level or level name

    Returns:
        Configured logger instance
    """
    level = resolve_level(level)
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    handlers = [
        RotatingFileHandler(
            log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        ),
        logging.StreamHandler(),
    ]
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def setup_logger_from_settings(settings: Settings, name: str = "fleetstats") -> logging.Logger:
    """Configure the service logger from FLEETSTATS_LOG_* settings."""
    return setup_logger(
        name,
        settings.log_file,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
        level=settings.log_level,
    )
