"""
Logging setup for the service.

One ``dictConfig`` call wires a size-rotated file log and a console log onto
the ``city_explorer`` namespace and routes uvicorn's own loggers through the
same handlers, so cache decisions, provider calls and access lines end up in
one place.
"""

import logging
import logging.config
from pathlib import Path

NAMESPACE = "city_explorer"

DETAILED_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"
CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"

# Libraries that log every request or statement at INFO/DEBUG
QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "aiosqlite", "asyncio")


def build_logging_config(
    level: str,
    log_file: str,
    max_bytes: int = 5_000_000,
    backup_count: int = 3,
) -> dict:
    """Return the ``dictConfig`` mapping used by :func:`setup_logging`."""
    console_level = level.upper() if isinstance(logging.getLevelName(level.upper()), int) else "INFO"
    handlers = ["file", "console"]
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {"format": DETAILED_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
            "console": {"format": CONSOLE_FORMAT, "datefmt": "%H:%M:%S"},
        },
        "handlers": {
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "filename": log_file,
                "maxBytes": max_bytes,
                "backupCount": backup_count,
                "encoding": "utf-8",
                "level": "DEBUG",
                "formatter": "detailed",
            },
            "console": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "level": console_level,
                "formatter": "console",
            },
        },
        "loggers": {
            NAMESPACE: {"level": "DEBUG", "handlers": handlers},
            "uvicorn.error": {"level": "INFO", "handlers": handlers, "propagate": False},
            "uvicorn.access": {"level": "INFO", "handlers": handlers, "propagate": False},
            **{name: {"level": "WARNING"} for name in QUIET_LOGGERS},
        },
    }


def setup_logging(
    level: str = "INFO",
    log_file: str = "logs/city_explorer.log",
    max_bytes: int = 5_000_000,
    backup_count: int = 3,
) -> None:
    """
    Configure application logging. Safe to call more than once.

    Args:
        level: Console log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            The file log always records DEBUG.
        log_file: Path to the log file; parent directories are created.
        max_bytes: Rotate the file log once it reaches this size.
        backup_count: Rotated files to keep.
    """
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    # dictConfig detaches old handlers without closing them
    for handler in logging.getLogger(NAMESPACE).handlers[:]:
        handler.close()

    logging.config.dictConfig(build_logging_config(level, log_file, max_bytes, backup_count))
    logging.getLogger(NAMESPACE).info("Logging configured: level=%s, file=%s", level, log_file)


def get_logger(name: str) -> logging.Logger:
    """
    Logger under the ``city_explorer`` namespace.

    Usage:
        logger = get_logger(__name__)
        logger.info("Cache MISS | %s | location=%s", table, location_id)

    Module names that already start with ``city_explorer.`` are used as-is.
    """
    if name == NAMESPACE or name.startswith(f"{NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{NAMESPACE}.{name}")
