"""
Logging configuration for ConnectionChecker.

Console output for the user goes through rich; this module only handles
diagnostic logging, optionally mirrored to a rotating log file.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "connectioncheck"


class StructuredFormatter(logging.Formatter):
    """Pipe-separated formatter for log files."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "module_name"):
            record.module_name = record.module
        if not hasattr(record, "function_name"):
            record.function_name = record.funcName
        if not hasattr(record, "thread_name"):
            record.thread_name = record.threadName
        return super().format(record)


def setup_logging(
    level: str = "WARNING",
    log_file: str | Path | None = None,
    max_bytes: int = 5242880,  # 5MB
    backup_count: int = 3,
    enable_console: bool = True,
) -> logging.Logger:
    """
    Set up logging for ConnectionChecker.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path; enables the rotating file handler
        max_bytes: Maximum log file size before rotation
        backup_count: Number of backup log files to keep
        enable_console: Enable logging to stderr

    Returns:
        The package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    logger.setLevel(logging.DEBUG if log_file else numeric_level)

    # Repeated calls (tests, nested CLI invocations) must not stack handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(StructuredFormatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)-32s | %(thread_name)-24s | "
                "%(function_name)-24s | %(lineno)-4d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Args:
        name: Module name (e.g., 'connectioncheck.trace.core')

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def configure_logging(debug: bool = False, log_file: str | Path | None = None) -> logging.Logger:
    """Quick logging configuration used by the CLI."""
    return setup_logging(
        level="DEBUG" if debug else "WARNING",
        log_file=log_file,
    )
