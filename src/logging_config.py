"""
Centralized logging configuration for the cavern generator.

Usage:
    from logging_config import setup_logging
    setup_logging()  # Call once at startup

All loggers write WARNING+ to the console by default. If a log folder is given, DEBUG and above additionally goes to a
rotating log file in that folder.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys

import constants


def setup_logging(
    log_dir: Path | str | None = None,
    log_level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
) -> Path | None:
    """
    Configure the logging system.

    Args:
        log_dir: Folder for the log file. If None, only console logging is set up.
        log_level: Level for file logging (default: DEBUG)
        console_level: Level for console output (default: WARNING)

    Returns:
        Path to the log file, or None if no file logging was set up.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(min(log_level, console_level) if log_dir is not None else console_level)

    # Clear any existing handlers (for re-initialization)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(fmt="%(levelname)-8s | %(name)-25s | %(message)s"))
    root_logger.addHandler(console_handler)

    if log_dir is None:
        return None

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    log_file = log_path / constants.LOG_FILE_NAME

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=constants.LOG_MAX_SIZE,
        backupCount=constants.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-25s | %(funcName)-25s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root_logger.addHandler(file_handler)

    return log_file
