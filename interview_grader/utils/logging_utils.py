"""
Logging utilities for the Interview Grader platform.

This module provides logging setup and configuration for the application.
"""
import os
import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    max_file_size: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
    log_format: Optional[str] = None,
    datefmt: Optional[str] = None,
) -> None:
    """
    Configure application logging with a console handler and, optionally, a
    rotating file handler.

    Args:
        log_level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to the log file; no file handler when omitted
        max_file_size: Maximum size of log file before rotating (bytes)
        backup_count: Number of backup log files to keep
        log_format: Format string for console records
        datefmt: Date format for both handlers
    """
    # Convert log level string to logging constant
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    datefmt = datefmt or DEFAULT_DATEFMT

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear existing handlers (in case this function is called multiple times)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(logging.Formatter(log_format or DEFAULT_FORMAT, datefmt=datefmt))
    root_logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_file_size,
            backupCount=backup_count
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(levelname)s - %(name)s - %(module)s:%(lineno)d - %(message)s',
            datefmt=datefmt
        ))
        root_logger.addHandler(file_handler)

    logging.info("Logging configured with level: %s", log_level)
