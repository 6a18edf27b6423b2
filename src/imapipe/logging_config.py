"""
Logging Setup

Every module logs through logging.getLogger(__name__). This helper wires the
handlers for applications that embed the pipeline.
"""

import logging
import logging.handlers
import os
import sys
from typing import Optional

from .config import DEFAULT_CONFIG

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    max_file_size: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    Configure logging for the imapipe package.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
                   None uses PipelineConfig.LOG_LEVEL (IMAPIPE_LOG_LEVEL).
        log_file: Path to log file (optional)
        max_file_size: Maximum size of log file before rotation
        backup_count: Number of rotated files to keep
        format_string: Custom format string for log messages

    Returns:
        The "imapipe" package logger
    """
    level = getattr(logging, (log_level or DEFAULT_CONFIG.LOG_LEVEL).upper(), logging.INFO)
    formatter = logging.Formatter(
        format_string or DEFAULT_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    package_logger = logging.getLogger("imapipe")
    package_logger.setLevel(level)
    package_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    package_logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size,
            backupCount=backup_count,
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        package_logger.addHandler(file_handler)

    # Pillow is chatty at DEBUG (plugin loading)
    logging.getLogger("PIL").setLevel(logging.WARNING)

    return package_logger
