"""
Logging configuration for the Builder.io page builder.
Provides consistent logging across all modules.
"""

import logging
import sys
from pathlib import Path
from typing import Optional


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Get a configured logger instance.

    The level is applied to the console handler and, if unset, to the
    "builder" parent. The child itself stays at NOTSET so handlers added
    to the parent (see setup_file_logging) decide what they receive.

    Args:
        name: Logger name (usually module name)
        level: Logging level (default INFO)

    Returns:
        Configured logger under the "builder" namespace
    """
    parent = logging.getLogger("builder")
    if parent.level == logging.NOTSET:
        parent.setLevel(level)

    logger = logging.getLogger(f"builder.{name}")

    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(
            logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
        )

        logger.addHandler(console_handler)

    return logger


def setup_file_logging(log_dir: Optional[Path] = None, level: int = logging.DEBUG) -> Path:
    """
    Add file handler to root builder logger.

    Args:
        log_dir: Directory for log files. If None, uses ./logs
        level: File logging level (default DEBUG)

    Returns:
        Path of the log file
    """
    if log_dir is None:
        log_dir = Path.cwd() / "logs"

    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "builder_pages.log"

    root_logger = logging.getLogger("builder")
    root_logger.setLevel(min(root_logger.level or level, level))

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    root_logger.addHandler(file_handler)
    return log_file
