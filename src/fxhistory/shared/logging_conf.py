# src/fxhistory/shared/logging_conf.py
"""
Logging Configuration - Logging Setup and Configuration

This module provides centralized logging configuration for the command-line
entry points. Library modules only create loggers with
``logging.getLogger(__name__)``; handlers are attached here, once per process.

Files that USE this module:
- fxhistory.app (setup_logging function for logging initialization)

Files that this module USES:
- None (pure configuration module)
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s :: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    log_dir: Optional[Union[str, Path]] = None,
    log_to_stdout: bool = True,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> None:
    """
    Configure application-wide logging settings.

    Args:
        level: Logging level, as a number or a name such as "DEBUG"
        log_file: Optional path to log file (enables file logging)
        log_dir: Optional directory for log files; the file is fxhistory.log.
                 Takes precedence over log_file.
        log_to_stdout: Also log to stdout (disable when a supervisor already
                       captures output and a file is configured)
        max_bytes: Maximum size per log file before rotation (default: 10MB)
        backup_count: Number of backup log files to keep (default: 5)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    handlers: List[logging.Handler] = []

    if log_to_stdout:
        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.setFormatter(formatter)
        handlers.append(stdout_handler)

    log_file_path: Optional[Path] = None
    if log_dir:
        log_file_path = Path(log_dir) / "fxhistory.log"
    elif log_file:
        log_file_path = Path(log_file)

    if log_file_path is not None:
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    # Never leave the process without any handler
    if not handlers:
        handlers = [logging.StreamHandler(sys.stdout)]

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,
    )

    logger = logging.getLogger(__name__)
    if log_file_path is not None:
        logger.info("Logging configured: file=%s, level=%s", log_file_path, logging.getLevelName(level))
    else:
        logger.info("Logging configured: stdout, level=%s", logging.getLevelName(level))
