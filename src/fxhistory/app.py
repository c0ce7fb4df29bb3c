# src/fxhistory/app.py
"""
Application Entry Points - History Generation and Snapshot Collection

This module is the composition root for the two scheduled jobs:
- main(): regenerate the downsampled history files (fxhistory-generate,
  python -m fxhistory)
- fetch_main(): collect today's snapshot from the upstream provider
  (fxhistory-fetch)

Library code raises exceptions; only these functions turn fatal errors into
a non-zero process exit code.

Files that USE this module:
- python -m fxhistory (module entry point)
- console scripts declared in pyproject.toml

Files that this module USES:
- fxhistory.shared.logging_conf (setup_logging for logging configuration)
- fxhistory.config (settings for directories and logging)
- fxhistory.application.history_service (generate_history)
- fxhistory.application.snapshot_service (collect_daily_snapshot)
- fxhistory.adapters.providers.openexchange (OpenExchangeRatesProvider)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations for forward references

import logging  # Standard library for logging messages and errors
import os  # Operating system interface for the working directory
import sys  # System-specific parameters and functions for exit codes

from fxhistory.config import settings  # Application configuration
from fxhistory.domain.errors import DomainError  # Base class of all fatal pipeline errors
from fxhistory.shared.logging_conf import setup_logging  # Configure logging with file rotation


def _configure_logging() -> logging.Logger:
    setup_logging(
        level=logging.INFO,
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        log_to_stdout=settings.log_stdout,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )
    logger = logging.getLogger(__name__)
    logger.info("Working directory: %s", os.getcwd())
    return logger


def main() -> None:
    """
    Regenerate every history period from the snapshot store.

    Exits with status 1 when the snapshot directory cannot be read or the
    history directory cannot be created. Per-period write failures are
    reported and also produce status 1, after every period has been tried.
    """
    from fxhistory.application.history_service import generate_history

    logger = _configure_logging()
    try:
        report = generate_history(
            data_dir=settings.data_dir,
            history_dir=settings.history_dir,
            default_base=settings.default_base,
            read_workers=settings.read_workers,
        )
    except DomainError as e:
        logger.error("History generation aborted: %s", e)
        sys.exit(1)

    for outcome in report.outcomes:
        logger.info(
            "Period %s: %s%s",
            outcome.period,
            outcome.status,
            f" ({outcome.reason})" if outcome.reason else "",
        )
    if report.failed:
        logger.error("%d period(s) failed to write", len(report.failed))
        sys.exit(1)


def fetch_main() -> None:
    """
    Fetch today's snapshot and the currency list from Open Exchange Rates.

    Exits with status 1 when OXR_APP_ID is missing, the provider fails or a
    file cannot be written.
    """
    from fxhistory.adapters.providers.openexchange import OpenExchangeRatesProvider
    from fxhistory.application.snapshot_service import collect_daily_snapshot

    logger = _configure_logging()
    try:
        provider = OpenExchangeRatesProvider()
        collect_daily_snapshot(
            provider,
            data_dir=settings.data_dir,
            latest_dir=settings.latest_dir,
            currencies_dir=settings.currencies_dir,
        )
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        sys.exit(1)
    except (DomainError, OSError) as e:
        logger.error("Daily snapshot collection failed: %s", e)
        sys.exit(1)
    logger.info("All data fetching and saving tasks completed successfully.")


if __name__ == "__main__":
    main()
