# src/fxhistory/application/snapshot_service.py
"""
Snapshot Service - Daily Snapshot Collection

Fetches today's rates and the currency list from a RateProvider and stores
them as compact JSON:
- currencies/currencies.json (currency code -> name)
- latest/data.json (most recent snapshot)
- data/YYYY-MM-DD.json (today's entry in the snapshot store)

All files go through the idempotent writer, so re-running on the same day
with unchanged upstream data writes nothing.

Files that USE this module:
- fxhistory.app (fetch entry point)
- tests.test_snapshot_service (unit tests)

Files that this module USES:
- fxhistory.adapters.providers.base (RateProvider interface)
- fxhistory.adapters.persistence.file_store (serialize_json, write_if_changed)
- fxhistory.config (settings for default directories)
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Union

from fxhistory.adapters.persistence.file_store import serialize_json, write_if_changed
from fxhistory.adapters.providers.base import RateProvider
from fxhistory.config import settings

logger = logging.getLogger(__name__)


def collect_daily_snapshot(
    provider: RateProvider,
    data_dir: Union[str, Path, None] = None,
    latest_dir: Union[str, Path, None] = None,
    currencies_dir: Union[str, Path, None] = None,
    today: Optional[date] = None,
) -> Dict[Path, bool]:
    """
    Fetch and store the currency list and today's snapshot.

    Args:
        provider: Upstream rate provider
        data_dir: Snapshot store directory (defaults to settings.data_dir)
        latest_dir: Directory for data.json (defaults to settings.latest_dir)
        currencies_dir: Directory for currencies.json (defaults to settings.currencies_dir)
        today: UTC day the snapshot is filed under (defaults to today, UTC)

    Returns:
        Mapping of every target path to whether it was rewritten

    Raises:
        ProviderUnavailableError: If the provider cannot be reached
        InvalidRateError: If the provider returns an unusable payload
        ArtifactWriteError: If a file cannot be written
    """
    data_dir = Path(data_dir) if data_dir is not None else settings.data_dir
    latest_dir = Path(latest_dir) if latest_dir is not None else settings.latest_dir
    currencies_dir = Path(currencies_dir) if currencies_dir is not None else settings.currencies_dir
    if today is None:
        today = datetime.now(timezone.utc).date()

    for directory in (latest_dir, currencies_dir, data_dir):
        directory.mkdir(parents=True, exist_ok=True)

    results: Dict[Path, bool] = {}

    currencies_path = currencies_dir / "currencies.json"
    results[currencies_path] = write_if_changed(
        currencies_path, serialize_json(provider.currencies()), log_prefix="[CURRENCIES LIST] "
    )

    snapshot = serialize_json(provider.latest())
    latest_path = latest_dir / "data.json"
    daily_path = data_dir / f"{today.isoformat()}.json"
    results[latest_path] = write_if_changed(latest_path, snapshot, log_prefix="[LATEST RATES] ")
    results[daily_path] = write_if_changed(daily_path, snapshot, log_prefix="[DAILY RATES] ")

    logger.info("Daily snapshot collection finished: %d of %d files changed", sum(results.values()), len(results))
    return results
