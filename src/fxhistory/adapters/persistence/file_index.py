# src/fxhistory/adapters/persistence/file_index.py
"""
File Index - Chronological Index of the Snapshot Store

Scans the daily snapshot directory and turns its file names into an
ascending list of FileIndexEntry. Only names of the exact form
``YYYY-MM-DD.json`` that describe a real calendar day are kept; everything
else in the directory is ignored.

Files that USE this module:
- fxhistory.application.history_service (build_file_index once per run)
- tests.test_file_index (unit tests)

Files that this module USES:
- fxhistory.domain.models (FileIndexEntry)
- fxhistory.domain.errors (SnapshotStoreError)
"""
from __future__ import annotations

import logging
import re
from datetime import date
from pathlib import Path
from typing import List, Optional, Union

from fxhistory.domain.errors import SnapshotStoreError
from fxhistory.domain.models import FileIndexEntry

log = logging.getLogger(__name__)

SNAPSHOT_FILENAME_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})\.json$")


def parse_date_from_filename(filename: str) -> Optional[date]:
    """
    Parse the calendar day encoded in a snapshot file name.

    Args:
        filename: Bare file name such as ``2024-01-31.json``

    Returns:
        The date, or None when the name does not match the pattern or the
        numbers do not form a real day (e.g. ``2021-02-30.json``)
    """
    match = SNAPSHOT_FILENAME_RE.match(filename)
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        log.warning("Skipping invalid date filename: %s", filename)
        return None


def build_file_index(store_path: Union[str, Path]) -> List[FileIndexEntry]:
    """
    Build the ascending index of daily snapshot files.

    Args:
        store_path: Snapshot directory

    Returns:
        Entries sorted by date; empty when the directory does not exist yet

    Raises:
        SnapshotStoreError: If the directory exists but cannot be listed
    """
    store = Path(store_path)
    try:
        names = [child.name for child in store.iterdir()]
    except FileNotFoundError:
        log.info("Snapshot directory %s does not exist yet", store)
        return []
    except OSError as e:
        log.error("Cannot read snapshot directory %s: %s", store, e)
        raise SnapshotStoreError(f"Cannot read snapshot directory {store}: {e}") from e

    entries = []
    for name in names:
        day = parse_date_from_filename(name)
        if day is not None:
            entries.append(FileIndexEntry(filename=name, date=day))

    entries.sort(key=lambda entry: entry.date)
    return entries
