# src/fxhistory/adapters/persistence/__init__.py
"""
Persistence Adapters - Data Storage

This package contains adapters for the on-disk JSON files:
- Snapshot store index (daily files)
- Snapshot reading, artifact serialization and idempotent writes
"""

from fxhistory.adapters.persistence.file_index import build_file_index, parse_date_from_filename
from fxhistory.adapters.persistence.file_store import (
    read_snapshot,
    serialize_artifact,
    serialize_json,
    write_if_changed,
)

__all__ = [
    "build_file_index",
    "parse_date_from_filename",
    "read_snapshot",
    "serialize_artifact",
    "serialize_json",
    "write_if_changed",
]
