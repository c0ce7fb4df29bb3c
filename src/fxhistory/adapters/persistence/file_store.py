# src/fxhistory/adapters/persistence/file_store.py
"""
File Store - Snapshot Reading and Idempotent JSON Writes

This module handles the JSON files the pipeline reads and writes:
- reading one daily snapshot file into a DailySnapshot
- deterministic, compact serialization of history artifacts
- writing a file only when its bytes actually change

Downstream deploys and CDN invalidation key off "did this file change", so
serialization must be byte-stable and unchanged content is never rewritten.

Files that USE this module:
- fxhistory.application.history_service (read_snapshot, serialize_artifact, write_if_changed)
- fxhistory.application.snapshot_service (serialize_json, write_if_changed)
- tests.test_file_store (unit tests)

Files that this module USES:
- fxhistory.domain.models (DailySnapshot, HistoryArtifact)
- fxhistory.domain.errors (SnapshotParseError, ArtifactWriteError)
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import date
from pathlib import Path
from typing import Any, Optional, Union

from fxhistory.domain.errors import ArtifactWriteError, SnapshotParseError
from fxhistory.domain.models import DailySnapshot, HistoryArtifact

log = logging.getLogger(__name__)


def _reject_constant(name: str) -> Any:
    # NaN / Infinity are not valid JSON
    raise ValueError(f"non-standard JSON constant {name}")


def read_snapshot(path: Union[str, Path], day: date) -> DailySnapshot:
    """
    Read and parse one daily snapshot file.

    Args:
        path: Snapshot file path
        day: Date the file represents (taken from its name)

    Returns:
        DailySnapshot instance

    Raises:
        SnapshotParseError: If the file cannot be read, is not valid JSON or
                            is not a JSON object
    """
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SnapshotParseError(f"Failed to read {p.name}: {e}") from e

    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:  # JSONDecodeError is a ValueError
        raise SnapshotParseError(f"Failed to parse {p.name}: {e}") from e

    if not isinstance(data, dict):
        raise SnapshotParseError(f"Failed to parse {p.name}: expected a JSON object")
    try:
        return DailySnapshot.from_json(day, data)
    except (OverflowError, ValueError) as e:
        raise SnapshotParseError(f"Failed to parse {p.name}: {e}") from e


def serialize_json(data: Any) -> str:
    """Compact, stable JSON text (no whitespace, non-ASCII kept as-is)."""
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"), allow_nan=False)


def serialize_artifact(artifact: HistoryArtifact) -> str:
    """Serialize a history artifact deterministically."""
    return serialize_json(artifact.to_json())


def _read_existing(p: Path, log_prefix: str) -> Optional[bytes]:
    try:
        return p.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as e:
        log.warning(
            "%sCould not read existing file %s for comparison, proceeding to write: %s",
            log_prefix, p, e,
        )
        return None


def write_if_changed(path: Union[str, Path], content: Union[str, bytes], log_prefix: str = "") -> bool:
    """
    Write ``content`` to ``path`` unless the file already holds the same bytes.

    Uses a temporary file in the target directory plus an atomic rename, so
    readers never observe a half-written file.

    Args:
        path: Destination file
        content: Serialized content (str is encoded as UTF-8)
        log_prefix: Prefix for log messages (e.g. "[HISTORY/week] ")

    Returns:
        True if the file was written, False if it was already up to date

    Raises:
        ArtifactWriteError: If the file cannot be written
    """
    p = Path(path)
    new_bytes = content.encode("utf-8") if isinstance(content, str) else content

    if _read_existing(p, log_prefix) == new_bytes:
        log.info("%sContent for %s has not changed. Skipping write.", log_prefix, p.name)
        return False

    try:
        temp_fd, temp_path = tempfile.mkstemp(suffix=".json.tmp", dir=str(p.parent))
    except OSError as e:
        log.error("%sError writing file %s: %s", log_prefix, p, e)
        raise ArtifactWriteError(f"Failed to write {p}: {e}") from e

    try:
        with os.fdopen(temp_fd, "wb") as f:
            f.write(new_bytes)
            f.flush()
            os.fsync(f.fileno())
        # mkstemp creates 0600 files; published files must stay world-readable
        os.chmod(temp_path, 0o644)
        os.replace(temp_path, str(p))
    except OSError as e:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        log.error("%sError writing file %s: %s", log_prefix, p, e)
        raise ArtifactWriteError(f"Failed to write {p}: {e}") from e

    log.info("%sSaved data to %s", log_prefix, p)
    return True
