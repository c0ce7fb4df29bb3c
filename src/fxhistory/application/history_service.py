# src/fxhistory/application/history_service.py
"""
History Service - Downsampled History Generation

This module turns the daily snapshot archive into one history file per
period. For every period it samples the file index, aggregates the sampled
snapshots into a per-currency time series and writes the result only when
the serialized bytes differ from what is already on disk.

Every run rebuilds each period from scratch. A bad snapshot file only costs
that file's points, an empty period only skips that period, and a failed
write only fails that period; the only run-wide failures are an unreadable
snapshot directory or an uncreatable history directory.

Files that USE this module:
- fxhistory.app (generate_history from the command-line entry point)
- tests.test_history_service (unit and end-to-end tests)

Files that this module USES:
- fxhistory.adapters.persistence.file_index (build_file_index)
- fxhistory.adapters.persistence.file_store (read_snapshot, serialize_artifact, write_if_changed)
- fxhistory.domain.sampling (HISTORY_PERIODS, sample)
- fxhistory.domain.models (FileIndexEntry, DailySnapshot, HistoryArtifact, RatePoint, PeriodConfig)
- fxhistory.shared.validators (is_numeric_rate)
- fxhistory.config (settings for default directories, fallback base and read workers)
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from fxhistory.adapters.persistence.file_index import build_file_index
from fxhistory.adapters.persistence.file_store import read_snapshot, serialize_artifact, write_if_changed
from fxhistory.config import settings
from fxhistory.domain.errors import ArtifactWriteError, SnapshotParseError
from fxhistory.domain.models import DailySnapshot, FileIndexEntry, HistoryArtifact, PeriodConfig, RatePoint
from fxhistory.domain.sampling import HISTORY_PERIODS, sample
from fxhistory.shared.validators import is_numeric_rate

logger = logging.getLogger(__name__)

class PeriodStatus(str, Enum):
    """Result of generating one period's artifact."""
    WRITTEN = "written"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.value


@dataclass
class AggregationResult:
    """
    Outcome of aggregating one period's sampled snapshots.

    ``artifact`` is None when no snapshot contributed a single rate.
    ``warnings`` lists the files that were skipped and why.
    """
    artifact: Optional[HistoryArtifact]
    warnings: List[str] = field(default_factory=list)

    @property
    def points_per_currency(self) -> Dict[str, int]:
        if self.artifact is None:
            return {}
        return self.artifact.points_per_currency()


@dataclass
class PeriodOutcome:
    """What happened to one period during a run."""
    period: str
    status: PeriodStatus
    path: Optional[Path] = None
    sampled: int = 0
    points_per_currency: Dict[str, int] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    reason: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.status == PeriodStatus.WRITTEN


@dataclass
class HistoryRunReport:
    """Summary of a full history generation run."""
    reference: datetime
    indexed: int = 0
    outcomes: List[PeriodOutcome] = field(default_factory=list)

    @property
    def changed(self) -> List[PeriodOutcome]:
        return [o for o in self.outcomes if o.status == PeriodStatus.WRITTEN]

    @property
    def skipped(self) -> List[PeriodOutcome]:
        return [o for o in self.outcomes if o.status == PeriodStatus.SKIPPED]

    @property
    def failed(self) -> List[PeriodOutcome]:
        return [o for o in self.outcomes if o.status == PeriodStatus.FAILED]

    @property
    def warnings(self) -> List[str]:
        return [w for o in self.outcomes for w in o.warnings]


def _load_entry(data_dir: Path, entry: FileIndexEntry) -> Union[DailySnapshot, SnapshotParseError]:
    # Errors are returned, not raised, so one bad file cannot cancel sibling reads
    try:
        return read_snapshot(data_dir / entry.filename, entry.date)
    except SnapshotParseError as e:
        return e


def aggregate(
    entries: Sequence[FileIndexEntry],
    data_dir: Union[str, Path, None] = None,
    default_base: Optional[str] = None,
    read_workers: Optional[int] = None,
) -> AggregationResult:
    """
    Merge sampled snapshots into one history artifact.

    Files may be read concurrently, but they are merged strictly in the
    order of ``entries`` (ascending date): the first snapshot declaring a
    base sets it, and points are appended chronologically.

    Args:
        entries: Sampled entries in ascending date order
        data_dir: Snapshot directory (defaults to settings.data_dir)
        default_base: Base used when no snapshot declares one
                      (defaults to settings.default_base)
        read_workers: Number of concurrent file reads (defaults to settings.read_workers)

    Returns:
        AggregationResult with the artifact (or None) and per-file warnings
    """
    data_dir = Path(data_dir) if data_dir is not None else settings.data_dir
    default_base = default_base or settings.default_base
    read_workers = read_workers or settings.read_workers

    if read_workers > 1 and len(entries) > 1:
        with ThreadPoolExecutor(max_workers=read_workers) as pool:
            # map() yields in submission order, not completion order
            loaded = list(pool.map(lambda e: _load_entry(data_dir, e), entries))
    else:
        loaded = [_load_entry(data_dir, e) for e in entries]

    rates: Dict[str, List[RatePoint]] = {}
    warnings: List[str] = []
    base: Optional[str] = None
    timestamp = 0

    for entry, snapshot in zip(entries, loaded):
        if isinstance(snapshot, SnapshotParseError):
            logger.warning("Skipping %s: %s", entry.filename, snapshot)
            warnings.append(str(snapshot))
            continue

        if base is None and snapshot.base:
            base = snapshot.base
        timestamp = max(timestamp, snapshot.effective_timestamp)

        for code, rate in snapshot.rates.items():
            if not is_numeric_rate(rate):
                continue
            points = rates.setdefault(code, [])
            if points and points[-1].date >= entry.date:
                continue
            points.append(RatePoint(date=entry.date, rate=rate))

    if not rates:
        return AggregationResult(artifact=None, warnings=warnings)

    artifact = HistoryArtifact(timestamp=timestamp, base=base or default_base, rates=rates)
    return AggregationResult(artifact=artifact, warnings=warnings)


def generate_period(
    period: PeriodConfig,
    index: Sequence[FileIndexEntry],
    data_dir: Union[str, Path, None] = None,
    history_dir: Union[str, Path, None] = None,
    reference: Optional[datetime] = None,
    default_base: Optional[str] = None,
    read_workers: Optional[int] = None,
) -> PeriodOutcome:
    """
    Build and persist the history artifact for a single period.

    Args:
        period: Period policy
        index: Ascending file index of the snapshot store
        data_dir: Snapshot directory (defaults to settings.data_dir)
        history_dir: Output directory (defaults to settings.history_dir)
        reference: Run start instant (defaults to now, UTC)
        default_base: Fallback base currency
        read_workers: Concurrent snapshot reads

    Returns:
        PeriodOutcome describing whether the artifact was written,
        unchanged, skipped or failed
    """
    history_dir = Path(history_dir) if history_dir is not None else settings.history_dir
    prefix = f"[HISTORY/{period.id}] "

    sampled = sample(index, period.lookback_days, period.rule, reference)
    logger.debug("%sSelected %d files after sampling", prefix, len(sampled))
    if not sampled:
        logger.info("%sNo data files selected within the last %d days. Skipping.", prefix, period.lookback_days)
        return PeriodOutcome(
            period=period.id,
            status=PeriodStatus.SKIPPED,
            reason=f"no snapshots selected within the last {period.lookback_days} days",
        )

    result = aggregate(sampled, data_dir=data_dir, default_base=default_base, read_workers=read_workers)
    if result.artifact is None:
        logger.warning("%sNo valid rates extracted. Skipping file generation.", prefix)
        return PeriodOutcome(
            period=period.id,
            status=PeriodStatus.SKIPPED,
            sampled=len(sampled),
            warnings=result.warnings,
            reason="no valid rates extracted",
        )

    path = history_dir / period.filename
    outcome = PeriodOutcome(
        period=period.id,
        status=PeriodStatus.UNCHANGED,
        path=path,
        sampled=len(sampled),
        points_per_currency=result.points_per_currency,
        warnings=result.warnings,
    )
    try:
        if write_if_changed(path, serialize_artifact(result.artifact), log_prefix=prefix):
            outcome.status = PeriodStatus.WRITTEN
    except ArtifactWriteError as e:
        outcome.status = PeriodStatus.FAILED
        outcome.reason = str(e)
    return outcome


def generate_history(
    data_dir: Union[str, Path, None] = None,
    history_dir: Union[str, Path, None] = None,
    reference: Optional[datetime] = None,
    periods: Sequence[PeriodConfig] = HISTORY_PERIODS,
    default_base: Optional[str] = None,
    read_workers: Optional[int] = None,
) -> HistoryRunReport:
    """
    Regenerate every period's history artifact.

    Args:
        data_dir: Snapshot directory (defaults to settings.data_dir)
        history_dir: Output directory, created if missing (defaults to settings.history_dir)
        reference: Run start instant shared by all periods (defaults to now, UTC)
        periods: Period policies to process, in order
        default_base: Fallback base currency
        read_workers: Concurrent snapshot reads per period

    Returns:
        HistoryRunReport with one outcome per period (none when the store is empty)

    Raises:
        SnapshotStoreError: If the snapshot directory cannot be listed
        ArtifactWriteError: If the history directory cannot be created
    """
    data_dir = Path(data_dir) if data_dir is not None else settings.data_dir
    history_dir = Path(history_dir) if history_dir is not None else settings.history_dir
    if reference is None:
        reference = datetime.now(timezone.utc)

    logger.info("Starting history generation (reference=%s)", reference.isoformat())
    try:
        history_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error("Error creating history directory %s: %s", history_dir, e)
        raise ArtifactWriteError(f"Cannot create history directory {history_dir}: {e}") from e

    index = build_file_index(data_dir)
    report = HistoryRunReport(reference=reference, indexed=len(index))
    if not index:
        logger.info("No valid daily data files found in %s. Skipping history generation.", data_dir)
        return report
    logger.info("Found %d total valid daily data files.", len(index))

    for period in periods:
        report.outcomes.append(
            generate_period(
                period,
                index,
                data_dir=data_dir,
                history_dir=history_dir,
                reference=reference,
                default_base=default_base,
                read_workers=read_workers,
            )
        )

    logger.info(
        "History generation finished: %d written, %d unchanged, %d skipped, %d failed",
        len(report.changed),
        sum(1 for o in report.outcomes if o.status == PeriodStatus.UNCHANGED),
        len(report.skipped),
        len(report.failed),
    )
    return report
