# src/fxhistory/domain/models.py
"""
Domain Models - Pure Business Objects

This module contains domain models representing core business concepts:
- Daily exchange-rate snapshots and their position in the snapshot store
- Points of a downsampled per-currency time series
- History artifacts (one per period)
- Period configuration

Files that USE this module:
- fxhistory.domain.sampling (FileIndexEntry, PeriodConfig)
- fxhistory.adapters.persistence.* (FileIndexEntry, DailySnapshot, HistoryArtifact)
- fxhistory.application.* (all services use domain models)
- tests.* (tests use domain models for test data)

Files that this module USES:
- fxhistory.shared.validators (is_finite_number for snapshot timestamps)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from dataclasses import dataclass, field  # Decorators for creating data classes
from datetime import date, datetime, timezone  # Calendar days and UTC epoch conversion
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from fxhistory.shared.validators import is_finite_number

if TYPE_CHECKING:
    from fxhistory.domain.sampling import SamplingRule


def date_to_epoch(day: date) -> int:
    """Return the UTC midnight of ``day`` as integer epoch seconds."""
    return int(datetime(day.year, day.month, day.day, tzinfo=timezone.utc).timestamp())


@dataclass(frozen=True)
class FileIndexEntry:
    """
    One daily snapshot file in the store.

    Attributes:
        filename: Bare file name (e.g. ``2024-01-10.json``)
        date: Calendar day parsed from the file name
    """
    filename: str
    date: date


@dataclass(frozen=True)
class DailySnapshot:
    """
    One day's exchange rates relative to a base currency.

    ``timestamp`` and ``base`` are optional because older snapshot files may
    lack them. ``rates`` holds whatever the file declared; non-numeric
    values are filtered out during aggregation.
    """
    date: date
    timestamp: Optional[int]
    base: Optional[str]
    rates: Mapping[str, Any]

    @staticmethod
    def from_json(day: date, data: Mapping[str, Any]) -> "DailySnapshot":
        """
        Create a DailySnapshot from a decoded snapshot file.

        Args:
            day: Date taken from the snapshot's file name
            data: Decoded JSON object

        Returns:
            DailySnapshot; missing or malformed fields become None / empty
        """
        timestamp = data.get("timestamp")
        if not is_finite_number(timestamp):
            timestamp = None
        base = data.get("base")
        if not isinstance(base, str) or not base:
            base = None
        rates = data.get("rates")
        if not isinstance(rates, dict):
            rates = {}
        return DailySnapshot(
            date=day,
            timestamp=int(timestamp) if timestamp else None,
            base=base,
            rates=rates,
        )

    @property
    def effective_timestamp(self) -> int:
        """Snapshot timestamp, or the file date's UTC midnight when absent."""
        if self.timestamp:
            return self.timestamp
        return date_to_epoch(self.date)


@dataclass(frozen=True)
class RatePoint:
    """A single (date, rate) point of a currency's history."""
    date: date
    rate: float

    def to_json(self) -> dict:
        return {"date": self.date.isoformat(), "rate": self.rate}


@dataclass(frozen=True)
class HistoryArtifact:
    """
    Downsampled history for one period.

    Attributes:
        timestamp: Maximum timestamp among contributing snapshots
        base: Base currency of the first snapshot that declared one
        rates: Currency code -> points in ascending date order
    """
    timestamp: int
    base: str
    rates: Dict[str, List[RatePoint]] = field(default_factory=dict)

    def to_json(self) -> dict:
        """
        Convert to a JSON-serializable dictionary.

        Key order is fixed (timestamp, base, rates) and currency codes are
        sorted so identical inputs always produce identical output.
        """
        return {
            "timestamp": self.timestamp,
            "base": self.base,
            "rates": {
                code: [point.to_json() for point in self.rates[code]]
                for code in sorted(self.rates)
            },
        }

    def points_per_currency(self) -> Dict[str, int]:
        return {code: len(points) for code, points in sorted(self.rates.items())}


@dataclass(frozen=True)
class PeriodConfig:
    """
    Retention policy for one history period.

    Attributes:
        id: Period identifier, also the artifact file stem
        lookback_days: Trailing window, in days, of eligible snapshots
        rule: Sampling rule applied inside the window
    """
    id: str
    lookback_days: int
    rule: "SamplingRule"

    @property
    def filename(self) -> str:
        return f"{self.id}.json"
