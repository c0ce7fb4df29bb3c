# src/fxhistory/domain/sampling.py
"""
Sampling Rules - Period Policy Table and Sampler

This module defines how each history period thins the daily archive down to
a handful of points. A period is a lookback window plus one sampling rule;
the sampler first keeps the entries inside the window and then applies the
rule to that ascending sequence.

Rules:
- Gap(n): every n-th entry of the window, counted from the oldest one
- DaysOfMonth(days): entries whose day of month is in ``days``
- DayOfMonthOnOrAfter(day): earliest entry per month with day of month >= ``day``
- FirstDayOfNthMonth(n): earliest entry of every month whose 0-based index
  (January = 0) is a multiple of ``n``

Files that USE this module:
- fxhistory.application.history_service (HISTORY_PERIODS and sample)
- tests.test_sampling (unit tests)

Files that this module USES:
- fxhistory.domain.models (FileIndexEntry, PeriodConfig)
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from typing import Callable, Dict, FrozenSet, Hashable, Iterable, List, Optional, Sequence, Tuple, Union

from fxhistory.domain.models import FileIndexEntry, PeriodConfig


@dataclass(frozen=True)
class Gap:
    """Keep positions 0, n, 2n, ... of the window."""
    n: int

    def __post_init__(self) -> None:
        if self.n < 1:
            raise ValueError("Gap stride must be a positive integer")


@dataclass(frozen=True)
class DaysOfMonth:
    """Keep entries whose calendar day is one of ``target_days``."""
    target_days: FrozenSet[int]

    def __post_init__(self) -> None:
        # Accept any iterable of days and store it as a frozenset
        object.__setattr__(self, "target_days", frozenset(self.target_days))
        if not self.target_days or any(d < 1 or d > 31 for d in self.target_days):
            raise ValueError("DaysOfMonth target days must be within 1..31")


@dataclass(frozen=True)
class DayOfMonthOnOrAfter:
    """Keep the earliest entry per month whose day is >= ``day``."""
    day: int

    def __post_init__(self) -> None:
        if self.day < 1 or self.day > 31:
            raise ValueError("DayOfMonthOnOrAfter day must be within 1..31")


@dataclass(frozen=True)
class FirstDayOfNthMonth:
    """Keep the earliest entry of every ``month_gap``-th month, anchored at January."""
    month_gap: int

    def __post_init__(self) -> None:
        if self.month_gap < 1:
            raise ValueError("FirstDayOfNthMonth month gap must be a positive integer")


SamplingRule = Union[Gap, DaysOfMonth, DayOfMonthOnOrAfter, FirstDayOfNthMonth]


# Period identifiers double as artifact file names consumed by the charts
# and the edge cache; keep these values stable.
HISTORY_PERIODS: Tuple[PeriodConfig, ...] = (
    PeriodConfig(id="week", lookback_days=7, rule=Gap(1)),
    PeriodConfig(id="month", lookback_days=31, rule=Gap(2)),
    PeriodConfig(id="6-month", lookback_days=183, rule=DaysOfMonth(frozenset({1, 11, 21}))),
    PeriodConfig(id="year", lookback_days=366, rule=DaysOfMonth(frozenset({1, 15}))),
    PeriodConfig(id="2-year", lookback_days=731, rule=DayOfMonthOnOrAfter(1)),
    PeriodConfig(id="5-year", lookback_days=1826, rule=FirstDayOfNthMonth(3)),
)


def get_period(period_id: str) -> PeriodConfig:
    """
    Look up a period by identifier.

    Raises:
        KeyError: If no period has this identifier
    """
    for period in HISTORY_PERIODS:
        if period.id == period_id:
            return period
    raise KeyError(f"Unknown history period: {period_id}")


def filter_window(
    index: Sequence[FileIndexEntry],
    lookback_days: int,
    reference: Optional[datetime] = None,
) -> List[FileIndexEntry]:
    """
    Keep the entries that fall inside the lookback window.

    The cutoff is ``reference - lookback_days`` (time of day preserved) and an
    entry is inside the window when its date's UTC midnight is at or after
    the cutoff.

    Args:
        index: Ascending file index
        lookback_days: Window length in days
        reference: Run start instant (defaults to now, UTC). Naive datetimes
                   are taken as UTC.

    Returns:
        Entries inside the window, still ascending
    """
    if reference is None:
        reference = datetime.now(timezone.utc)
    elif reference.tzinfo is None:
        reference = reference.replace(tzinfo=timezone.utc)
    cutoff = reference - timedelta(days=lookback_days)
    return [
        entry for entry in index
        if datetime.combine(entry.date, time.min, tzinfo=timezone.utc) >= cutoff
    ]


def _first_per_bucket(
    entries: Iterable[FileIndexEntry],
    key: Callable[[FileIndexEntry], Optional[Hashable]],
) -> List[FileIndexEntry]:
    """
    Keep the first entry seen for every bucket key.

    Entries whose key is None are not eligible. Input is ascending, so
    "first seen" is also "earliest date".
    """
    seen: Dict[Hashable, FileIndexEntry] = {}
    selected: List[FileIndexEntry] = []
    for entry in entries:
        bucket = key(entry)
        if bucket is None or bucket in seen:
            continue
        seen[bucket] = entry
        selected.append(entry)
    return selected


def apply_rule(entries: Sequence[FileIndexEntry], rule: SamplingRule) -> List[FileIndexEntry]:
    """
    Apply a sampling rule to an ascending window of entries.

    Raises:
        TypeError: If ``rule`` is not one of the known rule kinds
    """
    if isinstance(rule, Gap):
        return [entry for i, entry in enumerate(entries) if i % rule.n == 0]

    if isinstance(rule, DaysOfMonth):
        # Bucket by full date: one snapshot per day is expected, but a
        # duplicated date must still contribute a single point.
        return _first_per_bucket(
            entries,
            lambda e: e.date if e.date.day in rule.target_days else None,
        )

    if isinstance(rule, DayOfMonthOnOrAfter):
        return _first_per_bucket(
            entries,
            lambda e: (e.date.year, e.date.month) if e.date.day >= rule.day else None,
        )

    if isinstance(rule, FirstDayOfNthMonth):
        return _first_per_bucket(
            entries,
            lambda e: (
                (e.date.year, e.date.month)
                if (e.date.month - 1) % rule.month_gap == 0
                else None
            ),
        )

    raise TypeError(f"Unsupported sampling rule: {rule!r}")


def sample(
    index: Sequence[FileIndexEntry],
    lookback_days: int,
    rule: SamplingRule,
    reference: Optional[datetime] = None,
) -> List[FileIndexEntry]:
    """
    Select the entries that become points of a period's artifact.

    Args:
        index: Ascending file index
        lookback_days: Window length in days
        rule: Sampling rule for the period
        reference: Run start instant (defaults to now, UTC)

    Returns:
        Selected entries in ascending date order; empty when nothing falls
        inside the window or nothing matches the rule
    """
    window = filter_window(index, lookback_days, reference)
    if not window:
        return []
    return apply_rule(window, rule)
