# src/fxhistory/domain/__init__.py
"""
Domain Layer - Pure Business Objects

This package contains domain models, sampling rules and business errors.
No dependencies on infrastructure or external systems.
"""

from fxhistory.domain.models import (
    DailySnapshot,
    FileIndexEntry,
    HistoryArtifact,
    PeriodConfig,
    RatePoint,
)
from fxhistory.domain.errors import (
    ArtifactWriteError,
    DomainError,
    InvalidRateError,
    ProviderUnavailableError,
    SnapshotParseError,
    SnapshotStoreError,
)
from fxhistory.domain.sampling import (
    HISTORY_PERIODS,
    DayOfMonthOnOrAfter,
    DaysOfMonth,
    FirstDayOfNthMonth,
    Gap,
    SamplingRule,
    get_period,
    sample,
)

__all__ = [
    "DailySnapshot",
    "FileIndexEntry",
    "HistoryArtifact",
    "PeriodConfig",
    "RatePoint",
    "DomainError",
    "SnapshotStoreError",
    "SnapshotParseError",
    "ArtifactWriteError",
    "InvalidRateError",
    "ProviderUnavailableError",
    "HISTORY_PERIODS",
    "Gap",
    "DaysOfMonth",
    "DayOfMonthOnOrAfter",
    "FirstDayOfNthMonth",
    "SamplingRule",
    "get_period",
    "sample",
]
