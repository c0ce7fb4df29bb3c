# src/fxhistory/application/__init__.py
"""
Application Layer - Use Cases and Services

This package contains application services that orchestrate domain logic:
- History generation (sample, aggregate, write per period)
- Daily snapshot collection
"""

from fxhistory.application.history_service import (
    AggregationResult,
    HistoryRunReport,
    PeriodOutcome,
    PeriodStatus,
    aggregate,
    generate_history,
    generate_period,
)
from fxhistory.application.snapshot_service import collect_daily_snapshot

__all__ = [
    "AggregationResult",
    "HistoryRunReport",
    "PeriodOutcome",
    "PeriodStatus",
    "aggregate",
    "generate_history",
    "generate_period",
    "collect_daily_snapshot",
]
