"""Engine modules for Activity Tracker.

Contains the pure computation engines:
- schedule_engine: Next due date with excluded weekdays
- status_engine: Status classification and per-activity status snapshots
- statistics_engine: Record counts, average gaps and schedule deltas per period
"""

# Use relative imports within package to avoid mypy module resolution issues
from .schedule_engine import (
    RecurrenceEngine,
    calculate_next_due_date,
    calculate_next_due_date_from_activity,
)
from .statistics_engine import StatisticsEngine
from .status_engine import StatusEngine

__all__ = [
    "RecurrenceEngine",
    "StatisticsEngine",
    "StatusEngine",
    "calculate_next_due_date",
    "calculate_next_due_date_from_activity",
]
