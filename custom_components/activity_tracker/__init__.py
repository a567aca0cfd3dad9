# File: __init__.py
"""Initialization file for the Activity Tracker engine.

Activity Tracker computes, from the completion history of recurring
activities (habits, chores, maintenance tasks), when each activity is next
due, how urgent it is, and how closely completions follow the schedule.

Key Features:
- Due dates from an hour-based recurrence, skipping excluded weekdays.
- Four-level status: on track, almost overdue, short overdue, overdue.
- Record counts, average gaps and schedule deltas per month and all time.

Everything here is a pure function of (now, activity, records). Storage and
rendering belong to the host application.
"""

from __future__ import annotations

from .data_builders import EntityValidationError, build_activity, build_record
from .engines import (
    RecurrenceEngine,
    StatisticsEngine,
    StatusEngine,
    calculate_next_due_date,
)
from .utils.dt_utils import dt_format_hours, set_default_timezone

__all__ = [
    "EntityValidationError",
    "RecurrenceEngine",
    "StatisticsEngine",
    "StatusEngine",
    "build_activity",
    "build_record",
    "calculate_next_due_date",
    "dt_format_hours",
    "set_default_timezone",
]
