"""Type definitions for Activity Tracker data structures.

TypedDict is used for every structure whose keys are fixed at design time:
stored entities (activities, records) and derived results (status snapshots,
period statistics). Key names match the DATA_* constants in const.py.

NOTE: TypedDict is STATIC ANALYSIS ONLY. It does not validate at runtime.
Structural validation for caller input lives in data_builders.py.

IMPORTANT: This file must NOT import from engines/, helpers/ or
data_builders.py to avoid circular dependencies.
"""

from datetime import datetime
from typing import Literal, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

ActivityId = str  # UUID string
Weekday = int  # 0=Sunday .. 6=Saturday
ActivityStatus = Literal["on_track", "almost_overdue", "short_overdue", "overdue"]
ScheduleType = Literal["scheduled", "unscheduled"]


# =============================================================================
# Stored Entity Types
# =============================================================================


class RecordData(TypedDict):
    """A single logged completion of an activity."""

    timestamp: datetime  # Timezone-aware
    note: NotRequired[str | None]  # At most MAX_NOTE_LENGTH characters


class ActivityData(TypedDict):
    """Type definition for an activity.

    Records are not guaranteed to be in any particular order.
    A missing or None recurrence_hours means the activity is unscheduled.
    """

    internal_id: ActivityId
    name: str
    description: str
    created_at: datetime
    records: list[RecordData]
    recurrence_hours: NotRequired[float | None]
    excluded_weekdays: NotRequired[list[Weekday]]  # Never all seven days


# =============================================================================
# Derived Result Types (never persisted)
# =============================================================================


class ActivityStatusSnapshot(TypedDict):
    """Point-in-time status of an activity, recomputed on every call."""

    last_recorded_at: datetime | None
    hours_since_last_record: float | None
    hours_until_due: float | None
    status: ActivityStatus | None


class PeriodStatistics(TypedDict):
    """Completion statistics for a single time window.

    average_gap_hours and average_delta_vs_schedule_hours are None when the
    window holds fewer than two records. None is not zero.
    """

    record_count: int
    average_gap_hours: float | None
    average_delta_vs_schedule_hours: float | None  # Negative = faster than scheduled


class ActivityPeriodStatistics(TypedDict):
    """Statistics for the three fixed windows shown for an activity."""

    current_month: PeriodStatistics
    last_month: PeriodStatistics
    all_time: PeriodStatistics


class PeriodWindow(TypedDict):
    """Inclusive time window used for statistics."""

    start: datetime
    end: datetime


class PeriodWindows(TypedDict):
    """Resolved windows for the fixed statistics periods."""

    current_month: PeriodWindow
    last_month: PeriodWindow
    all_time: PeriodWindow


# =============================================================================
# Collection Type Aliases
# =============================================================================

ActivitiesCollection = dict[ActivityId, ActivityData]
