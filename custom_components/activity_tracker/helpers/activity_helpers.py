"""Activity collection helpers for Activity Tracker.

Read-only shaping of activity lists and record histories for the
presentation layer: list filtering, urgency ordering, calendar counts and
duplicate detection.
"""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime
from typing import TYPE_CHECKING

from .. import const
from ..engines.status_engine import StatusEngine
from ..utils.dt_utils import (
    as_local,
    as_utc,
    dt_hours_between,
    dt_now_utc,
    dt_parse,
)

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Mapping

    from ..type_defs import ActivityData, RecordData


def is_scheduled(activity: ActivityData) -> bool:
    """Return True if the activity has a recurrence interval."""
    return activity.get(const.DATA_ACTIVITY_RECURRENCE_HOURS) is not None


def get_activity_id_by_name(
    activities: Mapping[str, ActivityData], activity_name: str
) -> str | None:
    """Retrieve the internal_id for an activity by name."""
    for activity_id, activity in activities.items():
        if activity.get(const.DATA_ACTIVITY_NAME) == activity_name:
            return activity_id
    return None


def filter_activities(
    activities: Iterable[ActivityData],
    name_filter: str | None = None,
    schedule_types: Collection[str] | None = None,
) -> list[ActivityData]:
    """Filter activities by name and schedule type.

    Args:
        activities: Activities to filter (order is preserved).
        name_filter: Case-insensitive substring to match against the name.
        schedule_types: Selected SCHEDULE_TYPE_* values. The filter only
            applies when exactly one type is selected; none or both means
            every activity matches.

    Returns:
        Matching activities.
    """
    needle = (name_filter or "").strip().lower()
    selected = set(schedule_types or ())
    apply_type_filter = len(selected) == 1

    matches: list[ActivityData] = []
    for activity in activities:
        if needle and needle not in activity.get(const.DATA_ACTIVITY_NAME, "").lower():
            continue

        if apply_type_filter:
            scheduled = is_scheduled(activity)
            if const.SCHEDULE_TYPE_SCHEDULED in selected and not scheduled:
                continue
            if const.SCHEDULE_TYPE_UNSCHEDULED in selected and scheduled:
                continue

        matches.append(activity)

    return matches


def sort_activities_by_urgency(
    activities: Iterable[ActivityData],
    now: datetime | None = None,
) -> list[ActivityData]:
    """Order activities from most to least urgent.

    Sort keys: status rank (overdue first), then hours until due (soonest
    first, statusless last), then name.
    """
    reference = now or dt_now_utc()

    def sort_key(activity: ActivityData) -> tuple[int, bool, float, str]:
        snapshot = StatusEngine.calculate_activity_status(activity, reference)
        hours_until_due = snapshot[const.DATA_STATUS_HOURS_UNTIL_DUE]
        return (
            -StatusEngine.get_status_rank(snapshot[const.DATA_STATUS_STATUS]),
            hours_until_due is None,
            hours_until_due if hours_until_due is not None else 0.0,
            activity.get(const.DATA_ACTIVITY_NAME, "").lower(),
        )

    return sorted(activities, key=sort_key)


def count_records_by_day(
    records: Iterable[RecordData],
    year: int,
    month: int,
) -> dict[date, int]:
    """Count records per local calendar day for one month.

    Days without records are omitted.

    Example:
        count_records_by_day(records, 2026, 10)
        → {date(2026, 10, 3): 1, date(2026, 10, 17): 2}
    """
    counts: Counter[date] = Counter()
    for record in records:
        timestamp = dt_parse(record.get(const.DATA_RECORD_TIMESTAMP))
        if timestamp is None:
            continue
        local_day = as_local(timestamp).date()
        if local_day.year == year and local_day.month == month:
            counts[local_day] += 1
    return dict(counts)


def count_records_on_day(records: Iterable[RecordData], day: date) -> int:
    """Count records whose local calendar day equals day."""
    return count_records_by_day(records, day.year, day.month).get(day, 0)


def has_nearby_record(
    records: Iterable[RecordData],
    timestamp: datetime,
    window_hours: float = const.DUPLICATE_RECORD_WINDOW_HOURS,
) -> bool:
    """Return True if a record on the same local day lies within window_hours.

    Used to warn about a likely duplicate before logging a completion.
    """
    candidate = as_utc(timestamp)
    candidate_day = as_local(candidate).date()
    for record in records:
        existing = dt_parse(record.get(const.DATA_RECORD_TIMESTAMP))
        if existing is None or as_local(existing).date() != candidate_day:
            continue
        if abs(dt_hours_between(existing, candidate)) <= window_hours:
            return True
    return False
