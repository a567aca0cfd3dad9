"""Display helper functions for Activity Tracker.

This module provides read-only text shaping for the presentation layer.
Nothing here renders UI; each function turns engine output into the short
English strings shown on activity cards and detail pages.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from .. import const
from ..engines.status_engine import StatusEngine
from ..utils.dt_utils import dt_format_date, dt_format_hours, dt_format_relative

if TYPE_CHECKING:
    from ..type_defs import ActivityData


def get_status_label(status: str | None) -> str | None:
    """Return the display label for a status, or None if statusless."""
    if status is None:
        return None
    return const.STATUS_LABELS.get(status)


def get_status_color(status: str | None) -> str | None:
    """Return the hex chip color for a status, or None if statusless."""
    if status is None:
        return None
    return const.STATUS_COLORS.get(status)


def format_last_done(hours_since_last_record: float | None) -> str | None:
    """Format time since the last record, e.g. "Last done: 5 hours ago"."""
    if hours_since_last_record is None:
        return None
    return f"Last done: {dt_format_hours(hours_since_last_record)} ago"


def format_due_text(hours_until_due: float | None) -> str | None:
    """Format the due line for an activity.

    Examples:
        format_due_text(72) → "Next due: in 3 days"
        format_due_text(0) → "Overdue by: 0 hours"
        format_due_text(-2.5) → "Overdue by: 2 hours"
    """
    if hours_until_due is None:
        return None
    if hours_until_due > 0:
        return f"Next due: in {dt_format_hours(hours_until_due)}"
    return f"Overdue by: {dt_format_hours(-hours_until_due)}"


def format_recurrence(recurrence_hours: float | None) -> str | None:
    """Format a schedule, e.g. "Every 2 days"; None for unscheduled."""
    if recurrence_hours is None:
        return None
    return f"Every {dt_format_hours(recurrence_hours)}"


def format_schedule_delta(delta_hours: float | None) -> str | None:
    """Describe the average gap compared with the schedule.

    Negative deltas mean completions come faster than scheduled.
    A delta under one hour either way reads as "On schedule".

    Examples:
        format_schedule_delta(-9) → "9 hours faster than scheduled"
        format_schedule_delta(30) → "1 day slower than scheduled"
        format_schedule_delta(0.4) → "On schedule"
        format_schedule_delta(None) → None
    """
    if delta_hours is None:
        return None
    if abs(delta_hours) < 1:
        return "On schedule"
    direction = "faster" if delta_hours < 0 else "slower"
    return f"{dt_format_hours(delta_hours)} {direction} than scheduled"


def format_record_date(timestamp: datetime, now: datetime | None = None) -> str:
    """Format a record timestamp with relative time.

    Example:
        "Oct 14, 2026 (3 days ago)"
    """
    return f"{dt_format_date(timestamp)} ({dt_format_relative(timestamp, now)})"


def build_activity_summary(
    activity: ActivityData,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Build the display fields for an activity card.

    Args:
        activity: Activity data dict including its records.
        now: Reference instant. Defaults to the current time.

    Returns:
        Dict with the raw status snapshot plus label, color, last-done,
        due and recurrence text. Text fields are None when not applicable.
    """
    snapshot = StatusEngine.calculate_activity_status(activity, now)
    status = snapshot[const.DATA_STATUS_STATUS]

    return {
        const.DATA_ACTIVITY_NAME: activity.get(const.DATA_ACTIVITY_NAME),
        **snapshot,
        "status_label": get_status_label(status),
        "status_color": get_status_color(status),
        "last_done_text": format_last_done(
            snapshot[const.DATA_STATUS_HOURS_SINCE_LAST_RECORD]
        ),
        "due_text": format_due_text(snapshot[const.DATA_STATUS_HOURS_UNTIL_DUE]),
        "recurrence_text": format_recurrence(
            activity.get(const.DATA_ACTIVITY_RECURRENCE_HOURS)
        ),
    }
