"""Schedule Engine for Activity Tracker.

Computes when an activity is next due from its last completion, its
recurrence interval (in hours) and its excluded weekdays.

Rules:
- The base candidate is the last completion plus the recurrence interval,
  measured in elapsed hours.
- While the candidate falls on an excluded weekday (local time), it moves
  forward by exactly 24 hours, at most MAX_EXCLUDED_DAY_ITERATIONS times.
  The bound guarantees termination even if every weekday is excluded.

IMPORTANT: This module is pure. It must not read the clock or touch storage.
Only import from const.py, type_defs.py and utils/.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import TYPE_CHECKING

from .. import const
from ..utils.dt_utils import dt_add_hours, dt_weekday

if TYPE_CHECKING:
    from ..type_defs import ActivityData


class RecurrenceEngine:
    """Due-date calculator for an hour-based recurrence with excluded weekdays.

    Weekday indices follow the Sunday-first convention (0=Sunday, 6=Saturday).
    The engine holds only its immutable configuration, so one instance can be
    shared between callers.

    Example:
        engine = RecurrenceEngine(24, excluded_weekdays=[const.WEEKDAY_SUNDAY])
        engine.get_next_due(last_recorded_at)
    """

    def __init__(
        self,
        recurrence_hours: float,
        excluded_weekdays: Iterable[int] | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            recurrence_hours: Target hours between completions.
            excluded_weekdays: Weekdays (0=Sunday..6=Saturday) on which the
                activity is never due. Values outside 0-6 are ignored.
        """
        self._recurrence_hours = recurrence_hours

        raw_days = list(excluded_weekdays or [])
        self._excluded_weekdays = frozenset(d for d in raw_days if 0 <= d <= 6)
        if len(self._excluded_weekdays) != len(set(raw_days)):
            const.LOGGER.warning(
                "ScheduleEngine: Ignoring out-of-range excluded weekdays in %s",
                raw_days,
            )

    @property
    def recurrence_hours(self) -> float:
        """Target hours between completions."""
        return self._recurrence_hours

    @property
    def excluded_weekdays(self) -> frozenset[int]:
        """Weekdays on which the activity is never due."""
        return self._excluded_weekdays

    def is_excluded_day(self, dt: datetime) -> bool:
        """Return True if dt falls on an excluded weekday in local time."""
        return dt_weekday(dt) in self._excluded_weekdays

    def get_next_due(self, last_recorded_at: datetime) -> datetime:
        """Calculate the next due instant after a completion.

        Args:
            last_recorded_at: Timestamp of the most recent completion.

        Returns:
            Next due instant as UTC datetime.
        """
        next_due = dt_add_hours(last_recorded_at, self._recurrence_hours)

        if not self._excluded_weekdays:
            return next_due

        return self._skip_excluded_days(next_due)

    def _skip_excluded_days(self, candidate: datetime) -> datetime:
        """Advance candidate in 24 hour steps until it leaves excluded days.

        Args:
            candidate: Base due instant (UTC).

        Returns:
            Adjusted due instant (UTC), preserving time of day.
        """
        iteration = 0
        while (
            self.is_excluded_day(candidate)
            and iteration < const.MAX_EXCLUDED_DAY_ITERATIONS
        ):
            candidate = dt_add_hours(candidate, const.HOURS_PER_DAY)
            iteration += 1

        if self.is_excluded_day(candidate):
            const.LOGGER.warning(
                "ScheduleEngine: Max iterations reached skipping excluded weekdays %s",
                sorted(self._excluded_weekdays),
            )

        return candidate


# =============================================================================
# Convenience functions
# =============================================================================


def calculate_next_due_date(
    last_recorded_at: datetime,
    recurrence_hours: float,
    excluded_weekdays: Iterable[int] | None = None,
) -> datetime:
    """Calculate the next due date using RecurrenceEngine.

    Args:
        last_recorded_at: Timestamp of the most recent completion.
        recurrence_hours: Target hours between completions.
        excluded_weekdays: Weekdays (0=Sunday..6=Saturday) to skip.

    Returns:
        Next due instant as UTC datetime.

    Examples:
        Monday 10:00 + 24h, no exclusions → Tuesday 10:00
        Monday 10:00 + 24h, Tuesday excluded → Wednesday 10:00
    """
    engine = RecurrenceEngine(recurrence_hours, excluded_weekdays)
    return engine.get_next_due(last_recorded_at)


def calculate_next_due_date_from_activity(
    activity: ActivityData,
    last_recorded_at: datetime | None,
) -> datetime | None:
    """Calculate the next due date for an activity (pure calculation helper).

    Args:
        activity: Activity data dict with recurrence configuration.
        last_recorded_at: Most recent completion, or None if never recorded.

    Returns:
        Next due instant as UTC datetime, or None when the activity has no
        schedule or has never been recorded.
    """
    recurrence_hours = activity.get(const.DATA_ACTIVITY_RECURRENCE_HOURS)
    if not recurrence_hours or last_recorded_at is None:
        return None

    return calculate_next_due_date(
        last_recorded_at,
        recurrence_hours,
        activity.get(const.DATA_ACTIVITY_EXCLUDED_WEEKDAYS),
    )
