"""Status Engine - Pure logic for activity status classification.

This engine provides stateless functions for:
- Classifying hours-until-due into a four-level status
- Building a consistent status snapshot for an activity
- Ranking statuses by urgency

ARCHITECTURE: This is a pure logic engine. All methods are static and
operate on passed-in data. The current time is injected by the caller; when
omitted it is read once per call from dt_utils.dt_now_utc().
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from .. import const
from ..utils.dt_utils import dt_hours_between, dt_now_utc, dt_parse
from .schedule_engine import calculate_next_due_date_from_activity

if TYPE_CHECKING:
    from ..type_defs import (
        ActivityData,
        ActivityStatus,
        ActivityStatusSnapshot,
        RecordData,
    )


class StatusEngine:
    """Pure logic engine for activity status.

    All methods are static - no instance state. Calling any method twice with
    the same inputs and the same `now` returns equal results.
    """

    @staticmethod
    def classify_status(hours_until_due: float) -> ActivityStatus:
        """Map hours until due to a status.

        Thresholds:
            hours > 8             → on_track
            0 < hours <= 8        → almost_overdue
            -24 < hours <= 0      → short_overdue
            hours <= -24          → overdue

        Args:
            hours_until_due: Hours from now until the due instant
                (negative once the due instant has passed).

        Returns:
            One of the const.STATUS_* values.
        """
        if hours_until_due > const.STATUS_ALMOST_OVERDUE_THRESHOLD_HOURS:
            return const.STATUS_ON_TRACK
        if hours_until_due > const.STATUS_DUE_THRESHOLD_HOURS:
            return const.STATUS_ALMOST_OVERDUE
        if hours_until_due > const.STATUS_OVERDUE_THRESHOLD_HOURS:
            return const.STATUS_SHORT_OVERDUE
        return const.STATUS_OVERDUE

    @staticmethod
    def get_last_recorded_at(records: list[RecordData]) -> datetime | None:
        """Return the latest record timestamp (records may be unordered).

        Returns:
            Latest timestamp as UTC datetime, or None if there are no records.
        """
        timestamps = [
            parsed
            for record in records
            if (parsed := dt_parse(record.get(const.DATA_RECORD_TIMESTAMP)))
            is not None
        ]
        return max(timestamps, default=None)

    @staticmethod
    def calculate_activity_status(
        activity: ActivityData,
        now: datetime | None = None,
    ) -> ActivityStatusSnapshot:
        """Build the status snapshot for an activity.

        An activity only has a due time and status once it has both a
        schedule (recurrence_hours) and at least one record.
        hours_since_last_record is reported whenever a record exists.

        Args:
            activity: Activity data dict including its records.
            now: Reference instant. Defaults to the current time.

        Returns:
            ActivityStatusSnapshot with None for every value that does not
            apply.
        """
        reference = now or dt_now_utc()
        last_recorded_at = StatusEngine.get_last_recorded_at(
            activity.get(const.DATA_ACTIVITY_RECORDS, [])
        )

        hours_since_last_record: float | None = None
        hours_until_due: float | None = None
        status: ActivityStatus | None = None

        if last_recorded_at is not None:
            hours_since_last_record = dt_hours_between(last_recorded_at, reference)

        next_due = calculate_next_due_date_from_activity(activity, last_recorded_at)
        if next_due is not None:
            hours_until_due = dt_hours_between(reference, next_due)
            status = StatusEngine.classify_status(hours_until_due)

        const.LOGGER.debug(
            "StatusEngine: Activity '%s' last=%s until_due=%s status=%s",
            activity.get(const.DATA_ACTIVITY_NAME),
            last_recorded_at,
            hours_until_due,
            status,
        )

        return {
            const.DATA_STATUS_LAST_RECORDED_AT: last_recorded_at,
            const.DATA_STATUS_HOURS_SINCE_LAST_RECORD: hours_since_last_record,
            const.DATA_STATUS_HOURS_UNTIL_DUE: hours_until_due,
            const.DATA_STATUS_STATUS: status,
        }

    @staticmethod
    def get_status_rank(status: str | None) -> int:
        """Return the urgency rank of a status (higher = more urgent).

        Statusless activities rank below on_track (-1).
        """
        if status not in const.STATUS_ORDER:
            return -1
        return const.STATUS_ORDER.index(status)
