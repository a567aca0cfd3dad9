"""Statistics Engine - Period-based completion statistics.

This engine computes, for any inclusive time window:
- How many records fall inside the window
- The average gap between consecutive records
- How that average compares with the activity's recurrence interval

It also resolves the three fixed windows shown for every activity
(current calendar month, previous calendar month, all time).

Design Principles:
    - Stateless: Operates only on passed data structures
    - Honest partial data: Gap and delta are None (not 0) below two records
    - Consistent time zone: Month boundaries use the dt_utils local zone
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from dateutil.relativedelta import relativedelta

from .. import const
from ..utils.dt_utils import (
    as_local,
    as_utc,
    dt_hours_between,
    dt_now_utc,
    dt_parse,
    end_of_month,
    start_of_month,
)
from ..utils.math_utils import calculate_mean, pairwise_differences

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..type_defs import (
        ActivityData,
        ActivityPeriodStatistics,
        PeriodStatistics,
        PeriodWindows,
        RecordData,
    )


class StatisticsEngine:
    """Unified engine for period-based activity statistics.

    All methods are stateless - they operate on data structures passed as
    arguments and never modify them.

    Example:
        stats = StatisticsEngine()

        # One arbitrary window
        window_stats = stats.calculate_statistics(
            activity["records"], window_start, window_end, recurrence_hours=24
        )

        # The three standard windows
        period_stats = stats.calculate_period_statistics(activity, now)
        period_stats["last_month"]["average_gap_hours"]
    """

    # ────────────────────────────────────────────────────────────────
    # Window Resolution
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def get_period_windows(
        created_at: datetime,
        now: datetime | None = None,
    ) -> PeriodWindows:
        """Resolve the inclusive windows for the fixed statistics periods.

        Args:
            created_at: Activity creation time (start of the all-time window).
            now: Reference instant. Defaults to the current time.

        Returns:
            Windows keyed by current_month, last_month and all_time.

        Example:
            now = 2026-10-17 15:00 local
            current_month → 2026-10-01 00:00 .. 2026-10-31 23:59:59.999999
            last_month    → 2026-09-01 00:00 .. 2026-09-30 23:59:59.999999
            all_time      → created_at .. now
        """
        reference = now or dt_now_utc()
        last_month_reference = as_local(reference) - relativedelta(months=1)

        return {
            const.PERIOD_CURRENT_MONTH: {
                "start": start_of_month(reference),
                "end": end_of_month(reference),
            },
            const.PERIOD_LAST_MONTH: {
                "start": start_of_month(last_month_reference),
                "end": end_of_month(last_month_reference),
            },
            const.PERIOD_ALL_TIME: {
                "start": created_at,
                "end": reference,
            },
        }

    # ────────────────────────────────────────────────────────────────
    # Statistics
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def filter_timestamps(
        records: Iterable[RecordData],
        window_start: datetime,
        window_end: datetime,
    ) -> list[datetime]:
        """Return sorted UTC timestamps of records inside the window.

        Both window bounds are inclusive.
        """
        start_utc = as_utc(window_start)
        end_utc = as_utc(window_end)

        timestamps = [
            parsed
            for record in records
            if (parsed := dt_parse(record.get(const.DATA_RECORD_TIMESTAMP)))
            is not None
        ]
        return sorted(ts for ts in timestamps if start_utc <= ts <= end_utc)

    @staticmethod
    def calculate_statistics(
        records: Iterable[RecordData],
        window_start: datetime,
        window_end: datetime,
        recurrence_hours: float | None = None,
    ) -> PeriodStatistics:
        """Calculate statistics for one inclusive window.

        Args:
            records: Activity records in any order.
            window_start: Inclusive window start.
            window_end: Inclusive window end.
            recurrence_hours: Scheduled hours between completions, if any.

        Returns:
            PeriodStatistics. average_gap_hours is None below two records;
            average_delta_vs_schedule_hours is None unless both the average
            gap and the schedule are known. A negative delta means the
            activity is completed more often than scheduled.

        Example:
            Records 10h then 20h apart, recurrence 24h
            → record_count=3, average_gap_hours=15.0,
              average_delta_vs_schedule_hours=-9.0
        """
        timestamps = StatisticsEngine.filter_timestamps(
            records, window_start, window_end
        )
        record_count = len(timestamps)

        average_gap_hours: float | None = None
        if record_count >= const.MIN_RECORDS_FOR_GAP:
            hours = [dt_hours_between(timestamps[0], ts) for ts in timestamps]
            average_gap_hours = calculate_mean(pairwise_differences(hours))

        average_delta: float | None = None
        if average_gap_hours is not None and recurrence_hours is not None:
            average_delta = average_gap_hours - recurrence_hours

        return {
            const.DATA_STATS_RECORD_COUNT: record_count,
            const.DATA_STATS_AVERAGE_GAP_HOURS: average_gap_hours,
            const.DATA_STATS_AVERAGE_DELTA_VS_SCHEDULE_HOURS: average_delta,
        }

    @staticmethod
    def calculate_period_statistics(
        activity: ActivityData,
        now: datetime | None = None,
    ) -> ActivityPeriodStatistics:
        """Calculate statistics for the current month, last month and all time.

        Args:
            activity: Activity data dict including its records.
            now: Reference instant. Defaults to the current time.

        Returns:
            ActivityPeriodStatistics keyed by period name.
        """
        windows = StatisticsEngine.get_period_windows(
            activity[const.DATA_ACTIVITY_CREATED_AT], now
        )
        records = activity.get(const.DATA_ACTIVITY_RECORDS, [])
        recurrence_hours = activity.get(const.DATA_ACTIVITY_RECURRENCE_HOURS)

        const.LOGGER.debug(
            "StatisticsEngine: Calculating periods for '%s' (%d records)",
            activity.get(const.DATA_ACTIVITY_NAME),
            len(records),
        )

        return {
            const.PERIOD_CURRENT_MONTH: StatisticsEngine.calculate_statistics(
                records,
                windows[const.PERIOD_CURRENT_MONTH]["start"],
                windows[const.PERIOD_CURRENT_MONTH]["end"],
                recurrence_hours,
            ),
            const.PERIOD_LAST_MONTH: StatisticsEngine.calculate_statistics(
                records,
                windows[const.PERIOD_LAST_MONTH]["start"],
                windows[const.PERIOD_LAST_MONTH]["end"],
                recurrence_hours,
            ),
            const.PERIOD_ALL_TIME: StatisticsEngine.calculate_statistics(
                records,
                windows[const.PERIOD_ALL_TIME]["start"],
                windows[const.PERIOD_ALL_TIME]["end"],
                recurrence_hours,
            ),
        }
