"""Tests for activity_helpers - filtering, urgency ordering, day counts and duplicates."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

from custom_components.activity_tracker import const
from custom_components.activity_tracker.helpers.activity_helpers import (
    count_records_by_day,
    count_records_on_day,
    filter_activities,
    has_nearby_record,
    is_scheduled,
    sort_activities_by_urgency,
)
from custom_components.activity_tracker.utils import dt_utils


class TestFilterActivities:
    """Test filter_activities."""

    def test_name_filter_case_insensitive(self, make_activity) -> None:
        """Substring match ignores case and surrounding spaces."""
        activities = [make_activity("Water plants"), make_activity("Gym")]
        result = filter_activities(activities, name_filter="  PLANT ")
        assert [a["name"] for a in result] == ["Water plants"]

    def test_single_schedule_type(self, make_activity) -> None:
        """One selected type filters by schedule presence."""
        scheduled = make_activity("Gym", recurrence_hours=48)
        unscheduled = make_activity("Read")
        activities = [scheduled, unscheduled]

        assert filter_activities(
            activities, schedule_types=[const.SCHEDULE_TYPE_SCHEDULED]
        ) == [scheduled]
        assert filter_activities(
            activities, schedule_types=[const.SCHEDULE_TYPE_UNSCHEDULED]
        ) == [unscheduled]

    def test_both_or_no_types_match_all(self, make_activity) -> None:
        """Selecting both types, or none, keeps everything."""
        activities = [make_activity("Gym", recurrence_hours=48), make_activity("Read")]
        both = [const.SCHEDULE_TYPE_SCHEDULED, const.SCHEDULE_TYPE_UNSCHEDULED]

        assert filter_activities(activities, schedule_types=both) == activities
        assert filter_activities(activities) == activities

    def test_is_scheduled(self, make_activity) -> None:
        """Scheduled means recurrence_hours is set."""
        assert is_scheduled(make_activity(recurrence_hours=1))
        assert not is_scheduled(make_activity())


class TestSortByUrgency:
    """Test sort_activities_by_urgency."""

    def test_most_urgent_first(self, make_activity, now) -> None:
        """Overdue first, statusless last."""
        overdue = make_activity("Overdue", recurrence_hours=24, records=[50])
        almost = make_activity("Almost", recurrence_hours=24, records=[20])
        on_track = make_activity("Fine", recurrence_hours=24, records=[1])
        statusless = make_activity("Someday")

        result = sort_activities_by_urgency(
            [statusless, on_track, almost, overdue], now
        )

        assert [a["name"] for a in result] == ["Overdue", "Almost", "Fine", "Someday"]

    def test_ties_broken_by_due_then_name(self, make_activity, now) -> None:
        """Same status → sooner due first, then alphabetical."""
        later = make_activity("A", recurrence_hours=48, records=[1])
        sooner_b = make_activity("b", recurrence_hours=24, records=[1])
        sooner_a = make_activity("B", recurrence_hours=24, records=[1])

        result = sort_activities_by_urgency([later, sooner_b, sooner_a], now)

        assert [a["name"] for a in result][0] in {"b", "B"}
        assert result[-1]["name"] == "A"


class TestCountRecords:
    """Test per-day record counts."""

    def test_counts_by_day(self) -> None:
        """Only days in the requested month are returned."""
        records = [
            {const.DATA_RECORD_TIMESTAMP: datetime(2026, 10, 3, 8, tzinfo=UTC)},
            {const.DATA_RECORD_TIMESTAMP: datetime(2026, 10, 17, 8, tzinfo=UTC)},
            {const.DATA_RECORD_TIMESTAMP: datetime(2026, 10, 17, 20, tzinfo=UTC)},
            {const.DATA_RECORD_TIMESTAMP: datetime(2026, 9, 30, 20, tzinfo=UTC)},
        ]

        assert count_records_by_day(records, 2026, 10) == {
            date(2026, 10, 3): 1,
            date(2026, 10, 17): 2,
        }
        assert count_records_on_day(records, date(2026, 10, 17)) == 2
        assert count_records_on_day(records, date(2026, 10, 18)) == 0

    def test_days_are_local(self) -> None:
        """A late-evening local record counts on the local day."""
        dt_utils.set_default_timezone(ZoneInfo("America/New_York"))
        records = [
            {const.DATA_RECORD_TIMESTAMP: datetime(2026, 11, 1, 2, 0, tzinfo=UTC)}
        ]
        assert count_records_by_day(records, 2026, 10) == {date(2026, 10, 31): 1}


class TestHasNearbyRecord:
    """Test has_nearby_record."""

    BASE = datetime(2026, 10, 17, 9, 0, tzinfo=UTC)

    def _records(self, *timestamps: datetime) -> list[dict]:
        return [{const.DATA_RECORD_TIMESTAMP: ts} for ts in timestamps]

    def test_empty(self) -> None:
        """No records → nothing nearby."""
        assert not has_nearby_record([], self.BASE)

    def test_within_window_same_day(self) -> None:
        """A record a few hours earlier on the same day is nearby."""
        records = self._records(self.BASE)
        assert has_nearby_record(records, self.BASE + timedelta(hours=3))
        assert has_nearby_record(records, self.BASE - timedelta(hours=3))

    def test_window_edge(self) -> None:
        """Exactly the window is nearby; anything past it is not."""
        records = self._records(self.BASE)
        window = const.DUPLICATE_RECORD_WINDOW_HOURS
        assert has_nearby_record(records, self.BASE + timedelta(hours=window))
        assert not has_nearby_record(
            records, self.BASE + timedelta(hours=window, minutes=1)
        )

    def test_other_local_day_ignored(self) -> None:
        """Two hours apart across midnight is not a duplicate."""
        records = self._records(datetime(2026, 10, 16, 23, 0, tzinfo=UTC))
        assert not has_nearby_record(
            records, datetime(2026, 10, 17, 1, 0, tzinfo=UTC)
        )

    def test_day_boundary_is_local(self) -> None:
        """Same UTC day but different local days is not a duplicate."""
        dt_utils.set_default_timezone(ZoneInfo("America/New_York"))
        # 02:00 UTC is Oct 16 evening in New York; 06:00 UTC is Oct 17
        records = self._records(datetime(2026, 10, 17, 2, 0, tzinfo=UTC))
        assert not has_nearby_record(
            records, datetime(2026, 10, 17, 6, 0, tzinfo=UTC)
        )

    def test_iso_string_records(self) -> None:
        """Stored ISO timestamps are compared like datetimes."""
        records = [{const.DATA_RECORD_TIMESTAMP: "2026-10-17T08:00:00+00:00"}]
        assert has_nearby_record(records, self.BASE)
