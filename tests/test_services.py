"""Tests for service handlers - payload schemas and collection updates."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
import logging
from typing import Any

import pytest
import voluptuous as vol

from custom_components.activity_tracker import const, services
from custom_components.activity_tracker.data_builders import EntityValidationError
from custom_components.activity_tracker.services import ServiceError

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=UTC)


@pytest.fixture
def activities() -> dict[str, Any]:
    """Return a collection holding one scheduled activity with two records."""
    collection: dict[str, Any] = {}
    services.handle_create_activity(
        collection,
        {
            const.DATA_ACTIVITY_NAME: "Water plants",
            const.DATA_ACTIVITY_RECURRENCE_HOURS: "72",
        },
        now=NOW,
    )
    for ts in ("2026-10-10T08:00:00+00:00", "2026-10-13T08:00:00+00:00"):
        services.handle_record_activity(
            collection,
            {const.FIELD_ACTIVITY_NAME: "Water plants", const.DATA_RECORD_TIMESTAMP: ts},
            now=NOW,
        )
    return collection


def _only(collection: dict[str, Any]) -> dict[str, Any]:
    """Return the single activity in the collection."""
    (activity,) = collection.values()
    return activity


class TestActivityServices:
    """Test create, update and delete activity."""

    def test_create(self, activities) -> None:
        """Created activity is stored under its id with coerced fields."""
        activity = _only(activities)
        assert activities[activity["internal_id"]] is activity
        assert activity["recurrence_hours"] == 72.0
        assert activity["created_at"] == NOW

    def test_create_duplicate_rejected(self, activities) -> None:
        """Names must be unique within the collection."""
        with pytest.raises(EntityValidationError) as err:
            services.handle_create_activity(
                activities, {const.DATA_ACTIVITY_NAME: "Water plants"}
            )
        assert err.value.translation_key == const.TRANS_KEY_DUPLICATE_ACTIVITY

    def test_create_bad_shape(self) -> None:
        """Schema errors surface as vol.Invalid."""
        with pytest.raises(vol.Invalid):
            services.handle_create_activity(
                {},
                {
                    const.DATA_ACTIVITY_NAME: "Gym",
                    const.DATA_ACTIVITY_RECURRENCE_HOURS: "often",
                },
            )

    @pytest.mark.parametrize("hours", ["nan", "inf", float("nan")])
    def test_create_non_finite_recurrence_rejected(self, hours) -> None:
        """Non-finite intervals fail validation and nothing is stored."""
        collection: dict[str, Any] = {}
        with pytest.raises(EntityValidationError) as err:
            services.handle_create_activity(
                collection,
                {
                    const.DATA_ACTIVITY_NAME: "Gym",
                    const.DATA_ACTIVITY_RECURRENCE_HOURS: hours,
                },
                now=NOW,
            )
        assert err.value.translation_key == const.TRANS_KEY_INVALID_RECURRENCE_HOURS
        assert collection == {}

    def test_update(self, activities) -> None:
        """Update keeps records and applies changes."""
        services.handle_update_activity(
            activities,
            {
                const.FIELD_ACTIVITY_NAME: "Water plants",
                const.DATA_ACTIVITY_NAME: "Water ferns",
                const.DATA_ACTIVITY_EXCLUDED_WEEKDAYS: ["0"],
            },
        )
        activity = _only(activities)
        assert activity["name"] == "Water ferns"
        assert activity["excluded_weekdays"] == [0]
        assert len(activity["records"]) == 2

    def test_update_unknown_activity(self, activities) -> None:
        """Unknown names raise ServiceError."""
        with pytest.raises(ServiceError):
            services.handle_update_activity(
                activities, {const.FIELD_ACTIVITY_NAME: "Gym"}
            )

    def test_delete(self, activities) -> None:
        """Delete removes the activity."""
        services.handle_delete_activity(
            activities, {const.FIELD_ACTIVITY_NAME: "Water plants"}
        )
        assert activities == {}


class TestRecordServices:
    """Test record, update note and delete record."""

    def test_record_defaults_to_now(self, activities) -> None:
        """Omitted timestamp uses the injected now."""
        record = services.handle_record_activity(
            activities,
            {const.FIELD_ACTIVITY_NAME: "Water plants", const.DATA_RECORD_NOTE: "ok"},
            now=NOW,
        )
        assert record == {"timestamp": NOW, "note": "ok"}
        assert _only(activities)["records"][-1] is record

    def test_record_in_future_rejected(self, activities) -> None:
        """Future timestamps raise and leave the records untouched."""
        with pytest.raises(EntityValidationError) as err:
            services.handle_record_activity(
                activities,
                {
                    const.FIELD_ACTIVITY_NAME: "Water plants",
                    const.DATA_RECORD_TIMESTAMP: NOW + timedelta(days=30),
                },
                now=NOW,
            )
        assert err.value.translation_key == const.TRANS_KEY_FUTURE_RECORD
        assert len(_only(activities)["records"]) == 2

    def test_record_near_existing_warns(self, activities, caplog) -> None:
        """A same-day completion hours apart is stored with a warning."""
        with caplog.at_level(logging.WARNING):
            services.handle_record_activity(
                activities,
                {
                    const.FIELD_ACTIVITY_NAME: "Water plants",
                    const.DATA_RECORD_TIMESTAMP: "2026-10-13T12:00:00+00:00",
                },
                now=NOW,
            )
        assert "already has a record" in caplog.text
        assert len(_only(activities)["records"]) == 3

    def test_record_on_new_day_does_not_warn(self, activities, caplog) -> None:
        """Records on a day without completions log no warning."""
        with caplog.at_level(logging.WARNING):
            services.handle_record_activity(
                activities, {const.FIELD_ACTIVITY_NAME: "Water plants"}, now=NOW
            )
        assert "already has a record" not in caplog.text

    def test_update_note(self, activities) -> None:
        """Note is replaced; timestamp is untouched."""
        services.handle_update_record_note(
            activities,
            {
                const.FIELD_ACTIVITY_NAME: "Water plants",
                const.FIELD_RECORD_INDEX: 0,
                const.DATA_RECORD_NOTE: "  repotted ",
            },
        )
        record = _only(activities)["records"][0]
        assert record["note"] == "repotted"
        assert record["timestamp"] == datetime(2026, 10, 10, 8, 0, tzinfo=UTC)

    def test_update_note_too_long(self, activities) -> None:
        """Over-long notes are rejected."""
        with pytest.raises(EntityValidationError):
            services.handle_update_record_note(
                activities,
                {
                    const.FIELD_ACTIVITY_NAME: "Water plants",
                    const.FIELD_RECORD_INDEX: 0,
                    const.DATA_RECORD_NOTE: "x" * (const.MAX_NOTE_LENGTH + 1),
                },
            )

    def test_delete_record(self, activities) -> None:
        """The record at the index is removed."""
        services.handle_delete_record(
            activities,
            {const.FIELD_ACTIVITY_NAME: "Water plants", const.FIELD_RECORD_INDEX: 0},
        )
        records = _only(activities)["records"]
        assert [r["timestamp"].day for r in records] == [13]

    def test_delete_missing_record(self, activities) -> None:
        """An out-of-range index raises ServiceError."""
        with pytest.raises(ServiceError):
            services.handle_delete_record(
                activities,
                {const.FIELD_ACTIVITY_NAME: "Water plants", const.FIELD_RECORD_INDEX: 5},
            )

    def test_negative_index_rejected_by_schema(self, activities) -> None:
        """Indices are non-negative."""
        with pytest.raises(vol.Invalid):
            services.handle_delete_record(
                activities,
                {const.FIELD_ACTIVITY_NAME: "Water plants", const.FIELD_RECORD_INDEX: -1},
            )
