"""Shared fixtures for Activity Tracker tests."""

from collections.abc import Callable, Iterator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any
import uuid

import pytest
import yaml

from custom_components.activity_tracker import const, services
from custom_components.activity_tracker.type_defs import (
    ActivitiesCollection,
    ActivityData,
)
from custom_components.activity_tracker.utils import dt_utils

# Reference instant used across tests: Saturday 2026-10-17 12:00 UTC
FROZEN_NOW = datetime(2026, 10, 17, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def pin_default_timezone() -> Iterator[None]:
    """Pin the local zone to UTC so weekday/month math is deterministic.

    Tests that need another zone call dt_utils.set_default_timezone()
    themselves; the original setting is restored afterwards.
    """
    previous = dt_utils.get_default_timezone()
    dt_utils.set_default_timezone(UTC)
    yield
    dt_utils.set_default_timezone(previous)


@pytest.fixture
def now() -> datetime:
    """Return the shared reference instant."""
    return FROZEN_NOW


@pytest.fixture
def make_activity() -> Callable[..., ActivityData]:
    """Return a factory for activity dicts.

    Records may be given as datetimes or as hour offsets before FROZEN_NOW.
    """

    def _make(
        name: str = "Water plants",
        *,
        recurrence_hours: float | None = None,
        excluded_weekdays: list[int] | None = None,
        records: list[datetime | float] | None = None,
        created_at: datetime | None = None,
    ) -> ActivityData:
        record_list: list[dict[str, Any]] = []
        for entry in records or []:
            if isinstance(entry, datetime):
                timestamp = entry
            else:
                timestamp = FROZEN_NOW - timedelta(hours=entry)
            record_list.append({const.DATA_RECORD_TIMESTAMP: timestamp})

        return ActivityData(
            internal_id=str(uuid.uuid4()),
            name=name,
            description="",
            created_at=created_at or datetime(2026, 1, 1, tzinfo=UTC),
            records=record_list,
            recurrence_hours=recurrence_hours,
            excluded_weekdays=excluded_weekdays or [],
        )

    return _make


SCENARIOS_DIR = Path(__file__).parent / "scenarios"

# Creation time for activities loaded from scenario files
SCENARIO_CREATED_AT = datetime(2026, 9, 1, tzinfo=UTC)


def load_scenario(yaml_name: str) -> ActivitiesCollection:
    """Build an activities collection from a scenario YAML file.

    Activities are created through the service handlers so scenarios go
    through the same schemas and validation as real payloads.

    YAML format:
        activities:
          - name: "Water plants"
            recurrence_hours: 72          # optional
            excluded_weekdays: [0, 6]     # optional
            records_hours_ago: [78, 40]   # relative to FROZEN_NOW
    """
    path = SCENARIOS_DIR / yaml_name
    if not path.exists():
        raise FileNotFoundError(f"Scenario YAML not found: {path}")

    with open(path, encoding="utf-8") as f:
        yaml_data = yaml.safe_load(f)

    activities: ActivitiesCollection = {}
    for entry in yaml_data.get("activities", []):
        hours_ago = entry.pop("records_hours_ago", [])
        services.handle_create_activity(activities, entry, now=SCENARIO_CREATED_AT)
        for hours in hours_ago:
            services.handle_record_activity(
                activities,
                {
                    const.FIELD_ACTIVITY_NAME: entry[const.DATA_ACTIVITY_NAME],
                    const.DATA_RECORD_TIMESTAMP: FROZEN_NOW - timedelta(hours=hours),
                },
                now=FROZEN_NOW,
            )
    return activities


@pytest.fixture
def household() -> ActivitiesCollection:
    """Return the household scenario collection."""
    return load_scenario("scenario_household.yaml")
