# File: services.py
"""Service handlers for Activity Tracker.

Each handler takes the host application's activities collection (a dict of
ActivityData keyed by internal_id) and a raw payload, validates the payload
shape with a voluptuous schema, applies business rules via data_builders and
updates the collection in place. Persisting the collection afterwards is up
to the caller.

Activities are addressed by name; records by their index in the activity's
stored record list.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import voluptuous as vol

from . import const, data_builders as db
from .helpers.activity_helpers import get_activity_id_by_name, has_nearby_record
from .type_defs import ActivitiesCollection, RecordData

# --- Service Schemas ---
CREATE_ACTIVITY_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_ACTIVITY_NAME): str,
        vol.Optional(const.DATA_ACTIVITY_DESCRIPTION): str,
        vol.Optional(const.DATA_ACTIVITY_RECURRENCE_HOURS): vol.Any(
            None, vol.Coerce(float)
        ),
        vol.Optional(const.DATA_ACTIVITY_EXCLUDED_WEEKDAYS): [vol.Coerce(int)],
    }
)

UPDATE_ACTIVITY_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_ACTIVITY_NAME): str,
        vol.Optional(const.DATA_ACTIVITY_NAME): str,
        vol.Optional(const.DATA_ACTIVITY_DESCRIPTION): str,
        vol.Optional(const.DATA_ACTIVITY_RECURRENCE_HOURS): vol.Any(
            None, vol.Coerce(float)
        ),
        vol.Optional(const.DATA_ACTIVITY_EXCLUDED_WEEKDAYS): [vol.Coerce(int)],
    }
)

DELETE_ACTIVITY_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_ACTIVITY_NAME): str,
    }
)

RECORD_ACTIVITY_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_ACTIVITY_NAME): str,
        vol.Optional(const.DATA_RECORD_TIMESTAMP): vol.Any(None, str, datetime),
        vol.Optional(const.DATA_RECORD_NOTE): vol.Any(None, str),
    }
)

UPDATE_RECORD_NOTE_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_ACTIVITY_NAME): str,
        vol.Required(const.FIELD_RECORD_INDEX): vol.All(
            vol.Coerce(int), vol.Range(min=0)
        ),
        vol.Optional(const.DATA_RECORD_NOTE): vol.Any(None, str),
    }
)

DELETE_RECORD_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_ACTIVITY_NAME): str,
        vol.Required(const.FIELD_RECORD_INDEX): vol.All(
            vol.Coerce(int), vol.Range(min=0)
        ),
    }
)


class ServiceError(Exception):
    """Raised when a service call refers to something that does not exist."""


def _raise_first_error(errors: dict[str, str]) -> None:
    """Raise EntityValidationError for the first validation error, if any."""
    if errors:
        field, translation_key = next(iter(errors.items()))
        raise db.EntityValidationError(field=field, translation_key=translation_key)


def _get_activity_id(
    activities: ActivitiesCollection, activity_name: str, service_label: str
) -> str:
    """Map an activity name to its internal_id or raise ServiceError."""
    activity_id = get_activity_id_by_name(activities, activity_name)
    if not activity_id:
        const.LOGGER.warning(
            "WARNING: %s: %s",
            service_label,
            const.ERROR_ACTIVITY_NOT_FOUND_FMT.format(activity_name),
        )
        raise ServiceError(const.ERROR_ACTIVITY_NOT_FOUND_FMT.format(activity_name))
    return activity_id


def _check_record_index(
    activities: ActivitiesCollection,
    activity_id: str,
    record_index: int,
    service_label: str,
) -> None:
    """Raise ServiceError if the activity has no record at record_index."""
    activity = activities[activity_id]
    if record_index >= len(activity[const.DATA_ACTIVITY_RECORDS]):
        message = const.ERROR_RECORD_NOT_FOUND_FMT.format(
            record_index, activity[const.DATA_ACTIVITY_NAME]
        )
        const.LOGGER.warning("WARNING: %s: %s", service_label, message)
        raise ServiceError(message)


# --- Activity Services ---


def handle_create_activity(
    activities: ActivitiesCollection,
    payload: dict[str, Any],
    *,
    now: datetime | None = None,
) -> str:
    """Create an activity and return its internal_id.

    Raises:
        vol.Invalid: Payload has the wrong shape.
        EntityValidationError: A business rule fails (e.g. duplicate name).
    """
    data = CREATE_ACTIVITY_SCHEMA(payload)
    _raise_first_error(db.validate_activity_data(data, activities))

    activity = db.build_activity(data, now=now)
    activity_id = activity[const.DATA_ACTIVITY_INTERNAL_ID]
    activities[activity_id] = activity

    const.LOGGER.info(
        "INFO: Activity '%s' created (ID: %s)",
        activity[const.DATA_ACTIVITY_NAME],
        activity_id,
    )
    return activity_id


def handle_update_activity(
    activities: ActivitiesCollection, payload: dict[str, Any]
) -> None:
    """Update name, description or schedule of an existing activity."""
    data = UPDATE_ACTIVITY_SCHEMA(payload)
    activity_id = _get_activity_id(
        activities, data[const.FIELD_ACTIVITY_NAME], "Update Activity"
    )

    changes = {k: v for k, v in data.items() if k != const.FIELD_ACTIVITY_NAME}
    _raise_first_error(
        db.validate_activity_data(
            changes,
            activities,
            is_update=True,
            current_activity_id=activity_id,
        )
    )

    activities[activity_id] = db.build_activity(
        changes, existing=activities[activity_id]
    )
    const.LOGGER.info(
        "INFO: Activity '%s' updated (ID: %s)",
        activities[activity_id][const.DATA_ACTIVITY_NAME],
        activity_id,
    )


def handle_delete_activity(
    activities: ActivitiesCollection, payload: dict[str, Any]
) -> None:
    """Delete an activity together with its records."""
    data = DELETE_ACTIVITY_SCHEMA(payload)
    activity_name = data[const.FIELD_ACTIVITY_NAME]
    activity_id = _get_activity_id(activities, activity_name, "Delete Activity")

    del activities[activity_id]
    const.LOGGER.info(
        "INFO: Activity '%s' deleted (ID: %s)", activity_name, activity_id
    )


# --- Record Services ---


def handle_record_activity(
    activities: ActivitiesCollection,
    payload: dict[str, Any],
    *,
    now: datetime | None = None,
) -> RecordData:
    """Log a completion for an activity (timestamp defaults to now)."""
    data = RECORD_ACTIVITY_SCHEMA(payload)
    activity_id = _get_activity_id(
        activities, data[const.FIELD_ACTIVITY_NAME], "Record Activity"
    )

    record = db.build_record(
        data.get(const.DATA_RECORD_TIMESTAMP),
        data.get(const.DATA_RECORD_NOTE),
        now=now,
    )
    records = activities[activity_id][const.DATA_ACTIVITY_RECORDS]
    if has_nearby_record(records, record[const.DATA_RECORD_TIMESTAMP]):
        const.LOGGER.warning(
            "WARNING: Record Activity: '%s' already has a record "
            "within %s hours of %s",
            data[const.FIELD_ACTIVITY_NAME],
            const.DUPLICATE_RECORD_WINDOW_HOURS,
            record[const.DATA_RECORD_TIMESTAMP],
        )
    records.append(record)

    const.LOGGER.info(
        "INFO: Recorded activity '%s' at %s",
        data[const.FIELD_ACTIVITY_NAME],
        record[const.DATA_RECORD_TIMESTAMP],
    )
    return record


def handle_update_record_note(
    activities: ActivitiesCollection, payload: dict[str, Any]
) -> None:
    """Replace (or clear) the note of one record."""
    data = UPDATE_RECORD_NOTE_SCHEMA(payload)
    activity_id = _get_activity_id(
        activities, data[const.FIELD_ACTIVITY_NAME], "Update Record Note"
    )
    record_index = data[const.FIELD_RECORD_INDEX]
    _check_record_index(activities, activity_id, record_index, "Update Record Note")

    records = activities[activity_id][const.DATA_ACTIVITY_RECORDS]
    records[record_index] = db.update_record_note(
        records[record_index], data.get(const.DATA_RECORD_NOTE)
    )
    const.LOGGER.debug(
        "DEBUG: Updated note of record %d for activity '%s'",
        record_index,
        data[const.FIELD_ACTIVITY_NAME],
    )


def handle_delete_record(
    activities: ActivitiesCollection, payload: dict[str, Any]
) -> None:
    """Remove one record from an activity."""
    data = DELETE_RECORD_SCHEMA(payload)
    activity_id = _get_activity_id(
        activities, data[const.FIELD_ACTIVITY_NAME], "Delete Record"
    )
    record_index = data[const.FIELD_RECORD_INDEX]
    _check_record_index(activities, activity_id, record_index, "Delete Record")

    del activities[activity_id][const.DATA_ACTIVITY_RECORDS][record_index]
    const.LOGGER.info(
        "INFO: Deleted record %d for activity '%s'",
        record_index,
        data[const.FIELD_ACTIVITY_NAME],
    )
