"""Entity lifecycle management helpers.

This module is the SINGLE SOURCE OF TRUTH for:
- Activity and record field defaults
- Business rule validation (the invariants the engines rely on)
- Complete entity structure building

### Build Functions
Each entity type has a `build_<entity>()` function that:
- Takes user input (DATA_* keys)
- Generates internal_id (UUID) for new activities
- Sets timestamps (created_at, record timestamp)
- Applies field defaults and normalization
- Returns a complete entity dict ready for storage
- Raises EntityValidationError on the first rule violation

### Validation Functions
Each entity type has a `validate_<entity>_data()` function that:
- Takes data with DATA_* keys
- Performs the same business rule validation
- Returns dict of errors (empty if valid) instead of raising

The engines never validate. An activity excluding all seven weekdays, a
non-positive recurrence or an over-long note must be rejected here.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
import math
import uuid

from . import const
from .type_defs import ActivityData, RecordData
from .utils.dt_utils import as_utc, dt_now_utc, dt_parse

# ==============================================================================
# HELPER FUNCTIONS FOR FIELD NORMALIZATION
# ==============================================================================


def _normalize_weekdays(value: Any) -> list[int]:
    """Normalize an excluded weekdays field to a sorted, de-duplicated list.

    Handles cases where the value might be:
    - None → empty list
    - A single int → one-element list
    - Any iterable of ints (list, set, tuple) → sorted unique list
    """
    if value is None:
        return []
    if isinstance(value, int):
        return [value]
    return sorted(set(value))


def _normalize_recurrence_hours(value: Any) -> float | None:
    """Convert a recurrence field to float, keeping None/empty as None."""
    if value is None or value == "":
        return None
    return float(value)


def _normalize_note(note: str | None) -> str | None:
    """Strip a note; blank notes are stored as None."""
    if note is None:
        return None
    stripped = str(note).strip()
    return stripped or None


# ==============================================================================
# EXCEPTIONS
# ==============================================================================


class EntityValidationError(Exception):
    """Validation error with field-specific information for form highlighting.

    Attributes:
        field: The CFOP_ERROR_* constant identifying the field that failed
        translation_key: The TRANS_KEY_* constant for the error message
        placeholders: Optional dict for translation string placeholders

    Example:
        raise EntityValidationError(
            field=const.CFOP_ERROR_RECORD_NOTE,
            translation_key=const.TRANS_KEY_NOTE_TOO_LONG,
            placeholders={"max_length": "300"},
        )
    """

    def __init__(
        self,
        field: str,
        translation_key: str,
        placeholders: dict[str, str] | None = None,
    ) -> None:
        """Initialize EntityValidationError."""
        self.field = field
        self.translation_key = translation_key
        self.placeholders = placeholders or {}
        super().__init__(translation_key)


# ==============================================================================
# RECORDS
# ==============================================================================


def validate_record_note(note: str | None) -> dict[str, str]:
    """Validate a record note.

    Returns:
        Dict of errors: {error_field: translation_key}. Empty means valid.
    """
    normalized = _normalize_note(note)
    if normalized is not None and len(normalized) > const.MAX_NOTE_LENGTH:
        return {const.CFOP_ERROR_RECORD_NOTE: const.TRANS_KEY_NOTE_TOO_LONG}
    return {}


def _raise_if_note_too_long(note: str | None) -> None:
    """Raise EntityValidationError if the note exceeds MAX_NOTE_LENGTH."""
    if validate_record_note(note):
        raise EntityValidationError(
            field=const.CFOP_ERROR_RECORD_NOTE,
            translation_key=const.TRANS_KEY_NOTE_TOO_LONG,
            placeholders={"max_length": str(const.MAX_NOTE_LENGTH)},
        )


def build_record(
    timestamp: datetime | str | None = None,
    note: str | None = None,
    *,
    now: datetime | None = None,
) -> RecordData:
    """Build a completion record.

    Args:
        timestamp: Completion time (datetime or ISO string). Defaults to now.
        note: Optional note, at most MAX_NOTE_LENGTH characters after stripping.
        now: Reference instant. Used when timestamp is omitted and as the
            upper bound for timestamp. Defaults to the current time.

    Returns:
        Complete RecordData ready for storage.

    Raises:
        EntityValidationError: If the timestamp cannot be parsed, lies in the
            future, or the note is too long.
    """
    reference = now or dt_now_utc()

    if timestamp is None:
        parsed = reference
    else:
        parsed = dt_parse(timestamp)
        if parsed is None:
            raise EntityValidationError(
                field=const.CFOP_ERROR_RECORD_TIMESTAMP,
                translation_key=const.TRANS_KEY_INVALID_RECORD_TIMESTAMP,
                placeholders={"value": str(timestamp)},
            )
        if parsed > as_utc(reference):
            raise EntityValidationError(
                field=const.CFOP_ERROR_RECORD_TIMESTAMP,
                translation_key=const.TRANS_KEY_FUTURE_RECORD,
                placeholders={"value": parsed.isoformat()},
            )

    _raise_if_note_too_long(note)

    return RecordData(timestamp=parsed, note=_normalize_note(note))


def update_record_note(record: RecordData, note: str | None) -> RecordData:
    """Return a copy of record with its note replaced (or cleared).

    The timestamp is kept as stored; only the note is validated.
    """
    _raise_if_note_too_long(note)
    return RecordData(
        timestamp=record[const.DATA_RECORD_TIMESTAMP], note=_normalize_note(note)
    )


# ==============================================================================
# ACTIVITIES
# ==============================================================================


def validate_activity_data(
    data: dict[str, Any],
    existing_activities: dict[str, Any] | None = None,
    *,
    is_update: bool = False,
    current_activity_id: str | None = None,
) -> dict[str, str]:
    """Validate activity business rules - SINGLE SOURCE OF TRUTH.

    Args:
        data: Activity data dict with DATA_* keys
        existing_activities: All existing activities for duplicate checking (optional)
        is_update: True if updating an existing activity (name may be omitted)
        current_activity_id: ID of activity being updated (excluded from duplicate check)

    Returns:
        Dict of errors: {error_field: translation_key}
        Empty dict means validation passed.

    Validation Rules:
        1. Name not empty (create) or not blank (update if provided)
        2. Name not duplicate
        3. Recurrence hours finite and > 0 (if provided)
        4. Excluded weekdays are integers 0-6
        5. Excluded weekdays never cover all seven days
    """
    errors: dict[str, str] = {}

    # === 1. Name validation ===
    name = data.get(const.DATA_ACTIVITY_NAME, "")
    if isinstance(name, str):
        name = name.strip()

    if not is_update and not name:
        errors[const.CFOP_ERROR_ACTIVITY_NAME] = const.TRANS_KEY_INVALID_ACTIVITY_NAME
        return errors

    if is_update and const.DATA_ACTIVITY_NAME in data and not name:
        errors[const.CFOP_ERROR_ACTIVITY_NAME] = const.TRANS_KEY_INVALID_ACTIVITY_NAME
        return errors

    # === 2. Duplicate name check ===
    if name and existing_activities:
        for activity_id, activity_data in existing_activities.items():
            if activity_id == current_activity_id:
                continue  # Skip self when updating
            if activity_data.get(const.DATA_ACTIVITY_NAME) == name:
                errors[const.CFOP_ERROR_ACTIVITY_NAME] = (
                    const.TRANS_KEY_DUPLICATE_ACTIVITY
                )
                return errors

    # === 3. Recurrence hours: finite and > 0 ===
    if const.DATA_ACTIVITY_RECURRENCE_HOURS in data:
        try:
            recurrence_hours = _normalize_recurrence_hours(
                data[const.DATA_ACTIVITY_RECURRENCE_HOURS]
            )
        except (ValueError, TypeError):
            errors[const.CFOP_ERROR_RECURRENCE_HOURS] = (
                const.TRANS_KEY_INVALID_RECURRENCE_HOURS
            )
            return errors
        if recurrence_hours is not None and (
            not math.isfinite(recurrence_hours) or recurrence_hours <= 0
        ):
            errors[const.CFOP_ERROR_RECURRENCE_HOURS] = (
                const.TRANS_KEY_INVALID_RECURRENCE_HOURS
            )
            return errors

    # === 4 & 5. Excluded weekdays ===
    if const.DATA_ACTIVITY_EXCLUDED_WEEKDAYS in data:
        try:
            weekdays = _normalize_weekdays(data[const.DATA_ACTIVITY_EXCLUDED_WEEKDAYS])
        except TypeError:
            errors[const.CFOP_ERROR_EXCLUDED_WEEKDAYS] = (
                const.TRANS_KEY_INVALID_EXCLUDED_WEEKDAYS
            )
            return errors

        if any(
            isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6
            for day in weekdays
        ):
            errors[const.CFOP_ERROR_EXCLUDED_WEEKDAYS] = (
                const.TRANS_KEY_INVALID_EXCLUDED_WEEKDAYS
            )
            return errors

        if set(weekdays) >= const.ALL_WEEKDAYS:
            errors[const.CFOP_ERROR_EXCLUDED_WEEKDAYS] = (
                const.TRANS_KEY_ALL_WEEKDAYS_EXCLUDED
            )
            return errors

    return errors


def build_activity(
    user_input: dict[str, Any],
    existing: ActivityData | None = None,
    *,
    now: datetime | None = None,
) -> ActivityData:
    """Build activity data for create or update operations.

    One function handles both create (existing=None) and update
    (existing=ActivityData). Records are carried over from the existing
    activity unless user_input supplies them.

    Args:
        user_input: Data with DATA_* keys (may have missing fields)
        existing: None for create, existing ActivityData for update
        now: Creation time for new activities. Defaults to the current time.

    Returns:
        Complete ActivityData TypedDict ready for storage

    Raises:
        EntityValidationError: If any validate_activity_data() rule fails

    Examples:
        # CREATE mode - generates UUID and created_at
        activity = build_activity({DATA_ACTIVITY_NAME: "Water plants",
                                   DATA_ACTIVITY_RECURRENCE_HOURS: 72})

        # UPDATE mode - preserves fields not in user_input
        activity = build_activity({DATA_ACTIVITY_EXCLUDED_WEEKDAYS: [0]},
                                  existing=activity)
    """
    is_create = existing is None

    def get_field(data_key: str, default: Any) -> Any:
        """Get field value: user_input > existing > default."""
        if data_key in user_input:
            return user_input[data_key]
        if existing is not None:
            return existing.get(data_key, default)
        return default

    errors = validate_activity_data(user_input, is_update=not is_create)
    if errors:
        field, translation_key = next(iter(errors.items()))
        raise EntityValidationError(field=field, translation_key=translation_key)

    recurrence_hours = _normalize_recurrence_hours(
        get_field(const.DATA_ACTIVITY_RECURRENCE_HOURS, const.DEFAULT_RECURRENCE_HOURS)
    )

    # Exclusions only make sense for scheduled activities
    excluded_weekdays: list[int] = []
    if recurrence_hours is not None:
        excluded_weekdays = _normalize_weekdays(
            get_field(const.DATA_ACTIVITY_EXCLUDED_WEEKDAYS, [])
        )

    if is_create or existing is None:
        internal_id = str(uuid.uuid4())
        created_at = dt_parse(user_input.get(const.DATA_ACTIVITY_CREATED_AT))
        if created_at is None:
            created_at = now or dt_now_utc()
    else:
        internal_id = existing.get(const.DATA_ACTIVITY_INTERNAL_ID, str(uuid.uuid4()))
        created_at = existing[const.DATA_ACTIVITY_CREATED_AT]

    const.LOGGER.debug(
        "DataBuilders: %s activity '%s' (%s)",
        "Creating" if is_create else "Updating",
        get_field(const.DATA_ACTIVITY_NAME, ""),
        internal_id,
    )

    return ActivityData(
        internal_id=internal_id,
        name=str(get_field(const.DATA_ACTIVITY_NAME, "")).strip(),
        description=str(
            get_field(const.DATA_ACTIVITY_DESCRIPTION, const.DEFAULT_ACTIVITY_DESCRIPTION)
        ),
        created_at=created_at,
        records=list(get_field(const.DATA_ACTIVITY_RECORDS, [])),
        recurrence_hours=recurrence_hours,
        excluded_weekdays=excluded_weekdays,
    )
