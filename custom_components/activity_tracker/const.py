# File: const.py
"""Constants for the Activity Tracker engine.

This file centralizes data keys, thresholds, defaults, labels and status
identifiers so engines, builders and helpers agree on a single vocabulary.
"""

import logging
from typing import Final

# Logger
LOGGER = logging.getLogger(__package__)


# ------------------------------------------------------------------------------------------------
# Data Keys - Activity
# ------------------------------------------------------------------------------------------------
DATA_ACTIVITY_INTERNAL_ID = "internal_id"
DATA_ACTIVITY_NAME = "name"
DATA_ACTIVITY_DESCRIPTION = "description"
DATA_ACTIVITY_CREATED_AT = "created_at"
DATA_ACTIVITY_RECORDS = "records"
DATA_ACTIVITY_RECURRENCE_HOURS = "recurrence_hours"
DATA_ACTIVITY_EXCLUDED_WEEKDAYS = "excluded_weekdays"

# ------------------------------------------------------------------------------------------------
# Data Keys - Record
# ------------------------------------------------------------------------------------------------
DATA_RECORD_TIMESTAMP = "timestamp"
DATA_RECORD_NOTE = "note"

# ------------------------------------------------------------------------------------------------
# Data Keys - Status Snapshot
# ------------------------------------------------------------------------------------------------
DATA_STATUS_LAST_RECORDED_AT = "last_recorded_at"
DATA_STATUS_HOURS_SINCE_LAST_RECORD = "hours_since_last_record"
DATA_STATUS_HOURS_UNTIL_DUE = "hours_until_due"
DATA_STATUS_STATUS = "status"

# ------------------------------------------------------------------------------------------------
# Data Keys - Period Statistics
# ------------------------------------------------------------------------------------------------
DATA_STATS_RECORD_COUNT = "record_count"
DATA_STATS_AVERAGE_GAP_HOURS = "average_gap_hours"
DATA_STATS_AVERAGE_DELTA_VS_SCHEDULE_HOURS = "average_delta_vs_schedule_hours"


# ------------------------------------------------------------------------------------------------
# Activity Status
# ------------------------------------------------------------------------------------------------
STATUS_ON_TRACK = "on_track"
STATUS_ALMOST_OVERDUE = "almost_overdue"
STATUS_SHORT_OVERDUE = "short_overdue"
STATUS_OVERDUE = "overdue"

# Ordered from least to most urgent
STATUS_ORDER: Final[tuple[str, ...]] = (
    STATUS_ON_TRACK,
    STATUS_ALMOST_OVERDUE,
    STATUS_SHORT_OVERDUE,
    STATUS_OVERDUE,
)

# Classification thresholds (hours until due)
STATUS_ALMOST_OVERDUE_THRESHOLD_HOURS: Final = 8
STATUS_DUE_THRESHOLD_HOURS: Final = 0
STATUS_OVERDUE_THRESHOLD_HOURS: Final = -24

# Display labels
STATUS_LABELS: Final[dict[str, str]] = {
    STATUS_ON_TRACK: "On Track",
    STATUS_ALMOST_OVERDUE: "Almost Overdue",
    STATUS_SHORT_OVERDUE: "Overdue",
    STATUS_OVERDUE: "Very Overdue",
}

# Display colors
STATUS_COLORS: Final[dict[str, str]] = {
    STATUS_ON_TRACK: "#4caf50",  # Green
    STATUS_ALMOST_OVERDUE: "#ff9800",  # Orange
    STATUS_SHORT_OVERDUE: "#ff5722",  # Deep Orange
    STATUS_OVERDUE: "#f44336",  # Red
}


# ------------------------------------------------------------------------------------------------
# Scheduling
# ------------------------------------------------------------------------------------------------
HOURS_PER_DAY: Final = 24
SECONDS_PER_HOUR: Final = 3600

# Safety limit when skipping excluded weekdays
MAX_EXCLUDED_DAY_ITERATIONS: Final = 7

# Weekday indices (0=Sunday .. 6=Saturday)
WEEKDAY_SUNDAY = 0
WEEKDAY_MONDAY = 1
WEEKDAY_TUESDAY = 2
WEEKDAY_WEDNESDAY = 3
WEEKDAY_THURSDAY = 4
WEEKDAY_FRIDAY = 5
WEEKDAY_SATURDAY = 6

ALL_WEEKDAYS: Final[frozenset[int]] = frozenset(range(7))


# ------------------------------------------------------------------------------------------------
# Statistics Periods
# ------------------------------------------------------------------------------------------------
PERIOD_CURRENT_MONTH = "current_month"
PERIOD_LAST_MONTH = "last_month"
PERIOD_ALL_TIME = "all_time"

# Minimum records needed to compute a gap
MIN_RECORDS_FOR_GAP: Final = 2


# ------------------------------------------------------------------------------------------------
# Activity Filters
# ------------------------------------------------------------------------------------------------
SCHEDULE_TYPE_SCHEDULED = "scheduled"
SCHEDULE_TYPE_UNSCHEDULED = "unscheduled"


# ------------------------------------------------------------------------------------------------
# Records
# ------------------------------------------------------------------------------------------------
MAX_NOTE_LENGTH: Final = 300

# Records this close together on the same local day are likely duplicates
DUPLICATE_RECORD_WINDOW_HOURS: Final = 8


# ------------------------------------------------------------------------------------------------
# Defaults
# ------------------------------------------------------------------------------------------------
DEFAULT_ACTIVITY_DESCRIPTION = ""
DEFAULT_RECURRENCE_HOURS = None


# ------------------------------------------------------------------------------------------------
# Validation Errors
# ------------------------------------------------------------------------------------------------
CFOP_ERROR_ACTIVITY_NAME = "activity_name"
CFOP_ERROR_RECURRENCE_HOURS = "recurrence_hours"
CFOP_ERROR_EXCLUDED_WEEKDAYS = "excluded_weekdays"
CFOP_ERROR_RECORD_NOTE = "record_note"
CFOP_ERROR_RECORD_TIMESTAMP = "record_timestamp"

TRANS_KEY_INVALID_ACTIVITY_NAME = "invalid_activity_name"
TRANS_KEY_DUPLICATE_ACTIVITY = "duplicate_activity"
TRANS_KEY_INVALID_RECURRENCE_HOURS = "invalid_recurrence_hours"
TRANS_KEY_INVALID_EXCLUDED_WEEKDAYS = "invalid_excluded_weekdays"
TRANS_KEY_ALL_WEEKDAYS_EXCLUDED = "all_weekdays_excluded"
TRANS_KEY_NOTE_TOO_LONG = "note_too_long"
TRANS_KEY_INVALID_RECORD_TIMESTAMP = "invalid_record_timestamp"
TRANS_KEY_FUTURE_RECORD = "future_record"


# ------------------------------------------------------------------------------------------------
# Service Fields
# ------------------------------------------------------------------------------------------------
FIELD_ACTIVITY_NAME = "activity_name"
FIELD_RECORD_INDEX = "record_index"

# ------------------------------------------------------------------------------------------------
# Service Errors
# ------------------------------------------------------------------------------------------------
ERROR_ACTIVITY_NOT_FOUND_FMT = "Activity '{}' not found"
ERROR_RECORD_NOT_FOUND_FMT = "Record {} not found for activity '{}'"
