# File: utils/dt_utils.py
"""Date and time utilities for Activity Tracker.

Pure Python date/time functions with no I/O and no package imports.
All functions here can be unit tested in isolation.

Uses standard library: datetime, zoneinfo, plus dateutil for calendar math.

Time zone policy:
    One "local" time zone is used for every weekday and calendar-month
    computation. It defaults to the execution environment's local zone and
    can be pinned with set_default_timezone(). Naive datetimes are always
    interpreted in that zone. Elapsed-time arithmetic is done in UTC so DST
    transitions never stretch or shrink an interval.

Functions:
    - set_default_timezone / get_default_timezone: Local zone configuration
    - dt_now_utc / dt_now_local: Current datetime
    - as_utc / as_local: Time zone conversion
    - dt_parse: Normalize datetime or ISO string inputs
    - dt_add_hours: Add elapsed hours to an instant
    - dt_hours_between: Elapsed hours between two instants
    - dt_weekday: Sunday-first weekday index in local time
    - start_of_local_day / start_of_month / end_of_month: Calendar boundaries
    - dt_format_hours: Render an hour count as "N hours" / "N days"
    - dt_format_date: Render a date as "Oct 17, 2026"
    - dt_format_relative: Render distance to now as "3 days ago" / "in 2 hours"
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta, tzinfo
import logging
import math

# Third-party date utilities
from dateutil.relativedelta import relativedelta

# Module-level logger
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# These mirror const.py values but are defined locally for purity.
# ==============================================================================

# Default timezone: None means the execution environment's local zone
DEFAULT_TIME_ZONE: tzinfo | None = None

HOURS_PER_DAY = 24
SECONDS_PER_HOUR = 3600

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 1440
MINUTES_PER_MONTH = 43200  # 30 days
MINUTES_PER_TWO_MONTHS = 86400


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: tzinfo | None) -> None:
    """Set the local timezone used for weekday and calendar computations.

    Call this once during application setup. Passing None restores the
    execution environment's local zone.

    Args:
        tz: tzinfo (normally a ZoneInfo) or None
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> tzinfo | None:
    """Get the configured local timezone (None = environment local zone)."""
    return DEFAULT_TIME_ZONE


def _localize(naive: datetime, tz: tzinfo | None = None) -> datetime:
    """Attach the local zone to a naive wall-clock datetime."""
    tz_info = tz or DEFAULT_TIME_ZONE
    if tz_info is None:
        # astimezone() on a naive value interprets it as system local time
        return naive.astimezone()
    return naive.replace(tzinfo=tz_info)


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC.

    This is the only clock read used by the engines.
    """
    return datetime.now(UTC)


def dt_now_local(tz: tzinfo | None = None) -> datetime:
    """Return the current datetime in the local timezone."""
    return as_local(dt_now_utc(), tz)


# ==============================================================================
# Timezone Conversion
# ==============================================================================


def as_utc(dt_obj: datetime) -> datetime:
    """Convert a datetime to UTC timezone.

    Args:
        dt_obj: Datetime object. Naive values are interpreted as local time.

    Returns:
        Datetime in UTC timezone
    """
    if dt_obj.tzinfo is None:
        dt_obj = _localize(dt_obj)
    return dt_obj.astimezone(UTC)


def as_local(dt_obj: datetime, tz: tzinfo | None = None) -> datetime:
    """Convert a datetime to the local timezone.

    Args:
        dt_obj: Datetime object. Naive values are interpreted as local time.
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Datetime in local timezone
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    if dt_obj.tzinfo is None:
        return _localize(dt_obj, tz_info)
    if tz_info is None:
        return dt_obj.astimezone()
    return dt_obj.astimezone(tz_info)


def dt_parse(value: datetime | date | str | None) -> datetime | None:
    """Normalize a datetime input to a timezone-aware UTC datetime.

    Accepts datetime objects, date objects (midnight local time) and ISO 8601
    strings. Returns None for None, empty strings and unparseable strings.

    Examples:
        dt_parse("2026-01-05T10:00:00+00:00") → datetime(2026, 1, 5, 10, tzinfo=UTC)
        dt_parse("garbage") → None
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return as_utc(_localize(datetime(value.year, value.month, value.day)))
    try:
        parsed = datetime.fromisoformat(str(value).strip())
    except ValueError:
        _LOGGER.debug("dt_parse: Unable to parse datetime value %r", value)
        return None
    return as_utc(parsed)


# ==============================================================================
# Elapsed-Time Arithmetic
# ==============================================================================


def dt_add_hours(dt_obj: datetime, hours: float) -> datetime:
    """Add elapsed hours to an instant.

    The addition is performed in UTC, so 24 hours is always 24 real hours
    even across a DST change.

    Returns:
        UTC datetime
    """
    return as_utc(dt_obj) + timedelta(hours=hours)


def dt_hours_between(start: datetime, end: datetime) -> float:
    """Return elapsed hours from start to end (negative if end is earlier).

    Both values are converted to UTC first. Python ignores the offset when
    subtracting two datetimes that share a tzinfo object, which would turn a
    DST day into 24 wall-clock hours.
    """
    return (as_utc(end) - as_utc(start)).total_seconds() / SECONDS_PER_HOUR


def dt_weekday(dt_obj: datetime, tz: tzinfo | None = None) -> int:
    """Return the local weekday as 0=Sunday .. 6=Saturday.

    Python's weekday() is Monday-first (Monday=0), so shift by one.
    """
    return (as_local(dt_obj, tz).weekday() + 1) % 7


# ==============================================================================
# Calendar Boundaries
# ==============================================================================


def start_of_local_day(dt_obj: datetime, tz: tzinfo | None = None) -> datetime:
    """Get local midnight (00:00:00) of the day containing dt_obj."""
    local_dt = as_local(dt_obj, tz)
    return _localize(datetime(local_dt.year, local_dt.month, local_dt.day), tz)


def start_of_month(dt_obj: datetime, tz: tzinfo | None = None) -> datetime:
    """Get the first instant of the local calendar month containing dt_obj.

    Example:
        start_of_month(2026-10-17 15:30 local) → 2026-10-01 00:00:00 local
    """
    local_dt = as_local(dt_obj, tz)
    return _localize(datetime(local_dt.year, local_dt.month, 1), tz)


def end_of_month(dt_obj: datetime, tz: tzinfo | None = None) -> datetime:
    """Get the last instant (23:59:59.999999) of the local calendar month.

    Example:
        end_of_month(2026-02-10 local) → 2026-02-28 23:59:59.999999 local
    """
    local_dt = as_local(dt_obj, tz)
    next_month = datetime(local_dt.year, local_dt.month, 1) + relativedelta(months=1)
    return _localize(next_month - timedelta(microseconds=1), tz)


# ==============================================================================
# Formatting
# ==============================================================================


def _pluralize(count: int, unit: str) -> str:
    """Return "1 unit" or "N units"."""
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def dt_format_hours(hours: float) -> str:
    """Render an hour count as whole hours below one day, else whole days.

    The sign is ignored; callers word "ago"/"overdue by" themselves.
    Values are floored, never rounded.

    Examples:
        dt_format_hours(1) → "1 hour"
        dt_format_hours(23.9) → "23 hours"
        dt_format_hours(24) → "1 day"
        dt_format_hours(-50) → "2 days"
    """
    abs_hours = abs(hours)
    if abs_hours < HOURS_PER_DAY:
        return _pluralize(math.floor(abs_hours), "hour")
    return _pluralize(math.floor(abs_hours / HOURS_PER_DAY), "day")


def dt_format_date(dt_obj: datetime, tz: tzinfo | None = None) -> str:
    """Format a datetime as a short local date, e.g. "Oct 17, 2026"."""
    local_dt = as_local(dt_obj, tz)
    return f"{local_dt:%b} {local_dt.day}, {local_dt.year}"


def _format_distance(earlier: datetime, later: datetime) -> str:
    """Describe the distance between two instants in words."""
    minutes = round(dt_hours_between(earlier, later) * MINUTES_PER_HOUR)

    if minutes < 1:
        return "less than a minute"
    if minutes < 45:
        return _pluralize(minutes, "minute")
    if minutes < 90:
        return "about 1 hour"
    if minutes < MINUTES_PER_DAY:
        return f"about {_pluralize(round(minutes / MINUTES_PER_HOUR), 'hour')}"
    if minutes < 2520:  # 42 hours
        return "1 day"
    if minutes < MINUTES_PER_MONTH:
        return _pluralize(round(minutes / MINUTES_PER_DAY), "day")
    if minutes < MINUTES_PER_TWO_MONTHS:
        return f"about {_pluralize(round(minutes / MINUTES_PER_MONTH), 'month')}"

    delta = relativedelta(as_utc(later), as_utc(earlier))
    months = delta.years * 12 + delta.months
    if months < 12:
        return _pluralize(max(months, 2), "month")

    years, remainder = divmod(months, 12)
    if remainder < 3:
        return f"about {_pluralize(years, 'year')}"
    if remainder < 9:
        return f"over {_pluralize(years, 'year')}"
    return f"almost {_pluralize(years + 1, 'year')}"


def dt_format_relative(target: datetime, now: datetime | None = None) -> str:
    """Describe how far target is from now, with direction.

    Examples:
        dt_format_relative(now - 3 days, now) → "3 days ago"
        dt_format_relative(now + 2 hours, now) → "in about 2 hours"
        dt_format_relative(now - 20 seconds, now) → "less than a minute ago"
    """
    reference = now or dt_now_utc()
    if as_utc(target) <= as_utc(reference):
        return f"{_format_distance(target, reference)} ago"
    return f"in {_format_distance(reference, target)}"
