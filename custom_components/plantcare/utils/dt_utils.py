# File: utils/dt_utils.py
"""Date and time utilities for PlantCare.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

UTILS PURITY: NO `homeassistant.*` imports allowed.
   Uses standard library: datetime, zoneinfo; python-dateutil for ISO parsing.

Functions:
    - dt_now_utc: Current time helper
    - as_utc / as_local: Timezone conversion
    - dt_parse / dt_to_utc: Normalize stored timestamps
    - dt_add_days: Shift a timestamp by whole days
    - days_between: Ceiling day difference for due-date countdowns
    - calendar_days_between: Local calendar-date difference for streaks
    - format_time_ago: Human-readable relative time ("3h ago")
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
import logging
import math
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

# Third-party date utilities (no HA dependency)
from dateutil import parser as dt_parser

if TYPE_CHECKING:
    from datetime import tzinfo

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# ==============================================================================

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400
DAYS_PER_WEEK = 7
DAYS_PER_MONTH = 30

TIME_AGO_JUST_NOW = "just now"


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone for all dt_utils functions.

    Call this during integration setup to configure the user's timezone.

    Args:
        tz: ZoneInfo object representing the default timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware)."""
    return datetime.now(UTC)


# ==============================================================================
# Timezone Conversion
# ==============================================================================


def as_utc(dt_obj: datetime) -> datetime:
    """Convert a datetime to UTC timezone.

    Naive datetimes are assumed to be in the default timezone.
    """
    if dt_obj.tzinfo is None:
        dt_obj = dt_obj.replace(tzinfo=DEFAULT_TIME_ZONE)
    return dt_obj.astimezone(UTC)


def as_local(dt_obj: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Convert a datetime to local timezone.

    Naive datetimes are assumed to be in UTC.
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    if dt_obj.tzinfo is None:
        dt_obj = dt_obj.replace(tzinfo=UTC)
    return dt_obj.astimezone(tz_info)


# ==============================================================================
# Date/Time Parsing
# ==============================================================================


def dt_parse(
    dt_input: str | date | datetime | None,
    default_tzinfo: tzinfo | None = None,
) -> datetime | None:
    """Normalize a stored or user-supplied timestamp to an aware datetime.

    Accepts ISO strings, dates (midnight local) and datetimes. Naive values
    get ``default_tzinfo`` (DEFAULT_TIME_ZONE if None).

    Returns:
        Timezone-aware datetime, or None if the input could not be parsed.

    Example:
        >>> dt_parse("2025-04-15")
        datetime.datetime(2025, 4, 15, 0, 0, tzinfo=ZoneInfo('UTC'))
    """
    if not dt_input:
        return None

    tz_info = default_tzinfo or DEFAULT_TIME_ZONE
    result: datetime | None = None

    if isinstance(dt_input, str):
        try:
            result = dt_parser.isoparse(dt_input)
        except (ValueError, OverflowError):
            _LOGGER.debug("dt_parse: unparseable timestamp %r", dt_input)
            return None
    elif isinstance(dt_input, datetime):
        result = dt_input
    elif isinstance(dt_input, date):
        result = datetime.combine(dt_input, datetime.min.time())
    else:
        return None

    if result.tzinfo is None:
        result = result.replace(tzinfo=tz_info)
    return result


def dt_to_utc(dt_input: str | date | datetime | None) -> datetime | None:
    """Parse a timestamp, apply timezone if naive, and convert to UTC.

    Example:
        "2025-04-07T14:30:00-05:00" → datetime.datetime(2025, 4, 7, 19, 30, tzinfo=UTC)
    """
    result = dt_parse(dt_input, default_tzinfo=DEFAULT_TIME_ZONE)
    if result is None:
        return None
    return result.astimezone(UTC)


# ==============================================================================
# Interval Arithmetic
# ==============================================================================


def dt_add_days(base_date: str | date | datetime, days: int) -> datetime | None:
    """Shift a date/datetime by whole days (negative subtracts).

    Returns:
        UTC-aware datetime, or None on error.
    """
    base_dt = dt_to_utc(base_date)
    if base_dt is None:
        _LOGGER.error("dt_add_days: Could not parse base_date %r", base_date)
        return None

    try:
        return base_dt + timedelta(days=days)
    except OverflowError as exc:
        _LOGGER.error("Error adding %s days: %s", days, exc)
        return None


def days_between(
    start: str | date | datetime,
    end: str | date | datetime,
) -> int:
    """Return the ceiling of the elapsed days from ``start`` to ``end``.

    Used for due-date countdowns; a negative value means ``end`` precedes
    ``start`` (overdue when ``start`` is now and ``end`` the due date).

    Raises:
        ValueError: If either timestamp cannot be parsed.

    Examples:
        days_between(now, now + 36h) → 2
        days_between(now, now - 36h) → -1
    """
    start_dt = dt_to_utc(start)
    end_dt = dt_to_utc(end)
    if start_dt is None or end_dt is None:
        raise ValueError(f"Cannot compute days between {start!r} and {end!r}")
    return math.ceil((end_dt - start_dt).total_seconds() / SECONDS_PER_DAY)


def calendar_days_between(
    start: str | date | datetime,
    end: str | date | datetime,
    tz: ZoneInfo | None = None,
) -> int:
    """Return the number of local calendar days from ``start`` to ``end``.

    Two timestamps on the same local date are 0 apart; 23:59 and 00:01 the
    next morning are 1 apart.

    Raises:
        ValueError: If either timestamp cannot be parsed.
    """
    start_dt = dt_to_utc(start)
    end_dt = dt_to_utc(end)
    if start_dt is None or end_dt is None:
        raise ValueError(f"Cannot compute days between {start!r} and {end!r}")
    return (as_local(end_dt, tz).date() - as_local(start_dt, tz).date()).days


# ==============================================================================
# Formatting
# ==============================================================================


def format_time_ago(
    timestamp: str | date | datetime,
    now: datetime | None = None,
) -> str:
    """Format a past timestamp as a compact relative time.

    Buckets are half-open; a value exactly on a boundary belongs to the next
    coarser bucket (60s → "1m ago", 3600s → "1h ago").

    Examples:
        30 seconds ago → "just now"
        90 minutes ago → "1h ago"
        10 days ago → "1w ago"
        45 days ago → "1mo ago"
    """
    then = dt_to_utc(timestamp)
    if then is None:
        raise ValueError(f"Cannot format timestamp {timestamp!r}")
    current = as_utc(now) if now else dt_now_utc()

    seconds = (current - then).total_seconds()
    if seconds < SECONDS_PER_MINUTE:
        return TIME_AGO_JUST_NOW
    if seconds < SECONDS_PER_HOUR:
        return f"{int(seconds // SECONDS_PER_MINUTE)}m ago"
    if seconds < SECONDS_PER_DAY:
        return f"{int(seconds // SECONDS_PER_HOUR)}h ago"

    days = int(seconds // SECONDS_PER_DAY)
    if days < DAYS_PER_WEEK:
        return f"{days}d ago"
    if days < DAYS_PER_MONTH:
        return f"{days // DAYS_PER_WEEK}w ago"
    return f"{days // DAYS_PER_MONTH}mo ago"
