"""
Timezone utilities for Parcel Calendar.

The view engine never converts timestamps. Conversion happens once, at the
import boundary, into the zone configured for display. "Today" is also
resolved in that zone.
"""

from datetime import datetime, date
import pytz


# Default timezone - can be overridden by config
_local_timezone_name: str = "UTC"


def set_timezone(timezone_name: str):
    """Set the local timezone for the application."""
    global _local_timezone_name
    _local_timezone_name = timezone_name


def get_timezone_name() -> str:
    return _local_timezone_name


def get_local_timezone():
    """
    Get the local timezone as a pytz timezone object.

    Unknown names fall back to UTC.
    """
    try:
        return pytz.timezone(_local_timezone_name)
    except pytz.UnknownTimeZoneError:
        return pytz.UTC


def local_now() -> datetime:
    """Current time as an aware datetime in the local timezone."""
    return datetime.now(pytz.UTC).astimezone(get_local_timezone())


def local_today() -> date:
    """Today's calendar day in the local timezone."""
    return local_now().date()


def to_local_naive(dt: datetime) -> datetime:
    """
    Convert an aware datetime to a naive local datetime.

    Naive input is assumed to already be local wall time and is
    returned unchanged.
    """
    if dt.tzinfo is not None:
        return dt.astimezone(get_local_timezone()).replace(tzinfo=None)
    return dt
