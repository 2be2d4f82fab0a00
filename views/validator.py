"""
Timestamp validation for a single shipping event.
"""

import math
from datetime import datetime, date, time as dt_time, timedelta
from typing import Union

from backend.shipping_event import ShippingEvent
from .types import ValidatedEvent, InvalidEventReport, UNPARSABLE_TIMESTAMP


# Naive UTC, so epoch values compare with every other parsed instant
_EPOCH = datetime(1970, 1, 1)


class TimestampError(ValueError):
    """Raised internally when a timestamp value cannot become a datetime."""


def validate(event: ShippingEvent) -> Union[ValidatedEvent, InvalidEventReport]:
    """
    Convert the event's timestamp to a datetime.

    Total: every event yields exactly one ValidatedEvent or one
    InvalidEventReport. Nothing is raised and nothing is logged.
    """
    try:
        instant = parse_timestamp(event.timestamp)
    except TimestampError as e:
        return InvalidEventReport(event=event, reason=UNPARSABLE_TIMESTAMP, detail=str(e))
    return ValidatedEvent(event=event, instant=instant, all_day=is_date_only(event.timestamp))


def is_date_only(value) -> bool:
    """True for a date or a date-only ISO string: a day without a time of day."""
    if isinstance(value, datetime):
        return False
    if isinstance(value, date):
        return True
    if isinstance(value, str):
        try:
            date.fromisoformat(value.strip())
        except ValueError:
            return False
        return True
    return False


def parse_timestamp(value) -> datetime:
    """
    Turn a raw timestamp into a datetime without changing its zone.

    - datetime: returned as-is (aware values keep their own wall clock)
    - date: midnight of that day
    - str: ISO 8601, extended or basic form, date-only allowed
    - int/float: epoch milliseconds, as naive UTC
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, dt_time.min)
    if isinstance(value, str):
        return _parse_string(value)
    if isinstance(value, bool):
        raise TimestampError(f"boolean is not a timestamp: {value!r}")
    if isinstance(value, (int, float)):
        return _parse_epoch_ms(value)
    raise TimestampError(f"unsupported timestamp type: {type(value).__name__}")


def _parse_string(value: str) -> datetime:
    text = value.strip()
    if not text:
        raise TimestampError("empty timestamp")
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise TimestampError(f"not an ISO 8601 timestamp: {value!r}") from None


def _parse_epoch_ms(value: Union[int, float]) -> datetime:
    if isinstance(value, float) and not math.isfinite(value):
        raise TimestampError(f"non-finite timestamp: {value!r}")
    try:
        return _EPOCH + timedelta(milliseconds=value)
    except (OverflowError, ValueError):
        raise TimestampError(f"timestamp out of range: {value!r}") from None
