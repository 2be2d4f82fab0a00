"""
Shared types for the view engine.

Granularity, the view state value, windows, and the two outcomes of
timestamp validation.
"""

import warnings
from dataclasses import dataclass, replace
from datetime import datetime, date, timedelta
from enum import Enum
from typing import Iterator, Union

from backend.debug import debug_print
from backend.shipping_event import ShippingEvent


def _debug_print(msg: str) -> None:
    debug_print("VIEWS", msg)


UNPARSABLE_TIMESTAMP = "unparsable-timestamp"

DayKey = str                   # "YYYY-MM-DD"
HourKey = tuple[str, int]      # ("YYYY-MM-DD", 0-23)
BucketKey = Union[DayKey, HourKey]


class Granularity(Enum):
    MONTH = "month"
    WEEK = "week"
    DAY = "day"
    AGENDA = "agenda"

    @property
    def keys_by_hour(self) -> bool:
        """Week and day views bucket by (day, hour); month and agenda by day."""
        return self in (Granularity.WEEK, Granularity.DAY)


class UnknownGranularityWarning(RuntimeWarning):
    """
    Emitted when a granularity value outside the closed set reaches the
    engine. The engine falls back to month behavior; the warning marks the
    caller's defect without failing the render.
    """


def coerce_granularity(value) -> Granularity:
    """
    Accept a Granularity or its name/value ("month", "WEEK", "list").

    Anything else falls back to MONTH with an UnknownGranularityWarning.
    """
    if isinstance(value, Granularity):
        return value
    if isinstance(value, str):
        name = value.strip().lower()
        if name == "list":
            return Granularity.AGENDA
        for granularity in Granularity:
            if granularity.value == name:
                return granularity
    _debug_print(f"unknown granularity {value!r}, falling back to month")
    warnings.warn(
        f"unknown granularity {value!r}; using month",
        UnknownGranularityWarning,
        stacklevel=3,
    )
    return Granularity.MONTH


def day_key(d: date) -> DayKey:
    """Calendar-day key, YYYY-MM-DD, from the value's own fields."""
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def parse_day_key(key: DayKey) -> date:
    return date.fromisoformat(key)


def as_date(value: Union[date, datetime]) -> date:
    """Reduce a datetime to its calendar day; dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


@dataclass(frozen=True)
class ViewState:
    """Active granularity and the day navigation is anchored to."""
    granularity: Granularity
    focus_date: date

    def __post_init__(self):
        if not isinstance(self.focus_date, date):
            raise TypeError(f"focus_date must be a date, not {type(self.focus_date).__name__}")

    def with_granularity(self, granularity: Granularity) -> 'ViewState':
        return replace(self, granularity=granularity)

    def with_focus(self, focus_date: date) -> 'ViewState':
        return replace(self, focus_date=as_date(focus_date))


@dataclass(frozen=True)
class ViewWindow:
    """Inclusive range of calendar days to render."""
    start: date
    end: date

    @property
    def day_count(self) -> int:
        return (self.end - self.start).days + 1

    def days(self) -> Iterator[date]:
        for offset in range(self.day_count):
            yield self.start + timedelta(days=offset)

    def __contains__(self, d: date) -> bool:
        return self.start <= as_date(d) <= self.end

    def __len__(self) -> int:
        return self.day_count


class _Unbounded:
    """Window marker for the agenda: every valid event is eligible."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __contains__(self, d) -> bool:
        return True

    def __repr__(self):
        return "UNBOUNDED"


UNBOUNDED = _Unbounded()


@dataclass(frozen=True)
class ValidatedEvent:
    """A shipping event with its successfully parsed instant."""
    event: ShippingEvent
    instant: datetime
    all_day: bool = False

    @property
    def day_key(self) -> DayKey:
        return day_key(self.instant)

    @property
    def hour_key(self) -> HourKey:
        return (day_key(self.instant), self.instant.hour)

    @property
    def id(self) -> str:
        return self.event.id


@dataclass(frozen=True)
class InvalidEventReport:
    """An event excluded from bucketing, with the reason."""
    event: ShippingEvent
    reason: str = UNPARSABLE_TIMESTAMP
    detail: str = ""

    @property
    def event_id(self) -> str:
        return self.event.id
