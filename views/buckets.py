"""
Bucket assignment: group events by day or by (day, hour).

This is the only place event timestamps are interpreted. One linear pass,
no sorting; events keep their input order inside a bucket so that
truncated cells ("+K more") always show the same events.
"""

from typing import Iterable, NamedTuple

from backend.shipping_event import ShippingEvent
from .types import (
    Granularity, ValidatedEvent, InvalidEventReport, BucketKey, DayKey,
    coerce_granularity, parse_day_key,
)
from .validator import validate


class Assignment(NamedTuple):
    """Result of assign(): buckets by key plus the excluded events."""
    buckets: dict[BucketKey, list[ValidatedEvent]]
    invalid: list[InvalidEventReport]

    @property
    def valid_count(self) -> int:
        return sum(len(events) for events in self.buckets.values())

    @property
    def invalid_ids(self) -> list[str]:
        return [report.event_id for report in self.invalid]

    def events_for(self, key: BucketKey) -> list[ValidatedEvent]:
        return self.buckets.get(key, [])


def bucket_key(validated: ValidatedEvent, granularity: Granularity) -> BucketKey:
    """Key for one validated event under the given granularity."""
    if granularity.keys_by_hour:
        return validated.hour_key
    return validated.day_key


def assign(events: Iterable[ShippingEvent], granularity) -> Assignment:
    """
    Validate and bucket every event.

    Month/agenda: key "YYYY-MM-DD". Week/day: key ("YYYY-MM-DD", hour).
    Unknown granularity values fall back to month keying.
    """
    granularity = coerce_granularity(granularity)
    buckets: dict[BucketKey, list[ValidatedEvent]] = {}
    invalid: list[InvalidEventReport] = []

    for event in events:
        result = validate(event)
        if isinstance(result, InvalidEventReport):
            invalid.append(result)
            continue
        key = bucket_key(result, granularity)
        bucket = buckets.get(key)
        if bucket is None:
            buckets[key] = [result]
        else:
            bucket.append(result)

    return Assignment(buckets, invalid)


def agenda_days(buckets: dict[DayKey, list[ValidatedEvent]]) -> list[tuple[DayKey, list[ValidatedEvent]]]:
    """Day buckets as (key, events) pairs in ascending day order."""
    return [(key, buckets[key]) for key in sorted(buckets)]


def events_by_hour(
    buckets: dict[BucketKey, list[ValidatedEvent]],
    key: DayKey
) -> dict[int, list[ValidatedEvent]]:
    """
    Hour -> events for one day, taken from (day, hour) buckets.

    Only populated hours are present.
    """
    hours = {}
    for hour in range(24):
        events = buckets.get((key, hour))
        if events:
            hours[hour] = events
    return hours


def day_of(key: BucketKey):
    """Calendar day of any bucket key."""
    if isinstance(key, tuple):
        return parse_day_key(key[0])
    return parse_day_key(key)
