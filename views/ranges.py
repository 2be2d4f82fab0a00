"""
Visible window resolution and calendar arithmetic.

Week boundaries follow one configured weekday everywhere (Python weekday
numbers, 0 = Monday ... 6 = Sunday). The default is Sunday.
"""

import calendar
from datetime import date, timedelta
from typing import Union

from .types import Granularity, ViewWindow, UNBOUNDED, _Unbounded, coerce_granularity, as_date


SUNDAY = 6
MONDAY = 0
DEFAULT_WEEK_START = SUNDAY


def start_of_week(d: date, week_start: int = DEFAULT_WEEK_START) -> date:
    # Weeks at the ends of the calendar are cut at date.min / date.max
    offset = (d.weekday() - week_start) % 7
    return d - timedelta(days=min(offset, (d - date.min).days))


def end_of_week(d: date, week_start: int = DEFAULT_WEEK_START) -> date:
    offset = 6 - (d.weekday() - week_start) % 7
    return d + timedelta(days=min(offset, (date.max - d).days))


def first_of_month(d: date) -> date:
    return d.replace(day=1)


def last_of_month(d: date) -> date:
    return d.replace(day=calendar.monthrange(d.year, d.month)[1])


def add_months(d: date, months: int) -> date:
    """
    Shift by whole calendar months, clamping the day to the target
    month's length (Jan 31 + 1 month = Feb 28 or 29).
    """
    month_index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def same_month(a: date, b: date) -> bool:
    return a.year == b.year and a.month == b.month


def resolve(granularity, focus_date: date, week_start: int = DEFAULT_WEEK_START) -> Union[ViewWindow, _Unbounded]:
    """
    Visible window for a granularity around a focus date.

    - Month: whole weeks covering the focus date's month
    - Week: the 7 days of the focus date's week
    - Day: the focus date alone
    - Agenda: UNBOUNDED
    """
    granularity = coerce_granularity(granularity)
    focus = as_date(focus_date)

    if granularity == Granularity.AGENDA:
        return UNBOUNDED
    if granularity == Granularity.WEEK:
        return ViewWindow(start_of_week(focus, week_start), end_of_week(focus, week_start))
    if granularity == Granularity.DAY:
        return ViewWindow(focus, focus)
    # MONTH
    return ViewWindow(
        start_of_week(first_of_month(focus), week_start),
        end_of_week(last_of_month(focus), week_start),
    )


def step(granularity, focus_date: date, direction: int) -> date:
    """
    Move the focus date one unit of the granularity forward (+1) or back (-1).

    Agenda steps by a month like the month view. At the ends of the
    representable calendar the focus date stays where it is.
    """
    granularity = coerce_granularity(granularity)
    focus = as_date(focus_date)

    try:
        if granularity == Granularity.WEEK:
            return focus + timedelta(days=7 * direction)
        if granularity == Granularity.DAY:
            return focus + timedelta(days=direction)
        return add_months(focus, direction)
    except (OverflowError, ValueError):
        return focus
