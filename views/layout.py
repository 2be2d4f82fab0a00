"""
View model builder: turns (events, ViewState) into what a renderer draws.

Recomputed from scratch after every transition; nothing here is cached.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional, Union

from backend.config import LocalizationConfig
from backend.shipping_event import ShippingEvent
from .types import (
    Granularity, ViewState, ViewWindow, ValidatedEvent, InvalidEventReport,
    DayKey, _Unbounded, as_date, coerce_granularity, day_key, parse_day_key,
)
from .buckets import assign, agenda_days, events_by_hour
from .ranges import resolve, same_month, start_of_week, DEFAULT_WEEK_START


@dataclass
class DayCell:
    """
    One day of a month, week or day grid.

    Month cells carry ``events``; week and day cells carry ``hours``
    (hour -> events) and ``events`` lists the same events hour by hour.
    """
    day: date
    in_period: bool
    is_today: bool
    events: list[ValidatedEvent] = field(default_factory=list)
    hours: Optional[dict[int, list[ValidatedEvent]]] = None

    @property
    def key(self) -> DayKey:
        return day_key(self.day)

    def visible_events(self, limit: int) -> tuple[list[ValidatedEvent], int]:
        """First ``limit`` events and how many are hidden behind "+K more"."""
        shown = self.events[:limit]
        return shown, len(self.events) - len(shown)

    def events_at(self, hour: int) -> list[ValidatedEvent]:
        if not self.hours:
            return []
        return self.hours.get(hour, [])


@dataclass
class AgendaDay:
    """One day of the agenda list."""
    key: DayKey
    events: list[ValidatedEvent]
    is_today: bool

    @property
    def day(self) -> date:
        return parse_day_key(self.key)


@dataclass
class CalendarView:
    """Everything a renderer needs for one state."""
    state: ViewState
    window: Union[ViewWindow, _Unbounded]
    label: str
    cells: list[DayCell] = field(default_factory=list)
    agenda: list[AgendaDay] = field(default_factory=list)
    invalid: list[InvalidEventReport] = field(default_factory=list)

    @property
    def granularity(self) -> Granularity:
        return self.state.granularity

    @property
    def invalid_count(self) -> int:
        return len(self.invalid)

    @property
    def invalid_ids(self) -> list[str]:
        return [report.event_id for report in self.invalid]

    @property
    def is_empty(self) -> bool:
        if self.state.granularity == Granularity.AGENDA:
            return not self.agenda
        return not any(cell.events for cell in self.cells)

    def weeks(self) -> list[list[DayCell]]:
        """Cells in rows of 7 (month and week grids)."""
        return [self.cells[i:i + 7] for i in range(0, len(self.cells), 7)]


def build_view(
    events: Iterable[ShippingEvent],
    state: ViewState,
    today: date,
    week_start: int = DEFAULT_WEEK_START,
    localization: Optional[LocalizationConfig] = None,
) -> CalendarView:
    """
    Compute the window, buckets and cells for a state.

    Month cells hold day buckets; week and day cells hold hour buckets.
    The agenda lists every valid event regardless of the focus date.
    """
    if not isinstance(state.granularity, Granularity):
        state = state.with_granularity(coerce_granularity(state.granularity))
    today = as_date(today)
    granularity = state.granularity
    window = resolve(granularity, state.focus_date, week_start)
    assignment = assign(events, granularity)
    view = CalendarView(
        state=state,
        window=window,
        label=period_label(state, week_start, localization),
        invalid=assignment.invalid,
    )

    if granularity == Granularity.AGENDA:
        view.agenda = [
            AgendaDay(key=key, events=day_events, is_today=(key == day_key(today)))
            for key, day_events in agenda_days(assignment.buckets)
        ]
        return view

    for d in window.days():
        key = day_key(d)
        if granularity == Granularity.MONTH:
            cell = DayCell(
                day=d,
                in_period=same_month(d, state.focus_date),
                is_today=(d == today),
                events=list(assignment.events_for(key)),
            )
        else:
            hours = events_by_hour(assignment.buckets, key)
            cell = DayCell(
                day=d,
                in_period=True,
                is_today=(d == today),
                events=[e for hour in sorted(hours) for e in hours[hour]],
                hours=hours,
            )
        view.cells.append(cell)

    return view


def period_label(
    state: ViewState,
    week_start: int = DEFAULT_WEEK_START,
    localization: Optional[LocalizationConfig] = None,
) -> str:
    """
    Header text for the current period.

    Month/agenda: "March 2024". Week: "Mar 17 - Mar 23, 2024".
    Day: "Sunday, March 17, 2024".
    """
    loc = localization or LocalizationConfig()
    focus = state.focus_date

    if state.granularity == Granularity.WEEK:
        week_begin = start_of_week(focus, week_start)
        week_end = resolve(Granularity.WEEK, focus, week_start).end
        begin_text = f"{loc.get_month_abbr(week_begin.month)} {week_begin.day}"
        end_text = f"{loc.get_month_abbr(week_end.month)} {week_end.day}, {week_end.year}"
        if week_begin.year != week_end.year:
            begin_text += f", {week_begin.year}"
        return f"{begin_text} - {end_text}"
    if state.granularity == Granularity.DAY:
        return (f"{loc.get_day_name(focus.weekday())}, "
                f"{loc.get_month_name(focus.month)} {focus.day}, {focus.year}")
    return f"{loc.get_month_name(focus.month)} {focus.year}"


def day_heading(d: date, today: date, today_label: str = "Today",
                localization: Optional[LocalizationConfig] = None) -> str:
    """Agenda day heading: "Today" or "Friday, March 15, 2024"."""
    if as_date(d) == as_date(today):
        return today_label
    loc = localization or LocalizationConfig()
    return f"{loc.get_day_name(d.weekday())}, {loc.get_month_name(d.month)} {d.day}, {d.year}"


def week_header(week_start: int = DEFAULT_WEEK_START,
                localization: Optional[LocalizationConfig] = None) -> list[str]:
    """Abbreviated day names in grid column order."""
    loc = localization or LocalizationConfig()
    return [loc.get_day_abbr((week_start + i) % 7) for i in range(7)]
