"""
Parcel Calendar View Engine

Pure, rendering-independent computation of calendar views:
- Timestamp validation (validator.py)
- Day / day-hour bucketing (buckets.py)
- Visible window resolution (ranges.py)
- Navigation state machine (navigation.py)
- View model for renderers (layout.py)
"""

from .types import (
    Granularity, ViewState, ViewWindow, UNBOUNDED,
    ValidatedEvent, InvalidEventReport, UNPARSABLE_TIMESTAMP,
    UnknownGranularityWarning, coerce_granularity, day_key,
)
from .validator import validate, parse_timestamp
from .buckets import Assignment, assign, agenda_days
from .ranges import resolve, start_of_week, end_of_week, add_months
from .navigation import NavigationStateMachine, transition, initial_state
from .layout import CalendarView, DayCell, AgendaDay, build_view, period_label

__all__ = [
    'Granularity',
    'ViewState',
    'ViewWindow',
    'UNBOUNDED',
    'ValidatedEvent',
    'InvalidEventReport',
    'UNPARSABLE_TIMESTAMP',
    'UnknownGranularityWarning',
    'coerce_granularity',
    'day_key',
    'validate',
    'parse_timestamp',
    'Assignment',
    'assign',
    'agenda_days',
    'resolve',
    'start_of_week',
    'end_of_week',
    'add_months',
    'NavigationStateMachine',
    'transition',
    'initial_state',
    'CalendarView',
    'DayCell',
    'AgendaDay',
    'build_view',
    'period_label',
]
