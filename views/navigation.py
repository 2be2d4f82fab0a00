"""
Navigation state machine.

Holds the single ViewState and replaces it on every transition. The pure
``transition`` reducer does the actual work so hosts that keep their own
state can call it directly.
"""

from datetime import date
from typing import Callable, Optional, Union

from backend.debug import debug_print
from backend.timezone_utils import local_today
from .types import Granularity, ViewState, ViewWindow, _Unbounded, coerce_granularity, as_date
from .ranges import resolve, step, DEFAULT_WEEK_START


def _debug_print(msg: str) -> None:
    debug_print("NAV", msg)


PREVIOUS = "previous"
NEXT = "next"
TODAY = "today"
SELECT_DATE = "select_date"
SET_GRANULARITY = "set_granularity"

ACTIONS = (PREVIOUS, NEXT, TODAY, SELECT_DATE, SET_GRANULARITY)


def initial_state(today: date, granularity=Granularity.MONTH) -> ViewState:
    return ViewState(coerce_granularity(granularity), as_date(today))


def transition(state: ViewState, action: str, value=None, today: Optional[date] = None) -> ViewState:
    """
    Apply one navigation action and return the new state.

    ``value`` is the date for SELECT_DATE and the granularity for
    SET_GRANULARITY. ``today`` is required for TODAY. Unknown actions
    return the state unchanged.
    """
    if action == PREVIOUS:
        return state.with_focus(step(state.granularity, state.focus_date, -1))
    if action == NEXT:
        return state.with_focus(step(state.granularity, state.focus_date, 1))
    if action == TODAY:
        if today is None:
            today = local_today()
        return state.with_focus(today)
    if action == SELECT_DATE:
        return state.with_focus(value)
    if action == SET_GRANULARITY:
        return state.with_granularity(coerce_granularity(value))
    _debug_print(f"ignoring unknown action {action!r}")
    return state


class NavigationStateMachine:
    """
    Owner of the current ViewState.

    Every transition returns the new state and makes it current. Selecting
    a date never changes granularity; a caller that wants "click a month
    cell to open the day" composes select_date() and set_granularity().
    """

    def __init__(
        self,
        state: Optional[ViewState] = None,
        week_start: int = DEFAULT_WEEK_START,
        clock: Callable[[], date] = local_today,
    ):
        self._clock = clock
        self._week_start = week_start
        self._state = state if state is not None else initial_state(clock())

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def granularity(self) -> Granularity:
        return self._state.granularity

    @property
    def focus_date(self) -> date:
        return self._state.focus_date

    @property
    def week_start(self) -> int:
        return self._week_start

    @property
    def window(self) -> Union[ViewWindow, _Unbounded]:
        """Visible window for the current state."""
        return resolve(self._state.granularity, self._state.focus_date, self._week_start)

    def _apply(self, action: str, value=None) -> ViewState:
        today = self._clock() if action == TODAY else None
        new_state = transition(self._state, action, value, today=today)
        _debug_print(f"{action}: {self._state.granularity.value} {self._state.focus_date} -> "
                     f"{new_state.granularity.value} {new_state.focus_date}")
        self._state = new_state
        return new_state

    def set_granularity(self, granularity) -> ViewState:
        return self._apply(SET_GRANULARITY, granularity)

    def previous(self) -> ViewState:
        return self._apply(PREVIOUS)

    def next(self) -> ViewState:
        return self._apply(NEXT)

    def today(self) -> ViewState:
        return self._apply(TODAY)

    def select_date(self, d: date) -> ViewState:
        return self._apply(SELECT_DATE, d)
