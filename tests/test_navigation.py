"""
Tests for the navigation state machine and the transition reducer.
"""

import calendar
from datetime import date, datetime, timedelta

import pytest

from views.types import Granularity, ViewState, ViewWindow, UNBOUNDED
from views.navigation import (
    NavigationStateMachine, transition, initial_state,
    PREVIOUS, NEXT, TODAY, SELECT_DATE, SET_GRANULARITY,
)
from views.ranges import MONDAY, add_months


def _days(start, count):
    return [start + timedelta(days=i) for i in range(count)]


class TestInitialState:
    def test_starts_in_month_view_today(self, fixed_clock):
        nav = NavigationStateMachine(clock=fixed_clock)
        assert nav.state == ViewState(Granularity.MONTH, date(2024, 3, 20))

    def test_window_reports_resolved_range(self, fixed_clock):
        nav = NavigationStateMachine(clock=fixed_clock)
        assert nav.window == ViewWindow(date(2024, 2, 25), date(2024, 4, 6))

    def test_restored_state_and_week_start(self, fixed_clock):
        nav = NavigationStateMachine(
            state=ViewState(Granularity.WEEK, date(2024, 3, 15)),
            week_start=MONDAY,
            clock=fixed_clock,
        )
        assert nav.window == ViewWindow(date(2024, 3, 11), date(2024, 3, 17))


class TestStepping:
    @pytest.mark.parametrize("granularity,expected_next,expected_prev", [
        (Granularity.MONTH, date(2024, 4, 20), date(2024, 2, 20)),
        (Granularity.AGENDA, date(2024, 4, 20), date(2024, 2, 20)),
        (Granularity.WEEK, date(2024, 3, 27), date(2024, 3, 13)),
        (Granularity.DAY, date(2024, 3, 21), date(2024, 3, 19)),
    ])
    def test_one_unit_of_current_granularity(self, fixed_clock, granularity, expected_next, expected_prev):
        nav = NavigationStateMachine(state=ViewState(granularity, date(2024, 3, 20)), clock=fixed_clock)
        assert nav.next().focus_date == expected_next
        nav.select_date(date(2024, 3, 20))
        assert nav.previous().focus_date == expected_prev
        assert nav.granularity == granularity

    @pytest.mark.parametrize("granularity", [Granularity.WEEK, Granularity.DAY])
    def test_next_then_previous_round_trip(self, fixed_clock, granularity):
        for focus in _days(date(2023, 12, 1), 500):
            nav = NavigationStateMachine(state=ViewState(granularity, focus), clock=fixed_clock)
            nav.next()
            assert nav.previous().focus_date == focus

    def test_month_round_trip_except_at_month_length(self, fixed_clock):
        for focus in _days(date(2024, 1, 1), 366):
            nav = NavigationStateMachine(state=ViewState(Granularity.MONTH, focus), clock=fixed_clock)
            nav.next()
            back = nav.previous().focus_date
            target = add_months(focus, 1)
            if focus.day <= calendar.monthrange(target.year, target.month)[1]:
                assert back == focus
            else:
                # Clamped on the way out, so the trip lands earlier in the same month
                assert (back.year, back.month) == (focus.year, focus.month)
                assert back.day < focus.day

    def test_january_31_forward(self, fixed_clock):
        nav = NavigationStateMachine(state=ViewState(Granularity.MONTH, date(2024, 1, 31)), clock=fixed_clock)
        assert nav.next().focus_date == date(2024, 2, 29)
        assert nav.previous().focus_date == date(2024, 1, 29)

    def test_month_view_always_contains_its_month(self, fixed_clock):
        nav = NavigationStateMachine(state=ViewState(Granularity.MONTH, date(2024, 1, 31)), clock=fixed_clock)
        expected_month = (2024, 1)
        for _ in range(24):
            state = nav.next()
            year, month = expected_month
            expected_month = (year + month // 12, month % 12 + 1)
            assert (state.focus_date.year, state.focus_date.month) == expected_month


class TestOtherTransitions:
    def test_set_granularity_keeps_focus(self, fixed_clock):
        nav = NavigationStateMachine(clock=fixed_clock)
        nav.select_date(date(2024, 7, 4))
        state = nav.set_granularity(Granularity.DAY)
        assert state == ViewState(Granularity.DAY, date(2024, 7, 4))

    def test_set_granularity_accepts_names(self, fixed_clock):
        nav = NavigationStateMachine(clock=fixed_clock)
        assert nav.set_granularity("agenda").granularity == Granularity.AGENDA
        assert nav.window is UNBOUNDED

    def test_select_date_keeps_granularity(self, fixed_clock):
        nav = NavigationStateMachine(state=ViewState(Granularity.WEEK, date(2024, 3, 20)), clock=fixed_clock)
        state = nav.select_date(date(2024, 8, 1))
        assert state == ViewState(Granularity.WEEK, date(2024, 8, 1))

    def test_today_uses_clock_and_keeps_granularity(self, fixed_clock):
        nav = NavigationStateMachine(state=ViewState(Granularity.DAY, date(2020, 1, 1)), clock=fixed_clock)
        assert nav.today() == ViewState(Granularity.DAY, date(2024, 3, 20))

    def test_transitions_return_new_states(self, fixed_clock):
        nav = NavigationStateMachine(clock=fixed_clock)
        before = nav.state
        after = nav.next()
        assert before == ViewState(Granularity.MONTH, date(2024, 3, 20))
        assert after is nav.state
        assert after is not before


    @pytest.mark.parametrize("value", [None, "2024-03-15", 20240315])
    def test_select_date_rejects_non_dates(self, fixed_clock, value):
        nav = NavigationStateMachine(state=ViewState(Granularity.WEEK, date(2024, 3, 20)), clock=fixed_clock)
        with pytest.raises(TypeError):
            nav.select_date(value)
        assert nav.state == ViewState(Granularity.WEEK, date(2024, 3, 20))
        assert nav.window == ViewWindow(date(2024, 3, 17), date(2024, 3, 23))

    def test_select_datetime_keeps_its_day(self, fixed_clock):
        nav = NavigationStateMachine(clock=fixed_clock)
        assert nav.select_date(datetime(2024, 8, 1, 15, 30)).focus_date == date(2024, 8, 1)

    def test_view_state_requires_a_date(self):
        with pytest.raises(TypeError):
            ViewState(Granularity.MONTH, None)


class TestReducer:
    def test_reducer_matches_machine(self):
        state = initial_state(date(2024, 3, 20))
        state = transition(state, SET_GRANULARITY, "week")
        state = transition(state, NEXT)
        assert state == ViewState(Granularity.WEEK, date(2024, 3, 27))
        state = transition(state, PREVIOUS)
        state = transition(state, SELECT_DATE, date(2024, 5, 5))
        assert state == ViewState(Granularity.WEEK, date(2024, 5, 5))
        state = transition(state, TODAY, today=date(2024, 3, 20))
        assert state.focus_date == date(2024, 3, 20)

    def test_unknown_action_leaves_state(self):
        state = initial_state(date(2024, 3, 20))
        assert transition(state, "teleport") is state
