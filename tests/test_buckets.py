"""
Tests for bucket assignment.
"""

import warnings
from datetime import datetime, date, timedelta

import pytest

from views.types import Granularity, UnknownGranularityWarning, day_key
from views.buckets import assign, agenda_days, events_by_hour, bucket_key, day_of
from views.validator import parse_timestamp


def _mixed_events(event_factory):
    return [
        event_factory("1", "2024-03-15T10:00"),
        event_factory("2", "garbage"),
        event_factory("3", datetime(2024, 3, 15, 10, 45)),
        event_factory("4", date(2024, 3, 1)),
        event_factory("5", None),
        event_factory("6", "2024-02-28T23:59"),
        event_factory("7", 1710496800000),
    ]


class TestScenarios:
    def test_scenario_a_month_day_bucket(self, event_factory):
        result = assign([event_factory("a", "2024-03-15T10:00")], Granularity.MONTH)
        assert list(result.buckets) == ["2024-03-15"]
        assert result.buckets["2024-03-15"][0].id == "a"
        assert result.invalid == []

    def test_scenario_b_single_bad_event(self, event_factory):
        buckets, invalid = assign([event_factory("b", "not-a-date")], Granularity.MONTH)
        assert buckets == {}
        assert len(invalid) == 1
        assert invalid[0].event_id == "b"

    def test_scenario_c_week_hour_buckets(self, event_factory):
        events = [
            event_factory("morning", "2024-03-15T09:30"),
            event_factory("afternoon", "2024-03-15T14:00"),
        ]
        result = assign(events, Granularity.WEEK)
        assert set(result.buckets) == {("2024-03-15", 9), ("2024-03-15", 14)}
        assert result.buckets[("2024-03-15", 9)][0].id == "morning"
        assert result.buckets[("2024-03-15", 14)][0].id == "afternoon"

    @pytest.mark.parametrize("granularity", list(Granularity))
    def test_scenario_d_empty_input(self, granularity):
        result = assign([], granularity)
        assert result.buckets == {}
        assert result.invalid == []
        assert result.valid_count == 0


class TestInvariants:
    @pytest.mark.parametrize("granularity", list(Granularity))
    def test_counts_add_up(self, event_factory, granularity):
        events = _mixed_events(event_factory)
        result = assign(events, granularity)
        assert result.valid_count + len(result.invalid) == len(events)
        assert result.invalid_ids == ["2", "5"]

    @pytest.mark.parametrize("granularity", list(Granularity))
    def test_each_valid_event_in_exactly_one_bucket(self, event_factory, granularity):
        result = assign(_mixed_events(event_factory), granularity)
        ids = [v.id for bucket in result.buckets.values() for v in bucket]
        assert sorted(ids) == ["1", "3", "4", "6", "7"]

    @pytest.mark.parametrize("granularity", list(Granularity))
    def test_key_matches_recomputed_key(self, event_factory, granularity):
        result = assign(_mixed_events(event_factory), granularity)
        for key, bucket in result.buckets.items():
            for validated in bucket:
                instant = parse_timestamp(validated.event.timestamp)
                if granularity.keys_by_hour:
                    assert key == (day_key(instant), instant.hour)
                else:
                    assert key == day_key(instant)

    def test_input_order_preserved_within_bucket(self, event_factory):
        events = [
            event_factory(str(i), datetime(2024, 3, 15, 23 - i, 0))
            for i in range(6)
        ]
        result = assign(events, Granularity.MONTH)
        assert [v.id for v in result.buckets["2024-03-15"]] == ["0", "1", "2", "3", "4", "5"]

    def test_same_hour_keeps_input_order(self, event_factory):
        events = [
            event_factory("late", "2024-03-15T10:50"),
            event_factory("early", "2024-03-15T10:05"),
        ]
        result = assign(events, Granularity.DAY)
        assert [v.id for v in result.buckets[("2024-03-15", 10)]] == ["late", "early"]

    def test_buckets_do_not_depend_on_focus(self, event_factory):
        events = [event_factory("far", "1999-12-31T23:00")]
        result = assign(events, Granularity.WEEK)
        assert ("1999-12-31", 23) in result.buckets


class TestAgendaOrdering:
    def test_agenda_days_ascending(self, event_factory):
        start = date(2024, 3, 1)
        events = [
            event_factory(str(i), start + timedelta(days=(i * 7) % 31))
            for i in range(20)
        ]
        result = assign(events, Granularity.AGENDA)
        keys = [key for key, _ in agenda_days(result.buckets)]
        assert keys == sorted(keys)
        assert all(a < b for a, b in zip(keys, keys[1:]))

    def test_agenda_sorting_keeps_bucket_contents(self, event_factory):
        events = [
            event_factory("b", "2024-03-02T08:00"),
            event_factory("a", "2024-03-01T08:00"),
            event_factory("b2", "2024-03-02T07:00"),
        ]
        days = agenda_days(assign(events, Granularity.AGENDA).buckets)
        assert [(k, [v.id for v in vs]) for k, vs in days] == [
            ("2024-03-01", ["a"]),
            ("2024-03-02", ["b", "b2"]),
        ]


class TestHelpers:
    def test_events_by_hour_only_populated_hours(self, event_factory):
        events = [
            event_factory("a", "2024-03-15T09:30"),
            event_factory("b", "2024-03-15T14:00"),
            event_factory("c", "2024-03-16T14:00"),
        ]
        result = assign(events, Granularity.WEEK)
        hours = events_by_hour(result.buckets, "2024-03-15")
        assert list(hours) == [9, 14]
        assert [v.id for v in hours[14]] == ["b"]

    def test_bucket_key_and_day_of(self, event_factory):
        result = assign([event_factory("a", "2024-03-15T09:30")], Granularity.DAY)
        validated = result.buckets[("2024-03-15", 9)][0]
        assert bucket_key(validated, Granularity.MONTH) == "2024-03-15"
        assert day_of(("2024-03-15", 9)) == date(2024, 3, 15)
        assert day_of("2024-03-15") == date(2024, 3, 15)


class TestUnknownGranularity:
    def test_falls_back_to_month_keying_with_warning(self, event_factory):
        events = [event_factory("a", "2024-03-15T09:30"), event_factory("b", "nope")]
        with pytest.warns(UnknownGranularityWarning):
            result = assign(events, "fortnight")
        assert list(result.buckets) == ["2024-03-15"]
        assert result.invalid_ids == ["b"]

    def test_string_names_accepted_without_warning(self, event_factory):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            result = assign([event_factory("a", "2024-03-15T09:30")], "week")
            listed = assign([event_factory("a", "2024-03-15T09:30")], "list")
        assert list(result.buckets) == [("2024-03-15", 9)]
        assert list(listed.buckets) == ["2024-03-15"]
