"""Tests for the weekly-window date computation and display helpers."""

from datetime import date, datetime, time, timezone

import pytest

from lifeline.utils.time import (
    as_utc,
    day_name,
    format_time,
    months_ago,
    next_eligible_date,
    next_window_occurrence,
    start_of_month,
    sunday_based_weekday,
)

# Wednesday 2026-10-21, 08:00 UTC
WEDNESDAY_MORNING = datetime(2026, 10, 21, 8, 0, tzinfo=timezone.utc)


class TestNextWindowOccurrence:
    def test_same_weekday_lands_one_week_out(self):
        result = next_window_occurrence(3, time(9, 0), tz="UTC", now=WEDNESDAY_MORNING)
        assert result == datetime(2026, 10, 28, 9, 0, tzinfo=timezone.utc)
        assert (result.date() - WEDNESDAY_MORNING.date()).days == 7

    def test_same_weekday_never_later_today_even_after_window(self):
        evening = WEDNESDAY_MORNING.replace(hour=22)
        result = next_window_occurrence(3, time(9, 0), tz="UTC", now=evening)
        assert result.date() == date(2026, 10, 28)

    @pytest.mark.parametrize(
        "day_of_week, expected",
        [
            (4, date(2026, 10, 22)),  # Thursday
            (6, date(2026, 10, 24)),  # Saturday
            (0, date(2026, 10, 25)),  # Sunday
            (1, date(2026, 10, 26)),  # Monday
            (2, date(2026, 10, 27)),  # Tuesday
        ],
    )
    def test_other_weekdays_land_within_the_week(self, day_of_week, expected):
        result = next_window_occurrence(day_of_week, time(14, 30), tz="UTC", now=WEDNESDAY_MORNING)
        assert result.date() == expected
        assert result.time() == time(14, 30)

    def test_uses_primary_timezone_for_today_and_start_time(self):
        # 02:00 UTC Wednesday is still Tuesday evening in New York (UTC-4 in October)
        now = datetime(2026, 10, 21, 2, 0, tzinfo=timezone.utc)
        result = next_window_occurrence(3, time(9, 0), tz="America/New_York", now=now)
        assert result == datetime(2026, 10, 21, 13, 0, tzinfo=timezone.utc)

    def test_rejects_out_of_range_weekday(self):
        with pytest.raises(ValueError):
            next_window_occurrence(7, time(9, 0), tz="UTC", now=WEDNESDAY_MORNING)


class TestHelpers:
    def test_sunday_based_weekday(self):
        assert sunday_based_weekday(date(2026, 10, 25)) == 0
        assert sunday_based_weekday(date(2026, 10, 21)) == 3
        assert sunday_based_weekday(date(2026, 10, 24)) == 6

    def test_day_name(self):
        assert day_name(0) == "Sunday"
        assert day_name(3) == "Wednesday"

    @pytest.mark.parametrize(
        "value, expected",
        [(time(9, 0), "9:00 AM"), (time(13, 30), "1:30 PM"), (time(12, 0), "12:00 PM"), (time(0, 15), "12:15 AM")],
    )
    def test_format_time(self, value, expected):
        assert format_time(value) == expected

    def test_as_utc_treats_naive_as_utc(self):
        naive = datetime(2026, 1, 1, 12, 0)
        assert as_utc(naive) == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_next_eligible_date_is_56_calendar_days(self):
        last = datetime(2026, 1, 1, 23, 59, tzinfo=timezone.utc)
        assert next_eligible_date(last, 56) == date(2026, 2, 26)

    def test_start_of_month(self):
        assert start_of_month(WEDNESDAY_MORNING) == datetime(2026, 10, 1, tzinfo=timezone.utc)

    def test_months_ago(self):
        assert months_ago(6, WEDNESDAY_MORNING) == datetime(2026, 4, 21, 8, 0, tzinfo=timezone.utc)
