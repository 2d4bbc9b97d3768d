"""Unit tests for the calendar helpers behind billing cycles."""

from datetime import date, datetime, timedelta

import pytest

from src.service.billing.dates import (
    add_months,
    ceil_days,
    clamp_day,
    end_of_day,
    is_last_day_of_month,
    months_between,
    shift_month,
    start_of_day,
)


class TestMonthShifts:
    """Month arithmetic clamps to the last day of shorter months."""

    def test_add_month_from_january_31_lands_on_february_28(self):
        assert add_months(datetime(2025, 1, 31, 12), 1) == datetime(2025, 2, 28, 12)

    def test_add_month_on_leap_year(self):
        assert add_months(datetime(2024, 1, 31), 1) == datetime(2024, 2, 29)

    def test_add_months_keeps_day_when_it_exists(self):
        assert add_months(datetime(2025, 3, 15), 3) == datetime(2025, 6, 15)

    @pytest.mark.parametrize(
        "year,month,delta,expected",
        [
            (2025, 12, 1, (2026, 1)),
            (2025, 1, -1, (2024, 12)),
            (2025, 6, 0, (2025, 6)),
            (2025, 11, 14, (2027, 1)),
        ],
    )
    def test_shift_month_wraps_years(self, year, month, delta, expected):
        assert shift_month(year, month, delta) == expected

    @pytest.mark.parametrize(
        "year,month,day,expected",
        [
            (2025, 4, 31, date(2025, 4, 30)),
            (2025, 2, 30, date(2025, 2, 28)),
            (2024, 2, 30, date(2024, 2, 29)),
            (2025, 1, 31, date(2025, 1, 31)),
        ],
    )
    def test_clamp_day(self, year, month, day, expected):
        assert clamp_day(year, month, day) == expected


class TestMonthsBetween:
    def test_counts_calendar_boundaries_not_elapsed_days(self):
        assert months_between(date(2025, 2, 1), date(2025, 1, 31)) == 1

    def test_across_years(self):
        assert months_between(datetime(2026, 1, 15), datetime(2025, 3, 15)) == 10

    def test_same_month_is_zero(self):
        assert months_between(date(2025, 5, 31), date(2025, 5, 1)) == 0


class TestDayBoundaries:
    def test_start_of_day(self):
        assert start_of_day(datetime(2025, 6, 20, 17, 45)) == datetime(2025, 6, 20)

    def test_end_of_day_has_millisecond_precision(self):
        assert end_of_day(date(2025, 6, 20)) == datetime(2025, 6, 20, 23, 59, 59, 999000)

    def test_last_day_of_month(self):
        assert is_last_day_of_month(date(2024, 2, 29))
        assert is_last_day_of_month(date(2025, 4, 30))
        assert not is_last_day_of_month(date(2025, 5, 30))

    def test_ceil_days_rounds_partial_days_up(self):
        assert ceil_days(timedelta(hours=1)) == 1
        assert ceil_days(timedelta(days=2, seconds=1)) == 3
        assert ceil_days(timedelta(days=2)) == 2

    def test_ceil_days_in_the_past(self):
        assert ceil_days(timedelta(days=-1, hours=-12)) == -1
