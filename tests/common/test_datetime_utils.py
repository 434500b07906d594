from datetime import date, time

import pytest

from src.spbu_backoffice.spbu_backoffice.common.datetime_utils import (
    iter_days,
    month_bounds,
    parse_clock,
    parse_month,
)
from src.spbu_backoffice.spbu_backoffice.common.validators import require_int, round_half_up
from src.spbu_backoffice.spbu_backoffice.core.exceptions import (
    DateRangeError,
    MalformedInputError,
    OutOfRangeError,
)


def test_parse_month_accepts_year_month():
    assert parse_month("2024-02") == (2024, 2)
    assert parse_month(" 2024-2 ") == (2024, 2)


@pytest.mark.parametrize("value", ["2024-13x", "24-01", "", "2024/01"])
def test_parse_month_rejects_wrong_shape(value):
    with pytest.raises(MalformedInputError):
        parse_month(value)


@pytest.mark.parametrize("value", ["2024-13", "2024-00", "1800-01"])
def test_parse_month_rejects_out_of_range(value):
    with pytest.raises(OutOfRangeError):
        parse_month(value)


def test_month_bounds_handles_leap_year():
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(2023, 2) == (date(2023, 2, 1), date(2023, 2, 28))


def test_iter_days_is_inclusive_and_rejects_reversed_range():
    days = list(iter_days(date(2024, 1, 30), date(2024, 2, 2)))
    assert days == [date(2024, 1, 30), date(2024, 1, 31), date(2024, 2, 1), date(2024, 2, 2)]

    with pytest.raises(DateRangeError):
        list(iter_days(date(2024, 2, 2), date(2024, 2, 1)))


def test_parse_clock_variants():
    assert parse_clock("06:45") == time(6, 45)
    assert parse_clock("23:05:10") == time(23, 5, 10)
    assert parse_clock(time(7, 0)) == time(7, 0)
    assert parse_clock(75) == time(1, 15)
    assert parse_clock("") is None
    assert parse_clock(None) is None


def test_parse_clock_errors():
    with pytest.raises(MalformedInputError):
        parse_clock("jam tujuh")
    with pytest.raises(OutOfRangeError):
        parse_clock("24:00")


def test_round_half_up_rounds_halves_away_from_zero():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(300000.4) == 300000


def test_require_int_accepts_numeric_strings():
    assert require_int("15000", "Jumlah") == 15000
    with pytest.raises(MalformedInputError):
        require_int("abc", "Jumlah")
    with pytest.raises(MalformedInputError):
        require_int(True, "Jumlah")


@pytest.mark.parametrize("minutes", [-1, -60, 1440, 1500])
def test_parse_clock_rejects_minutes_outside_one_day(minutes):
    with pytest.raises(OutOfRangeError):
        parse_clock(minutes)


def test_parse_clock_accepts_minute_bounds():
    assert parse_clock(0) == time(0, 0)
    assert parse_clock(1439) == time(23, 59)
