"""Tests for date and month parsing."""

import pytest
from datetime import date, timedelta
from dateutil.relativedelta import relativedelta
from salarizare.utils.date_parser import month_bounds, parse_date, parse_month


def test_parse_iso_date():
    """ISO dates are read year-month-day."""
    assert parse_date("2025-03-04") == date(2025, 3, 4)


def test_parse_romanian_date():
    """Numeric dates are read day first."""
    assert parse_date("04.03.2025") == date(2025, 3, 4)
    assert parse_date("04/03/2025") == date(2025, 3, 4)


def test_parse_today():
    """Test parsing 'today' and 'azi'."""
    assert parse_date("today") == date.today()
    assert parse_date(" Azi ") == date.today()


def test_parse_yesterday():
    """Test parsing 'yesterday' and 'ieri'."""
    assert parse_date("yesterday") == date.today() - timedelta(days=1)
    assert parse_date("ieri") == date.today() - timedelta(days=1)


def test_parse_tomorrow():
    """Test parsing 'tomorrow' and 'maine'."""
    assert parse_date("maine") == date.today() + timedelta(days=1)


def test_parse_invalid_date():
    """Garbage and impossible dates raise ValueError."""
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date")
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("2025-02-30")


def test_parse_month_formats():
    """Months are accepted as YYYY-MM, MM/YYYY and M.YYYY."""
    assert parse_month("2025-03") == (2025, 3)
    assert parse_month("03/2025") == (2025, 3)
    assert parse_month("3.2025") == (2025, 3)


def test_parse_relative_months():
    """Test 'this month', 'last month' and 'next month'."""
    today = date.today()
    last = today - relativedelta(months=1)
    following = today + relativedelta(months=1)

    assert parse_month("this month") == (today.year, today.month)
    assert parse_month("last month") == (last.year, last.month)
    assert parse_month("Next Month") == (following.year, following.month)


def test_parse_month_invalid():
    """Month 13 and free text are rejected."""
    with pytest.raises(ValueError, match="1-12"):
        parse_month("2025-13")
    with pytest.raises(ValueError, match="expected YYYY-MM"):
        parse_month("martie")


def test_month_bounds():
    """Bounds cover the whole month, leap years included."""
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(2025, 12) == (date(2025, 12, 1), date(2025, 12, 31))
