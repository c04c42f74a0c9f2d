"""Date parsing utilities."""

import re
from datetime import date, timedelta

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2025-03-15", "15.03.2025", "15/03/2025", "March 15, 2025"
    - Relative dates: "today"/"azi", "yesterday"/"ieri", "tomorrow"/"maine"

    Ambiguous numeric dates are read day first, as written in Romania.

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "azi": today,
        "yesterday": today - timedelta(days=1),
        "ieri": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "maine": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    # ISO dates are unambiguous; dayfirst would swap month and day
    if re.fullmatch(r"\d{4}-\d{1,2}-\d{1,2}", date_str):
        try:
            return date(*(int(part) for part in date_str.split("-")))
        except ValueError as e:
            raise ValueError(f"Could not parse date '{date_str}': {e}")

    try:
        return date_parser.parse(date_str, dayfirst=True).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_month(month_str: str) -> tuple[int, int]:
    """Parse a payroll month into (year, month).

    Accepts "2025-03", "03/2025", "3.2025", "this month", "last month" and
    "next month".

    Raises:
        ValueError: If the string is not a recognizable month
    """
    month_str = month_str.strip().lower()
    today = date.today()

    relative_months = {
        "this month": today,
        "last month": today - relativedelta(months=1),
        "next month": today + relativedelta(months=1),
    }
    if month_str in relative_months:
        target = relative_months[month_str]
        return target.year, target.month

    match = re.fullmatch(r"(\d{4})-(\d{1,2})", month_str)
    if match:
        year, month = int(match.group(1)), int(match.group(2))
    else:
        match = re.fullmatch(r"(\d{1,2})[./](\d{4})", month_str)
        if not match:
            raise ValueError(f"Could not parse month '{month_str}': expected YYYY-MM or MM/YYYY")
        month, year = int(match.group(1)), int(match.group(2))

    if not 1 <= month <= 12:
        raise ValueError(f"Could not parse month '{month_str}': month must be 1-12")
    return year, month


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of a month."""
    start = date(year, month, 1)
    end = start + relativedelta(months=1) - timedelta(days=1)
    return start, end
