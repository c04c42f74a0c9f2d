"""Working days calendar domain service."""

import logging
import re
from typing import Mapping, Optional

from salarizare.database.base import Database, WorkingDaysData
from salarizare.domain.errors import ConflictError, NotFoundError, PersistenceError, ValidationError, store_write_failed

logger = logging.getLogger(__name__)

MONTHS_RO = (
    "Ianuarie",
    "Februarie",
    "Martie",
    "Aprilie",
    "Mai",
    "Iunie",
    "Iulie",
    "August",
    "Septembrie",
    "Octombrie",
    "Noiembrie",
    "Decembrie",
)

DEFAULT_DATA: WorkingDaysData = {
    "2025": {1: 18, 2: 20, 3: 21, 4: 20, 5: 21, 6: 20, 7: 23, 8: 20, 9: 22, 10: 23, 11: 20, 12: 20},
    "2026": {1: 18, 2: 20, 3: 22, 4: 20, 5: 20, 6: 21, 7: 23, 8: 21, 9: 22, 10: 22, 11: 20, 12: 21},
}


def validate_year(year: str) -> str:
    """Validate a 4-digit year string."""
    year = str(year).strip()
    if not re.fullmatch(r"\d{4}", year):
        raise ValidationError("Please enter a valid 4-digit year")
    return year


def validate_days(days: int) -> int:
    """Validate a working-day count for one month."""
    if days < 0 or days > 31:
        raise ValidationError("Please enter valid working days (0-31)")
    return days


def validate_month(month: int) -> int:
    """Validate a month number (1-12)."""
    if month < 1 or month > 12:
        raise ValidationError(f"Invalid month {month}: expected 1-12")
    return month


def days_worked(working_days_in_month: Optional[int], zile_co_medical: int, zile_co_odihna: int) -> int:
    """Days actually worked: working days minus leave days, never negative."""
    if working_days_in_month is None:
        return 0
    return max(0, working_days_in_month - zile_co_medical - zile_co_odihna)


class WorkingDaysService:
    """Service for managing working days per month."""

    def __init__(self, db: Database):
        """Initialize working days service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_calendar(self) -> WorkingDaysData:
        """Get the full calendar, seeding the default years on first use."""
        data = self.db.get_working_days()
        if data:
            return data
        logger.info("Working days store is empty, seeding default years")
        if not self.db.put_working_days(DEFAULT_DATA):
            raise PersistenceError(store_write_failed("working days"))
        return {year: dict(months) for year, months in DEFAULT_DATA.items()}

    def get_days_for_month(self, year: int | str, month: int) -> Optional[int]:
        """Get working days for a month.

        Returns:
            Number of working days, or None if the month is not defined
        """
        return self.get_calendar().get(str(year), {}).get(month)

    def add_year(self, year: str, days_by_month: Mapping[int, int]) -> None:
        """Add a new year with working days for all twelve months.

        Raises:
            ValidationError: If the year or any month value is invalid
            ConflictError: If the year already exists
        """
        year = validate_year(year)
        calendar = self.get_calendar()
        if year in calendar:
            raise ConflictError("This year already exists")
        calendar[year] = self._validated_year_data(days_by_month)
        self._save(calendar)
        logger.info("Added working days for %s", year)

    def update_year(self, year: str, days_by_month: Mapping[int, int]) -> None:
        """Replace the working days of an existing year.

        Raises:
            ValidationError: If any month value is invalid
            NotFoundError: If the year does not exist
        """
        year = validate_year(year)
        calendar = self.get_calendar()
        if year not in calendar:
            raise NotFoundError(f"Year {year} not found")
        calendar[year] = self._validated_year_data(days_by_month)
        self._save(calendar)

    def set_month(self, year: str, month: int, days: int) -> None:
        """Set working days for a single month, creating the year if needed."""
        year = validate_year(year)
        validate_month(month)
        validate_days(days)
        calendar = self.get_calendar()
        calendar.setdefault(year, {})[month] = days
        self._save(calendar)

    def delete_year(self, year: str) -> None:
        """Delete a year from the calendar."""
        year = validate_year(year)
        calendar = self.get_calendar()
        if year not in calendar:
            raise NotFoundError(f"Year {year} not found")
        del calendar[year]
        self._save(calendar)

    def _validated_year_data(self, days_by_month: Mapping[int, int]) -> dict[int, int]:
        missing = [m for m in range(1, 13) if m not in days_by_month]
        if missing:
            raise ValidationError("Please enter valid working days (0-31) for all months")
        return {month: validate_days(int(days_by_month[month])) for month in range(1, 13)}

    def _save(self, calendar: WorkingDaysData) -> None:
        if not self.db.put_working_days(calendar):
            raise PersistenceError(store_write_failed("working days"))
