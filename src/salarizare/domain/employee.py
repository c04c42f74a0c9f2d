"""Employee domain service."""

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from salarizare.database.base import Database
from salarizare.domain.entities import Employee
from salarizare.domain.errors import (
    NotFoundError,
    PersistenceError,
    ValidationError,
    employee_not_found,
    store_write_failed,
)
from salarizare.domain.payroll import apply_derived
from salarizare.domain.settings import LegalSettingsService, PayrollSettings
from salarizare.domain.working_days import WorkingDaysService
from salarizare.utils.amount_parser import parse_number_or_zero

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("nume", "companie")
BOOL_FIELDS = ("principal_loc_munca", "tichete_de_masa")
INT_FIELDS = ("persoane_intretinere", "din_care_minori", "varsta", "zile_co_medical", "zile_co_odihna")
DECIMAL_FIELDS = (
    "valoare_tichet_de_masa",
    "indemnizatie_zi_co_medical",
    "indemnizatie_zi_co_odihna",
    "salariu_cim",
)
EDITABLE_FIELDS = TEXT_FIELDS + BOOL_FIELDS + INT_FIELDS + DECIMAL_FIELDS

YES_VALUES = frozenset({"da", "yes", "y", "true", "1"})
NO_VALUES = frozenset({"nu", "no", "n", "false", "0"})


def parse_da_nu(value: Any) -> bool:
    """Parse a DA/NU flag (also accepts yes/no, true/false, 1/0)."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in YES_VALUES:
        return True
    if text in NO_VALUES:
        return False
    raise ValidationError(f"Expected DA or NU, got '{value}'")


def da_nu(flag: bool) -> str:
    """Format a flag the way the payroll sheet shows it."""
    return "DA" if flag else "NU"


def apply_field_edit(employee: Employee, field: str, raw_value: Any, settings: PayrollSettings) -> Employee:
    """Apply a single-field edit with its side effects.

    Numeric input that is empty or does not parse counts as 0. Setting a meal
    ticket value turns meal tickets on when positive and off (value 0)
    otherwise. Setting leave days to 0 zeroes the matching daily allowance; a
    non-zero value fills it from the settings default when there is one.

    Args:
        employee: Employee before the edit
        field: Field name, one of EDITABLE_FIELDS
        raw_value: Value as typed by the user
        settings: Payroll settings snapshot (for allowance defaults)

    Returns:
        The edited employee; cached figures are not recomputed here

    Raises:
        ValidationError: If the field is not editable or a text/flag value is invalid
    """
    if field not in EDITABLE_FIELDS:
        raise ValidationError(f"Field '{field}' cannot be edited")

    if field in TEXT_FIELDS:
        text = str(raw_value).strip()
        if field == "nume" and not text:
            raise ValidationError("Employee name is required")
        return replace(employee, **{field: text})

    if field in BOOL_FIELDS:
        return replace(employee, **{field: parse_da_nu(raw_value)})

    number = raw_value if isinstance(raw_value, Decimal) else parse_number_or_zero(str(raw_value))
    if field in INT_FIELDS:
        number = int(number)
    changes: dict[str, Any] = {field: number}

    if field == "valoare_tichet_de_masa":
        if number > 0:
            changes["tichete_de_masa"] = True
        else:
            changes["tichete_de_masa"] = False
            changes["valoare_tichet_de_masa"] = Decimal(0)

    elif field == "zile_co_medical":
        if number == 0:
            changes["indemnizatie_zi_co_medical"] = Decimal(0)
        elif settings.indemnizatie_co_medical is not None:
            changes["indemnizatie_zi_co_medical"] = settings.indemnizatie_co_medical

    elif field == "zile_co_odihna":
        if number == 0:
            changes["indemnizatie_zi_co_odihna"] = Decimal(0)
        elif settings.indemnizatie_co_odihna is not None:
            changes["indemnizatie_zi_co_odihna"] = settings.indemnizatie_co_odihna

    return replace(employee, **changes)


class EmployeeService:
    """Service for managing employees and their cached payroll figures."""

    def __init__(self, db: Database):
        """Initialize employee service.

        Args:
            db: Database instance
        """
        self.db = db
        self.settings_service = LegalSettingsService(db)
        self.working_days_service = WorkingDaysService(db)

    def _month_context(self, year: Optional[int], month: Optional[int]) -> tuple[PayrollSettings, Optional[int]]:
        if year is None or month is None:
            today = date.today()
            year, month = today.year, today.month
        settings = self.settings_service.get_payroll_settings()
        return settings, self.working_days_service.get_days_for_month(year, month)

    def add_employee(
        self,
        nume: str,
        companie: str = "",
        principal_loc_munca: bool = True,
        persoane_intretinere: int = 0,
        din_care_minori: int = 0,
        varsta: int = 0,
        tichete_de_masa: bool = False,
        valoare_tichet_de_masa: Optional[Decimal] = None,
        salariu_cim: Optional[Decimal] = None,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> Employee:
        """Add a new employee.

        The numeric ID is one more than the highest existing ID and the
        display ID is ``IDS_<count + 1>``. Opting into meal tickets without a
        value uses the default ticket value from the legal settings.

        Args:
            nume: Employee name (required)
            companie: Company name
            principal_loc_munca: Whether this is the employee's primary job
            persoane_intretinere: Number of dependents
            din_care_minori: How many of the dependents are minors
            varsta: Age in years
            tichete_de_masa: Whether the employee receives meal tickets
            valoare_tichet_de_masa: Meal ticket value per day
            salariu_cim: Contract salary; None uses the default
            year: Year of the month used for the cached figures (defaults to current)
            month: Month used for the cached figures (defaults to current)

        Returns:
            The stored employee

        Raises:
            ValidationError: If the name is empty or a count is negative
            PersistenceError: If the store rejects the write
        """
        nume = (nume or "").strip()
        if not nume:
            raise ValidationError("Employee name is required")
        for label, count in (
            ("Persoane in intretinere", persoane_intretinere),
            ("Din care minori", din_care_minori),
            ("Varsta", varsta),
        ):
            if count < 0:
                raise ValidationError(f"{label} cannot be negative")

        settings, working_days = self._month_context(year, month)
        if tichete_de_masa and valoare_tichet_de_masa is None:
            valoare_tichet_de_masa = settings.valoare_tichet_default
        if not tichete_de_masa:
            valoare_tichet_de_masa = None

        existing = self.db.list_employees()
        employee = Employee(
            id=max((emp.id for emp in existing), default=0) + 1,
            unique_id=f"IDS_{len(existing) + 1}",
            nume=nume,
            companie=(companie or "").strip(),
            principal_loc_munca=principal_loc_munca,
            persoane_intretinere=persoane_intretinere,
            din_care_minori=din_care_minori,
            varsta=varsta,
            tichete_de_masa=tichete_de_masa,
            valoare_tichet_de_masa=valoare_tichet_de_masa,
            salariu_cim=salariu_cim,
        )
        employee = apply_derived(employee, settings, working_days)

        if not self.db.add_employee(employee):
            raise PersistenceError(store_write_failed("employee"))
        logger.info("Added employee %s (%s)", employee.unique_id, employee.nume)
        return employee

    def get_employee(self, employee_id: int) -> Optional[Employee]:
        """Get employee by ID."""
        return self.db.get_employee(employee_id)

    def list_employees(self) -> list[Employee]:
        """List all employees ordered by ID."""
        return self.db.list_employees()

    def update_field(
        self,
        employee_id: int,
        field: str,
        raw_value: Any,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> Employee:
        """Edit one field of an employee and recompute its cached figures.

        Args:
            employee_id: Employee ID
            field: Field name, one of EDITABLE_FIELDS
            raw_value: Value as typed by the user
            year: Year used for the cached figures (defaults to current)
            month: Month used for the cached figures (defaults to current)

        Returns:
            The updated employee

        Raises:
            NotFoundError: If the employee does not exist
            ValidationError: If the field or value is invalid
            PersistenceError: If the store rejects the write
        """
        employee = self.db.get_employee(employee_id)
        if employee is None:
            raise NotFoundError(employee_not_found(employee_id))

        settings, working_days = self._month_context(year, month)
        updated = apply_derived(apply_field_edit(employee, field, raw_value, settings), settings, working_days)

        if not self.db.update_employee(updated):
            raise PersistenceError(store_write_failed("employee"))
        logger.info("Employee %s: %s changed", updated.unique_id, field)
        return updated

    def delete_employee(self, employee_id: int) -> None:
        """Delete an employee.

        Raises:
            NotFoundError: If the employee does not exist
            PersistenceError: If the store rejects the write
        """
        if self.db.get_employee(employee_id) is None:
            raise NotFoundError(employee_not_found(employee_id))
        if not self.db.remove_employee(employee_id):
            raise PersistenceError(store_write_failed("employee removal"))
        logger.info("Deleted employee %d", employee_id)
