"""Domain layer for salarizare application."""

from salarizare.domain.settings import LegalSettingsService
from salarizare.domain.working_days import WorkingDaysService
from salarizare.domain.employee import EmployeeService
from salarizare.domain.payroll import PayrollService
from salarizare.domain.tac import TACService
from salarizare.domain.transaction import TransactionService
from salarizare.domain.csv_import import TransactionImportService

__all__ = [
    "LegalSettingsService",
    "WorkingDaysService",
    "EmployeeService",
    "PayrollService",
    "TACService",
    "TransactionService",
    "TransactionImportService",
]
