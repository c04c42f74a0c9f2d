"""Shared pytest fixtures for salarizare tests."""

import logging
import os
import tempfile
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from salarizare.database.factories import create_sqlite_database
from salarizare.domain.employee import EmployeeService
from salarizare.domain.entities import Employee, TACRow
from salarizare.domain.payroll import PayrollService
from salarizare.domain.settings import LegalSettingsService
from salarizare.domain.tac import TACService
from salarizare.domain.transaction import TransactionService
from salarizare.domain.working_days import WorkingDaysService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """CLI runs reconfigure the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def settings_service(temp_db):
    """Create a LegalSettingsService with a temporary database."""
    return LegalSettingsService(temp_db)


@pytest.fixture
def working_days_service(temp_db):
    """Create a WorkingDaysService with a temporary database."""
    return WorkingDaysService(temp_db)


@pytest.fixture
def employee_service(temp_db):
    """Create an EmployeeService with a temporary database."""
    return EmployeeService(temp_db)


@pytest.fixture
def payroll_service(temp_db):
    """Create a PayrollService with a temporary database."""
    return PayrollService(temp_db)


@pytest.fixture
def tac_service(temp_db):
    """Create a TACService with a temporary database."""
    return TACService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def make_employee():
    """Build an Employee entity with sensible defaults for calculator tests."""

    def _make(**overrides) -> Employee:
        fields = dict(
            id=1,
            unique_id="IDS_1",
            nume="Popescu Ion",
            companie="ACME SRL",
            principal_loc_munca=True,
            persoane_intretinere=0,
            din_care_minori=0,
            varsta=30,
            tichete_de_masa=False,
            salariu_cim=Decimal("4050"),
        )
        fields.update(overrides)
        return Employee(**fields)

    return _make


@pytest.fixture
def sample_tac(tac_service):
    """Create TAC B1_613: one row debiting 628 with Val_ded + Val_neded."""
    tac_id = tac_service.create_tac(
        name="B1_613",
        description="Cheltuieli cu servicii bancare",
        rows=[
            TACRow(fisa_cont="628", cont_corespondent="5121", debit_formula="Val_ded + Val_neded"),
            TACRow(fisa_cont="5121", cont_corespondent="628", credit_formula="Val_ded + Val_neded"),
        ],
    )
    return tac_service.get_tac(tac_id)


@pytest.fixture
def sample_employee(employee_service):
    """Create a sample employee for March 2025 (21 working days)."""
    return employee_service.add_employee(
        nume="Popescu Ion",
        companie="ACME SRL",
        varsta=30,
        salariu_cim=Decimal("4050"),
        year=2025,
        month=3,
    )


@pytest.fixture
def settings_day():
    """A fixed date for settings history tests."""
    return date(2025, 1, 1)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
