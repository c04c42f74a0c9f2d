"""Tests for CSV import of transactions."""

from decimal import Decimal

import pytest

from salarizare.domain.csv_import import TransactionImportService


@pytest.fixture
def import_service(temp_db):
    """Create a TransactionImportService with a temporary database."""
    return TransactionImportService(temp_db)


def test_import_fixture(import_service, transaction_service, sample_tac, fixtures_dir):
    """Valid rows are imported and posted; bad rows are reported."""
    result = import_service.import_csv(str(fixtures_dir / "transactions.csv"))

    assert result["imported"] == 2
    assert result["entries"] == 4
    assert result["errors"] == [
        "Row 4: TAC 'NOPE' not found",
        "Row 5: Missing TAC",
        "Row 6: Missing date",
        result["errors"][3],
    ]
    assert result["errors"][3].startswith("Row 7: Could not parse date")

    transactions = transaction_service.list_transactions()
    assert [t.transaction_date.isoformat() for t in transactions] == ["2025-03-16", "2025-03-15"]
    # empty cells are not stored as variables
    assert transactions[1].variables == {"Val_ded": Decimal("440"), "Val_neded": Decimal("440")}
    assert transactions[0].variables["T.Moneda"] == "RON"
    assert transactions[0].description == "Comision"


def test_import_semicolon_delimited(import_service, transaction_service, sample_tac, tmp_path):
    """Semicolon separated files are detected."""
    csv_file = tmp_path / "semicolon.csv"
    csv_file.write_text("TAC;Data;Val_ded;Val_neded\nB1_613;15.03.2025;300;20\n", encoding="utf-8")

    result = import_service.import_csv(str(csv_file))

    assert result["imported"] == 1
    assert result["errors"] == []
    entries = transaction_service.list_entries()
    assert entries[0].debit == Decimal("320")


def test_import_missing_columns(import_service, tmp_path):
    """TAC and Data columns are required."""
    csv_file = tmp_path / "bad.csv"
    csv_file.write_text("Data,Suma\n2025-03-15,10\n", encoding="utf-8")

    with pytest.raises(ValueError, match="missing required columns: TAC"):
        import_service.import_csv(str(csv_file))


def test_import_missing_file(import_service, tmp_path):
    """A missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        import_service.import_csv(str(tmp_path / "nope.csv"))


def test_import_invalid_variable_name(import_service, sample_tac, tmp_path):
    """A column that cannot be a variable name fails the row."""
    csv_file = tmp_path / "badvar.csv"
    csv_file.write_text("TAC,Data,Val-ded\nB1_613,2025-03-15,10\n", encoding="utf-8")

    result = import_service.import_csv(str(csv_file))

    assert result["imported"] == 0
    assert result["errors"] == ["Row 2: Invalid variable name 'Val-ded'"]
