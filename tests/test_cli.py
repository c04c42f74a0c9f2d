"""Tests for the command line interface."""

import pytest

from salarizare.cli.commands.tac import parse_row_spec, read_rows_file
from salarizare.cli.commands.transaction import parse_variable_options
from salarizare.cli.main import cli


@pytest.fixture
def run(cli_runner, temp_db):
    """Invoke the CLI against the temporary database."""

    def _run(*args, input=None):
        return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], input=input)

    return _run


def test_help_does_not_need_database(cli_runner):
    """Top-level help lists the command groups."""
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    for group in ("employee", "settings", "working-days", "payroll", "deduction", "tac", "transaction", "import"):
        assert group in result.output


def test_employee_workflow(run):
    """Add, edit, show and list an employee."""
    result = run("employee", "add", "Popescu Ion", "--companie", "ACME SRL", "--varsta", "30", "--month", "2025-03")
    assert result.exit_code == 0, result.output
    assert "Added employee IDS_1 'Popescu Ion' (ID: 1)" in result.output

    result = run("employee", "set", "1", "valoare_tichet_de_masa", "40", "--month", "2025-03")
    assert result.exit_code == 0, result.output
    assert "Updated valoare_tichet_de_masa for IDS_1 'Popescu Ion'" in result.output

    result = run("employee", "show", "1")
    assert result.exit_code == 0
    assert "Tichete de masa" in result.output
    assert "DA" in result.output

    result = run("employee", "list")
    assert "Popescu Ion" in result.output
    assert "ACME SRL" in result.output


def test_employee_list_empty(run):
    """An empty list says so."""
    assert "No employees found." in run("employee", "list").output


def test_employee_show_missing(run):
    """Unknown employees are an error."""
    result = run("employee", "show", "5")
    assert result.exit_code == 1
    assert "Error: Employee 5 not found" in result.output


def test_employee_set_invalid_flag(run):
    """Invalid DA/NU values are reported."""
    run("employee", "add", "Popescu Ion")
    result = run("employee", "set", "1", "principal_loc_munca", "poate")
    assert result.exit_code == 1
    assert "Error: Expected DA or NU" in result.output


def test_employee_delete_confirmation(run):
    """Deletion asks first unless --yes is given."""
    run("employee", "add", "Popescu Ion")

    result = run("employee", "delete", "1", input="n\n")
    assert "Deletion cancelled." in result.output

    result = run("employee", "delete", "1", "--yes")
    assert result.exit_code == 0
    assert "Deleted employee 'Popescu Ion'" in result.output
    assert "No employees found." in run("employee", "list").output


def test_employee_recalculate(run):
    """Recalculation reports how many employees were refreshed."""
    run("employee", "add", "A")
    run("employee", "add", "B")
    result = run("employee", "recalculate", "2025-03")
    assert result.exit_code == 0
    assert "Recalculated 2 employees for 2025-03" in result.output


def test_settings_list_and_set(run):
    """Settings print grouped; percentages are typed as whole numbers."""
    result = run("settings", "list")
    assert result.exit_code == 0
    assert "Taxe" in result.output
    assert "Salariul minim pe economie" in result.output
    assert "25%" in result.output

    result = run("settings", "set", "CASS", "12")
    assert result.exit_code == 0, result.output
    assert "Saved CASS = 12%" in result.output

    result = run("settings", "show", "CASS", "--on", "2030-01-01")
    assert "CASS: 12%" in result.output
    assert "Effective on 2030-01-01: 12%" in result.output
    assert "prezent" in result.output


def test_settings_unknown_key(run):
    """Unknown keys are an error."""
    result = run("settings", "set", "BONUS", "10")
    assert result.exit_code == 1
    assert "Error: Unknown legal setting" in result.output


def test_settings_rejects_negative(run):
    """Negative values are an error."""
    result = run("settings", "set", "SALARIUL_MINIM", "(10)")
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_working_days_commands(run):
    """List, add, set and delete calendar years."""
    result = run("working-days", "list", "2025")
    assert result.exit_code == 0
    assert "Martie" in result.output
    assert "21" in result.output

    days = ["20", "20", "23", "21", "20", "22", "22", "21", "22", "21", "21", "22"]
    result = run("working-days", "add-year", "2027", *days)
    assert result.exit_code == 0, result.output
    assert "Added working days for 2027" in result.output

    result = run("working-days", "add-year", "2027", *days)
    assert result.exit_code == 1
    assert "This year already exists" in result.output

    result = run("working-days", "set", "2027", "2", "19")
    assert "Februarie 2027: 19 working days" in result.output

    result = run("working-days", "delete-year", "2027")
    assert result.exit_code == 0
    result = run("working-days", "list", "2027")
    assert result.exit_code == 1
    assert "Error: Year 2027 not found" in result.output


def test_working_days_add_year_needs_twelve_values(run):
    """Fewer than twelve values is a usage error."""
    result = run("working-days", "add-year", "2027", "20", "20")
    assert result.exit_code == 2
    assert "expected 12 values" in result.output


def test_payroll_table_and_detail(run):
    """The table shows the net salary and a total row."""
    run("employee", "add", "Popescu Ion", "--varsta", "30", "--salariu-cim", "4050", "--month", "2025-03")

    result = run("payroll", "table", "2025-03")
    assert result.exit_code == 0, result.output
    assert "Stat de plata 2025-03" in result.output
    assert "2574" in result.output
    assert "Total" in result.output

    result = run("payroll", "detail", "1", "2025-03")
    assert result.exit_code == 0
    assert "Salariu net" in result.output
    assert "2574" in result.output

    result = run("payroll", "detail", "9", "2025-03")
    assert result.exit_code == 1


def test_payroll_bad_month(run):
    """Unparsable months are an error."""
    result = run("payroll", "table", "martie")
    assert result.exit_code == 1
    assert "Error: Could not parse month" in result.output


def test_deduction_commands(run):
    """Lookup prints the percentage or says there is none."""
    assert "20.0%" in run("deduction", "lookup", "4050", "0").output
    assert "45.0%" in run("deduction", "lookup", "4050", "4").output
    assert "No personal deduction" in run("deduction", "lookup", "7000", "0").output

    result = run("deduction", "table")
    assert result.exit_code == 0
    assert "6050" in result.output


def test_tac_workflow(run, fixtures_dir):
    """Create TACs from options and from a rows file, then show them."""
    result = run("tac", "create", "B1_613", "--row", "628;5121;Val_ded + Val_neded", "--description", "Comisioane")
    assert result.exit_code == 0, result.output
    assert "Created TAC 'B1_613' (ID: 1) with 1 rows" in result.output

    result = run("tac", "create", "FX_IN", "--rows-file", str(fixtures_dir / "tac_rows.csv"))
    assert result.exit_code == 0, result.output
    assert "with 2 rows" in result.output

    result = run("tac", "show", "FX_IN")
    assert "Suma * Curs" in result.output
    assert "T.Moneda" in result.output

    result = run("tac", "list")
    assert "B1_613" in result.output
    assert "FX_IN" in result.output

    result = run("tac", "create", "B1_613")
    assert result.exit_code == 1
    assert "already exists" in result.output

    result = run("tac", "delete", "FX_IN", "--yes")
    assert "Deleted TAC 'FX_IN'" in result.output


def test_tac_show_missing(run):
    """Unknown TACs are an error."""
    result = run("tac", "show", "NOPE")
    assert result.exit_code == 1
    assert "Error: TAC 'NOPE' not found" in result.output


def test_transaction_workflow(run, sample_tac):
    """Add a transaction, list it, list its entries and re-apply."""
    result = run(
        "transaction", "add", "--tac", "B1_613", "--date", "15.03.2025",
        "--var", "Val_ded=440", "--var", "Val_neded=440", "--description", "Comision",
    )
    assert result.exit_code == 0, result.output
    assert "Created transaction 1 with 2 entries" in result.output

    result = run("transaction", "list")
    assert "2025-03-15" in result.output
    assert "B1_613" in result.output

    result = run("transaction", "entries", "--transaction", "1")
    assert "880.00" in result.output

    result = run("transaction", "apply", "1")
    assert "Posted 2 entries for transaction 1" in result.output

    result = run("transaction", "delete", "1", "--yes")
    assert "Deleted transaction 1" in result.output
    assert "No entries found." in run("transaction", "entries").output


def test_transaction_bad_variable(run):
    """Variables must be KEY=VALUE."""
    result = run("transaction", "add", "--var", "Val_ded")
    assert result.exit_code == 1
    assert "expected KEY=VALUE" in result.output


def test_transaction_inverted_range(run):
    """The start date cannot be after the end date."""
    result = run("transaction", "list", "--start-date", "2025-04-01", "--end-date", "2025-03-01")
    assert result.exit_code == 1


def test_import_command(run, sample_tac, fixtures_dir):
    """The import reports counts and row errors."""
    result = run("import", str(fixtures_dir / "transactions.csv"))
    assert result.exit_code == 0, result.output
    assert "Imported: 2 transactions" in result.output
    assert "Entries: 4 account file entries" in result.output
    assert "Errors: 4" in result.output
    assert "Row 4: TAC 'NOPE' not found" in result.output


def test_import_missing_columns(run, tmp_path):
    """Files without the required columns fail."""
    csv_file = tmp_path / "bad.csv"
    csv_file.write_text("Suma\n10\n", encoding="utf-8")
    result = run("import", str(csv_file))
    assert result.exit_code == 1
    assert "Error: CSV file missing required columns" in result.output


def test_parse_row_spec():
    """Trailing row fields are optional."""
    row = parse_row_spec("628; 5121 ;Val_ded")
    assert row.fisa_cont == "628"
    assert row.cont_corespondent == "5121"
    assert row.debit_formula == "Val_ded"
    assert row.credit_formula is None
    with pytest.raises(ValueError, match="Too many fields"):
        parse_row_spec("a;b;c;d;e;f;g")


def test_read_rows_file(fixtures_dir):
    """Rows files accept the sheet's column titles."""
    rows = read_rows_file(str(fixtures_dir / "tac_rows.csv"))
    assert [r.fisa_cont for r in rows] == ["5124", "472"]
    assert rows[0].valuta_formula == "Suma"
    assert rows[0].moneda_valuta_formula == "T.Moneda"
    assert rows[1].credit_formula == "Suma * Curs"


def test_parse_variable_options():
    """Numeric values become numbers; others stay text."""
    variables = parse_variable_options(("Val_ded=440", "T.Moneda=EUR"))
    assert variables["Val_ded"] == 440
    assert variables["T.Moneda"] == "EUR"
