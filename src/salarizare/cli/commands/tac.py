"""TAC management commands."""

import csv
from pathlib import Path

import click

from salarizare.cli.error_handling import handle_domain_error, reported_errors
from salarizare.domain.entities import TACRow
from salarizare.domain.tac import TACService

# Accepted header spellings for each row field of a rows file
ROW_COLUMNS = {
    "fisa_cont": ("fisa_cont", "Fisa cont"),
    "cont_corespondent": ("cont_corespondent", "Cont corespondent"),
    "debit_formula": ("debit_formula", "debit", "Debit"),
    "credit_formula": ("credit_formula", "credit", "Credit"),
    "valuta_formula": ("valuta_formula", "valuta", "Valuta"),
    "moneda_valuta_formula": ("moneda_valuta_formula", "moneda_valuta", "Moneda valuta"),
}


def parse_row_spec(spec: str) -> TACRow:
    """Parse "FISA;CONT_CORESPONDENT;DEBIT;CREDIT;VALUTA;MONEDA" (trailing parts optional)."""
    parts = [part.strip() for part in spec.split(";")]
    if len(parts) > 6:
        raise ValueError(f"Too many fields in row '{spec}' (at most 6, separated by ';')")
    parts += [""] * (6 - len(parts))
    fisa, cont, debit, credit, valuta, moneda = parts
    return TACRow(
        fisa_cont=fisa,
        cont_corespondent=cont or None,
        debit_formula=debit or None,
        credit_formula=credit or None,
        valuta_formula=valuta or None,
        moneda_valuta_formula=moneda or None,
    )


def read_rows_file(path: str) -> list[TACRow]:
    """Read TAC rows from a CSV file with one row per line, in order."""
    with open(Path(path), "r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            raise ValueError("Rows file has no columns")

        columns = {}
        for field, names in ROW_COLUMNS.items():
            columns[field] = next((name for name in names if name in reader.fieldnames), None)
        if columns["fisa_cont"] is None:
            raise ValueError("Rows file missing required column: fisa_cont")

        rows = []
        for line in reader:
            values = {field: (line.get(col) or "").strip() or None for field, col in columns.items() if col}
            rows.append(TACRow(fisa_cont=values.pop("fisa_cont") or "", **values))
        return rows


def _collect_rows(row_specs: tuple[str, ...], rows_file: str | None) -> list[TACRow] | None:
    if rows_file and row_specs:
        raise ValueError("Use either --row or --rows-file, not both")
    if rows_file:
        return read_rows_file(rows_file)
    if row_specs:
        return [parse_row_spec(spec) for spec in row_specs]
    return None


@click.group()
def tac_group():
    """Manage TACs (transaction allocation templates)."""
    pass


@tac_group.command("create")
@click.argument("name")
@click.option("--description", help="TAC description")
@click.option("--row", "row_specs", multiple=True, help='Row as "FISA;CONT;DEBIT;CREDIT;VALUTA;MONEDA"')
@click.option("--rows-file", type=click.Path(exists=True), help="CSV file with one TAC row per line")
@click.pass_context
def create_tac(ctx, name: str, description: str | None, row_specs: tuple[str, ...], rows_file: str | None):
    """Create a TAC.

    Examples:
        salarizare tac create B1_613 --row "628;401;Val_ded + Val_neded"
        salarizare tac create FX_IN --rows-file rows.csv --description "Incasare valuta"
    """
    db = ctx.obj["db"]
    service = TACService(db)

    with reported_errors(ctx):
        rows = _collect_rows(row_specs, rows_file) or []
        tac_id = service.create_tac(name=name, description=description, rows=rows)
        click.echo(f"Created TAC '{name.strip()}' (ID: {tac_id}) with {len(rows)} rows")


@tac_group.command("update")
@click.argument("tac")
@click.option("--name", help="New name")
@click.option("--description", help="New description")
@click.option("--row", "row_specs", multiple=True, help="Replacement rows (replace all existing rows)")
@click.option("--rows-file", type=click.Path(exists=True), help="CSV file with the replacement rows")
@click.pass_context
def update_tac(
    ctx,
    tac: str,
    name: str | None,
    description: str | None,
    row_specs: tuple[str, ...],
    rows_file: str | None,
):
    """Update a TAC. TAC can be a name or ID."""
    db = ctx.obj["db"]
    service = TACService(db)

    with reported_errors(ctx):
        found = service.resolve(tac)
        service.update_tac(
            found.id,
            name=name,
            description=description,
            rows=_collect_rows(row_specs, rows_file),
        )
        click.echo(f"Updated TAC {found.id}")


@tac_group.command("delete")
@click.argument("tac")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_tac(ctx, tac: str, yes: bool):
    """Delete a TAC. Its transactions are kept without a TAC."""
    db = ctx.obj["db"]
    service = TACService(db)

    try:
        found = service.resolve(tac)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Are you sure you want to delete TAC '{found.name}' (ID: {found.id})?"):
        click.echo("Deletion cancelled.")
        return

    with reported_errors(ctx):
        service.delete_tac(found.id)
        click.echo(f"Deleted TAC '{found.name}'")


@tac_group.command("list")
@click.pass_context
def list_tacs(ctx):
    """List all TACs."""
    db = ctx.obj["db"]
    service = TACService(db)

    tacs = service.list_tacs()
    if not tacs:
        click.echo("No TACs found.")
        return

    click.echo("\nTACs:")
    click.echo("-" * 60)
    for tac in tacs:
        click.echo(f"ID: {tac.id:3d} | {tac.name:20s} | {tac.description or ''}")


@tac_group.command("show")
@click.argument("tac")
@click.pass_context
def show_tac(ctx, tac: str):
    """Show a TAC with its rows. TAC can be a name or ID."""
    db = ctx.obj["db"]
    service = TACService(db)

    with reported_errors(ctx):
        found = service.resolve(tac)
        rows = service.get_rows(found.id)

    click.echo(f"\n{found.name} (ID: {found.id})")
    if found.description:
        click.echo(found.description)
    click.echo(
        f"\n{'#':>2} | {'Fisa cont':10} | {'Cont coresp.':12} | {'Debit':20} | {'Credit':20} | "
        f"{'Valuta':12} | {'Moneda':10}"
    )
    click.echo("-" * 102)
    for row in rows:
        click.echo(
            f"{row.row_order + 1:2d} | {row.fisa_cont:10s} | {row.cont_corespondent or '':12s} | "
            f"{row.debit_formula or '':20s} | {row.credit_formula or '':20s} | "
            f"{row.valuta_formula or '':12s} | {row.moneda_valuta_formula or '':10s}"
        )


def register_commands(cli):
    """Register TAC commands with main CLI."""
    cli.add_command(tac_group, name="tac")
