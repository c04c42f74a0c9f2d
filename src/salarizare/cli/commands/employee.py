"""Employee management commands."""

import click

from salarizare.cli.error_handling import handle_domain_error, reported_errors
from salarizare.domain.employee import EDITABLE_FIELDS, EmployeeService, da_nu
from salarizare.domain.payroll import PayrollService
from salarizare.utils.amount_parser import parse_number
from salarizare.utils.date_parser import parse_month


def _month_option(month: str | None) -> tuple[int | None, int | None]:
    if month is None:
        return None, None
    return parse_month(month)


@click.group()
def employee_group():
    """Manage employees."""
    pass


@employee_group.command("add")
@click.argument("nume", metavar="NAME")
@click.option("--companie", default="", help="Company name")
@click.option("--principal/--secundar", default=True, help="Primary job (DA) or secondary job (NU)")
@click.option("--persoane-intretinere", type=click.IntRange(min=0), default=0, help="Number of dependents")
@click.option("--minori", type=click.IntRange(min=0), default=0, help="How many dependents are minors")
@click.option("--varsta", type=click.IntRange(min=0), default=0, help="Age in years")
@click.option("--tichete/--fara-tichete", default=False, help="Receives meal tickets")
@click.option("--valoare-tichet", help="Meal ticket value per day (defaults to the legal setting)")
@click.option("--salariu-cim", help="Contract salary (defaults to the legal setting)")
@click.option("--month", help="Month for the cached figures (YYYY-MM, defaults to current month)")
@click.pass_context
def add_employee(
    ctx,
    nume: str,
    companie: str,
    principal: bool,
    persoane_intretinere: int,
    minori: int,
    varsta: int,
    tichete: bool,
    valoare_tichet: str | None,
    salariu_cim: str | None,
    month: str | None,
):
    """Add a new employee.

    Examples:
        salarizare employee add "Popescu Ion" --companie "ACME SRL" --varsta 30
        salarizare employee add "Ionescu Ana" --tichete --persoane-intretinere 2 --minori 1
    """
    db = ctx.obj["db"]
    service = EmployeeService(db)

    with reported_errors(ctx):
        year, month_num = _month_option(month)
        employee = service.add_employee(
            nume=nume,
            companie=companie,
            principal_loc_munca=principal,
            persoane_intretinere=persoane_intretinere,
            din_care_minori=minori,
            varsta=varsta,
            tichete_de_masa=tichete,
            valoare_tichet_de_masa=parse_number(valoare_tichet) if valoare_tichet else None,
            salariu_cim=parse_number(salariu_cim) if salariu_cim else None,
            year=year,
            month=month_num,
        )
        click.echo(f"Added employee {employee.unique_id} '{employee.nume}' (ID: {employee.id})")


@employee_group.command("list")
@click.pass_context
def list_employees(ctx):
    """List all employees."""
    db = ctx.obj["db"]
    service = EmployeeService(db)

    employees = service.list_employees()
    if not employees:
        click.echo("No employees found.")
        return

    click.echo(
        f"\n{'ID':>4} | {'Unique ID':10} | {'Nume':25} | {'Companie':20} | "
        f"{'Principal':9} | {'Pers.':>5} | {'Minori':>6} | {'Varsta':>6} | {'Tichete':7}"
    )
    click.echo("-" * 118)
    for emp in employees:
        click.echo(
            f"{emp.id:4d} | {emp.unique_id:10s} | {emp.nume[:25]:25s} | {emp.companie[:20]:20s} | "
            f"{da_nu(emp.principal_loc_munca):9s} | {emp.persoane_intretinere:5d} | "
            f"{emp.din_care_minori:6d} | {emp.varsta:6d} | {da_nu(emp.tichete_de_masa):7s}"
        )


@employee_group.command("show")
@click.argument("employee_id", type=int)
@click.pass_context
def show_employee(ctx, employee_id: int):
    """Show all fields of an employee."""
    db = ctx.obj["db"]
    service = EmployeeService(db)

    employee = service.get_employee(employee_id)
    if employee is None:
        click.echo(f"Error: Employee {employee_id} not found", err=True)
        ctx.exit(1)

    rows = [
        ("ID", employee.id),
        ("Unique ID", employee.unique_id),
        ("Nume", employee.nume),
        ("Companie", employee.companie),
        ("Functia de baza", da_nu(employee.principal_loc_munca)),
        ("Persoane in intretinere", employee.persoane_intretinere),
        ("Din care minori", employee.din_care_minori),
        ("Varsta", employee.varsta),
        ("Tichete de masa", da_nu(employee.tichete_de_masa)),
        ("Valoare tichet de masa", employee.valoare_tichet_de_masa),
        ("Zile CO medical", employee.zile_co_medical),
        ("Indemnizatie / zi CO medical", employee.indemnizatie_zi_co_medical),
        ("Zile CO odihna", employee.zile_co_odihna),
        ("Indemnizatie / zi CO odihna", employee.indemnizatie_zi_co_odihna),
        ("Salariu CIM", employee.salariu_cim),
        ("Sal. brut cf. zile lucrate", employee.sal_brut_cf_zile_lucrate_rounded),
        ("Indem. CO medical", employee.indem_co_medical_rounded),
        ("Indem. CO odihna", employee.indem_co_odihna_rounded),
    ]
    click.echo()
    for label, value in rows:
        click.echo(f"{label:30s} {'' if value is None else value}")


@employee_group.command("set")
@click.argument("employee_id", type=int)
@click.argument("field", type=click.Choice(EDITABLE_FIELDS))
@click.argument("value", required=False, default="")
@click.option("--month", help="Month for the cached figures (YYYY-MM, defaults to current month)")
@click.pass_context
def set_field(ctx, employee_id: int, field: str, value: str, month: str | None):
    """Edit one field of an employee.

    Numeric fields treat an empty or unparsable VALUE as 0. Setting
    valoare_tichet_de_masa also switches meal tickets on or off, and setting
    leave days fills or clears the daily allowance.

    Examples:
        salarizare employee set 1 zile_co_medical 3
        salarizare employee set 1 valoare_tichet_de_masa 40
        salarizare employee set 1 principal_loc_munca NU
    """
    db = ctx.obj["db"]
    service = EmployeeService(db)

    with reported_errors(ctx):
        year, month_num = _month_option(month)
        employee = service.update_field(employee_id, field, value, year=year, month=month_num)
        click.echo(f"Updated {field} for {employee.unique_id} '{employee.nume}'")


@employee_group.command("delete")
@click.argument("employee_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_employee(ctx, employee_id: int, yes: bool):
    """Delete an employee."""
    db = ctx.obj["db"]
    service = EmployeeService(db)

    employee = service.get_employee(employee_id)
    if employee is None:
        click.echo(f"Error: Employee {employee_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Are you sure you want to delete employee '{employee.nume}' (ID: {employee_id})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_employee(employee_id)
        click.echo(f"Deleted employee '{employee.nume}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@employee_group.command("recalculate")
@click.argument("month")
@click.pass_context
def recalculate(ctx, month: str):
    """Recompute every employee's cached figures for MONTH (YYYY-MM).

    Run this after changing the month's working days or the default
    contract salary.
    """
    db = ctx.obj["db"]
    service = PayrollService(db)

    with reported_errors(ctx):
        year, month_num = parse_month(month)
        updated = service.recalculate_employees(year, month_num)
        click.echo(f"Recalculated {len(updated)} employees for {year:04d}-{month_num:02d}")


def register_commands(cli):
    """Register employee commands with main CLI."""
    cli.add_command(employee_group, name="employee")
