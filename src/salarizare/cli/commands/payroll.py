"""Payroll table commands."""

from decimal import Decimal

import click

from salarizare.cli.error_handling import handle_domain_error, reported_errors
from salarizare.domain.employee import da_nu
from salarizare.domain.payroll import PayrollService, summarize
from salarizare.utils.date_parser import parse_month


def blank_zero(value: int | Decimal | None) -> str:
    """Format an amount, showing zero and missing values as blank."""
    if value is None or value == 0:
        return ""
    if isinstance(value, Decimal):
        return f"{value.normalize():f}"
    return str(value)


@click.group()
def payroll_group():
    """Compute the monthly payroll."""
    pass


@payroll_group.command("table")
@click.argument("month")
@click.option("--effective-dated", is_flag=True, help="Use the legal settings effective on the first day of MONTH")
@click.pass_context
def payroll_table(ctx, month: str, effective_dated: bool):
    """Show the payroll summary table for MONTH (YYYY-MM).

    Examples:
        salarizare payroll table 2025-03
        salarizare payroll table "last month" --effective-dated
    """
    db = ctx.obj["db"]
    service = PayrollService(db)

    with reported_errors(ctx):
        year, month_num = parse_month(month)
        rows = service.compute_month(year, month_num, effective_dated=effective_dated)

    if not rows:
        click.echo("No employees found.")
        return

    click.echo(f"\nStat de plata {year:04d}-{month_num:02d}")
    click.echo(
        f"{'Unique ID':10} | {'Nume':25} | {'Salariu net':>11} | {'CAS':>8} | "
        f"{'CASS (incl. Tichete)':>20} | {'Impozit':>8} | {'CAM':>8}"
    )
    click.echo("-" * 107)
    for employee, result in rows:
        click.echo(
            f"{employee.unique_id:10s} | {employee.nume[:25]:25s} | {blank_zero(result.salariu_net):>11} | "
            f"{blank_zero(result.cas):>8} | {blank_zero(result.cass_incl_tichete):>20} | "
            f"{blank_zero(result.impozit_pe_venit):>8} | {blank_zero(result.cam):>8}"
        )

    totals = summarize(result for _, result in rows)
    click.echo("-" * 107)
    click.echo(
        f"{'Total':10s} | {'':25s} | {blank_zero(totals['salariu_net']):>11} | "
        f"{blank_zero(totals['cas']):>8} | {blank_zero(totals['cass_incl_tichete']):>20} | "
        f"{blank_zero(totals['impozit_pe_venit']):>8} | {blank_zero(totals['cam']):>8}"
    )


@payroll_group.command("detail")
@click.argument("employee_id", type=int)
@click.argument("month")
@click.option("--effective-dated", is_flag=True, help="Use the legal settings effective on the first day of MONTH")
@click.pass_context
def payroll_detail(ctx, employee_id: int, month: str, effective_dated: bool):
    """Show every step of the payroll chain for one employee."""
    db = ctx.obj["db"]
    service = PayrollService(db)

    with reported_errors(ctx):
        year, month_num = parse_month(month)
        rows = service.compute_month(year, month_num, effective_dated=effective_dated)

    match = next(((emp, res) for emp, res in rows if emp.id == employee_id), None)
    if match is None:
        handle_domain_error(ctx, ValueError(f"Employee {employee_id} not found"))
    employee, result = match

    lines = [
        ("Functia de baza", da_nu(employee.principal_loc_munca)),
        ("Zile lucrate", result.zile_lucrate),
        ("Sal. brut cf. zile lucrate", result.sal_brut_cf_zile_lucrate),
        ("Indem. CO medical", result.indem_co_medical),
        ("Indem. CO odihna", result.indem_co_odihna),
        ("Total venituri brute", result.total_venituri_brute),
        ("Scutire de taxe", result.scutire_de_taxe),
        ("Baza de calcul contributii", result.baza_de_calcul_contributii),
        ("CAS", result.cas),
        ("CASS", result.cass),
        ("Tichete de masa", result.tichete_de_masa),
        ("CASS tichete de masa", result.cass_tichete_de_masa),
        ("Venit impozabil inainte de deduceri", result.venit_impozabil_inainte_de_deduceri),
        ("Deducere %", result.deducere_procent),
        ("Deducere personala", result.deducere_personala),
        ("Deducere minori", result.deducere_minori),
        ("Deducere pentru tineri <26 ani", result.deducere_pentru_tineri),
        ("Venit impozabil dupa deduceri", result.venit_impozabil_dupa_deduceri),
        ("Impozit pe venit", result.impozit_pe_venit),
        ("CAM", result.cam),
        ("CASS (incl. Tichete)", result.cass_incl_tichete),
        ("Salariu net", result.salariu_net),
    ]
    click.echo(f"\n{employee.unique_id} {employee.nume} - {year:04d}-{month_num:02d}")
    click.echo("-" * 50)
    for label, value in lines:
        text = value if isinstance(value, str) else blank_zero(value)
        click.echo(f"{label:38s} {text:>10}")


def register_commands(cli):
    """Register payroll commands with main CLI."""
    cli.add_command(payroll_group, name="payroll")
