"""Working days calendar commands."""

import click

from salarizare.cli.error_handling import reported_errors
from salarizare.domain.working_days import MONTHS_RO, WorkingDaysService


def _parse_year_days(days: tuple[int, ...]) -> dict[int, int]:
    if len(days) != 12:
        raise click.BadParameter("expected 12 values, one per month", param_hint="DAYS")
    return {month: value for month, value in enumerate(days, start=1)}


@click.group()
def working_days_group():
    """Manage working days per month."""
    pass


@working_days_group.command("list")
@click.argument("year", required=False)
@click.pass_context
def list_working_days(ctx, year: str | None):
    """Show the working days calendar, optionally for one YEAR."""
    db = ctx.obj["db"]
    service = WorkingDaysService(db)

    with reported_errors(ctx):
        calendar = service.get_calendar()

    years = sorted(calendar) if year is None else [year]
    for y in years:
        months = calendar.get(y)
        if months is None:
            click.echo(f"Error: Year {y} not found", err=True)
            ctx.exit(1)
        click.echo(f"\n{y}")
        click.echo("-" * 24)
        for month in range(1, 13):
            value = months.get(month)
            click.echo(f"  {MONTHS_RO[month - 1]:12s} {'' if value is None else value:>4}")


@working_days_group.command("add-year")
@click.argument("year")
@click.argument("days", nargs=-1, type=int)
@click.pass_context
def add_year(ctx, year: str, days: tuple[int, ...]):
    """Add YEAR with 12 working-day values, January to December.

    Example:
        salarizare working-days add-year 2027 20 20 23 21 20 22 22 21 22 21 21 22
    """
    db = ctx.obj["db"]
    service = WorkingDaysService(db)

    with reported_errors(ctx):
        service.add_year(year, _parse_year_days(days))
        click.echo(f"Added working days for {year}")


@working_days_group.command("edit-year")
@click.argument("year")
@click.argument("days", nargs=-1, type=int)
@click.pass_context
def edit_year(ctx, year: str, days: tuple[int, ...]):
    """Replace all 12 working-day values of an existing YEAR."""
    db = ctx.obj["db"]
    service = WorkingDaysService(db)

    with reported_errors(ctx):
        service.update_year(year, _parse_year_days(days))
        click.echo(f"Updated working days for {year}")


@working_days_group.command("set")
@click.argument("year")
@click.argument("month", type=int)
@click.argument("days", type=int)
@click.pass_context
def set_month(ctx, year: str, month: int, days: int):
    """Set the working days of one MONTH (1-12) of YEAR."""
    db = ctx.obj["db"]
    service = WorkingDaysService(db)

    with reported_errors(ctx):
        service.set_month(year, month, days)
        click.echo(f"{MONTHS_RO[month - 1]} {year}: {days} working days")


@working_days_group.command("delete-year")
@click.argument("year")
@click.pass_context
def delete_year(ctx, year: str):
    """Remove YEAR from the calendar."""
    db = ctx.obj["db"]
    service = WorkingDaysService(db)

    with reported_errors(ctx):
        service.delete_year(year)
        click.echo(f"Deleted working days for {year}")


def register_commands(cli):
    """Register working days commands with main CLI."""
    cli.add_command(working_days_group, name="working-days")
