"""Personal deduction table commands."""

import click

from salarizare.cli.error_handling import reported_errors
from salarizare.domain.deduction import generate_deduction_table, lookup_deduction_percentage
from salarizare.utils.amount_parser import parse_number


@click.group()
def deduction_group():
    """Personal deduction table (OUG 16/2022)."""
    pass


@deduction_group.command("table")
def show_table():
    """Print the deduction table."""
    click.echo(
        f"\n{'Rand':>4} | {'Venit de la':>11} | {'Venit pana la':>13} | "
        f"{'0 pers.':>7} | {'1 pers.':>7} | {'2 pers.':>7} | {'3 pers.':>7} | {'4+ pers.':>8}"
    )
    click.echo("-" * 88)
    for row in generate_deduction_table():
        p0, p1, p2, p3, p4 = (f"{p:.1f}%" for p in row.percentages)
        click.echo(
            f"{row.row:4d} | {row.income_from:11d} | {row.income_to:13d} | "
            f"{p0:>7} | {p1:>7} | {p2:>7} | {p3:>7} | {p4:>8}"
        )


@deduction_group.command("lookup")
@click.argument("income")
@click.argument("dependents", type=click.IntRange(min=0))
@click.pass_context
def lookup(ctx, income: str, dependents: int):
    """Look up the deduction percentage for INCOME and DEPENDENTS."""
    with reported_errors(ctx):
        percentage = lookup_deduction_percentage(parse_number(income), dependents)

    if percentage is None:
        click.echo("No personal deduction")
    else:
        click.echo(f"{percentage:.1f}%")


def register_commands(cli):
    """Register deduction commands with main CLI."""
    cli.add_command(deduction_group, name="deduction")
