"""Transaction and account file commands."""

from decimal import Decimal

import click

from salarizare.cli.error_handling import handle_domain_error, reported_errors
from salarizare.domain.tac import TACService
from salarizare.domain.transaction import TransactionService
from salarizare.utils.amount_parser import coerce_variable
from salarizare.utils.date_parser import parse_date


def parse_variable_options(options: tuple[str, ...]) -> dict:
    """Parse repeated KEY=VALUE options into a variable bag."""
    variables = {}
    for option in options:
        name, sep, value = option.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"Invalid variable '{option}': expected KEY=VALUE")
        variables[name.strip()] = coerce_variable(value)
    return variables


def _amount(value: Decimal | None) -> str:
    if value is None:
        return ""
    return f"{value:.2f}"


@click.group()
def transaction_group():
    """Manage transactions and their account file entries."""
    pass


@transaction_group.command("add")
@click.option("--tac", help="TAC name or ID to apply")
@click.option("--date", "txn_date", default="today", help="Transaction date (YYYY-MM-DD, DD.MM.YYYY or 'today')")
@click.option("--description", help="Transaction description")
@click.option("--var", "variables", multiple=True, help="Variable as KEY=VALUE (repeatable)")
@click.pass_context
def add_transaction(ctx, tac: str | None, txn_date: str, description: str | None, variables: tuple[str, ...]):
    """Create a transaction and post its account file entries.

    Values that parse as numbers are stored as numbers, anything else as text.

    Examples:
        salarizare transaction add --tac B1_613 --var Val_ded=440 --var Val_neded=440
        salarizare transaction add --tac FX_IN --var Suma=100 --var T.Moneda=EUR --date 15.03.2025
    """
    db = ctx.obj["db"]
    service = TransactionService(db)
    tac_service = TACService(db)

    with reported_errors(ctx):
        tac_id = tac_service.resolve(tac).id if tac else None
        transaction_id = service.create_transaction(
            transaction_date=parse_date(txn_date),
            variables=parse_variable_options(variables),
            tac_id=tac_id,
            description=description,
        )
        entries = service.list_entries(transaction_id)
        click.echo(f"Created transaction {transaction_id} with {len(entries)} entries")


@transaction_group.command("list")
@click.option("--start-date", help="Start date")
@click.option("--end-date", help="End date")
@click.option("--tac", help="Only transactions of this TAC (name or ID)")
@click.pass_context
def list_transactions(ctx, start_date: str | None, end_date: str | None, tac: str | None):
    """List transactions, newest first."""
    db = ctx.obj["db"]
    service = TransactionService(db)
    tac_service = TACService(db)

    with reported_errors(ctx):
        start = parse_date(start_date) if start_date else None
        end = parse_date(end_date) if end_date else None
        tac_id = tac_service.resolve(tac).id if tac else None
        transactions = service.list_transactions(start_date=start, end_date=end, tac_id=tac_id)

    if not transactions:
        click.echo("No transactions found.")
        return

    tac_names = {t.id: t.name for t in tac_service.list_tacs()}
    click.echo(f"\n{'ID':>5} | {'Data':10} | {'TAC':15} | {'Descriere':25} | Variabile")
    click.echo("-" * 100)
    for txn in transactions:
        tac_name = tac_names.get(txn.tac_id, "") if txn.tac_id is not None else ""
        variables = ", ".join(f"{k}={v}" for k, v in txn.variables.items())
        click.echo(
            f"{txn.id:5d} | {txn.transaction_date.isoformat()} | {tac_name[:15]:15s} | "
            f"{(txn.description or '')[:25]:25s} | {variables}"
        )


@transaction_group.command("apply")
@click.argument("transaction_id", type=int)
@click.option("--tac", help="TAC name or ID (defaults to the transaction's own TAC)")
@click.pass_context
def apply_transaction(ctx, transaction_id: int, tac: str | None):
    """Re-apply a TAC to a transaction, replacing its entries."""
    db = ctx.obj["db"]
    service = TransactionService(db)
    tac_service = TACService(db)

    with reported_errors(ctx):
        tac_id = tac_service.resolve(tac).id if tac else None
        entries = service.apply(transaction_id, tac_id=tac_id)
        click.echo(f"Posted {len(entries)} entries for transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool):
    """Delete a transaction and its entries."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    if service.get_transaction(transaction_id) is None:
        handle_domain_error(ctx, ValueError(f"Transaction {transaction_id} not found"))

    if not yes and not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    with reported_errors(ctx):
        service.delete_transaction(transaction_id)
        click.echo(f"Deleted transaction {transaction_id}")


@transaction_group.command("entries")
@click.option("--transaction", "transaction_id", type=int, help="Only entries of this transaction")
@click.pass_context
def list_entries(ctx, transaction_id: int | None):
    """List account file entries in posting order."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    with reported_errors(ctx):
        entries = service.list_entries(transaction_id)

    if not entries:
        click.echo("No entries found.")
        return

    click.echo(
        f"\n{'Tranz.':>6} | {'Fisa cont':10} | {'Cont coresp.':12} | {'Debit':>12} | {'Credit':>12} | "
        f"{'Valuta':>10} | Moneda"
    )
    click.echo("-" * 90)
    for entry in entries:
        click.echo(
            f"{entry.transaction_id:6d} | {entry.fisa_cont:10s} | {entry.cont_corespondent or '':12s} | "
            f"{_amount(entry.debit):>12} | {_amount(entry.credit):>12} | "
            f"{_amount(entry.valuta):>10} | {entry.moneda_valuta or ''}"
        )


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
