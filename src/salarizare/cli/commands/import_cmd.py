"""CSV import command."""

import click

from salarizare.domain.csv_import import TransactionImportService


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True))
@click.pass_context
def import_csv(ctx, csv_file: str):
    """Import transactions from a CSV file and post them through their TACs.

    The file needs TAC and Data columns, an optional Descriere column, and
    one column per transaction variable.
    """
    db = ctx.obj["db"]
    service = TransactionImportService(db)

    try:
        result = service.import_csv(csv_file_path=csv_file)
        click.echo("\nImport complete:")
        click.echo(f"  Imported: {result['imported']} transactions")
        click.echo(f"  Entries: {result['entries']} account file entries")
        if result["errors"]:
            click.echo(f"  Errors: {len(result['errors'])}")
            for error in result["errors"]:
                click.echo(f"    {error}", err=True)
    except (ValueError, FileNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_csv)
