"""Legal settings commands."""

from decimal import Decimal

import click

from salarizare.cli.error_handling import reported_errors
from salarizare.domain.settings import PERCENTAGE_KEYS, SECTIONS, LegalSettingsService, SettingKey, value_on
from salarizare.utils.amount_parser import parse_number
from salarizare.utils.date_parser import parse_date


def format_setting_value(key: SettingKey, value: Decimal) -> str:
    """Show percentage settings as whole percentages (0.1 -> 10%)."""
    if key in PERCENTAGE_KEYS:
        return f"{(value * 100).normalize():f}%"
    return f"{value.normalize():f}"


@click.group()
def settings_group():
    """View and edit legal settings."""
    pass


@settings_group.command("list")
@click.pass_context
def list_settings(ctx):
    """List all legal settings grouped by section."""
    db = ctx.obj["db"]
    service = LegalSettingsService(db)

    with reported_errors(ctx):
        settings = service.load_settings()

    for section, keys in SECTIONS.items():
        click.echo(f"\n{section}")
        click.echo("-" * 70)
        for key in keys:
            setting = settings[key.value]
            click.echo(f"{key.value:55s} {format_setting_value(key, setting.current_value):>12s}")


@settings_group.command("show")
@click.argument("key")
@click.option("--on", "on_date", help="Show the value effective on this date")
@click.pass_context
def show_setting(ctx, key: str, on_date: str | None):
    """Show a setting with its history.

    KEY is the display name (e.g. "Salariul minim pe economie") or the
    enum name (e.g. SALARIUL_MINIM).
    """
    db = ctx.obj["db"]
    service = LegalSettingsService(db)

    with reported_errors(ctx):
        setting_key = SettingKey.from_name(key)
        setting = service.get_setting(setting_key)
        when = parse_date(on_date) if on_date else None

    click.echo(f"\n{setting_key.value}: {format_setting_value(setting_key, setting.current_value)}")
    if when is not None:
        effective = value_on(setting, when)
        shown = format_setting_value(setting_key, effective) if effective is not None else "(no value)"
        click.echo(f"Effective on {when.isoformat()}: {shown}")

    click.echo("\nHistory:")
    for entry in reversed(setting.history):
        end = entry.end_date.isoformat() if entry.end_date else "prezent"
        click.echo(
            f"  {entry.start_date.isoformat()} - {end:10s}  {format_setting_value(setting_key, entry.value)}"
        )


@settings_group.command("set")
@click.argument("key")
@click.argument("value")
@click.option("--date", "change_date", help="Date of the change (defaults to today)")
@click.pass_context
def set_setting(ctx, key: str, value: str, change_date: str | None):
    """Save a new value for a setting.

    Percentage settings (CAS, CASS, CAM, Cota impozit) take a whole
    percentage: "10" means 10%.

    Examples:
        salarizare settings set SALARIUL_MINIM 4050
        salarizare settings set CASS 10
    """
    db = ctx.obj["db"]
    service = LegalSettingsService(db)

    with reported_errors(ctx):
        setting_key = SettingKey.from_name(key)
        updated = service.update_setting(
            setting_key,
            parse_number(value),
            today=parse_date(change_date) if change_date else None,
            as_percentage=True,
        )
        click.echo(f"Saved {setting_key.value} = {format_setting_value(setting_key, updated.current_value)}")


def register_commands(cli):
    """Register settings commands with main CLI."""
    cli.add_command(settings_group, name="settings")
