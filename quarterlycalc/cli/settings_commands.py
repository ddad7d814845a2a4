"""Settings CLI commands for Quarterly Calc.

Manages settings.json - default tax year, installment style, data directory.
"""

import click

from quarterlycalc.sdk import (
    load_settings,
    set_setting,
    unset_setting,
    known_settings,
    get_settings_path,
    get_data_path,
    get_ledger_path,
)


def _load_or_fail() -> dict:
    try:
        return load_settings()
    except ValueError as e:
        raise click.ClickException(str(e))


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - tax_year: default tax year for estimates
    - installment_style: equal or annualized (30/30/20/20)
    - ai_categorization: try the Gemini CLI before keyword rules
    - data_dir: custom data directory (expense ledger)
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = _load_or_fail()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    click.echo()
    click.echo("Effective paths:")
    click.echo(f"  data_dir: {get_data_path()}{'' if current.get('data_dir') else ' (default)'}")
    click.echo(f"  ledger:   {get_ledger_path()}")


@settings.command("set")
@click.argument("key", type=click.Choice(known_settings()))
@click.argument("value")
def settings_set(key, value):
    """Set a setting.

    \b
    Examples:
        quarterly-calc settings set tax_year 2025
        quarterly-calc settings set installment_style annualized
        quarterly-calc settings set ai_categorization true
    """
    _load_or_fail()
    try:
        path = set_setting(key, value)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="VALUE")
    click.echo(f"Set {key}: {load_settings()[key]}")
    click.echo(f"Saved to: {path}")


@settings.command("unset")
@click.argument("key", type=click.Choice(known_settings()))
def settings_unset(key):
    """Clear a setting, reverting to its default."""
    _load_or_fail()
    if unset_setting(key):
        click.echo(f"Cleared {key} setting.")
    else:
        click.echo(f"{key} was not set.")
