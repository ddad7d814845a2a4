"""Quarterly Calc CLI - Command-line interface for estimated tax planning."""

import json
from pathlib import Path

import click
from pydantic import ValidationError

from quarterlycalc import __version__

from .expenses_commands import expenses as expenses_group
from .inputs import input_options, resolve_inputs
from .rules_commands import rules as rules_group
from .settings_commands import settings as settings_group


@click.group()
@click.version_option(version=__version__, prog_name="quarterly-calc")
def cli():
    """Quarterly Calc - Estimated tax planning for self-employed households.

    Computes federal income tax, self-employment tax, child credits, a
    safe-harbor payment target, and a quarterly payment schedule.

    Settings are loaded from (in order):

    \b
    1. QUARTERLY_CALC_CONFIG_PATH environment variable
    2. ~/.config/quarterly-calc/settings.json (XDG default)

    Run 'quarterly-calc settings show' to see current settings.
    """
    pass


# Add subcommand groups
cli.add_command(settings_group)
cli.add_command(rules_group)
cli.add_command(expenses_group)


def _year_option(func):
    return click.option("--year", type=str, default=None,
                        help="Tax year (default: settings tax_year, else latest rules)")(func)


def _installment_style_option(func):
    return click.option("--annualized/--equal", "weighted", default=None,
                        help="Installment split (default: settings installment_style)")(func)


def _run_estimate(year, weighted, options):
    """Resolve inputs and rules, then generate the estimate."""
    from quarterlycalc.sdk import TaxRulesNotFoundError, generate_estimate, load_tax_rules, resolve_year

    if year is not None and (not year.isdigit() or len(year) != 4):
        raise click.BadParameter(f"Invalid year '{year}'. Must be 4 digits.", param_hint="--year")

    inputs, ledger = resolve_inputs(options)
    try:
        rules = load_tax_rules(resolve_year(year))
        estimate = generate_estimate(inputs, weighted=weighted, rules=rules)
    except TaxRulesNotFoundError as e:
        raise click.ClickException(str(e))
    except (ValidationError, ValueError) as e:
        raise click.ClickException(f"Error generating estimate: {e}")
    return estimate, rules, ledger


@cli.command("estimate")
@_year_option
@_installment_style_option
@click.option("--format", "output_format", type=click.Choice(["text", "json", "csv"]), default="text",
              help="Output format (default: text)")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write to file instead of stdout")
@input_options
def estimate(year, weighted, output_format, output, **options):
    """Calculate tax liability and the estimated payment schedule.

    \b
    Output formats:
      --format=text  ASCII tables (default, for terminal viewing)
      --format=json  JSON object (summary + schedule)
      --format=csv   Metric/Amount rows (for spreadsheet import)

    \b
    Examples:
      quarterly-calc estimate --w2-wages 8000 --business-income 42000
      quarterly-calc estimate --inputs household.yaml --annualized
      quarterly-calc estimate --inputs household.yaml --expenses expenses.json --format csv
    """
    from quarterlycalc.sdk.export import estimate_to_csv_string, format_estimate_text

    result, rules, ledger = _run_estimate(year, weighted, options)

    if output_format == "text":
        text = format_estimate_text(result, rules)
    elif output_format == "json":
        text = json.dumps(result.model_dump(mode="json"), indent=2)
    else:
        text = estimate_to_csv_string(result, ledger)

    if output:
        Path(output).write_text(text if text.endswith("\n") else text + "\n")
        click.echo(f"Wrote {output}")
    else:
        click.echo(text)


@cli.command("schedule")
@click.argument("amount", type=float)
@click.option("--count", type=click.IntRange(min=0), default=None,
              help="Number of installments (default: the year's due dates)")
@_year_option
@_installment_style_option
def schedule(amount, count, year, weighted):
    """Split AMOUNT into installments that add up to the cent.

    Without --count, uses the estimated payment due dates of the tax year.
    """
    from quarterlycalc.sdk import (
        TaxRulesNotFoundError,
        allocate,
        build_schedule,
        load_tax_rules,
        resolve_year,
    )
    from quarterlycalc.sdk.config import get_default_installment_weighted
    from quarterlycalc.sdk.export import format_usd

    if amount < 0:
        raise click.BadParameter("Amount cannot be negative.", param_hint="AMOUNT")
    if weighted is None:
        try:
            weighted = get_default_installment_weighted()
        except ValueError as e:
            raise click.ClickException(str(e))

    if count is not None:
        for i, value in enumerate(allocate(amount, count, weighted), start=1):
            click.echo(f"  {i:>2}. {format_usd(value):>14}")
        return

    try:
        rules = load_tax_rules(resolve_year(year))
    except (TaxRulesNotFoundError, ValueError) as e:
        raise click.ClickException(str(e))
    plan = build_schedule(amount, rules.estimated_payment_due_dates, weighted)
    for inst in plan.installments:
        click.echo(f"  {inst.number}. {inst.due_date.isoformat()}  {format_usd(inst.amount):>14}")


@cli.command("ics")
@click.option("--out-dir", type=click.Path(file_okay=False), default=".", show_default=True,
              help="Directory for the .ics files")
@click.option("--url", type=str, default=None, help="Optional link to include in each event")
@_year_option
@_installment_style_option
@input_options
def ics(out_dir, url, year, weighted, **options):
    """Write one calendar reminder (.ics) per estimated payment."""
    from quarterlycalc.sdk.export import schedule_to_ics_files

    result, _rules, _ledger = _run_estimate(year, weighted, options)
    if not result.schedule.installments:
        raise click.ClickException(f"No estimated payment due dates defined for {result.year}")

    for path in schedule_to_ics_files(result.schedule, Path(out_dir), url=url):
        click.echo(f"Wrote {path}")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
