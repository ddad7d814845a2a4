"""Tax rules CLI commands."""

import click

from quarterlycalc.sdk import TaxRulesNotFoundError, get_available_years, load_tax_rules
from quarterlycalc.sdk.export import format_usd


@click.group()
def rules():
    """Inspect the bundled tax rules tables (tax_rules/YYYY.yaml)."""
    pass


@rules.command("years")
def rules_years():
    """List years that have a tax rules table."""
    years = get_available_years()
    if not years:
        click.echo("No tax rules found.")
        return
    for year in years:
        click.echo(year)


@rules.command("show")
@click.argument("year")
@click.option("--filing-status", type=click.Choice(["single", "mfj", "mfs", "hoh"]), default=None,
              help="Show only one filing status")
def rules_show(year, filing_status):
    """Show brackets, deductions, and due dates for YEAR."""
    try:
        tax_rules = load_tax_rules(year)
    except (TaxRulesNotFoundError, ValueError) as e:
        raise click.ClickException(str(e))

    click.echo(f"TAX RULES {tax_rules.year}")
    click.echo("=" * 50)

    statuses = [filing_status] if filing_status else ["single", "mfj", "mfs", "hoh"]
    for status in statuses:
        status_rules = tax_rules.for_status(status)
        click.echo()
        click.echo(f"{status.upper()}")
        click.echo(f"  Standard deduction:           {format_usd(status_rules.standard_deduction)}")
        click.echo(f"  Additional Medicare threshold: {format_usd(status_rules.additional_medicare_threshold)}")
        lower = 0.0
        for bracket in status_rules.tax_brackets:
            upper = format_usd(bracket.up_to) if bracket.up_to is not None else "and up"
            click.echo(f"  {bracket.rate:>5.0%}  {format_usd(lower)} - {upper}")
            if bracket.up_to is not None:
                lower = bracket.up_to

    click.echo()
    click.echo(f"Social Security wage base: {format_usd(tax_rules.social_security.wage_base)}")
    click.echo(f"Child tax credit: {format_usd(tax_rules.child_credit.per_child)} per child "
               f"({format_usd(tax_rules.child_credit.per_child_alternate)} alternate), "
               f"refundable up to {format_usd(tax_rules.child_credit.refundable_cap_per_child)}")
    click.echo("Estimated payment due dates:")
    for due in tax_rules.estimated_payment_due_dates:
        click.echo(f"  {due.isoformat()}")
