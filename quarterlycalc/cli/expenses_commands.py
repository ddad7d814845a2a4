"""Expense ledger CLI commands.

The ledger is a JSON file (default: <data_dir>/expenses.json). Its total
feeds 'quarterly-calc estimate --expenses'.
"""

from datetime import date as date_cls
from pathlib import Path

import click
from pydantic import ValidationError

from quarterlycalc.sdk import (
    BUSINESS_TYPES,
    EXPENSE_CATEGORIES,
    ExpenseEntry,
    categorize_expense,
    generate_insights,
    get_ledger_path,
    load_ledger,
    parse_expense_text,
    save_ledger,
    suggested_expenses,
)
from quarterlycalc.sdk.expenses import (
    calculate_mileage_deduction,
    get_category_label,
    get_expenses_by_category,
)
from quarterlycalc.sdk.export import format_usd


def _ledger_path(ledger):
    return Path(ledger) if ledger else get_ledger_path()


def _load(ledger):
    try:
        path = _ledger_path(ledger)
        return load_ledger(path), path
    except (ValueError, ValidationError) as e:
        raise click.ClickException(f"Could not load expense ledger: {e}")


def _categorize(description, amount, business_type, use_ai):
    try:
        return categorize_expense(description, amount, business_type, use_ai=use_ai)
    except ValueError as e:
        raise click.ClickException(str(e))


ledger_option = click.option("--ledger", type=click.Path(dir_okay=False), default=None,
                             help="Ledger JSON file (default: <data_dir>/expenses.json)")


@click.group()
def expenses():
    """Log and categorize business expenses."""
    pass


@expenses.command("categories")
@click.option("--business-type", type=click.Choice(BUSINESS_TYPES), default=None,
              help="Business type (default: the ledger's)")
@ledger_option
def expenses_categories(business_type, ledger):
    """List expense category keys for a business type."""
    if business_type is None:
        business_type = _load(ledger)[0].business_type

    for group, categories in EXPENSE_CATEGORIES[business_type].items():
        click.echo(group)
        for key, label in categories.items():
            click.echo(f"  {key:<28} {label}")


@expenses.command("set-type")
@click.argument("business_type", type=click.Choice(BUSINESS_TYPES))
@ledger_option
def expenses_set_type(business_type, ledger):
    """Select the business type used for new entries."""
    current, path = _load(ledger)
    current.business_type = business_type
    save_ledger(current, path)
    click.echo(f"Business type set to: {business_type}")


@expenses.command("add")
@click.argument("amount", type=float)
@click.argument("description")
@click.option("--category", type=str, default=None, help="Category key (suggested automatically if omitted)")
@click.option("--date", "entry_date", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Expense date YYYY-MM-DD (default: today)")
@click.option("--ai/--no-ai", "use_ai", default=None, help="Try the Gemini CLI for the category suggestion")
@ledger_option
def expenses_add(amount, description, category, entry_date, use_ai, ledger):
    """Add an expense of AMOUNT described by DESCRIPTION.

    \b
    Examples:
        quarterly-calc expenses add 45.20 "USPS shipping labels"
        quarterly-calc expenses add 1299 "New laptop" --category consultant_equipment
    """
    current, path = _load(ledger)
    business_type = current.business_type

    if category is None:
        suggestion = _categorize(description, amount, business_type, use_ai)
        if suggestion.category is None:
            raise click.ClickException(
                f"Could not suggest a category for '{description}'. "
                f"Pass --category (see 'quarterly-calc expenses categories')."
            )
        category = suggestion.category
        click.echo(f"Category: {category} ({suggestion.source}, confidence {suggestion.confidence:.0%})")

    day = (entry_date.date() if entry_date else date_cls.today()).isoformat()
    try:
        entry = ExpenseEntry(
            date=day,
            category=category,
            description=description,
            amount=amount,
            business_type=business_type,
        )
    except ValidationError as e:
        raise click.ClickException(f"Invalid expense:\n{e}")

    current.add(entry)
    save_ledger(current, path)
    click.echo(f"Added {entry.id}: {format_usd(entry.amount)} {entry.description}")


@expenses.command("mileage")
@click.argument("miles", type=float)
@click.option("--description", default="Business mileage", show_default=True)
@click.option("--date", "entry_date", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Expense date YYYY-MM-DD (default: today)")
@ledger_option
def expenses_mileage(miles, description, entry_date, ledger):
    """Log MILES at the standard mileage rate (rideshare vehicles)."""
    current, path = _load(ledger)
    if current.business_type != "rideshare":
        raise click.ClickException("Mileage entries require business type 'rideshare'.")
    if miles < 0:
        raise click.BadParameter("Miles cannot be negative.", param_hint="MILES")

    day = (entry_date.date() if entry_date else date_cls.today()).isoformat()
    entry = current.add(ExpenseEntry(
        date=day,
        category="vehicle_mileage",
        description=f"{description} ({miles:g} mi)",
        amount=round(calculate_mileage_deduction(miles), 2),
        business_type="rideshare",
    ))
    save_ledger(current, path)
    click.echo(f"Added {entry.id}: {format_usd(entry.amount)} {entry.description}")


@expenses.command("list")
@click.option("--by-category", is_flag=True, help="Group entries by category")
@ledger_option
def expenses_list(by_category, ledger):
    """List logged expenses."""
    current, path = _load(ledger)
    if not current.entries:
        click.echo(f"No expenses logged ({path}).")
        return

    if by_category:
        grouped = get_expenses_by_category(current.entries, current.business_type)
        for category, entries in grouped.items():
            subtotal = sum(e.amount for e in entries)
            click.echo(f"{get_category_label(category, current.business_type)}: {format_usd(subtotal)}")
            for entry in entries:
                click.echo(f"  {entry.date}  {format_usd(entry.amount):>12}  {entry.description}")
    else:
        for entry in current.entries:
            click.echo(
                f"{entry.id}  {entry.date}  {format_usd(entry.amount):>12}  "
                f"{entry.description} [{entry.category}]"
            )
    click.echo(f"Total: {format_usd(current.total)}")


@expenses.command("total")
@ledger_option
def expenses_total(ledger):
    """Print the ledger total."""
    current, _path = _load(ledger)
    click.echo(format_usd(current.total))


@expenses.command("remove")
@click.argument("entry_id")
@ledger_option
def expenses_remove(entry_id, ledger):
    """Remove the entry with ENTRY_ID."""
    current, path = _load(ledger)
    if not current.remove(entry_id):
        raise click.ClickException(f"No expense with id '{entry_id}'")
    save_ledger(current, path)
    click.echo(f"Removed {entry_id}")


@expenses.command("categorize")
@click.argument("description")
@click.option("--amount", type=float, default=0.0, help="Amount (context for the AI prompt)")
@click.option("--business-type", type=click.Choice(BUSINESS_TYPES), default=None,
              help="Business type (default: the ledger's)")
@click.option("--ai/--no-ai", "use_ai", default=None, help="Try the Gemini CLI first")
@ledger_option
def expenses_categorize(description, amount, business_type, use_ai, ledger):
    """Suggest a category for DESCRIPTION without logging it."""
    if business_type is None:
        business_type = _load(ledger)[0].business_type

    suggestion = _categorize(description, amount, business_type, use_ai)
    if suggestion.category is None:
        click.echo(f"No suggestion ({suggestion.reasoning})")
        return
    click.echo(f"{suggestion.category}: {get_category_label(suggestion.category, business_type)}")
    click.echo(f"  confidence: {suggestion.confidence:.0%} ({suggestion.source})")
    click.echo(f"  {suggestion.reasoning}")


@expenses.command("parse")
@click.argument("text")
@click.option("--add", "add_entry", is_flag=True, help="Log the parsed expense to the ledger")
@click.option("--date", "entry_date", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Expense date YYYY-MM-DD when adding (default: today)")
@click.option("--ai/--no-ai", "use_ai", default=None, help="Try the Gemini CLI first")
@ledger_option
def expenses_parse(text, add_entry, entry_date, use_ai, ledger):
    """Parse a free-text expense like "spent $42.50 on gas".

    Without a category from the parser, the keyword rules suggest one.

    \b
    Examples:
        quarterly-calc expenses parse "spent 50 on gas"
        quarterly-calc expenses parse "USPS labels $18.40" --add
    """
    current, path = _load(ledger)
    business_type = current.business_type

    try:
        parsed = parse_expense_text(text, business_type, use_ai=use_ai)
    except ValueError as e:
        raise click.ClickException(str(e))

    category = parsed.category
    if category is None:
        category = _categorize(parsed.description, parsed.amount, business_type, use_ai=False).category

    click.echo(f"Description: {parsed.description}")
    click.echo(f"Amount:      {format_usd(parsed.amount)}")
    click.echo(f"Category:    {category or '(none)'}")
    click.echo(f"Parsed by:   {parsed.source}")

    if not add_entry:
        return
    if category is None:
        raise click.ClickException("No category found; use 'quarterly-calc expenses add' with --category.")

    day = (entry_date.date() if entry_date else date_cls.today()).isoformat()
    try:
        entry = ExpenseEntry(
            date=day,
            category=category,
            description=parsed.description,
            amount=parsed.amount,
            business_type=business_type,
        )
    except ValidationError as e:
        raise click.ClickException(f"Invalid expense:\n{e}")
    current.add(entry)
    save_ledger(current, path)
    click.echo(f"Added {entry.id}: {format_usd(entry.amount)} {entry.description}")


@expenses.command("suggest")
@click.option("--business-type", type=click.Choice(BUSINESS_TYPES), default=None,
              help="Business type (default: the ledger's)")
@ledger_option
def expenses_suggest(business_type, ledger):
    """List commonly missed deductible expenses."""
    if business_type is None:
        business_type = _load(ledger)[0].business_type
    for item in suggested_expenses(business_type):
        click.echo(f"  - {item}")


@expenses.command("insights")
@click.option("--income", type=float, required=True, help="Gross business income")
@click.option("--payment", "payments", type=float, multiple=True,
              help="Planned estimated payment (repeat for each installment)")
@click.option("--ai/--no-ai", "use_ai", default=None, help="Try the Gemini CLI first")
@ledger_option
def expenses_insights(income, payments, use_ai, ledger):
    """Planning insights from income, the ledger total, and planned payments.

    \b
    Example:
        quarterly-calc expenses insights --income 60000 --payment 1500 --payment 1500
    """
    current, _path = _load(ledger)
    try:
        insights = generate_insights(income, current.total, list(payments), current.business_type, use_ai=use_ai)
    except ValueError as e:
        raise click.ClickException(str(e))

    if not insights:
        click.echo("No insights - income, expenses and payments look consistent.")
        return
    for insight in insights:
        click.echo(f"[{insight.type.upper()}] {insight.title}")
        click.echo(f"  {insight.message}")
        if insight.impact:
            click.echo(f"  {insight.impact}")
