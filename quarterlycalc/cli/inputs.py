"""Shared CLI options for building estimate Inputs."""

from pathlib import Path
from typing import Optional

import click
import yaml
from pydantic import ValidationError

from quarterlycalc.sdk import Inputs, build_inputs, load_ledger
from quarterlycalc.sdk.expenses import ExpenseLedger
from quarterlycalc.sdk.taxes import FILING_STATUSES

SAFE_HARBOR_CHOICES = ["current", "prior100", "prior110"]

# CLI option name -> Inputs field
_OPTION_FIELDS = {
    "filing_status": "filing_status",
    "w2_wages": "w2_wages",
    "w2_withheld": "w2_withheld",
    "business_income": "net_business_income",
    "other_income": "other_income",
    "children": "dependents_under_17",
    "other_dependents": "other_dependents",
    "alternate_child_credit": "use_alternate_child_credit",
    "safe_harbor": "safe_harbor_mode",
    "prior_year_tax": "prior_year_total_tax",
}


def input_options(func):
    """Decorate a command with the household/income options."""
    options = [
        click.option("--inputs", "inputs_file", type=click.Path(exists=True, dir_okay=False),
                     help="YAML file with input fields (options below override it)"),
        click.option("--filing-status", type=click.Choice(list(FILING_STATUSES)),
                     help="single, mfj, mfs, or hoh (default: single)"),
        click.option("--w2-wages", type=float, help="W-2 wages"),
        click.option("--w2-withheld", type=float, help="Federal income tax withheld on W-2s"),
        click.option("--business-income", type=float,
                     help="Business income; gross when --expenses is given, else net"),
        click.option("--other-income", type=float, help="Other taxable income"),
        click.option("--children", type=int, help="Qualifying children under 17"),
        click.option("--other-dependents", type=int, help="Other dependents"),
        click.option("--alternate-child-credit/--standard-child-credit", default=None,
                     help="Use the $2,200 per-child amount instead of $2,000"),
        click.option("--safe-harbor", type=click.Choice(SAFE_HARBOR_CHOICES), help="Safe harbor mode"),
        click.option("--prior-year-tax", type=float, help="Prior year total tax (Form 1040 line 24)"),
        click.option("--expenses", "expenses_file", type=click.Path(dir_okay=False),
                     help="Expense ledger JSON; its total is subtracted from business income"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _load_inputs_file(path: str) -> dict:
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise click.BadParameter(f"{path} must contain a mapping of input fields", param_hint="--inputs")
    return data


def resolve_inputs(options: dict) -> tuple[Inputs, Optional[ExpenseLedger]]:
    """Build Inputs from --inputs file plus option overrides.

    Pops the input options out of the command's kwargs dict.

    Returns:
        (inputs, ledger) - ledger is None unless --expenses was given
    """
    inputs_file = options.pop("inputs_file", None)
    expenses_file = options.pop("expenses_file", None)

    fields = _load_inputs_file(inputs_file) if inputs_file else {}
    for option_name, field_name in _OPTION_FIELDS.items():
        value = options.pop(option_name, None)
        if value is not None:
            fields[field_name] = value

    ledger = None
    expenses_total = 0.0
    if expenses_file:
        try:
            ledger = load_ledger(Path(expenses_file))
        except (ValueError, ValidationError) as e:
            raise click.ClickException(f"Could not load expense ledger: {e}")
        expenses_total = ledger.total

    gross = fields.pop("net_business_income", 0)
    try:
        inputs = build_inputs(gross, expenses_total, **fields)
    except ValidationError as e:
        raise click.ClickException(f"Invalid inputs:\n{e}")
    except (TypeError, ValueError) as e:
        raise click.ClickException(f"Invalid inputs: {e}")
    return inputs, ledger
