"""Estimate generation - the main entry point for one calculation request."""

import logging
from typing import Optional, Union

from .config import get_default_installment_weighted, get_setting
from .installments import build_schedule
from .liability import aggregate
from .schemas import Estimate, Inputs
from .taxes import TaxRules, get_latest_year, load_tax_rules

logger = logging.getLogger(__name__)


def resolve_year(year: Optional[Union[str, int]] = None) -> int:
    """Year to use: explicit argument, then settings tax_year, then latest rules file."""
    if year is not None:
        return int(year)
    configured = get_setting("tax_year")
    if configured is not None:
        return int(configured)
    return get_latest_year()


def build_inputs(gross_business_income: float = 0, expenses_total: float = 0, **fields) -> Inputs:
    """Construct Inputs, netting business expenses against gross business income.

    The expense total is subtracted before Inputs is built; the tax
    calculators never see expenses.

    Raises:
        pydantic.ValidationError: If any field violates its constraints
    """
    if expenses_total < 0:
        raise ValueError(f"Expense total cannot be negative: {expenses_total}")
    return Inputs(net_business_income=gross_business_income - expenses_total, **fields)


def generate_estimate(
    inputs: Inputs,
    year: Optional[Union[str, int]] = None,
    weighted: Optional[bool] = None,
    rules: Optional[TaxRules] = None,
) -> Estimate:
    """Generate liability summary and installment schedule.

    Args:
        inputs: Validated household/income inputs
        year: Tax year. Defaults to settings tax_year, then the latest rules.
            Ignored when rules are passed.
        weighted: Annualized 30/30/20/20 installments. Defaults to the
            installment_style setting.
        rules: Pre-loaded tax rules (loaded from tax_rules/ if not provided)

    Returns:
        Estimate with summary and schedule
    """
    if rules is None:
        rules = load_tax_rules(resolve_year(year))
    if weighted is None:
        weighted = get_default_installment_weighted()

    summary = aggregate(inputs, rules)
    schedule = build_schedule(
        summary.amount_due_after_withholding,
        rules.estimated_payment_due_dates,
        weighted=weighted,
    )
    logger.debug(
        f"Estimate {rules.year}: liability={summary.total_tax_liability:.2f} "
        f"due={summary.amount_due_after_withholding:.2f} over {len(schedule.installments)} installments"
    )

    return Estimate(year=rules.year, inputs=inputs, summary=summary, schedule=schedule)
