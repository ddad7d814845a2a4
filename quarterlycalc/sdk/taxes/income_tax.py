"""Federal income tax from the progressive bracket tables."""

import math
from typing import NamedTuple, Optional

from .schemas import FilingStatus, TaxRules


def round_to_dollar(amount: float) -> int:
    """Round to nearest dollar, halves rounding up (0.50 -> 1)."""
    return math.floor(amount + 0.5)


def compute_income_tax(taxable_income: float, status: FilingStatus, rules: TaxRules) -> int:
    """Calculate federal income tax on taxable income.

    Walks the ordered brackets for the filing status, taxing the slice of
    income that falls in each one. Result is rounded to whole dollars and
    never negative.
    """
    if taxable_income <= 0:
        return 0

    remaining = taxable_income
    tax_owed = 0.0
    previous_bracket_max = 0.0

    for bracket in rules.for_status(status).tax_brackets:
        bracket_max = math.inf if bracket.up_to is None else bracket.up_to
        income_in_this_bracket = max(0.0, min(remaining, bracket_max - previous_bracket_max))
        if income_in_this_bracket > 0:
            tax_owed += income_in_this_bracket * bracket.rate
            remaining -= income_in_this_bracket
            previous_bracket_max = bracket_max
        if remaining <= 0:
            break

    return max(0, round_to_dollar(tax_owed))


class BracketRow(NamedTuple):
    lower: float
    upper: Optional[float]
    rate: float
    income_in_bracket: float
    tax: float


def bracket_breakdown(taxable_income: float, status: FilingStatus, rules: TaxRules) -> list[BracketRow]:
    """Per-bracket detail of the income tax computation (unrounded), for reports."""
    rows = []
    lower = 0.0
    for bracket in rules.for_status(status).tax_brackets:
        upper = bracket.up_to
        top = math.inf if upper is None else upper
        income_in_bracket = max(0.0, min(taxable_income, top) - lower)
        rows.append(BracketRow(lower, upper, bracket.rate, income_in_bracket, income_in_bracket * bracket.rate))
        if upper is None:
            break
        lower = upper
    return rows


def marginal_rate(taxable_income: float, status: FilingStatus, rules: TaxRules) -> float:
    """Rate of the bracket the next dollar of taxable income falls into."""
    for bracket in rules.for_status(status).tax_brackets:
        if bracket.up_to is None or taxable_income < bracket.up_to:
            return bracket.rate
    return rules.for_status(status).tax_brackets[-1].rate
