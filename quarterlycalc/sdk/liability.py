"""Total tax liability and safe-harbor target for one Inputs value."""

from .schemas import Inputs, LiabilitySummary
from .taxes import (
    TaxRules,
    compute_child_credits,
    compute_income_tax,
    compute_se_tax,
    per_child_amount_for,
    round_to_dollar,
)

PRIOR_YEAR_110_FACTOR = 1.10


def safe_harbor_target(mode: str, total_tax_liability: float, prior_year_total_tax: float) -> float:
    """Required annual payment for the selected safe-harbor mode."""
    if mode == "prior100":
        return prior_year_total_tax
    if mode == "prior110":
        return round_to_dollar(prior_year_total_tax * PRIOR_YEAR_110_FACTOR)
    return total_tax_liability


def aggregate(inputs: Inputs, rules: TaxRules) -> LiabilitySummary:
    """Combine income tax, SE tax and credits into a liability summary.

    The total liability is not floored: refundable ACTC larger than the tax
    owed leaves it negative (an overpayment). Only the amount due after
    withholding is floored at zero.
    """
    status = inputs.filing_status
    warnings = []

    total_income = inputs.w2_wages + inputs.net_business_income + inputs.other_income
    earned_income = inputs.w2_wages + max(0.0, inputs.net_business_income)

    se = compute_se_tax(inputs.net_business_income, inputs.w2_wages, status, rules)
    standard_deduction = rules.for_status(status).standard_deduction
    taxable_income = max(0.0, total_income - standard_deduction - se.half_se_deduction)
    income_tax = compute_income_tax(taxable_income, status, rules)

    credits = compute_child_credits(
        status,
        earned_income,
        inputs.dependents_under_17,
        inputs.other_dependents,
        per_child_amount_for(inputs.use_alternate_child_credit, rules),
        rules.child_credit.refundable_cap_per_child,
    )
    nonrefundable_available = credits.nonrefundable_child_credit + credits.other_dependent_credit
    nonrefundable_used = min(income_tax, nonrefundable_available)
    income_tax_after_credits = max(0, income_tax - nonrefundable_used)

    # Child credit is applied ahead of the other-dependent credit
    child_remaining = max(
        0.0, credits.nonrefundable_child_credit - min(income_tax, credits.nonrefundable_child_credit)
    )
    actc = min(credits.actc_income_limit, credits.actc_cap, child_remaining)

    total_tax_liability = income_tax_after_credits + se.total - actc

    safe_harbor_100 = inputs.prior_year_total_tax
    safe_harbor_110 = round_to_dollar(inputs.prior_year_total_tax * PRIOR_YEAR_110_FACTOR)
    target = safe_harbor_target(inputs.safe_harbor_mode, total_tax_liability, inputs.prior_year_total_tax)
    amount_due = max(0.0, target - inputs.w2_withheld)

    if inputs.net_business_income < 0:
        warnings.append(
            f"Business loss of ${-inputs.net_business_income:,.2f} reduces total income; "
            f"no net operating loss limitation is applied."
        )
    if total_tax_liability < 0:
        warnings.append(
            f"Refundable credits exceed tax owed by ${-total_tax_liability:,.2f} (overpayment)."
        )

    return LiabilitySummary(
        total_income=total_income,
        earned_income=earned_income,
        standard_deduction=standard_deduction,
        half_se_deduction=se.half_se_deduction,
        taxable_income=taxable_income,
        income_tax=income_tax,
        nonrefundable_credit_used=nonrefundable_used,
        income_tax_after_credits=income_tax_after_credits,
        se_tax=se,
        credits=credits,
        actc=actc,
        total_tax_liability=total_tax_liability,
        safe_harbor_100=safe_harbor_100,
        safe_harbor_110=safe_harbor_110,
        safe_harbor_target=target,
        w2_withheld=inputs.w2_withheld,
        amount_due_after_withholding=amount_due,
        warnings=warnings,
    )
