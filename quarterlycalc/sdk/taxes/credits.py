"""Child tax credit, credit for other dependents, and ACTC limits.

Returns raw amounts only. Capping the nonrefundable credits at the tax owed
and picking the refundable ACTC is the aggregator's job.
"""

from .schemas import CreditsResult, FilingStatus, TaxRules

# Statutory amounts, not year-indexed
OTHER_DEPENDENT_CREDIT = 500
ACTC_EARNED_INCOME_THRESHOLD = 2500
ACTC_PHASE_IN_RATE = 0.15


def compute_child_credits(
    status: FilingStatus,
    earned_income: float,
    num_qualifying_children: int,
    num_other_dependents: int,
    per_child_amount: float,
    refundable_cap_per_child: float,
) -> CreditsResult:
    """Calculate child and dependent credit amounts.

    Dependent counts must already be validated as non-negative integers.
    """
    earned_over_threshold = max(0.0, earned_income - ACTC_EARNED_INCOME_THRESHOLD)
    return CreditsResult(
        nonrefundable_child_credit=per_child_amount * num_qualifying_children,
        other_dependent_credit=OTHER_DEPENDENT_CREDIT * num_other_dependents,
        actc_income_limit=ACTC_PHASE_IN_RATE * earned_over_threshold,
        actc_cap=refundable_cap_per_child * num_qualifying_children,
    )


def per_child_amount_for(use_alternate: bool, rules: TaxRules) -> float:
    """Per-child credit amount: the alternate amount when elected."""
    credit = rules.child_credit
    return credit.per_child_alternate if use_alternate else credit.per_child
