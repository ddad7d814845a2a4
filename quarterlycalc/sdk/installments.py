"""Estimated payment installment allocation.

Amounts are split in integer cents so the installments always add up to
the rounded total exactly. Leftover cents from the floor division go to the
last installment first, then the one before it, and so on.
"""

import logging
import math
from datetime import date
from typing import Optional, Sequence

from .schemas import Installment, InstallmentSchedule

logger = logging.getLogger(__name__)

# Annualized split used when there are exactly four installments
ANNUALIZED_WEIGHTS = (30, 30, 20, 20)


def to_cents(amount: float) -> int:
    """Convert dollars to whole cents, halves rounding up, floored at 0."""
    return max(0, math.floor(amount * 100 + 0.5))


def installment_weights(count: int, weighted: bool) -> list[int]:
    """Integer weights per installment: 30/30/20/20 for a weighted 4-way split, else equal."""
    if weighted and count == len(ANNUALIZED_WEIGHTS):
        return list(ANNUALIZED_WEIGHTS)
    return [1] * count


def allocate_cents(total_amount: float, count: int, weighted: bool = False) -> list[int]:
    """Split total_amount into count installments, in cents.

    Args:
        total_amount: Dollar amount to distribute (negative treated as 0)
        count: Number of installments (due dates)
        weighted: Use the annualized 30/30/20/20 split (only applies when count == 4)

    Returns:
        List of count integer-cent amounts summing exactly to to_cents(total_amount)
    """
    if count <= 0:
        return []

    total_cents = to_cents(total_amount)
    if total_cents == 0:
        return [0] * count

    weights = installment_weights(count, weighted)
    weight_sum = sum(weights)
    allocations = [total_cents * w // weight_sum for w in weights]

    remainder = total_cents - sum(allocations)
    idx = count - 1
    while remainder > 0:
        allocations[idx] += 1
        remainder -= 1
        idx = count - 1 if idx == 0 else idx - 1

    return allocations


def allocate(total_amount: float, count: int, weighted: bool = False) -> list[float]:
    """Split total_amount into count installments, in dollars. See allocate_cents()."""
    return [cents / 100 for cents in allocate_cents(total_amount, count, weighted)]


def build_schedule(
    total_amount: float,
    due_dates: Sequence[date],
    weighted: bool = False,
) -> InstallmentSchedule:
    """Pair each due date with its allocated amount."""
    cents = allocate_cents(total_amount, len(due_dates), weighted)
    use_weights = weighted and len(due_dates) == len(ANNUALIZED_WEIGHTS)
    if weighted and not use_weights:
        logger.debug(f"Annualized split needs 4 due dates, got {len(due_dates)}; splitting equally")

    installments = [
        Installment(number=i + 1, due_date=due, amount=amount / 100)
        for i, (due, amount) in enumerate(zip(due_dates, cents))
    ]
    return InstallmentSchedule(
        installments=installments,
        total=sum(cents) / 100,
        weighted=use_weights,
    )


def next_due_date(due_dates: Sequence[date], today: Optional[date] = None) -> Optional[date]:
    """First due date after today; the last one if all have passed; None if no dates."""
    if not due_dates:
        return None
    today = today or date.today()
    for due in due_dates:
        if due > today:
            return due
    return due_dates[-1]
