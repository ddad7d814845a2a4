"""Planning insights from income, logged expenses and estimated payments.

Narrative hints only. They read the ledger total and the computed
installments; nothing here changes the tax math.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Optional, Sequence

from quarterlycalc import gemini_client

from .categorize import gemini_enabled
from .taxes import round_to_dollar

logger = logging.getLogger(__name__)

INSIGHT_TYPES = ("warning", "suggestion", "info")

HIGH_EXPENSE_RATIO = 0.70
MIN_PAYMENT_SHARE = 0.25  # of net income
UNDERPAYMENT_PENALTY_RATE = 0.05
RIDESHARE_TYPICAL_EXPENSE_SHARE = 0.30
RIDESHARE_TARGET_EXPENSE_SHARE = 0.40
ECOMMERCE_TYPICAL_EXPENSE_SHARE = 0.40


@dataclass
class Insight:
    type: str  # "warning", "suggestion", or "info"
    title: str
    message: str
    impact: str = ""
    source: str = "rules"  # "ai" or "rules"

    def to_dict(self) -> dict:
        return asdict(self)


def rule_insights(
    total_income: float,
    total_expenses: float,
    quarterly_payments: Sequence[float],
    business_type: str,
) -> list[Insight]:
    """Deterministic insights.

    - expenses above 70% of income
    - estimated payments below 25% of net income (with a 5% penalty estimate)
    - rideshare expenses below 30% of income
    - ecommerce expenses below 40% of income
    """
    insights = []
    net_income = total_income - total_expenses
    total_payments = sum(quarterly_payments)

    if total_income > 0 and total_expenses / total_income > HIGH_EXPENSE_RATIO:
        insights.append(Insight(
            type="warning",
            title="High Expense Ratio",
            message=(
                f"Your expenses are {round_to_dollar(total_expenses / total_income * 100)}% of income. "
                "Consider reviewing for potential audit flags."
            ),
            impact="May trigger IRS scrutiny if ratio seems unreasonable for your business type.",
        ))

    required = net_income * MIN_PAYMENT_SHARE
    if total_payments < required:
        penalty = round_to_dollar((required - total_payments) * UNDERPAYMENT_PENALTY_RATE)
        insights.append(Insight(
            type="warning",
            title="Underpayment Risk",
            message="Your quarterly payments may be too low. Consider increasing payments to avoid penalties.",
            impact=f"Potential underpayment penalty of ${penalty:,}.",
        ))

    if business_type == "rideshare" and total_expenses < total_income * RIDESHARE_TYPICAL_EXPENSE_SHARE:
        additional = round_to_dollar(total_income * RIDESHARE_TARGET_EXPENSE_SHARE - total_expenses)
        insights.append(Insight(
            type="suggestion",
            title="Track Vehicle Expenses",
            message=(
                "Rideshare drivers typically have 30-50% deductible expenses. "
                "Ensure you're tracking all vehicle costs."
            ),
            impact=f"Could potentially deduct an additional ${additional:,}",
        ))

    if business_type == "ecommerce" and total_expenses < total_income * ECOMMERCE_TYPICAL_EXPENSE_SHARE:
        insights.append(Insight(
            type="suggestion",
            title="Review COGS and Fees",
            message="E-commerce businesses often have 40-60% in cost of goods sold and platform fees.",
            impact="Review inventory costs, shipping, and marketplace fees for missed deductions.",
        ))

    return insights


def _build_prompt(total_income, total_expenses, quarterly_payments, business_type) -> str:
    payments = ", ".join(f"${p:,.2f}" for p in quarterly_payments) or "none"
    return (
        f"As a tax advisor, analyze this {business_type} business financial data:\n\n"
        f"Total Income: ${total_income:,.2f}\n"
        f"Total Expenses: ${total_expenses:,.2f}\n"
        f"Quarterly Payments: {payments}\n\n"
        "Provide 3-5 specific tax insights in this format:\n"
        '{"insights": [{"type": "warning|suggestion|info", "title": "Brief title", '
        '"message": "Detailed advice", "impact": "Financial impact description"}]}\n\n'
        "Focus on quarterly tax planning, deduction optimization, and business-specific advice."
    )


def ai_insights(
    total_income: float,
    total_expenses: float,
    quarterly_payments: Sequence[float],
    business_type: str,
) -> list[Insight]:
    """Ask the Gemini CLI for insights.

    Raises:
        RuntimeError: If the CLI is unavailable or fails
        ValueError: If the answer has no well-formed insights
    """
    answer = gemini_client.process_prompt(
        _build_prompt(total_income, total_expenses, quarterly_payments, business_type)
    )
    items = answer.get("insights")
    if not isinstance(items, list):
        raise ValueError("Gemini answer has no 'insights' list")

    insights = []
    for item in items:
        if not isinstance(item, dict) or item.get("type") not in INSIGHT_TYPES:
            continue
        if not item.get("title") or not item.get("message"):
            continue
        insights.append(Insight(
            type=item["type"],
            title=str(item["title"]),
            message=str(item["message"]),
            impact=str(item.get("impact") or ""),
            source="ai",
        ))
    if not insights:
        raise ValueError("Gemini returned no usable insights")
    return insights


def generate_insights(
    total_income: float,
    total_expenses: float,
    quarterly_payments: Sequence[float],
    business_type: str,
    use_ai: Optional[bool] = None,
) -> list[Insight]:
    """Planning insights for a business.

    Args:
        total_income: Gross business income
        total_expenses: Logged expense total
        quarterly_payments: Planned estimated payments
        business_type: ecommerce, rideshare, or consultant
        use_ai: Try Gemini first. Defaults to the ai_categorization setting.
    """
    if gemini_enabled(use_ai):
        try:
            return ai_insights(total_income, total_expenses, quarterly_payments, business_type)
        except (RuntimeError, ValueError) as e:
            logger.warning(f"AI insights failed, using built-in rules: {e}")

    return rule_insights(total_income, total_expenses, quarterly_payments, business_type)
