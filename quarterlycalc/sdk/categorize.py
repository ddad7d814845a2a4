"""Expense categorization and free-text expense parsing.

Best-effort: optionally asks the Gemini CLI, and always falls back to
deterministic rules. Suggestions only annotate expense entries; they never
feed into tax math.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from quarterlycalc import gemini_client

from .config import get_setting
from .expenses import categories_for

logger = logging.getLogger(__name__)

KEYWORD_CONFIDENCE = 0.7
NO_MATCH_CONFIDENCE = 0.3

# business type -> ordered (keywords, category); first match wins
KEYWORD_PATTERNS = {
    "ecommerce": [
        (("inventory", "stock", "product", "wholesale"), "cogs_inventory"),
        (("shipping", "postage", "fedex", "ups", "usps"), "shipping_postage"),
        (("amazon", "ebay", "etsy", "marketplace"), "fees_marketplace"),
        (("stripe", "paypal", "payment"), "fees_payment"),
        (("ads", "advertising", "facebook", "google"), "marketing_ads"),
        (("quickbooks", "accounting", "software"), "software_accounting"),
    ],
    "rideshare": [
        (("gas", "gasoline", "fuel"), "vehicle_gas"),
        (("uber", "lyft", "doordash", "commission"), "rideshare_commissions"),
        (("phone", "cellular", "mobile"), "rideshare_phone"),
        (("toll", "parking", "car wash"), "rideshare_tolls"),
        (("charger", "mount", "dash cam"), "rideshare_supplies"),
    ],
    "consultant": [
        (("website", "hosting", "domain"), "consultant_advertising"),
        (("flight", "hotel", "travel", "mileage"), "consultant_travel"),
        (("meal", "lunch", "dinner", "restaurant"), "consultant_meals"),
        (("laptop", "computer", "monitor"), "consultant_equipment"),
        (("office", "supplies", "stationery"), "consultant_office"),
    ],
}

# Common deductible expenses to prompt users with, per business type
SUGGESTED_EXPENSES = {
    "ecommerce": [
        "Amazon seller fees",
        "PayPal transaction fees",
        "Inventory purchase",
        "Shipping supplies",
        "Facebook advertising",
        "QuickBooks subscription",
        "Product photography",
        "Warehouse storage fees",
    ],
    "rideshare": [
        "Gasoline",
        "Uber/Lyft commission",
        "Car maintenance",
        "Phone mount",
        "Car insurance (business portion)",
        "Toll fees",
        "Car wash",
        "Dash cam",
    ],
    "consultant": [
        "Client lunch meeting",
        "Conference registration",
        "LinkedIn Premium",
        "Business cards",
        "Home office internet",
        "Laptop purchase",
        "Professional liability insurance",
        "Coworking space membership",
    ],
}

# First dollar amount in free text: "$25.99", "50"
AMOUNT_PATTERN = re.compile(r"\$?(\d+(?:\.\d{2})?)")


@dataclass
class Categorization:
    """A suggested category with its confidence."""
    category: Optional[str]
    confidence: float
    reasoning: str
    source: str  # "ai", "keyword", or "none"


@dataclass
class ParsedExpense:
    """Description, amount and (maybe) category pulled out of free text."""
    description: str
    amount: float
    category: Optional[str]
    source: str  # "ai" or "regex"


def gemini_enabled(use_ai: Optional[bool] = None) -> bool:
    """Whether to ask Gemini: the argument, else the ai_categorization setting.

    Returns False (with a warning) when AI is requested but the CLI is not
    installed, so callers go straight to their rules.
    """
    if use_ai is None:
        use_ai = bool(get_setting("ai_categorization", False))
    if use_ai and not gemini_client.is_available():
        logger.warning("Gemini CLI not found on PATH, using built-in rules")
        return False
    return use_ai


def _keyword_matches(keyword: str, text: str) -> bool:
    # Keywords must start a word: "ups" matches "UPS label" but not "paper cups"
    return re.search(r"\b" + re.escape(keyword), text) is not None


def keyword_categorize(description: str, business_type: str) -> Categorization:
    """Deterministic keyword match on the lower-cased description."""
    desc = description.lower()
    for keywords, category in KEYWORD_PATTERNS.get(business_type, []):
        if any(_keyword_matches(keyword, desc) for keyword in keywords):
            return Categorization(
                category=category,
                confidence=KEYWORD_CONFIDENCE,
                reasoning=f"Matched keyword pattern for {business_type} business",
                source="keyword",
            )
    return Categorization(
        category=None,
        confidence=NO_MATCH_CONFIDENCE,
        reasoning="No clear category match found",
        source="none",
    )


def _build_prompt(description: str, amount: float, business_type: str) -> str:
    available = "\n".join(f"{key}: {label}" for key, label in categories_for(business_type).items())
    return (
        f"As a tax expert, categorize this business expense for a {business_type} business:\n\n"
        f'Description: "{description}"\n'
        f"Amount: ${amount:,.2f}\n\n"
        f"Available categories:\n{available}\n\n"
        'Answer in this exact format: {"category": "category_key_here", '
        '"confidence": 0.85, "reasoning": "Brief explanation why this category fits"}\n'
        "Choose the most appropriate category key from the list above."
    )


def ai_categorize(description: str, amount: float, business_type: str) -> Categorization:
    """Ask the Gemini CLI for a category.

    Raises:
        RuntimeError: If the CLI is unavailable or fails
        ValueError: If the answer is not a category of this business type
    """
    answer = gemini_client.process_prompt(_build_prompt(description, amount, business_type))
    category = answer.get("category")
    if category not in categories_for(business_type):
        raise ValueError(f"Gemini suggested unknown category: {category!r}")

    try:
        confidence = float(answer.get("confidence", 0.5))
    except (TypeError, ValueError):
        confidence = 0.5
    return Categorization(
        category=category,
        confidence=min(max(confidence, 0.0), 1.0),
        reasoning=str(answer.get("reasoning") or "AI analysis"),
        source="ai",
    )


def categorize_expense(
    description: str,
    amount: float,
    business_type: str,
    use_ai: Optional[bool] = None,
) -> Categorization:
    """Suggest a category for an expense.

    Args:
        description: Free-text expense description
        amount: Expense amount (context for the AI prompt only)
        business_type: ecommerce, rideshare, or consultant
        use_ai: Try Gemini first. Defaults to the ai_categorization setting.
    """
    if gemini_enabled(use_ai):
        try:
            return ai_categorize(description, amount, business_type)
        except (RuntimeError, ValueError) as e:
            logger.warning(f"AI categorization failed, using keyword rules: {e}")

    return keyword_categorize(description, business_type)


def suggested_expenses(business_type: str) -> list[str]:
    """Typical deductible expenses for a business type (empty if unknown)."""
    return list(SUGGESTED_EXPENSES.get(business_type, []))


def regex_parse_expense(text: str) -> ParsedExpense:
    """Take the first dollar amount out of the text; the rest is the description."""
    match = AMOUNT_PATTERN.search(text)
    amount = float(match.group(1)) if match else 0.0
    description = AMOUNT_PATTERN.sub("", text, count=1).strip() or "Expense"
    return ParsedExpense(description=description, amount=amount, category=None, source="regex")


def _build_parse_prompt(text: str, business_type: str) -> str:
    return (
        f"Parse this natural language expense entry for a {business_type} business:\n\n"
        f'"{text}"\n\n'
        "Extract and respond with ONLY a JSON object in this exact format:\n"
        '{"description": "Clean, professional description", "amount": 0.00, '
        '"category": "category_key_or_null"}\n\n'
        f"Valid category keys: {', '.join(categories_for(business_type))}\n\n"
        "Examples:\n"
        '- "spent 50 bucks on gas" -> {"description": "Gasoline", "amount": 50.00, "category": "vehicle_gas"}\n'
        '- "bought office supplies for $25.99" -> {"description": "Office supplies", "amount": 25.99, '
        '"category": "consultant_office"}'
    )


def ai_parse_expense(text: str, business_type: str) -> ParsedExpense:
    """Ask the Gemini CLI to parse free text.

    A category outside the business type's taxonomy is dropped, not trusted.

    Raises:
        RuntimeError: If the CLI is unavailable or fails
        ValueError: If the answer is not a JSON object
    """
    answer = gemini_client.process_prompt(_build_parse_prompt(text, business_type))
    try:
        amount = max(0.0, float(answer.get("amount") or 0))
    except (TypeError, ValueError):
        amount = 0.0
    category = answer.get("category")
    if category not in categories_for(business_type):
        category = None
    return ParsedExpense(
        description=str(answer.get("description") or text).strip(),
        amount=amount,
        category=category,
        source="ai",
    )


def parse_expense_text(text: str, business_type: str, use_ai: Optional[bool] = None) -> ParsedExpense:
    """Turn "spent $42.50 on gas" into a description, amount and category.

    Gemini is tried when enabled; otherwise (or on failure) the first number
    in the text is taken as the amount.
    """
    if gemini_enabled(use_ai):
        try:
            return ai_parse_expense(text, business_type)
        except (RuntimeError, ValueError) as e:
            logger.warning(f"AI expense parsing failed, using regex fallback: {e}")

    return regex_parse_expense(text)
