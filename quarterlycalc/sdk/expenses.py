"""Business expense ledger.

Expenses are logged per business type against a fixed category taxonomy.
The ledger total is subtracted from gross business income before Inputs
is built (see estimate.build_inputs); the tax math never sees expenses.
"""

import json
import logging
import secrets
import time
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Literal, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, model_validator

logger = logging.getLogger(__name__)

BusinessType = Literal["ecommerce", "rideshare", "consultant"]

BUSINESS_TYPES: tuple[str, ...] = ("ecommerce", "rideshare", "consultant")

STANDARD_MILEAGE_RATE_2025 = 0.67  # dollars per mile

# business type -> group label -> {category key: label}
EXPENSE_CATEGORIES: Dict[str, Dict[str, Dict[str, str]]] = {
    "ecommerce": {
        "Cost of Goods Sold": {
            "cogs_inventory": "Inventory",
            "cogs_returns": "Returns & refunds",
            "cogs_shipping": "Shipping cost of goods to you",
        },
        "Shipping & Fulfillment": {
            "shipping_postage": "Postage and courier fees",
            "shipping_fulfillment": "Fulfillment fees",
            "shipping_storage": "Storage fees",
            "shipping_restocking": "Restocking costs",
        },
        "Platform & Transaction Fees": {
            "fees_marketplace": "Marketplace fees",
            "fees_payment": "Payment processor fees",
            "fees_subscription": "Subscription fees",
        },
        "Marketing & Advertising": {
            "marketing_ads": "Paid ads",
            "marketing_influencer": "Influencer partnerships",
            "marketing_seo": "SEO tools and keyword subscriptions",
            "marketing_content": "Content creation",
        },
        "Software & Tools": {
            "software_platform": "Ecommerce platform fees",
            "software_accounting": "Accounting software (QuickBooks)",
            "software_analytics": "Analytics dashboards",
        },
        "Business Operations": {
            "operations_licenses": "Business licenses & permits",
            "operations_professional": "Professional services (legal, tax prep, consultants)",
            "operations_office": "Office supplies (printer, labels, paper)",
            "operations_utilities": "Internet, phone, utilities (if home office)",
        },
    },
    "rideshare": {
        "Car & Vehicle Expenses": {
            "vehicle_mileage": "Mileage (standard rate or actual)",
            "vehicle_gas": "Gas, oil changes, repairs, tires",
            "vehicle_maintenance": "Lease payments or depreciation",
            "vehicle_insurance": "Insurance (business-use portion)",
            "vehicle_registration": "Registration, license plate fees",
        },
        "Platform Fees & Commissions": {
            "rideshare_commissions": "Uber, Lyft, DoorDash service fees",
        },
        "Supplies & Equipment": {
            "rideshare_supplies": "Phone mounts, chargers, delivery bags",
            "rideshare_phone": "Cell phone bill (business portion)",
        },
        "Other Expenses": {
            "rideshare_tolls": "Tolls, parking, car washes",
            "rideshare_professional": "Tax prep, legal advice",
            "rideshare_other": "Background checks, roadside assistance",
        },
    },
    "consultant": {
        "Advertising & Marketing": {
            "consultant_advertising": "Website hosting, business cards, LinkedIn ads",
        },
        "Travel & Meals": {
            "consultant_travel": "Mileage, airfare, hotels for client visits",
            "consultant_meals": "Meals while traveling (50% deductible)",
        },
        "Fees & Commissions": {
            "consultant_fees": "Payment processor, marketplace fees",
        },
        "Contract Labor & Equipment": {
            "consultant_contractors": "Subcontractors, virtual assistants",
            "consultant_equipment": "Laptops, monitors, office furniture",
        },
        "Professional Services": {
            "consultant_insurance": "Professional liability insurance",
            "consultant_professional": "Tax prep, legal consulting",
        },
        "Office & Operations": {
            "consultant_office": "Office supplies, software tools",
            "consultant_rent": "Coworking spaces, office rental",
            "consultant_repairs": "Computer servicing, equipment repairs",
            "consultant_supplies": "Books, reference materials, client deliverables",
            "consultant_licenses": "Business licenses, permits",
            "consultant_utilities": "Internet, phone, cloud storage",
        },
        "Education & Development": {
            "consultant_education": "Courses, certifications, memberships",
            "consultant_other": "Networking events, trade journals",
        },
    },
}


def categories_for(business_type: str) -> Dict[str, str]:
    """Flat {category key: label} mapping for a business type."""
    flat = {}
    for group in EXPENSE_CATEGORIES.get(business_type, {}).values():
        flat.update(group)
    return flat


def generate_expense_id() -> str:
    """Short unique id: base-36 millisecond timestamp plus random suffix."""
    millis = int(time.time() * 1000)
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    stamp = ""
    while millis:
        millis, r = divmod(millis, 36)
        stamp = digits[r] + stamp
    return stamp + secrets.token_hex(4)


class ExpenseEntry(BaseModel):
    """A single logged business expense."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(default_factory=generate_expense_id)
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$", description="YYYY-MM-DD")
    category: str
    description: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    business_type: BusinessType

    @model_validator(mode="after")
    def check_category(self) -> "ExpenseEntry":
        if self.category not in categories_for(self.business_type):
            raise ValueError(
                f"Category '{self.category}' is not a {self.business_type} expense category"
            )
        return self


class ExpenseLedger(BaseModel):
    """All logged expenses plus the currently selected business type."""

    model_config = ConfigDict(extra="forbid")

    business_type: BusinessType = "consultant"
    entries: List[ExpenseEntry] = Field(default_factory=list)

    def add(self, entry: ExpenseEntry) -> ExpenseEntry:
        self.entries.append(entry)
        return entry

    def remove(self, entry_id: str) -> bool:
        before = len(self.entries)
        self.entries = [e for e in self.entries if e.id != entry_id]
        return len(self.entries) < before

    @property
    def total(self) -> float:
        return get_total_expenses(self.entries)


def get_total_expenses(entries: Sequence[ExpenseEntry]) -> float:
    return sum(entry.amount for entry in entries)


def get_expenses_by_category(
    entries: Sequence[ExpenseEntry], business_type: str
) -> Dict[str, List[ExpenseEntry]]:
    """Group one business type's entries by category key (insertion order)."""
    grouped: Dict[str, List[ExpenseEntry]] = defaultdict(list)
    for entry in entries:
        if entry.business_type == business_type:
            grouped[entry.category].append(entry)
    return dict(grouped)


def get_category_label(category: str, business_type: str) -> str:
    """Human-readable label, or the key itself if unknown."""
    return categories_for(business_type).get(category, category)


def calculate_mileage_deduction(miles: float, use_standard_rate: bool = True) -> float:
    """Standard mileage deduction. Actual-expense method is logged as separate entries."""
    return miles * STANDARD_MILEAGE_RATE_2025 if use_standard_rate else 0.0


def load_ledger(path: Optional[Path] = None) -> ExpenseLedger:
    """Load the ledger from JSON. A missing file yields an empty ledger.

    Raises:
        ValueError: If the file is not valid JSON
        pydantic.ValidationError: If entries fail validation
    """
    if path is None:
        from .config import get_ledger_path
        path = get_ledger_path()
    path = Path(path)

    if not path.exists():
        logger.debug(f"No ledger at {path}, starting empty")
        return ExpenseLedger()

    with open(path, "r") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in ledger {path}: {e}") from e
    return ExpenseLedger.model_validate(raw)


def save_ledger(ledger: ExpenseLedger, path: Optional[Path] = None) -> Path:
    """Write the ledger as JSON, creating parent directories."""
    if path is None:
        from .config import get_ledger_path
        path = get_ledger_path()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        json.dump(ledger.model_dump(), f, indent=2)
    return path
