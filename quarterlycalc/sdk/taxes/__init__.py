"""taxes - Federal tax tables and calculators.

Scope:
- Federal tax rules and brackets per filing status
- Income tax from progressive brackets
- Self-employment tax (OASDI, Medicare, Additional Medicare)
- Child tax credit, credit for other dependents, ACTC limits

Constraints:
- Pure calculation - no I/O, no settings, no shared state
- Rules are passed explicitly; nothing looks them up globally
- Year-specific rules loaded from tax_rules/{year}.yaml

Usage:
    from quarterlycalc.sdk.taxes import load_tax_rules, compute_se_tax

    rules = load_tax_rules("2025")
    se = compute_se_tax(42000, 8000, "single", rules)
"""

from .schemas import (
    FILING_STATUSES,
    ChildCreditRules,
    CreditsResult,
    FilingStatus,
    FilingStatusRules,
    SelfEmploymentRules,
    SETaxResult,
    SocialSecurityRules,
    TaxBracket,
    TaxRules,
)

from .rules import (
    TaxRulesNotFoundError,
    get_available_years,
    get_latest_year,
    load_tax_rules,
    load_tax_rules_file,
)

from .income_tax import (
    BracketRow,
    bracket_breakdown,
    compute_income_tax,
    marginal_rate,
    round_to_dollar,
)

from .se_tax import compute_se_tax

from .credits import (
    ACTC_EARNED_INCOME_THRESHOLD,
    ACTC_PHASE_IN_RATE,
    OTHER_DEPENDENT_CREDIT,
    compute_child_credits,
    per_child_amount_for,
)

__all__ = [
    # Schemas
    "FILING_STATUSES",
    "ChildCreditRules",
    "CreditsResult",
    "FilingStatus",
    "FilingStatusRules",
    "SelfEmploymentRules",
    "SETaxResult",
    "SocialSecurityRules",
    "TaxBracket",
    "TaxRules",
    # Rules loading
    "TaxRulesNotFoundError",
    "get_available_years",
    "get_latest_year",
    "load_tax_rules",
    "load_tax_rules_file",
    # Income tax
    "BracketRow",
    "bracket_breakdown",
    "compute_income_tax",
    "marginal_rate",
    "round_to_dollar",
    # SE tax
    "compute_se_tax",
    # Credits
    "ACTC_EARNED_INCOME_THRESHOLD",
    "ACTC_PHASE_IN_RATE",
    "OTHER_DEPENDENT_CREDIT",
    "compute_child_credits",
    "per_child_amount_for",
]
