"""Quarterly Calc SDK - Core functionality for estimated tax planning."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    unset_setting,
    known_settings,
    get_data_path,
    get_ledger_path,
    INSTALLMENT_STYLES,
)

from .taxes import (
    FilingStatus,
    TaxRules,
    TaxRulesNotFoundError,
    load_tax_rules,
    get_available_years,
    compute_income_tax,
    compute_se_tax,
    compute_child_credits,
)

from .schemas import (
    Inputs,
    SafeHarborMode,
    LiabilitySummary,
    Installment,
    InstallmentSchedule,
    Estimate,
)

from .liability import aggregate

from .installments import (
    allocate,
    allocate_cents,
    build_schedule,
    next_due_date,
    to_cents,
)

from .estimate import (
    build_inputs,
    generate_estimate,
    resolve_year,
)

from .expenses import (
    BusinessType,
    BUSINESS_TYPES,
    EXPENSE_CATEGORIES,
    ExpenseEntry,
    ExpenseLedger,
    load_ledger,
    save_ledger,
    get_total_expenses,
)

from .categorize import (
    Categorization,
    ParsedExpense,
    categorize_expense,
    parse_expense_text,
    suggested_expenses,
)

from .insights import (
    Insight,
    generate_insights,
)

from .export import (
    format_usd,
    estimate_to_csv_string,
    write_estimate_csv,
    format_estimate_text,
    build_ics,
    schedule_to_ics_files,
)

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "unset_setting",
    "known_settings",
    "get_data_path",
    "get_ledger_path",
    "INSTALLMENT_STYLES",
    # Tax rules and calculators
    "FilingStatus",
    "TaxRules",
    "TaxRulesNotFoundError",
    "load_tax_rules",
    "get_available_years",
    "compute_income_tax",
    "compute_se_tax",
    "compute_child_credits",
    # Schemas
    "Inputs",
    "SafeHarborMode",
    "LiabilitySummary",
    "Installment",
    "InstallmentSchedule",
    "Estimate",
    # Liability
    "aggregate",
    # Installments
    "allocate",
    "allocate_cents",
    "build_schedule",
    "next_due_date",
    "to_cents",
    # Estimate
    "build_inputs",
    "generate_estimate",
    "resolve_year",
    # Expenses
    "BusinessType",
    "BUSINESS_TYPES",
    "EXPENSE_CATEGORIES",
    "ExpenseEntry",
    "ExpenseLedger",
    "load_ledger",
    "save_ledger",
    "get_total_expenses",
    # Categorization
    "Categorization",
    "ParsedExpense",
    "categorize_expense",
    "parse_expense_text",
    "suggested_expenses",
    # Insights
    "Insight",
    "generate_insights",
    # Export
    "format_usd",
    "estimate_to_csv_string",
    "write_estimate_csv",
    "format_estimate_text",
    "build_ics",
    "schedule_to_ics_files",
]
