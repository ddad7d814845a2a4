"""Quarterly Calc MCP Server - FastMCP implementation for estimated tax tools."""

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field, ValidationError

from quarterlycalc.sdk import (
    TaxRulesNotFoundError,
    allocate,
    build_inputs,
    categorize_expense as sdk_categorize_expense,
    generate_estimate,
    generate_insights,
    get_available_years,
    parse_expense_text,
    suggested_expenses,
)

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("quarterly-calc")


# --- Tools ---

@mcp.tool()
async def estimate_quarterly_taxes(
    filing_status: str = Field(default="single", description="single, mfj, mfs, or hoh"),
    w2_wages: float = Field(default=0, description="W-2 wages (Box 1)"),
    w2_withheld: float = Field(default=0, description="Federal income tax withheld on W-2s (Box 2)"),
    net_business_income: float = Field(default=0, description="Business income; net of expenses unless business_expenses is given"),
    business_expenses: float = Field(default=0, description="Total business expenses to subtract from net_business_income"),
    other_income: float = Field(default=0, description="Interest, dividends, other taxable income"),
    dependents_under_17: int = Field(default=0, description="Qualifying children under 17"),
    other_dependents: int = Field(default=0, description="Other dependents ($500 credit each)"),
    use_alternate_child_credit: bool = Field(default=False, description="Use the $2,200 per-child amount"),
    safe_harbor_mode: str = Field(default="current", description="current, prior100, or prior110"),
    prior_year_total_tax: float = Field(default=0, description="Prior year total tax (Form 1040 line 24)"),
    year: str | None = Field(default=None, description="Tax year (default: settings, else latest rules)"),
    annualized: bool | None = Field(default=None, description="30/30/20/20 split instead of equal installments"),
) -> dict[str, Any]:
    """Estimate federal tax liability and the quarterly payment schedule for a household."""
    try:
        inputs = build_inputs(
            net_business_income,
            business_expenses,
            filing_status=filing_status,
            w2_wages=w2_wages,
            w2_withheld=w2_withheld,
            other_income=other_income,
            dependents_under_17=dependents_under_17,
            other_dependents=other_dependents,
            use_alternate_child_credit=use_alternate_child_credit,
            safe_harbor_mode=safe_harbor_mode,
            prior_year_total_tax=prior_year_total_tax,
        )
        estimate = generate_estimate(inputs, year=year, weighted=annualized)
        return estimate.model_dump(mode="json")
    except (ValidationError, ValueError, TaxRulesNotFoundError) as e:
        return {"error": str(e), "summary": None, "schedule": None}
    except Exception as e:
        logger.error(f"Error estimating taxes: {e}")
        return {"error": str(e), "summary": None, "schedule": None}


@mcp.tool()
async def allocate_installments(
    amount: float = Field(description="Total amount to split, in dollars"),
    count: int = Field(default=4, description="Number of installments"),
    annualized: bool = Field(default=False, description="30/30/20/20 split (only applies when count is 4)"),
) -> dict[str, Any]:
    """Split an amount into installments that sum exactly to the cent."""
    if count < 0:
        return {"error": "count cannot be negative", "installments": []}
    amounts = allocate(amount, count, annualized)
    return {
        "installments": amounts,
        "total": round(sum(amounts), 2),
        "weighted": annualized and count == 4,
    }


@mcp.tool()
async def categorize_expense(
    description: str = Field(description="Expense description"),
    amount: float = Field(default=0, description="Expense amount"),
    business_type: str = Field(default="consultant", description="ecommerce, rideshare, or consultant"),
    use_ai: bool | None = Field(default=None, description="Try the Gemini CLI first (default: settings)"),
) -> dict[str, Any]:
    """Suggest an expense category for a business type. Falls back to keyword rules."""
    try:
        suggestion = sdk_categorize_expense(description, amount, business_type, use_ai=use_ai)
        return {
            "category": suggestion.category,
            "confidence": suggestion.confidence,
            "reasoning": suggestion.reasoning,
            "source": suggestion.source,
        }
    except Exception as e:
        logger.error(f"Error categorizing expense: {e}")
        return {"error": str(e), "category": None}


@mcp.tool()
async def parse_expense(
    text: str = Field(description="Free-text expense, e.g. \"spent $42.50 on gas\""),
    business_type: str = Field(default="consultant", description="ecommerce, rideshare, or consultant"),
    use_ai: bool | None = Field(default=None, description="Try the Gemini CLI first (default: settings)"),
) -> dict[str, Any]:
    """Pull a description, amount and category out of free text. Falls back to regex and keyword rules."""
    try:
        parsed = parse_expense_text(text, business_type, use_ai=use_ai)
        category = parsed.category
        if category is None:
            category = sdk_categorize_expense(parsed.description, parsed.amount, business_type, use_ai=False).category
        return {
            "description": parsed.description,
            "amount": parsed.amount,
            "category": category,
            "source": parsed.source,
            "suggested_expenses": suggested_expenses(business_type),
        }
    except Exception as e:
        logger.error(f"Error parsing expense: {e}")
        return {"error": str(e), "amount": None}


@mcp.tool()
async def tax_insights(
    total_income: float = Field(description="Gross business income"),
    total_expenses: float = Field(default=0, description="Total business expenses"),
    quarterly_payments: list[float] = Field(default_factory=list, description="Planned estimated payments"),
    business_type: str = Field(default="consultant", description="ecommerce, rideshare, or consultant"),
    use_ai: bool | None = Field(default=None, description="Try the Gemini CLI first (default: settings)"),
) -> dict[str, Any]:
    """Planning insights: expense ratio, underpayment risk, and commonly missed deductions."""
    try:
        insights = generate_insights(total_income, total_expenses, quarterly_payments, business_type, use_ai=use_ai)
        return {"insights": [insight.to_dict() for insight in insights]}
    except Exception as e:
        logger.error(f"Error generating insights: {e}")
        return {"error": str(e), "insights": []}


# --- Resources (optional, for browsing) ---

@mcp.resource("quarterlycalc://rules/years")
async def list_years_resource() -> str:
    """List years with bundled tax rules."""
    return json.dumps({"years": get_available_years()}, indent=2)


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
