"""Pydantic schemas for estimate inputs and results.

All schemas use extra='forbid' to reject unknown fields, ensuring
typos in input files cause clear errors rather than silent ignoring.
Inputs and results are frozen: a new calculation is a new value.
"""

from datetime import date
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field

from .taxes.schemas import CreditsResult, FilingStatus, SETaxResult


SafeHarborMode = Literal["current", "prior100", "prior110"]


# =============================================================================
# Inputs
# =============================================================================


class Inputs(BaseModel):
    """Household and income snapshot for one estimate.

    Field constraints are enforced here, at construction. The calculators
    assume a valid Inputs and do not check again.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    filing_status: FilingStatus = Field(default="single")
    w2_wages: float = Field(default=0, ge=0, description="W-2 Box 1 wages")
    w2_withheld: float = Field(default=0, ge=0, description="Federal income tax withheld (W-2 Box 2)")
    net_business_income: float = Field(
        default=0,
        description="Business income after expenses. May be negative (a loss).",
    )
    other_income: float = Field(default=0, ge=0, description="Interest, dividends, other taxable income")
    dependents_under_17: int = Field(default=0, ge=0, description="Qualifying children for the child tax credit")
    other_dependents: int = Field(default=0, ge=0, description="Dependents eligible for the $500 credit")
    use_alternate_child_credit: bool = Field(
        default=False, description="Use the alternate per-child credit amount ($2,200)"
    )
    safe_harbor_mode: SafeHarborMode = Field(default="current")
    prior_year_total_tax: float = Field(default=0, ge=0, description="Prior year Form 1040 line 24")


class LiabilitySummary(BaseModel):
    """Everything the aggregator derives from one Inputs value."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    total_income: float
    earned_income: float
    standard_deduction: float
    half_se_deduction: float
    taxable_income: float
    income_tax: float = Field(..., description="Income tax before credits")
    nonrefundable_credit_used: float
    income_tax_after_credits: float
    se_tax: SETaxResult
    credits: CreditsResult
    actc: float = Field(..., description="Refundable additional child tax credit")
    total_tax_liability: float = Field(..., description="Not floored; negative means overpayment")
    safe_harbor_100: float
    safe_harbor_110: float
    safe_harbor_target: float
    w2_withheld: float
    amount_due_after_withholding: float
    warnings: List[str] = Field(default_factory=list)

    @property
    def is_overpayment(self) -> bool:
        """True when refundable credits exceed the tax owed."""
        return self.total_tax_liability < 0


# =============================================================================
# Installments
# =============================================================================


class Installment(BaseModel):
    """One estimated payment."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    number: int = Field(..., ge=1)
    due_date: date
    amount: float = Field(..., ge=0)


class InstallmentSchedule(BaseModel):
    """Ordered estimated payments. Amounts sum to total, to the cent."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    installments: List[Installment] = Field(default_factory=list)
    total: float = Field(..., ge=0, description="Amount distributed, rounded to the cent")
    weighted: bool = Field(default=False, description="30/30/20/20 annualized split was used")

    @property
    def total_cents(self) -> int:
        return sum(round(i.amount * 100) for i in self.installments)

    @property
    def amounts(self) -> List[float]:
        return [i.amount for i in self.installments]


class Estimate(BaseModel):
    """Result of one calculation request."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int
    inputs: Inputs
    summary: LiabilitySummary
    schedule: InstallmentSchedule
