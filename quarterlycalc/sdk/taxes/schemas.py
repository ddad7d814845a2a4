"""Pydantic schemas for tax rules validation.

These schemas validate the tax_rules/*.yaml files and provide typed access
to tax parameters like the SS wage base, SE tax rates, and tax brackets.
Models are frozen: a loaded table is never mutated by the calculators.
"""

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


FilingStatus = Literal["single", "mfj", "mfs", "hoh"]

FILING_STATUSES: tuple[str, ...] = ("single", "mfj", "mfs", "hoh")


class TaxBracket(BaseModel):
    """Single tax bracket entry."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    rate: float = Field(..., ge=0, le=1, description="Tax rate as decimal")
    up_to: Optional[float] = Field(default=None, gt=0, description="Upper bound (None for the top bracket)")


class FilingStatusRules(BaseModel):
    """Tax rules for a filing status (mfj, single, etc.)."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    standard_deduction: float = Field(..., ge=0)
    tax_brackets: tuple[TaxBracket, ...] = Field(..., min_length=1)
    additional_medicare_threshold: float = Field(..., ge=0)

    @model_validator(mode="after")
    def check_brackets_partition(self) -> "FilingStatusRules":
        """Brackets must cover [0, inf) in ascending order with no gaps."""
        previous = 0.0
        last_index = len(self.tax_brackets) - 1
        for index, bracket in enumerate(self.tax_brackets):
            if bracket.up_to is None:
                if index != last_index:
                    raise ValueError(
                        f"Unbounded bracket at position {index + 1} must be the last bracket"
                    )
                continue
            if bracket.up_to <= previous:
                raise ValueError(
                    f"Bracket upper bounds must be ascending: {bracket.up_to} <= {previous}"
                )
            previous = bracket.up_to
        if self.tax_brackets[-1].up_to is not None:
            raise ValueError("Last tax bracket must be unbounded (omit up_to)")
        return self


class SocialSecurityRules(BaseModel):
    """Social Security wage base."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    wage_base: float = Field(..., gt=0, description="SS wage base (max taxable)")


class SelfEmploymentRules(BaseModel):
    """Schedule SE rates. Rates are combined employer + employee portions."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    net_earnings_factor: float = Field(default=0.9235, gt=0, le=1)
    oasdi_rate: float = Field(default=0.124, ge=0, le=1)
    medicare_rate: float = Field(default=0.029, ge=0, le=1)
    additional_medicare_rate: float = Field(default=0.009, ge=0, le=1)


class ChildCreditRules(BaseModel):
    """Child tax credit amounts."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    per_child: float = Field(..., ge=0)
    per_child_alternate: float = Field(..., ge=0, description="Per-child amount under the alternate law")
    refundable_cap_per_child: float = Field(..., ge=0, description="ACTC cap per qualifying child")


class TaxRules(BaseModel):
    """Complete tax rules for a year."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int = Field(..., ge=2000)
    single: FilingStatusRules
    mfj: FilingStatusRules
    mfs: FilingStatusRules
    hoh: FilingStatusRules
    social_security: SocialSecurityRules
    self_employment: SelfEmploymentRules = Field(default_factory=SelfEmploymentRules)
    child_credit: ChildCreditRules
    estimated_payment_due_dates: tuple[date, ...] = Field(default=())

    @model_validator(mode="after")
    def check_due_dates_ordered(self) -> "TaxRules":
        dates = self.estimated_payment_due_dates
        if any(later <= earlier for earlier, later in zip(dates, dates[1:])):
            raise ValueError("estimated_payment_due_dates must be strictly ascending")
        return self

    def for_status(self, status: FilingStatus) -> FilingStatusRules:
        """Return the per-status rules (standard deduction, brackets, thresholds)."""
        if status not in FILING_STATUSES:
            raise ValueError(f"Unknown filing status: {status}")
        return getattr(self, status)


class SETaxResult(BaseModel):
    """Schedule SE breakdown."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    oasdi: float = Field(..., description="Social Security portion (12.4% up to the wage base)")
    medicare: float = Field(..., description="Medicare portion (2.9%, uncapped)")
    additional_medicare: float = Field(..., description="Additional Medicare (0.9% over threshold)")
    total: float
    se_taxable_base: float = Field(..., description="Net earnings from self-employment (92.35%)")
    half_se_deduction: float = Field(..., description="Above-the-line deduction: half of OASDI + Medicare")


class CreditsResult(BaseModel):
    """Raw child and dependent credit amounts before the tax-owed caps."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    nonrefundable_child_credit: float
    other_dependent_credit: float
    actc_income_limit: float = Field(..., description="15% of earned income over $2,500")
    actc_cap: float = Field(..., description="Refundable cap per child x qualifying children")
