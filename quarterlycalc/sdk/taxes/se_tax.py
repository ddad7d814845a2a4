"""Self-employment tax (Schedule SE).

W-2 wages consume the Social Security wage base first, so SE OASDI is only
levied on the headroom left under the base. Medicare is uncapped. The
Additional Medicare portion computed here is only the part attributable to
self-employment income; W-2 Additional Medicare is handled by the employer.
"""

from .schemas import FilingStatus, SETaxResult, TaxRules


def compute_se_tax(
    net_business_income: float,
    w2_wages: float,
    status: FilingStatus,
    rules: TaxRules,
) -> SETaxResult:
    """Calculate SE tax on net business income.

    Args:
        net_business_income: Business income after expenses. A loss produces
            no SE tax base (but still reduces total income elsewhere).
        w2_wages: W-2 wages, used for wage-base proration and the
            Additional Medicare threshold
        status: Filing status (selects the Additional Medicare threshold)
        rules: Tax rules for the year

    Returns:
        SETaxResult with the OASDI/Medicare/Additional Medicare breakdown and
        the deductible half of SE tax
    """
    se = rules.self_employment
    wages = max(0.0, w2_wages)

    se_base = max(0.0, net_business_income) * se.net_earnings_factor

    oasdi_base_left = max(0.0, rules.social_security.wage_base - wages)
    oasdi = min(se_base, oasdi_base_left) * se.oasdi_rate

    medicare = se_base * se.medicare_rate

    threshold = rules.for_status(status).additional_medicare_threshold
    over_threshold = max(0.0, wages + se_base - threshold)
    additional_medicare = min(over_threshold, se_base) * se.additional_medicare_rate

    return SETaxResult(
        oasdi=oasdi,
        medicare=medicare,
        additional_medicare=additional_medicare,
        total=oasdi + medicare + additional_medicare,
        se_taxable_base=se_base,
        # Additional Medicare is excluded from the deduction
        half_se_deduction=0.5 * (oasdi + medicare),
    )
