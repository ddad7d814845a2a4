"""Estimate output: CSV plan, text report, and iCalendar reminders.

All amounts are rounded to the cent here, at the presentation boundary.
"""

import csv
import io
import math
import re
from datetime import date
from pathlib import Path
from typing import Optional

from .expenses import ExpenseLedger, get_category_label
from .installments import next_due_date
from .schemas import Estimate, InstallmentSchedule
from .taxes import TaxRules, bracket_breakdown, marginal_rate

ICS_PRODID = "-//Quarterly Calc//EN"
ICS_UID_DOMAIN = "quarterly-calc.local"

SAFE_HARBOR_LABELS = {
    "current": "Current year (100% of estimated tax)",
    "prior100": "Prior year (100% of last year's tax)",
    "prior110": "Prior year (110% of last year's tax)",
}


def round_to_cent(amount: float) -> float:
    """Round to the nearest cent, halves away from zero."""
    cents = math.floor(abs(amount) * 100 + 0.5)
    return math.copysign(cents / 100, amount) if cents else 0.0


def format_usd(amount: float) -> str:
    """Format dollars: $1,234 when there are no cents, $1,234.56 otherwise."""
    cents = math.floor(abs(amount) * 100 + 0.5)
    sign = "-" if amount < 0 and cents else ""
    dollars, rem = divmod(cents, 100)
    if rem == 0:
        return f"{sign}${dollars:,}"
    return f"{sign}${dollars:,}.{rem:02d}"


# =============================================================================
# CSV
# =============================================================================


def estimate_to_rows(estimate: Estimate, ledger: Optional[ExpenseLedger] = None) -> list[list]:
    """Metric/Amount rows for the CSV plan."""
    inputs = estimate.inputs
    summary = estimate.summary

    rows = [
        ["Metric", "Amount"],
        ["Tax year", estimate.year],
        ["Filing status", inputs.filing_status],
        ["W-2 wages", round_to_cent(inputs.w2_wages)],
        ["W-2 withheld", round_to_cent(inputs.w2_withheld)],
    ]
    if ledger is not None:
        rows.append(["Gross business income", round_to_cent(inputs.net_business_income + ledger.total)])
        rows.append(["Total business expenses", round_to_cent(ledger.total)])
    rows.extend([
        ["Net business income (after expenses)", round_to_cent(inputs.net_business_income)],
        ["Other income", round_to_cent(inputs.other_income)],
        ["Total income", round_to_cent(summary.total_income)],
        ["Standard deduction", round_to_cent(summary.standard_deduction)],
        ["Half SE tax deduction", round_to_cent(summary.half_se_deduction)],
        ["Taxable income", round_to_cent(summary.taxable_income)],
        ["Income tax (before credits)", round_to_cent(summary.income_tax)],
        ["Nonrefundable credits used", round_to_cent(summary.nonrefundable_credit_used)],
        ["Refundable ACTC", round_to_cent(summary.actc)],
        ["Self-employment tax", round_to_cent(summary.se_tax.total)],
        ["Total estimated tax", round_to_cent(summary.total_tax_liability)],
        ["Safe harbor selection", inputs.safe_harbor_mode],
        ["Required for plan", round_to_cent(summary.safe_harbor_target)],
        ["Withholding", round_to_cent(inputs.w2_withheld)],
        ["Estimated tax due after withholding", round_to_cent(summary.amount_due_after_withholding)],
    ])
    for inst in estimate.schedule.installments:
        rows.append([f"Installment {inst.number} ({inst.due_date.isoformat()})", inst.amount])

    if ledger is not None and ledger.entries:
        rows.append(["", ""])
        rows.append(["BUSINESS EXPENSES", ""])
        for entry in ledger.entries:
            label = get_category_label(entry.category, entry.business_type)
            rows.append([f"{entry.description} ({label})", round_to_cent(entry.amount)])

    return rows


def estimate_to_csv_string(estimate: Estimate, ledger: Optional[ExpenseLedger] = None) -> str:
    """Convert an estimate to a CSV string."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerows(estimate_to_rows(estimate, ledger))
    return output.getvalue()


def write_estimate_csv(estimate: Estimate, output_path: Path, ledger: Optional[ExpenseLedger] = None) -> Path:
    """Write an estimate to a CSV file.

    Returns:
        Path to the written file
    """
    with open(output_path, "w", newline="") as csvfile:
        writer = csv.writer(csvfile)
        writer.writerows(estimate_to_rows(estimate, ledger))

    return Path(output_path)


# =============================================================================
# Text report
# =============================================================================


def format_estimate_text(
    estimate: Estimate,
    rules: Optional[TaxRules] = None,
    today: Optional[date] = None,
) -> str:
    """Format an estimate as ASCII tables for terminal display.

    The bracket table is included when rules are passed.
    """
    inputs = estimate.inputs
    s = estimate.summary
    lines = []

    def row(label, amount, minus=False):
        text = format_usd(amount)
        lines.append(f"  {label:<34} {('-' + text) if minus else text:>14}")

    lines.append(f"ESTIMATED TAX PLAN FOR {estimate.year} ({inputs.filing_status.upper()})")
    lines.append("=" * 60)
    lines.append("")

    lines.append("INCOME")
    lines.append("-" * 60)
    row("W-2 wages", inputs.w2_wages)
    row("Net business income", inputs.net_business_income)
    row("Other income", inputs.other_income)
    row("Total income", s.total_income)
    row("Standard deduction", s.standard_deduction, minus=True)
    row("Half SE tax deduction", s.half_se_deduction, minus=True)
    lines.append("  " + "-" * 49)
    row("Taxable income", s.taxable_income)
    lines.append("")

    if rules is not None:
        lines.append(f"FEDERAL INCOME TAX BRACKETS ({inputs.filing_status.upper()})")
        lines.append("-" * 60)
        for b in bracket_breakdown(s.taxable_income, inputs.filing_status, rules):
            if b.income_in_bracket <= 0:
                continue
            upper = format_usd(b.upper) if b.upper is not None else "and up"
            span = f"{format_usd(b.lower)} - {upper}"
            lines.append(f"  {b.rate:>4.0%}  {span:<28} {format_usd(b.tax):>14}")
        lines.append(f"  Marginal rate: {marginal_rate(s.taxable_income, inputs.filing_status, rules):.0%}")
        lines.append("")

    lines.append("TAX")
    lines.append("-" * 60)
    row("Income tax (before credits)", s.income_tax)
    row("Nonrefundable credits used", s.nonrefundable_credit_used, minus=True)
    row("Social Security (SE)", s.se_tax.oasdi)
    row("Medicare (SE)", s.se_tax.medicare)
    if s.se_tax.additional_medicare:
        row("Additional Medicare (SE)", s.se_tax.additional_medicare)
    row("Refundable ACTC", s.actc, minus=True)
    lines.append("  " + "-" * 49)
    row("Total estimated tax", s.total_tax_liability)
    lines.append("")

    lines.append("SAFE HARBOR PLAN")
    lines.append("-" * 60)
    lines.append(f"  {SAFE_HARBOR_LABELS.get(inputs.safe_harbor_mode, inputs.safe_harbor_mode)}")
    row("Required for plan", s.safe_harbor_target)
    row("W-2 withholding", s.w2_withheld, minus=True)
    row("Due via estimated payments", s.amount_due_after_withholding)
    lines.append("")

    schedule = estimate.schedule
    style = "annualized 30/30/20/20" if schedule.weighted else "equal"
    lines.append(f"INSTALLMENTS ({style})")
    lines.append("-" * 60)
    upcoming = next_due_date([i.due_date for i in schedule.installments], today)
    for inst in schedule.installments:
        marker = "  <- next" if inst.due_date == upcoming else ""
        lines.append(f"  {inst.number}. {inst.due_date.strftime('%b %d, %Y'):<31} {format_usd(inst.amount):>14}{marker}")

    if s.warnings:
        lines.append("")
        for warning in s.warnings:
            lines.append(f"  ⚠ {warning}")

    return "\n".join(lines)


# =============================================================================
# iCalendar
# =============================================================================


def build_ics(summary: str, due_date: date, url: Optional[str] = None, description: Optional[str] = None) -> str:
    """Build a single all-day VEVENT calendar file for a due date."""
    day = due_date.strftime("%Y%m%d")
    slug = re.sub(r"\s+", "-", summary).lower()
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{ICS_PRODID}",
        "CALSCALE:GREGORIAN",
        "BEGIN:VEVENT",
        f"UID:{slug}-{day}@{ICS_UID_DOMAIN}",
        f"DTSTAMP:{day}T000000",
        f"DTSTART;VALUE=DATE:{day}",
        f"DTEND;VALUE=DATE:{day}",
        f"SUMMARY:{summary}",
    ]
    if description:
        lines.append(f"DESCRIPTION:{description}")
    if url:
        lines.append(f"URL:{url}")
    lines.extend(["END:VEVENT", "END:VCALENDAR"])
    return "\r\n".join(lines) + "\r\n"


def schedule_to_ics_files(schedule: InstallmentSchedule, out_dir: Path, url: Optional[str] = None) -> list[Path]:
    """Write one est-tax-YYYYMMDD.ics file per installment."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    count = len(schedule.installments)
    written = []
    for inst in schedule.installments:
        ics = build_ics(
            f"Estimated tax payment {inst.number}/{count}",
            inst.due_date,
            url=url,
            description=f"Amount due: {format_usd(inst.amount)}",
        )
        path = out_dir / f"est-tax-{inst.due_date.strftime('%Y%m%d')}.ics"
        with open(path, "w", newline="") as f:
            f.write(ics)
        written.append(path)
    return written
