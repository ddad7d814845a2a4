"""Unit tests for estimate generation and year resolution."""

import pytest

from quarterlycalc.sdk import Inputs, TaxRulesNotFoundError, generate_estimate, resolve_year, set_setting
from quarterlycalc.sdk.taxes import get_latest_year


BASE = Inputs(w2_wages=8000, w2_withheld=600, net_business_income=42000, other_income=1500)


class TestResolveYear:

    def test_explicit(self):
        assert resolve_year("2025") == 2025

    def test_from_settings(self):
        set_setting("tax_year", 2024)
        assert resolve_year() == 2024

    def test_latest_rules(self):
        assert resolve_year() == get_latest_year()


class TestGenerateEstimate:

    def test_equal_schedule(self):
        estimate = generate_estimate(BASE, year=2025, weighted=False)
        assert estimate.year == 2025
        assert estimate.schedule.amounts == [2279.85, 2279.85, 2279.85, 2279.86]
        assert estimate.schedule.total_cents == 911941

    def test_weighted_schedule(self):
        estimate = generate_estimate(BASE, year=2025, weighted=True)
        assert estimate.schedule.weighted is True
        assert estimate.schedule.amounts == [2735.82, 2735.82, 1823.88, 1823.89]

    def test_weighted_from_settings(self):
        set_setting("installment_style", "annualized")
        assert generate_estimate(BASE, year=2025).schedule.weighted is True

    def test_zero_income(self):
        estimate = generate_estimate(Inputs(), year=2025, weighted=False)
        assert estimate.summary.total_tax_liability == 0
        assert estimate.schedule.amounts == [0, 0, 0, 0]

    def test_missing_year(self):
        with pytest.raises(TaxRulesNotFoundError):
            generate_estimate(BASE, year=1990)

    def test_json_round_trip(self):
        estimate = generate_estimate(BASE, year=2025, weighted=False)
        dumped = estimate.model_dump(mode="json")
        assert dumped["schedule"]["installments"][0]["due_date"] == "2025-04-15"
        assert dumped["summary"]["income_tax"] == 3785
        assert type(estimate).model_validate(dumped) == estimate
