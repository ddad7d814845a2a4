"""Unit tests for tax rules loading and validation."""

from datetime import date

import pytest
import yaml
from pydantic import ValidationError

from quarterlycalc.sdk.taxes import (
    TaxRules,
    TaxRulesNotFoundError,
    get_available_years,
    get_latest_year,
    load_tax_rules,
    load_tax_rules_file,
)


def rules_dict(**overrides):
    """Minimal valid rules table; single status reused for all four."""
    status = {
        "standard_deduction": 15000,
        "additional_medicare_threshold": 200000,
        "tax_brackets": [
            {"rate": 0.10, "up_to": 10000},
            {"rate": 0.20},
        ],
    }
    data = {
        "year": 2030,
        "single": status,
        "mfj": status,
        "mfs": status,
        "hoh": status,
        "social_security": {"wage_base": 200000},
        "self_employment": {},
        "child_credit": {"per_child": 2000, "per_child_alternate": 2200, "refundable_cap_per_child": 1700},
        "estimated_payment_due_dates": ["2030-04-15", "2030-06-15", "2030-09-15", "2031-01-15"],
    }
    data.update(overrides)
    return data


class TestLoadTaxRules:

    def test_loads_2025(self):
        rules = load_tax_rules(2025)
        assert rules.year == 2025
        assert rules.single.standard_deduction == 15000
        assert rules.mfj.standard_deduction == 30000
        assert rules.hoh.standard_deduction == 22500
        assert rules.social_security.wage_base == 176100
        assert rules.self_employment.net_earnings_factor == 0.9235
        assert rules.estimated_payment_due_dates[0] == date(2025, 4, 15)
        assert len(rules.estimated_payment_due_dates) == 4

    def test_string_year(self):
        assert load_tax_rules("2025") is load_tax_rules(2025)

    def test_missing_year(self):
        with pytest.raises(TaxRulesNotFoundError, match="1999"):
            load_tax_rules(1999)

    def test_missing_year_is_file_not_found(self):
        with pytest.raises(FileNotFoundError):
            load_tax_rules(1999)

    def test_invalid_year(self):
        with pytest.raises(ValueError, match="4 digits"):
            load_tax_rules("25")

    def test_available_years(self):
        assert 2025 in get_available_years()
        assert get_latest_year() == get_available_years()[0]

    def test_for_status(self):
        rules = load_tax_rules(2025)
        assert rules.for_status("mfs") is rules.mfs


class TestTaxRulesValidation:

    def test_valid_minimal(self):
        rules = TaxRules.model_validate(rules_dict())
        assert rules.self_employment.oasdi_rate == 0.124

    def test_brackets_must_ascend(self):
        bad = rules_dict()
        bad["single"] = {
            **bad["single"],
            "tax_brackets": [{"rate": 0.1, "up_to": 20000}, {"rate": 0.2, "up_to": 10000}, {"rate": 0.3}],
        }
        with pytest.raises(ValidationError, match="ascending"):
            TaxRules.model_validate(bad)

    def test_last_bracket_must_be_unbounded(self):
        bad = rules_dict()
        bad["mfj"] = {**bad["mfj"], "tax_brackets": [{"rate": 0.1, "up_to": 10000}]}
        with pytest.raises(ValidationError, match="unbounded"):
            TaxRules.model_validate(bad)

    def test_unbounded_bracket_must_be_last(self):
        bad = rules_dict()
        bad["hoh"] = {**bad["hoh"], "tax_brackets": [{"rate": 0.1}, {"rate": 0.2, "up_to": 10000}]}
        with pytest.raises(ValidationError):
            TaxRules.model_validate(bad)

    def test_due_dates_must_ascend(self):
        bad = rules_dict(estimated_payment_due_dates=["2030-06-15", "2030-04-15"])
        with pytest.raises(ValidationError):
            TaxRules.model_validate(bad)

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            TaxRules.model_validate(rules_dict(surprise=1))

    def test_rules_are_frozen(self):
        rules = load_tax_rules(2025)
        with pytest.raises(ValidationError):
            rules.year = 2026

    def test_load_file(self, tmp_path):
        path = tmp_path / "2030.yaml"
        path.write_text(yaml.safe_dump(rules_dict()))
        rules = load_tax_rules_file(path)
        assert rules.year == 2030
        assert rules.estimated_payment_due_dates[-1] == date(2031, 1, 15)
