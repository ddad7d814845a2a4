"""Unit tests for self-employment tax."""

import pytest

from quarterlycalc.sdk.taxes import compute_se_tax


class TestComputeSETax:

    def test_basic(self, rules_2025):
        se = compute_se_tax(42000, 8000, "single", rules_2025)
        assert se.se_taxable_base == pytest.approx(38787)
        assert se.oasdi == pytest.approx(4809.588)
        assert se.medicare == pytest.approx(1124.823)
        assert se.additional_medicare == 0
        assert se.total == pytest.approx(5934.411)
        assert se.half_se_deduction == pytest.approx(2967.2055)

    def test_loss_has_no_se_tax(self, rules_2025):
        se = compute_se_tax(-12000, 50000, "single", rules_2025)
        assert se.se_taxable_base == 0
        assert se.total == 0
        assert se.half_se_deduction == 0

    def test_zero_income(self, rules_2025):
        assert compute_se_tax(0, 0, "mfj", rules_2025).total == 0

    def test_wages_over_wage_base_leave_no_oasdi(self, rules_2025):
        se = compute_se_tax(50000, 200000, "mfj", rules_2025)
        assert se.oasdi == 0
        assert se.medicare == pytest.approx(50000 * 0.9235 * 0.029)

    def test_wages_partially_consume_wage_base(self, rules_2025):
        # 176100 - 150000 = 26100 of headroom, less than the 46175 SE base
        se = compute_se_tax(50000, 150000, "mfj", rules_2025)
        assert se.oasdi == pytest.approx(26100 * 0.124)

    def test_se_base_alone_capped_at_wage_base(self, rules_2025):
        se = compute_se_tax(300000, 0, "mfj", rules_2025)
        assert se.oasdi == pytest.approx(176100 * 0.124)

    def test_additional_medicare_over_threshold(self, rules_2025):
        # single threshold 200000; wages 190000 + base 92350 -> 82350 over
        se = compute_se_tax(100000, 190000, "single", rules_2025)
        assert se.additional_medicare == pytest.approx(82350 * 0.009)

    def test_additional_medicare_capped_at_se_base(self, rules_2025):
        se = compute_se_tax(10000, 400000, "single", rules_2025)
        assert se.additional_medicare == pytest.approx(9235 * 0.009)

    def test_additional_medicare_not_in_deduction(self, rules_2025):
        se = compute_se_tax(100000, 190000, "single", rules_2025)
        assert se.half_se_deduction == pytest.approx(0.5 * (se.oasdi + se.medicare))

    def test_negative_wages_treated_as_zero(self, rules_2025):
        assert compute_se_tax(42000, -100, "single", rules_2025) == compute_se_tax(42000, 0, "single", rules_2025)

    def test_mfs_threshold_lower(self, rules_2025):
        mfs = compute_se_tax(150000, 0, "mfs", rules_2025)
        single = compute_se_tax(150000, 0, "single", rules_2025)
        assert mfs.additional_medicare > 0
        assert single.additional_medicare == 0
