"""Unit tests for federal income tax bracket computation."""

import pytest

from quarterlycalc.sdk.taxes import (
    bracket_breakdown,
    compute_income_tax,
    marginal_rate,
    round_to_dollar,
)


class TestRoundToDollar:

    def test_half_rounds_up(self):
        assert round_to_dollar(10.5) == 11
        assert round_to_dollar(0.5) == 1

    def test_below_half_rounds_down(self):
        assert round_to_dollar(10.49) == 10

    def test_negative_half_rounds_toward_positive(self):
        assert round_to_dollar(-2.5) == -2


class TestComputeIncomeTax:

    def test_zero_income(self, rules_2025):
        assert compute_income_tax(0, "single", rules_2025) == 0

    def test_negative_income(self, rules_2025):
        assert compute_income_tax(-5000, "mfj", rules_2025) == 0

    def test_first_bracket_only(self, rules_2025):
        assert compute_income_tax(10000, "single", rules_2025) == 1000

    def test_top_of_first_bracket(self, rules_2025):
        # 11925 * 10% = 1192.50, rounds up
        assert compute_income_tax(11925, "single", rules_2025) == 1193

    def test_spans_two_brackets(self, rules_2025):
        # 1192.50 + (33532.7945 - 11925) * 12% = 3785.435
        assert compute_income_tax(33532.7945, "single", rules_2025) == 3785

    def test_top_bracket(self, rules_2025):
        tax_at_top = compute_income_tax(626350, "single", rules_2025)
        assert compute_income_tax(726350, "single", rules_2025) == round_to_dollar(tax_at_top + 37000)

    def test_mfj_brackets_are_wider(self, rules_2025):
        assert compute_income_tax(80000, "mfj", rules_2025) < compute_income_tax(80000, "single", rules_2025)

    @pytest.mark.parametrize("status", ["single", "mfj", "mfs", "hoh"])
    def test_monotonic_in_income(self, rules_2025, status):
        previous = 0
        for income in range(0, 800001, 2500):
            tax = compute_income_tax(income, status, rules_2025)
            assert tax >= previous
            previous = tax

    @pytest.mark.parametrize("status", ["single", "mfj", "mfs", "hoh"])
    def test_continuous_at_bracket_boundaries(self, rules_2025, status):
        """One dollar past a boundary adds at most the top rate, plus rounding."""
        for bracket in rules_2025.for_status(status).tax_brackets:
            if bracket.up_to is None:
                continue
            below = compute_income_tax(bracket.up_to, status, rules_2025)
            above = compute_income_tax(bracket.up_to + 1, status, rules_2025)
            assert 0 <= above - below <= 1


class TestBracketBreakdown:

    def test_sums_to_unrounded_tax(self, rules_2025):
        rows = bracket_breakdown(33532.7945, "single", rules_2025)
        assert sum(r.tax for r in rows) == pytest.approx(3785.435)
        assert rows[0].income_in_bracket == 11925
        assert rows[2].income_in_bracket == 0

    def test_last_row_unbounded(self, rules_2025):
        rows = bracket_breakdown(1000, "hoh", rules_2025)
        assert rows[-1].upper is None
        assert rows[-1].rate == 0.37


class TestMarginalRate:

    def test_in_second_bracket(self, rules_2025):
        assert marginal_rate(33532.79, "single", rules_2025) == 0.12

    def test_at_boundary_moves_up(self, rules_2025):
        assert marginal_rate(11925, "single", rules_2025) == 0.12

    def test_top(self, rules_2025):
        assert marginal_rate(10_000_000, "mfs", rules_2025) == 0.37
