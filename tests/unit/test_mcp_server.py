"""Tests for the MCP tools (called directly, all arguments passed explicitly)."""

import asyncio

import pytest

pytest.importorskip("mcp")

from quarterlycalc import gemini_client
from quarterlycalc.mcp import server


def estimate_args(**overrides):
    args = dict(
        filing_status="single",
        w2_wages=8000,
        w2_withheld=600,
        net_business_income=42000,
        business_expenses=0,
        other_income=1500,
        dependents_under_17=0,
        other_dependents=0,
        use_alternate_child_credit=False,
        safe_harbor_mode="current",
        prior_year_total_tax=0,
        year="2025",
        annualized=False,
    )
    args.update(overrides)
    return args


class TestEstimateTool:

    def test_estimate(self):
        result = asyncio.run(server.estimate_quarterly_taxes(**estimate_args()))
        assert result["summary"]["total_tax_liability"] == pytest.approx(9719.411)
        assert [i["amount"] for i in result["schedule"]["installments"]] == [2279.85, 2279.85, 2279.85, 2279.86]

    def test_expenses_netted(self):
        result = asyncio.run(server.estimate_quarterly_taxes(
            **estimate_args(net_business_income=42300, business_expenses=300)
        ))
        assert result["inputs"]["net_business_income"] == 42000

    def test_invalid_input_returns_error(self):
        result = asyncio.run(server.estimate_quarterly_taxes(**estimate_args(w2_wages=-1)))
        assert "error" in result
        assert result["summary"] is None

    def test_missing_year_returns_error(self):
        result = asyncio.run(server.estimate_quarterly_taxes(**estimate_args(year="1999")))
        assert "1999" in result["error"]


class TestAllocateTool:

    def test_weighted(self):
        result = asyncio.run(server.allocate_installments(amount=9119.411, count=4, annualized=True))
        assert result["installments"] == [2735.82, 2735.82, 1823.88, 1823.89]
        assert result["weighted"] is True
        assert result["total"] == 9119.41

    def test_negative_count(self):
        result = asyncio.run(server.allocate_installments(amount=10, count=-1, annualized=False))
        assert "error" in result


class TestCategorizeTool:

    def test_keyword(self):
        result = asyncio.run(server.categorize_expense(
            description="Uber commission", amount=12, business_type="rideshare", use_ai=False,
        ))
        assert result == {
            "category": "rideshare_commissions",
            "confidence": 0.7,
            "reasoning": "Matched keyword pattern for rideshare business",
            "source": "keyword",
        }

    @pytest.mark.usefixtures("gemini_installed")
    def test_ai(self, monkeypatch):
        monkeypatch.setattr(gemini_client, "process_prompt", lambda prompt, timeout=60: {
            "category": "shipping_storage", "confidence": 0.66, "reasoning": "Warehouse fee",
        })
        result = asyncio.run(server.categorize_expense(
            description="Warehouse", amount=80, business_type="ecommerce", use_ai=True,
        ))
        assert result["category"] == "shipping_storage"
        assert result["source"] == "ai"


class TestParseExpenseTool:

    def test_regex_then_keyword(self):
        result = asyncio.run(server.parse_expense(
            text="spent $42.50 on gas", business_type="rideshare", use_ai=False,
        ))
        assert result["amount"] == 42.5
        assert result["description"] == "spent  on gas"
        assert result["category"] == "vehicle_gas"
        assert result["source"] == "regex"
        assert "Gasoline" in result["suggested_expenses"]

    @pytest.mark.usefixtures("gemini_installed")
    def test_ai(self, monkeypatch):
        monkeypatch.setattr(gemini_client, "process_prompt", lambda prompt, timeout=60: {
            "description": "Client lunch", "amount": 64.5, "category": "consultant_meals",
        })
        result = asyncio.run(server.parse_expense(
            text="lunch w/ client 64.50", business_type="consultant", use_ai=True,
        ))
        assert result["category"] == "consultant_meals"
        assert result["source"] == "ai"


class TestInsightsTool:

    def test_rules(self):
        result = asyncio.run(server.tax_insights(
            total_income=50000, total_expenses=10000, quarterly_payments=[2000, 2000, 2000, 2000],
            business_type="consultant", use_ai=False,
        ))
        assert result == {"insights": [{
            "type": "warning",
            "title": "Underpayment Risk",
            "message": "Your quarterly payments may be too low. Consider increasing payments to avoid penalties.",
            "impact": "Potential underpayment penalty of $100.",
            "source": "rules",
        }]}

    def test_nothing_to_report(self):
        result = asyncio.run(server.tax_insights(
            total_income=0, total_expenses=0, quarterly_payments=[], business_type="consultant", use_ai=False,
        ))
        assert result == {"insights": []}
