"""Unit tests for expense categorization.

The Gemini CLI is never invoked; is_available and process_prompt are
monkeypatched.
"""

import pytest

from quarterlycalc import gemini_client
from quarterlycalc.sdk import categorize_expense, parse_expense_text, set_setting, suggested_expenses
from quarterlycalc.sdk.categorize import keyword_categorize, regex_parse_expense


class TestKeywordCategorize:

    @pytest.mark.parametrize("description,business_type,expected", [
        ("USPS priority postage", "ecommerce", "shipping_postage"),
        ("Etsy listing fee", "ecommerce", "fees_marketplace"),
        ("Shell gas station", "rideshare", "vehicle_gas"),
        ("Lyft service fee", "rideshare", "rideshare_commissions"),
        ("Hotel for client visit", "consultant", "consultant_travel"),
        ("New LAPTOP", "consultant", "consultant_equipment"),
    ])
    def test_matches(self, description, business_type, expected):
        result = keyword_categorize(description, business_type)
        assert result.category == expected
        assert result.confidence == 0.7
        assert result.source == "keyword"

    def test_first_pattern_wins(self):
        # "product" (inventory) is listed before "shipping"
        assert keyword_categorize("product shipping", "ecommerce").category == "cogs_inventory"

    def test_no_match(self):
        result = keyword_categorize("something odd", "consultant")
        assert result.category is None
        assert result.confidence == 0.3
        assert result.source == "none"

    def test_keyword_must_start_a_word(self):
        assert keyword_categorize("paper cups", "ecommerce").category is None
        assert keyword_categorize("UPS label", "ecommerce").category == "shipping_postage"

    def test_keyword_prefix_matches_plural(self):
        assert keyword_categorize("Wholesale products", "ecommerce").category == "cogs_inventory"
        assert keyword_categorize("Toll roads", "rideshare").category == "rideshare_tolls"


@pytest.mark.usefixtures("gemini_installed")
class TestCategorizeExpense:

    def test_keyword_only_by_default(self, monkeypatch):
        def fail(prompt, timeout=60):
            raise AssertionError("AI should not be called")
        monkeypatch.setattr(gemini_client, "process_prompt", fail)

        assert categorize_expense("gas", 40, "rideshare").category == "vehicle_gas"

    def test_ai_answer_used(self, monkeypatch):
        monkeypatch.setattr(gemini_client, "process_prompt", lambda prompt, timeout=60: {
            "category": "rideshare_supplies", "confidence": 0.92, "reasoning": "Phone mount",
        })
        result = categorize_expense("dashboard gizmo", 25, "rideshare", use_ai=True)
        assert result.category == "rideshare_supplies"
        assert result.confidence == 0.92
        assert result.source == "ai"

    def test_ai_prompt_lists_categories(self, monkeypatch):
        seen = {}

        def capture(prompt, timeout=60):
            seen["prompt"] = prompt
            return {"category": "consultant_meals", "confidence": 0.8, "reasoning": "lunch"}
        monkeypatch.setattr(gemini_client, "process_prompt", capture)

        categorize_expense("client lunch", 64.5, "consultant", use_ai=True)
        assert "consultant_meals" in seen["prompt"]
        assert "$64.50" in seen["prompt"]

    def test_ai_failure_falls_back(self, monkeypatch):
        def boom(prompt, timeout=60):
            raise RuntimeError("Gemini CLI not found on PATH")
        monkeypatch.setattr(gemini_client, "process_prompt", boom)

        result = categorize_expense("fuel", 30, "rideshare", use_ai=True)
        assert result.category == "vehicle_gas"
        assert result.source == "keyword"

    def test_ai_unknown_category_falls_back(self, monkeypatch):
        monkeypatch.setattr(gemini_client, "process_prompt",
                            lambda prompt, timeout=60: {"category": "vehicle_gas", "confidence": 0.9})
        result = categorize_expense("laptop", 900, "consultant", use_ai=True)
        assert result.category == "consultant_equipment"
        assert result.source == "keyword"

    def test_ai_confidence_clamped(self, monkeypatch):
        monkeypatch.setattr(gemini_client, "process_prompt",
                            lambda prompt, timeout=60: {"category": "consultant_office", "confidence": 7})
        assert categorize_expense("pens", 5, "consultant", use_ai=True).confidence == 1.0

    def test_setting_enables_ai(self, monkeypatch):
        monkeypatch.setattr(gemini_client, "process_prompt",
                            lambda prompt, timeout=60: {"category": "consultant_rent", "confidence": 0.6})
        set_setting("ai_categorization", "true")
        assert categorize_expense("desk", 300, "consultant").source == "ai"

    def test_missing_cli_skips_ai(self, monkeypatch):
        monkeypatch.setattr(gemini_client, "is_available", lambda: False)

        def fail(prompt, timeout=60):
            raise AssertionError("AI should not be called")
        monkeypatch.setattr(gemini_client, "process_prompt", fail)

        result = categorize_expense("fuel", 30, "rideshare", use_ai=True)
        assert result.category == "vehicle_gas"
        assert result.source == "keyword"


class TestExtractJson:

    def test_fenced(self):
        assert gemini_client.extract_json('```json\n{"a": 1}\n```') == {"a": 1}

    def test_surrounding_prose(self):
        assert gemini_client.extract_json('Sure! {"a": 2} Hope that helps.') == {"a": 2}

    def test_not_json(self):
        with pytest.raises(ValueError):
            gemini_client.extract_json("no braces here")

    def test_missing_cli(self, monkeypatch):
        def missing(*args, **kwargs):
            raise FileNotFoundError("gemini")
        monkeypatch.setattr(gemini_client.subprocess, "run", missing)
        with pytest.raises(RuntimeError, match="not found"):
            gemini_client.process_prompt("hi")


class TestRegexParseExpense:

    def test_dollar_amount(self):
        parsed = regex_parse_expense("$25.99 office supplies")
        assert parsed.amount == 25.99
        assert parsed.description == "office supplies"
        assert parsed.category is None
        assert parsed.source == "regex"

    def test_first_number_is_amount(self):
        parsed = regex_parse_expense("spent 50 bucks on gas")
        assert parsed.amount == 50
        # only the number is removed; inner whitespace is left alone
        assert parsed.description == "spent  bucks on gas"

    def test_no_number(self):
        parsed = regex_parse_expense("parking downtown")
        assert parsed.amount == 0
        assert parsed.description == "parking downtown"

    def test_amount_only(self):
        parsed = regex_parse_expense("$40")
        assert parsed.amount == 40
        assert parsed.description == "Expense"


@pytest.mark.usefixtures("gemini_installed")
class TestParseExpenseText:

    def test_regex_by_default(self, monkeypatch):
        def fail(prompt, timeout=60):
            raise AssertionError("AI should not be called")
        monkeypatch.setattr(gemini_client, "process_prompt", fail)

        assert parse_expense_text("tolls 12.50", "rideshare").source == "regex"

    def test_ai_answer_used(self, monkeypatch):
        monkeypatch.setattr(gemini_client, "process_prompt", lambda prompt, timeout=60: {
            "description": "Gasoline", "amount": 50, "category": "vehicle_gas",
        })
        parsed = parse_expense_text("spent 50 bucks on gas", "rideshare", use_ai=True)
        assert parsed.description == "Gasoline"
        assert parsed.amount == 50
        assert parsed.category == "vehicle_gas"
        assert parsed.source == "ai"

    def test_ai_category_outside_business_type_dropped(self, monkeypatch):
        monkeypatch.setattr(gemini_client, "process_prompt", lambda prompt, timeout=60: {
            "description": "Gasoline", "amount": "50", "category": "consultant_meals",
        })
        parsed = parse_expense_text("gas 50", "rideshare", use_ai=True)
        assert parsed.category is None
        assert parsed.amount == 50

    def test_ai_bad_amount_is_zero(self, monkeypatch):
        monkeypatch.setattr(gemini_client, "process_prompt", lambda prompt, timeout=60: {
            "description": "Gas", "amount": "fifty",
        })
        assert parse_expense_text("gas", "rideshare", use_ai=True).amount == 0

    def test_ai_failure_falls_back(self, monkeypatch):
        def boom(prompt, timeout=60):
            raise ValueError("No JSON object in Gemini output")
        monkeypatch.setattr(gemini_client, "process_prompt", boom)

        parsed = parse_expense_text("$25.99 office supplies", "consultant", use_ai=True)
        assert parsed.source == "regex"
        assert parsed.amount == 25.99


class TestSuggestedExpenses:

    def test_known_type(self):
        items = suggested_expenses("rideshare")
        assert len(items) == 8
        assert "Dash cam" in items

    def test_unknown_type(self):
        assert suggested_expenses("farming") == []

    def test_returns_copy(self):
        suggested_expenses("consultant").append("Yacht")
        assert "Yacht" not in suggested_expenses("consultant")
