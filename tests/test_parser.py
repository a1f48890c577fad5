"""End-to-end tests for the spending parser."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from spendlog.config import ParserSettings
from spendlog.extraction import SpendingParser
from spendlog.extraction.description import GENERIC_DESCRIPTION
from spendlog.models.spending import CurrencyCode, SpendingCategory


TODAY = date(2024, 3, 15)


class TestScenarios:

    def test_yen_coffee_at_doutor(self, parser, fixed_clock):
        text = "I spent 680 yen on matcha latte at Doutor"
        parsed = parser.parse(text)

        assert parsed.amount == Decimal("680")
        assert parsed.currency == CurrencyCode.JPY
        assert parsed.category == SpendingCategory.COFFEE
        assert "Doutor" in parsed.location
        assert parsed.description == text
        assert parsed.date == TODAY
        assert parsed.confidence >= 0.6
        assert parsed.confidence == pytest.approx(0.9)
        assert parsed.timestamp == fixed_clock()

    def test_groceries_at_walmart(self, parser):
        parsed = parser.parse("Bought groceries for 25 dollars at Walmart")

        assert parsed.amount == Decimal("25")
        assert parsed.currency == CurrencyCode.USD
        assert parsed.category == SpendingCategory.GROCERIES
        assert "Walmart" in parsed.location

    def test_bare_number_defaults_to_usd(self, parser):
        parsed = parser.parse("spent 15.50 on lunch")

        assert parsed.amount == Decimal("15.5")
        assert parsed.currency == CurrencyCode.USD
        assert parsed.category == SpendingCategory.DINING
        assert parsed.location == ""

    def test_dollar_symbol(self, parser):
        parsed = parser.parse("$25 for a movie ticket")
        assert parsed.amount == Decimal("25")
        assert parsed.currency == CurrencyCode.USD
        assert parsed.category == SpendingCategory.ENTERTAINMENT

    def test_yesterday(self, parser):
        parsed = parser.parse("taxi to the station yesterday 1,200 yen")
        assert parsed.date == date(2024, 3, 14)
        assert parsed.amount == Decimal("1200")
        assert parsed.category == SpendingCategory.TRANSPORTATION

    def test_rupiah_with_dot_separators(self, parser):
        parsed = parser.parse("rp 10.000 for nasi goreng")
        assert parsed.amount == Decimal("10000")
        assert parsed.currency == CurrencyCode.IDR

    def test_overlong_numeral_is_no_amount(self, parser):
        parsed = parser.parse("9" * 400 + " yen for coffee")
        assert parsed.amount == Decimal("0")
        assert parsed.currency == CurrencyCode.JPY
        assert parsed.model_dump(mode="json")["amount"] == 0.0

    def test_place_comes_before_organization(self, parser):
        parsed = parser.parse("coffee at Starbucks in Shibuya")
        assert parsed.location == "Shibuya"

    def test_nonsense_is_other(self, parser):
        parsed = parser.parse("xyzzy plugh")

        assert parsed.category == SpendingCategory.OTHER
        assert parsed.amount == Decimal("0")
        assert parsed.currency == CurrencyCode.USD
        assert parsed.confidence == pytest.approx(0.3)

    def test_whitespace_only_does_not_raise(self, parser):
        """Blank text is rejected at the HTTP boundary; the parser still copes."""
        parsed = parser.parse("   ")
        assert parsed.description == GENERIC_DESCRIPTION
        assert parsed.confidence == 0.0
        assert parsed.category == SpendingCategory.OTHER


class TestProperties:

    @pytest.mark.parametrize("text", [
        "I spent 680 yen on matcha latte at Doutor",
        "12/31/99 99999999999999999999 dollars",
        "february 30 ¥ $ yen",
        "!!!",
        "a" * 2000,
        "1,2,3,4 , . 5..6",
    ])
    def test_output_is_always_in_range(self, parser, text):
        parsed = parser.parse(text)
        assert 0.0 <= parsed.confidence <= 1.0
        assert parsed.amount >= 0
        assert parsed.category in set(SpendingCategory)
        assert parsed.description

    def test_idempotent_with_fixed_clock(self, parser):
        text = "Bought groceries for 25 dollars at Walmart yesterday"
        first = parser.parse(text)
        second = parser.parse(text)
        assert first == second

    def test_adding_organization_increases_confidence(self, parser):
        without = parser.parse("spent 500 yen on coffee")
        with_org = parser.parse("spent 500 yen on coffee at Doutor")
        assert with_org.confidence > without.confidence


class TestProcessingDate:

    def test_timezone_decides_today(self, category_model):
        """Late evening UTC is already tomorrow in Tokyo."""
        late = datetime(2024, 3, 15, 20, 0, tzinfo=timezone.utc)
        parser = SpendingParser(
            category_model=category_model,
            clock=lambda: late,
            settings=ParserSettings(_env_file=None, timezone="Asia/Tokyo"),
        )
        assert parser.parse("coffee").date == date(2024, 3, 16)
        assert parser.parse("coffee yesterday").date == date(2024, 3, 15)

    def test_invalid_timezone_is_rejected(self):
        with pytest.raises(ValueError):
            ParserSettings(_env_file=None, timezone="Mars/Olympus")
