"""Tests for the money resolver."""

from decimal import Decimal

import pytest

from spendlog.extraction.money import detect_currency, parse_decimal, resolve_money
from spendlog.models.spending import CurrencyCode


class TestResolveMoney:

    def test_yen(self):
        money = resolve_money(["680 yen"], ["680"])
        assert money.amount == Decimal("680")
        assert money.currency == CurrencyCode.JPY

    def test_dollar_symbol(self):
        money = resolve_money(["$25"], ["25"])
        assert money.amount == Decimal("25")
        assert money.currency == CurrencyCode.USD

    def test_thousands_separator_is_stripped(self):
        money = resolve_money(["¥1,500"], [])
        assert money.amount == Decimal("1500")
        assert money.currency == CurrencyCode.JPY

    def test_rupiah(self):
        money = resolve_money(["rp 50,000"], [])
        assert money.amount == Decimal("50000")
        assert money.currency == CurrencyCode.IDR

    def test_two_decimal_places(self):
        assert resolve_money(["$4.75"], []).amount == Decimal("4.75")

    def test_only_first_money_span_is_used(self):
        """The primary total is assumed to be mentioned first."""
        money = resolve_money(["500 yen", "$3"], [])
        assert money.amount == Decimal("500")
        assert money.currency == CurrencyCode.JPY

    def test_falls_back_to_first_amount(self):
        """Without a money span the first bare number is used, in USD."""
        money = resolve_money([], ["15.50", "3"])
        assert money.amount == Decimal("15.50")
        assert money.currency == CurrencyCode.USD

    def test_fallback_keeps_currency_from_money_span(self):
        """A money span without digits still decides the currency."""
        money = resolve_money(["¥"], ["900"])
        assert money.amount == Decimal("900")
        assert money.currency == CurrencyCode.JPY

    def test_nothing_found(self):
        money = resolve_money([], [])
        assert money.amount == Decimal("0")
        assert money.currency == CurrencyCode.USD

    def test_malformed_amount_is_zero(self):
        """Unparsable numbers are a miss, not an error."""
        assert resolve_money([], ["1,2,,"]).amount == Decimal("12")
        assert resolve_money([], ["abc"]).amount == Decimal("0")


class TestParseDecimal:

    @pytest.mark.parametrize("raw,expected", [
        ("680", Decimal("680")),
        ("1,200", Decimal("1200")),
        ("15.50", Decimal("15.50")),
        ("", Decimal("0")),
        ("nan", Decimal("0")),
        ("Infinity", Decimal("0")),
        ("-5", Decimal("0")),
        ("12abc", Decimal("0")),
    ])
    def test_parse(self, raw, expected):
        assert parse_decimal(raw) == expected


class TestDetectCurrency:

    @pytest.mark.parametrize("span,expected", [
        ("680 yen", CurrencyCode.JPY),
        ("¥680", CurrencyCode.JPY),
        ("jpy 680", CurrencyCode.JPY),
        ("25 dollars", CurrencyCode.USD),
        ("1 dollar", CurrencyCode.USD),
        ("20 bucks", CurrencyCode.USD),
        ("USD 40", CurrencyCode.USD),
        ("$25", CurrencyCode.USD),
        ("idr 10000", CurrencyCode.IDR),
        ("10000 rupiah", CurrencyCode.IDR),
        ("25", CurrencyCode.USD),
    ])
    def test_markers(self, span, expected):
        assert detect_currency(span) == expected


class TestLimits:

    def test_overlong_numeral_is_malformed(self):
        """More digits than an amount may carry reads as no amount."""
        assert parse_decimal("9" * 400) == Decimal("0")
        assert parse_decimal("1234567890123456") == Decimal("0")
        assert parse_decimal("123456789012345") == Decimal("123456789012345")

    def test_overlong_money_span_falls_back_to_zero(self):
        money = resolve_money(["9" * 400 + " yen"], ["9" * 400])
        assert money.amount == Decimal("0")
        assert money.currency == CurrencyCode.JPY


class TestRupiahGrouping:

    @pytest.mark.parametrize("span,expected", [
        ("rp 10.000", Decimal("10000")),
        ("rp 1.500.000", Decimal("1500000")),
        ("25.000 rupiah", Decimal("25000")),
        ("idr 12.5", Decimal("12.5")),
        ("rp 50,000", Decimal("50000")),
    ])
    def test_dots_group_thousands(self, span, expected):
        money = resolve_money([span], [])
        assert money.amount == expected
        assert money.currency == CurrencyCode.IDR

    def test_dots_are_decimals_for_other_currencies(self):
        assert resolve_money(["$10.00"], []).amount == Decimal("10.00")
