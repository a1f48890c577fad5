"""Tests for the entity extractor."""

import pytest

from spendlog.config import ParserSettings
from spendlog.extraction.entities import EntityExtractor, compile_gazetteer


@pytest.fixture
def extractor() -> EntityExtractor:
    return EntityExtractor()


class TestAmounts:
    """Bare numeric tokens."""

    def test_integer_and_decimal(self, extractor):
        """Integers and decimals are both amounts."""
        entities = extractor.extract("spent 15.50 on lunch and 3 on coffee")
        assert entities.amounts == ("15.50", "3")

    def test_thousands_separator(self, extractor):
        """Separators stay inside one token."""
        assert extractor.extract("paid 1,200 yen").amounts == ("1,200",)

    def test_dates_and_ordinals_are_not_amounts(self, extractor):
        """Numbers glued to date or ordinal syntax are ignored."""
        entities = extractor.extract("on 3/15 and 2024-03-01, the 3rd time at 10:30")
        assert entities.amounts == ()

    def test_number_in_money_expression_is_still_an_amount(self, extractor):
        """Sub-extractors are independent, so overlap is expected."""
        entities = extractor.extract("I spent 680 yen")
        assert entities.amounts == ("680",)
        assert entities.money == ("680 yen",)


class TestMoney:
    """Composite number + currency expressions."""

    @pytest.mark.parametrize("text,expected", [
        ("680 yen", ("680 yen",)),
        ("$25", ("$25",)),
        ("¥1,500 for dinner", ("¥1,500",)),
        ("25 dollars", ("25 dollars",)),
        ("usd 40", ("usd 40",)),
        ("rp 50,000", ("rp 50,000",)),
        ("rp 1.500.000 for rent", ("rp 1.500.000",)),
        ("20 bucks", ("20 bucks",)),
    ])
    def test_money_forms(self, extractor, text, expected):
        """Symbol-first, code-first and word-after forms are recognized."""
        assert extractor.extract(text).money == expected

    def test_case_folded(self, extractor):
        """Spans come back lower case."""
        assert extractor.extract("680 YEN").money == ("680 yen",)

    def test_first_occurrence_order(self, extractor):
        """Spans keep source order and are not deduplicated."""
        entities = extractor.extract("$5 then 5 dollars then $5")
        assert entities.money == ("$5", "5 dollars", "$5")

    def test_no_money(self, extractor):
        """No currency marker means no money span."""
        assert extractor.extract("spent 15.50 on lunch").money == ()


class TestCurrencies:

    def test_symbols_and_words(self, extractor):
        entities = extractor.extract("$5 or 500 yen")
        assert entities.currencies == ("$", "yen")

    def test_word_boundaries(self, extractor):
        """'yen' inside another word is not a currency."""
        assert extractor.extract("yentl bought usda beef").currencies == ()


class TestGazetteers:
    """Places and organizations."""

    def test_organization(self, extractor):
        entities = extractor.extract("matcha latte at Doutor")
        assert entities.organizations == ("doutor",)
        assert entities.has_location is True

    def test_place(self, extractor):
        assert extractor.extract("train ticket in Tokyo").places == ("tokyo",)

    def test_longest_name_wins(self, extractor):
        """Multi-word names are not split into shorter entries."""
        assert extractor.extract("renewed amazon prime").organizations == ("amazon prime",)

    def test_word_boundaries(self, extractor):
        """Names are only matched as whole words."""
        assert extractor.extract("a targeted ad").organizations == ()

    def test_empty_gazetteer_yields_nothing(self):
        """A sub-extractor with nothing to look for degrades to empty."""
        extractor = EntityExtractor(places=(), organizations=())
        entities = extractor.extract("coffee at Doutor in Tokyo")
        assert entities.places == ()
        assert entities.organizations == ()

    def test_compile_gazetteer_empty(self):
        assert compile_gazetteer([]) is None
        assert compile_gazetteer(["  ", ""]) is None

    def test_extra_names_from_settings(self):
        """Deployments can add their own names."""
        settings = ParserSettings(
            _env_file=None,
            extra_places="Kichijoji Station",
            extra_organizations="Corner Bakery, Local Deli",
        )
        extractor = EntityExtractor.from_settings(settings)
        entities = extractor.extract("bread at corner bakery near kichijoji station")
        assert entities.organizations == ("corner bakery",)
        assert entities.places == ("kichijoji station",)


class TestDateSpans:

    def test_relative_and_absolute(self, extractor):
        entities = extractor.extract("lunch yesterday and dinner on March 3rd")
        assert entities.dates == ("yesterday", "march 3rd")

    def test_no_dates(self, extractor):
        assert extractor.extract("I spent 680 yen on matcha latte at Doutor").dates == ()


class TestFullUtterance:

    def test_scenario(self, extractor):
        entities = extractor.extract("I spent 680 yen on matcha latte at Doutor")
        assert entities.amounts == ("680",)
        assert entities.currencies == ("yen",)
        assert entities.money == ("680 yen",)
        assert entities.organizations == ("doutor",)
        assert entities.places == ()
