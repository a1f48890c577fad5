"""
Entity Extractor

Pulls typed spans out of an utterance: bare numbers, currency words,
money expressions, places, organizations and date phrases.

Each entity type has its own sub-extractor and they do not consult each
other, so "680" shows up both in amounts and inside the money span
"680 yen". A sub-extractor that has nothing to look for (an empty
gazetteer, for instance) contributes an empty sequence.
"""

import re
from typing import Iterable, Optional

import structlog

from spendlog.config import ParserSettings
from spendlog.extraction.dates import DatePhraseDetector
from spendlog.extraction.lexicon import (
    CURRENCY_SYMBOLS,
    CURRENCY_WORDS,
    ORGANIZATIONS,
    PLACES,
)
from spendlog.models.spending import ExtractedEntities

logger = structlog.get_logger(__name__)


# Digit groups with optional thousands separators and decimal part.
NUMBER = r"\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d{1,3}(?:\.\d{3}){2,}|\d+(?:\.\d+)?"

# Not glued to letters, dates or times ("3rd", "3/15", "2024-03-01", "10:30").
AMOUNT_RE = re.compile(rf"(?<![\w.,/:-])(?:{NUMBER})(?![\w/:-]|[.,]\d)")

_WORD_ALT = "|".join(sorted(CURRENCY_WORDS, key=len, reverse=True))
_SYMBOL_ALT = "".join(re.escape(s) for s in CURRENCY_SYMBOLS)

CURRENCY_RE = re.compile(rf"[{_SYMBOL_ALT}]|\b(?:{_WORD_ALT})\b")

MONEY_RE = re.compile(
    rf"[{_SYMBOL_ALT}]\s?(?:{NUMBER})"
    rf"|\b(?:usd|jpy|idr|rp\.?)\s?(?:{NUMBER})"
    rf"|(?<![\w.,])(?:{NUMBER})\s?(?:{_WORD_ALT})\b"
)


def compile_gazetteer(names: Iterable[str]) -> Optional[re.Pattern]:
    """
    Build one word-bounded alternation out of a list of names.

    Longer names come first so "amazon prime" beats "amazon".
    Returns None for an empty list.
    """
    unique = sorted({n.strip().lower() for n in names if n and n.strip()}, key=len, reverse=True)
    if not unique:
        return None
    alternation = "|".join(re.escape(n) for n in unique)
    return re.compile(rf"(?<!\w)(?:{alternation})(?!\w)")


def find_all(pattern: Optional[re.Pattern], text: str) -> tuple[str, ...]:
    if pattern is None:
        return ()
    return tuple(m.group(0).strip() for m in pattern.finditer(text))


class EntityExtractor:
    """
    Produces ExtractedEntities from raw text.

    Text is case-folded before matching, so every span comes back
    lower case.
    """

    def __init__(
        self,
        places: Iterable[str] = PLACES,
        organizations: Iterable[str] = ORGANIZATIONS,
        date_detector: Optional[DatePhraseDetector] = None,
    ):
        self._places = compile_gazetteer(places)
        self._organizations = compile_gazetteer(organizations)
        self._date_detector = date_detector or DatePhraseDetector()

    @classmethod
    def from_settings(
        cls,
        settings: ParserSettings,
        date_detector: Optional[DatePhraseDetector] = None,
    ) -> "EntityExtractor":
        """Built-in gazetteers plus whatever the deployment configured."""
        return cls(
            places=PLACES + tuple(settings.extra_places_list),
            organizations=ORGANIZATIONS + tuple(settings.extra_organizations_list),
            date_detector=date_detector,
        )

    @property
    def date_detector(self) -> DatePhraseDetector:
        return self._date_detector

    def extract(self, text: str) -> ExtractedEntities:
        folded = text.lower()

        entities = ExtractedEntities(
            amounts=find_all(AMOUNT_RE, folded),
            currencies=find_all(CURRENCY_RE, folded),
            money=find_all(MONEY_RE, folded),
            places=find_all(self._places, folded),
            organizations=find_all(self._organizations, folded),
            dates=tuple(self._date_detector.spans(folded)),
        )

        logger.debug(
            "entities_extracted",
            amounts=len(entities.amounts),
            money=len(entities.money),
            places=len(entities.places),
            organizations=len(entities.organizations),
            dates=len(entities.dates),
        )
        return entities
