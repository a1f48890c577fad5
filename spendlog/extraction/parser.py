"""
Spending Parser

Runs the whole extraction pipeline over one utterance:

    text -> entities -> money, description, date
         -> category (text + description)
         -> confidence (everything above)

The parser holds no per-request state. Apart from the injected category
model every step is a pure function of the text and the processing date,
so a parser can be shared by concurrent requests.
"""

import re
from datetime import date, datetime, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo

import structlog

from spendlog.config import ParserSettings
from spendlog.extraction.classifier import (
    CategoryModel,
    categorize,
    get_category_model,
)
from spendlog.extraction.confidence import score_confidence
from spendlog.extraction.dates import DatePhraseDetector, resolve_date
from spendlog.extraction.description import resolve_description
from spendlog.extraction.entities import EntityExtractor
from spendlog.extraction.money import resolve_money
from spendlog.models.spending import ExtractedEntities, ParsedSpending

logger = structlog.get_logger(__name__)


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def resolve_location(entities: ExtractedEntities, text: str) -> str:
    """
    First place, else first organization, as it was written in the text.

    Entity spans are case-folded; the original casing is looked up again
    so "Doutor" comes back as "Doutor".
    """
    candidates = entities.places or entities.organizations
    if not candidates:
        return ""
    span = candidates[0]
    match = re.search(re.escape(span), text, re.IGNORECASE)
    return match.group(0) if match else span


class SpendingParser:
    """
    Converts an utterance into a ParsedSpending proposal.

    Usage:
        parser = SpendingParser(category_model=CategoryModel.train())
        parsed = parser.parse("I spent 680 yen on matcha latte at Doutor")
    """

    def __init__(
        self,
        category_model: Optional[CategoryModel] = None,
        extractor: Optional[EntityExtractor] = None,
        date_detector: Optional[DatePhraseDetector] = None,
        clock: Optional[Clock] = None,
        settings: Optional[ParserSettings] = None,
    ):
        self.settings = settings or ParserSettings()
        self.date_detector = date_detector or DatePhraseDetector()
        self.extractor = extractor or EntityExtractor.from_settings(
            self.settings, date_detector=self.date_detector
        )
        self.category_model = category_model or get_category_model()
        self.clock = clock or utc_now
        self._zone = ZoneInfo(self.settings.timezone)

    def processing_date(self, now: datetime) -> date:
        """Calendar date of `now` in the configured timezone."""
        return now.astimezone(self._zone).date()

    def parse(self, text: str) -> ParsedSpending:
        now = self.clock()
        today = self.processing_date(now)

        entities = self.extractor.extract(text)

        money = resolve_money(entities.money, entities.amounts)
        description = resolve_description(text)
        spent_on = resolve_date(text, entities.dates, today, detector=self.date_detector)

        category = categorize(
            self.category_model,
            f"{text} {description}".lower(),
            floor=self.settings.category_confidence_floor,
        )
        confidence = score_confidence(entities, money.amount, description)

        parsed = ParsedSpending(
            amount=money.amount,
            currency=money.currency,
            category=category,
            description=description,
            location=resolve_location(entities, text),
            date=spent_on,
            confidence=confidence,
            timestamp=now,
        )

        logger.info(
            "utterance_parsed",
            category=parsed.category.value,
            currency=parsed.currency.value,
            has_amount=parsed.amount > 0,
            confidence=parsed.confidence,
        )
        return parsed
