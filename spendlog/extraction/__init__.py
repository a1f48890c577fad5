"""
Extraction Package

Turns a free-form spending utterance into a structured ParsedSpending.
"""

from spendlog.extraction.classifier import (
    TRAINING_CORPUS,
    CategoryModel,
    categorize,
    get_category_model,
)
from spendlog.extraction.confidence import (
    CONFIDENCE_WEIGHTS,
    confidence_signals,
    score_confidence,
)
from spendlog.extraction.dates import (
    DateCandidate,
    DatePhraseDetector,
    DateRule,
    resolve_date,
)
from spendlog.extraction.description import GENERIC_DESCRIPTION, resolve_description
from spendlog.extraction.entities import EntityExtractor
from spendlog.extraction.money import detect_currency, parse_decimal, resolve_money
from spendlog.extraction.parser import SpendingParser, resolve_location

__all__ = [
    "TRAINING_CORPUS",
    "CategoryModel",
    "categorize",
    "get_category_model",
    "CONFIDENCE_WEIGHTS",
    "confidence_signals",
    "score_confidence",
    "DateCandidate",
    "DatePhraseDetector",
    "DateRule",
    "resolve_date",
    "GENERIC_DESCRIPTION",
    "resolve_description",
    "EntityExtractor",
    "detect_currency",
    "parse_decimal",
    "resolve_money",
    "SpendingParser",
    "resolve_location",
]
