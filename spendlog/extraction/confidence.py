"""
Confidence Scorer

An additive score of how much of the expected information was found in
an utterance. It only drives the badge shown during review; nothing is
rejected because of it.
"""

from decimal import Decimal
from types import MappingProxyType
from typing import Mapping

from spendlog.extraction.description import is_generic
from spendlog.models.spending import ExtractedEntities


CONFIDENCE_WEIGHTS: Mapping[str, Decimal] = MappingProxyType({
    "amount": Decimal("0.4"),
    "description": Decimal("0.3"),
    "location": Decimal("0.2"),
    "date": Decimal("0.1"),
})

MAX_CONFIDENCE = Decimal("1")


def confidence_signals(
    entities: ExtractedEntities,
    amount: Decimal,
    description: str,
) -> dict[str, bool]:
    """Which weighted signals are present, keyed like CONFIDENCE_WEIGHTS."""
    return {
        "amount": amount > 0,
        "description": not is_generic(description),
        "location": entities.has_location,
        "date": bool(entities.dates),
    }


def score_confidence(
    entities: ExtractedEntities,
    amount: Decimal,
    description: str,
    weights: Mapping[str, Decimal] = CONFIDENCE_WEIGHTS,
) -> float:
    signals = confidence_signals(entities, amount, description)
    total = sum(
        (weights[name] for name, present in signals.items() if present),
        Decimal("0"),
    )
    return float(min(total, MAX_CONFIDENCE))
