"""
Money Resolver

Turns the money and bare-number spans of an utterance into a single
amount and currency. Only the first span of each sequence is consulted;
the primary total is assumed to be mentioned first.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Sequence

from spendlog.models.spending import AMOUNT_MAX_DIGITS, CurrencyCode, MoneyAmount


# Digit groups with optional thousands separators and up to two decimals.
NUMERIC_RE = re.compile(r"\d[\d,]*(?:\.\d{1,2})?")

# Rupiah amounts group thousands with dots: "rp 10.000", "1.500.000 rupiah".
DOT_GROUPED_RE = re.compile(r"(?<![\d.,])\d{1,3}(?:\.\d{3})+(?![\d.,])")

CURRENCY_MARKERS: tuple[tuple[re.Pattern, CurrencyCode], ...] = (
    (re.compile(r"\byen\b|\bjpy\b|¥", re.IGNORECASE), CurrencyCode.JPY),
    (re.compile(r"\bdollars?\b|\bbucks?\b|\busd\b|\$", re.IGNORECASE), CurrencyCode.USD),
    (re.compile(r"\brupiah\b|\bidr\b|\brp\b", re.IGNORECASE), CurrencyCode.IDR),
)

DEFAULT_CURRENCY = CurrencyCode.USD


def parse_decimal(raw: str) -> Decimal:
    """
    Parse a numeric span, dropping thousands separators.

    Anything that is not a finite non-negative number, or that has more
    than AMOUNT_MAX_DIGITS digits, comes back as 0.
    """
    cleaned = raw.replace(",", "").strip()
    if not cleaned:
        return Decimal("0")
    if sum(ch.isdigit() for ch in cleaned) > AMOUNT_MAX_DIGITS:
        return Decimal("0")
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return Decimal("0")
    if not value.is_finite() or value < 0:
        return Decimal("0")
    return value


def detect_currency(span: str) -> CurrencyCode:
    """Currency of the earliest marker in the span, USD when there is none."""
    best = None
    for pattern, code in CURRENCY_MARKERS:
        match = pattern.search(span)
        if match and (best is None or match.start() < best[0]):
            best = (match.start(), code)
    return best[1] if best else DEFAULT_CURRENCY


def _span_amount(span: str, currency: CurrencyCode) -> Decimal:
    if currency == CurrencyCode.IDR:
        grouped = DOT_GROUPED_RE.search(span)
        if grouped:
            return parse_decimal(grouped.group(0).replace(".", ""))
    number = NUMERIC_RE.search(span)
    if number:
        return parse_decimal(number.group(0))
    return Decimal("0")


def resolve_money(money: Sequence[str], amounts: Sequence[str]) -> MoneyAmount:
    amount = Decimal("0")
    currency = DEFAULT_CURRENCY

    if money:
        span = money[0]
        currency = detect_currency(span)
        amount = _span_amount(span, currency)

    if amount <= 0 and amounts:
        amount = parse_decimal(amounts[0])

    return MoneyAmount(amount=amount, currency=currency)
