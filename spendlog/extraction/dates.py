"""
Date phrase detection and resolution.

The same rule table serves two callers:
- the entity extractor, which only needs the matched phrases
- the date resolver, which needs each phrase turned into a calendar date

Every rule is a compiled pattern plus a resolver taking the match and the
processing date. Resolvers return None for impossible dates (February 30)
instead of raising.
"""

import calendar
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Iterable, Optional

import structlog

logger = structlog.get_logger(__name__)


WEEKDAYS = (
    "monday", "tuesday", "wednesday", "thursday",
    "friday", "saturday", "sunday",
)

MONTHS = {
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sept": 9, "sep": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
}

NUMBER_WORDS = {
    "a": 1, "an": 1, "one": 1, "two": 2, "three": 3, "four": 4,
    "five": 5, "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
}

_MONTH_ALT = "|".join(sorted(MONTHS, key=len, reverse=True))
_WEEKDAY_ALT = "|".join(WEEKDAYS)
_COUNT_ALT = "|".join(sorted(NUMBER_WORDS, key=len, reverse=True))


Resolver = Callable[[re.Match, date], Optional[date]]


@dataclass(frozen=True)
class DateRule:
    name: str
    pattern: re.Pattern
    resolve: Resolver


@dataclass(frozen=True)
class DateCandidate:
    """A date phrase found in text and the calendar date it stands for."""
    text: str
    start: int
    end: int
    rule: str
    value: Optional[date]


def shift_months(day: date, months: int) -> date:
    """Move by whole months, clamping the day to the target month's length."""
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def _count(token: str) -> int:
    if token.isdigit():
        return int(token)
    return NUMBER_WORDS[token]


def _expand_year(raw: Optional[str], today: date) -> int:
    if not raw:
        return today.year
    year = int(raw)
    if len(raw) == 2:
        year += 2000
    return year


def _ago(match: re.Match, today: date) -> date:
    n = _count(match.group(1))
    unit = match.group(2)
    days = n * 7 if unit == "week" else n
    return today - timedelta(days=days)


def _last_period(match: re.Match, today: date) -> date:
    period = match.group(1)
    if period == "week":
        return today - timedelta(days=7)
    if period == "month":
        return shift_months(today, -1)
    return shift_months(today, -12)


def _weekday(match: re.Match, today: date) -> date:
    qualifier = match.group(1)
    target = WEEKDAYS.index(match.group(2))
    delta = (today.weekday() - target) % 7
    if qualifier == "last" and delta == 0:
        delta = 7
    return today - timedelta(days=delta)


def _month_day(match: re.Match, today: date) -> date:
    month = MONTHS[match.group(1)]
    return date(_expand_year(match.group(3), today), month, int(match.group(2)))


def _day_month(match: re.Match, today: date) -> date:
    month = MONTHS[match.group(2)]
    return date(_expand_year(match.group(3), today), month, int(match.group(1)))


def _iso(match: re.Match, today: date) -> date:
    return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))


def _slashed(match: re.Match, today: date) -> date:
    month, day = int(match.group(1)), int(match.group(2))
    return date(_expand_year(match.group(3), today), month, day)


DEFAULT_RULES: tuple[DateRule, ...] = (
    DateRule(
        "day_before_yesterday",
        re.compile(r"\b(?:the )?day before yesterday\b"),
        lambda m, today: today - timedelta(days=2),
    ),
    DateRule(
        "today",
        re.compile(r"\b(?:today|tonight|this (?:morning|afternoon|evening))\b"),
        lambda m, today: today,
    ),
    DateRule(
        "yesterday",
        re.compile(r"\b(?:yesterday|last night)\b"),
        lambda m, today: today - timedelta(days=1),
    ),
    DateRule(
        "tomorrow",
        re.compile(r"\btomorrow\b"),
        lambda m, today: today + timedelta(days=1),
    ),
    DateRule(
        "ago",
        re.compile(rf"\b(\d{{1,3}}|{_COUNT_ALT}) (day|week)s? ago\b"),
        _ago,
    ),
    DateRule(
        "last_period",
        re.compile(r"\blast (week|month|year)\b"),
        _last_period,
    ),
    DateRule(
        "weekday",
        re.compile(rf"\b(?:(last|this|on) )?({_WEEKDAY_ALT})\b"),
        _weekday,
    ),
    DateRule(
        "month_day",
        re.compile(
            rf"\b({_MONTH_ALT})\.? (\d{{1,2}})(?:st|nd|rd|th)?\b(?:,? (\d{{4}})\b)?"
        ),
        _month_day,
    ),
    DateRule(
        "day_month",
        re.compile(
            rf"\b(\d{{1,2}})(?:st|nd|rd|th)? (?:of )?({_MONTH_ALT})\b\.?(?:,? (\d{{4}})\b)?"
        ),
        _day_month,
    ),
    DateRule(
        "iso",
        re.compile(r"\b(\d{4})-(\d{1,2})-(\d{1,2})\b"),
        _iso,
    ),
    DateRule(
        "slashed",
        re.compile(r"\b(\d{1,2})/(\d{1,2})(?:/(\d{4}|\d{2}))?\b"),
        _slashed,
    ),
)


class DatePhraseDetector:
    """
    Finds date phrases in free text.

    Matches from all rules are merged left to right. When two matches
    overlap, the one starting first wins, then the longer one, then the
    rule listed first.
    """

    def __init__(self, rules: Iterable[DateRule] = DEFAULT_RULES):
        self._rules = tuple(rules)

    def _matches(self, text: str) -> list[tuple[re.Match, int, DateRule]]:
        folded = text.lower()
        found = []
        for priority, rule in enumerate(self._rules):
            for match in rule.pattern.finditer(folded):
                found.append((match, priority, rule))

        found.sort(key=lambda item: (item[0].start(), -len(item[0].group(0)), item[1]))

        selected = []
        cursor = 0
        for match, priority, rule in found:
            if match.start() < cursor:
                continue
            selected.append((match, priority, rule))
            cursor = match.end()
        return selected

    def spans(self, text: str) -> list[str]:
        """Matched date phrases, in order of appearance."""
        return [match.group(0) for match, _, _ in self._matches(text)]

    def candidates(self, text: str, today: date) -> list[DateCandidate]:
        """Matched phrases with their resolved calendar dates."""
        result = []
        for match, _, rule in self._matches(text):
            try:
                value = rule.resolve(match, today)
            except (ValueError, OverflowError, KeyError):
                logger.debug("date_phrase_unresolved", phrase=match.group(0), rule=rule.name)
                value = None
            result.append(DateCandidate(
                text=match.group(0),
                start=match.start(),
                end=match.end(),
                rule=rule.name,
                value=value,
            ))
        return result


def resolve_date(
    text: str,
    date_spans: Iterable[str],
    today: date,
    detector: Optional[DatePhraseDetector] = None,
) -> date:
    """
    Resolve the spending date for an utterance.

    The first phrase that maps to a real calendar date wins. With no date
    phrase, or none that resolves, the processing date is returned.
    """
    if not tuple(date_spans):
        return today

    detector = detector or DatePhraseDetector()
    for candidate in detector.candidates(text, today):
        if candidate.value is not None:
            return candidate.value
    return today
