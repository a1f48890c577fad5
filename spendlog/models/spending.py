"""
Core Data Models for Spendlog

These models define the schemas for all data flowing through the system:
1. What the extraction pipeline produces from an utterance
2. What the HTTP boundary accepts
3. What gets persisted as a spending entry

Closed value sets (categories, currencies) are enums so the classifier,
the storage layer and the UI all agree on the same labels.
"""

import secrets
import time
import datetime as dt
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictStr,
    field_serializer,
    field_validator,
)


# Total digits allowed in an amount, so it survives JSON and Sheets as a number.
AMOUNT_MAX_DIGITS = 15


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class SpendingCategory(str, Enum):
    """
    Supported spending categories.

    Every label the category classifier can emit must be a member here.
    OTHER is the catch-all for low-confidence classifications.
    """
    GROCERIES = "groceries"
    HOBBY = "hobby"
    TRANSPORTATION = "transportation"
    ENTERTAINMENT = "entertainment"
    UTILITIES = "utilities"
    DINING = "dining"
    SHOPPING = "shopping"
    HEALTH = "health"
    EDUCATION = "education"
    COFFEE = "coffee"
    OTHER = "other"


class CurrencyCode(str, Enum):
    """ISO 4217 codes the application knows how to display."""
    USD = "USD"
    JPY = "JPY"
    IDR = "IDR"


class ConfidenceLevel(str, Enum):
    """Badge shown next to a parsed spending while the user reviews it."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_score(cls, score: float) -> "ConfidenceLevel":
        if score >= 0.8:
            return cls.HIGH
        if score >= 0.6:
            return cls.MEDIUM
        return cls.LOW


# =============================================================================
# EXTRACTION MODELS
# =============================================================================

class ExtractedEntities(BaseModel):
    """
    Typed spans pulled out of a case-folded utterance.

    Each field is filled by an independent sub-extractor and may be empty.
    Spans keep first-occurrence order and are never deduplicated.
    """
    model_config = ConfigDict(frozen=True)

    amounts: tuple[str, ...] = Field(
        default=(),
        description="Bare numeric tokens, e.g. '680', '25.50'"
    )
    currencies: tuple[str, ...] = Field(
        default=(),
        description="Currency words and symbols, e.g. 'yen', '$'"
    )
    money: tuple[str, ...] = Field(
        default=(),
        description="Number + currency marker expressions, e.g. '680 yen', '$25'"
    )
    places: tuple[str, ...] = Field(
        default=(),
        description="Geographic location names"
    )
    organizations: tuple[str, ...] = Field(
        default=(),
        description="Business and brand names"
    )
    dates: tuple[str, ...] = Field(
        default=(),
        description="Absolute and relative date phrases"
    )

    @property
    def has_location(self) -> bool:
        return bool(self.places or self.organizations)


class MoneyAmount(BaseModel):
    """Amount and currency resolved from money/number spans."""
    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(default=Decimal("0"), ge=0, max_digits=AMOUNT_MAX_DIGITS)
    currency: CurrencyCode = CurrencyCode.USD


class CategoryPrediction(BaseModel):
    """A single label with the classifier's posterior probability."""
    model_config = ConfigDict(frozen=True)

    category: SpendingCategory
    confidence: float = Field(ge=0.0, le=1.0)


class ParsedSpending(BaseModel):
    """
    The extraction pipeline's output for one utterance.

    This is PROPOSED data. The caller shows it to the user for
    confirmation or editing before anything is saved.
    """

    amount: Decimal = Field(
        ...,
        ge=0,
        max_digits=AMOUNT_MAX_DIGITS,
        description="Resolved amount (0 when none was found)"
    )
    currency: CurrencyCode = Field(
        ...,
        description="Resolved currency code"
    )
    category: SpendingCategory = Field(
        ...,
        description="Classified spending category"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="Human-readable label for the expense"
    )
    location: str = Field(
        default="",
        description="First place or organization mentioned, original casing"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date the spending happened"
    )
    confidence: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="How much of the expected information was extracted"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When parsing occurred"
    )

    @field_serializer("amount", when_used="json")
    def _amount_as_number(self, v: Decimal) -> float:
        return float(v)

    @property
    def confidence_level(self) -> ConfidenceLevel:
        return ConfidenceLevel.from_score(self.confidence)


# =============================================================================
# HTTP REQUEST MODELS
# =============================================================================

class VoiceProcessRequest(BaseModel):
    """Body of the voice-processing endpoint."""

    text: StrictStr = Field(
        ...,
        description="Finalized utterance from speech-to-text or typed input"
    )

    @field_validator('text')
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("text must not be blank")
        try:
            v.encode("utf-8")
        except UnicodeEncodeError:
            raise ValueError("text must be valid unicode")
        return v


# =============================================================================
# PERSISTED SPENDING ENTRY
# =============================================================================

def generate_entry_id() -> str:
    """Entry ids look like entry_<epoch millis>_<9 random chars>."""
    return f"entry_{int(time.time() * 1000)}_{secrets.token_hex(5)[:9]}"


class NewSpendingEntry(BaseModel):
    """
    A spending the user has confirmed (manual form or reviewed voice parse).

    Only these are handed to storage.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    amount: Decimal = Field(
        ...,
        gt=0,
        max_digits=AMOUNT_MAX_DIGITS,
        decimal_places=2,
        description="Amount spent"
    )
    category: SpendingCategory = Field(
        ...,
        description="Spending category"
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="What the money was spent on"
    )
    date: dt.date = Field(
        ...,
        description="Date of the spending"
    )
    user: str = Field(
        default="sharing",
        min_length=1,
        max_length=200,
        description="Who the spending belongs to"
    )
    currency: CurrencyCode = Field(
        default=CurrencyCode.USD,
        description="Currency of the amount"
    )

    @field_serializer("amount", when_used="json")
    def _amount_as_number(self, v: Decimal) -> float:
        return float(v)


class SpendingEntry(NewSpendingEntry):
    """A spending entry as stored in the spreadsheet."""

    id: str = Field(
        default_factory=generate_entry_id,
        description="Unique entry id"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the entry was saved"
    )

    @classmethod
    def from_new(cls, entry: NewSpendingEntry) -> "SpendingEntry":
        return cls(**entry.model_dump())


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'future_date', 'suspicious_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage validation of a spending entry.

    Stage 1: Schema validation (required fields, value ranges)
    Stage 2: Semantic validation (dates, amounts that look wrong)
    """

    validated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    schema_valid: bool
    semantic_valid: bool
    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-blocking warnings"
    )
    entry: Optional[NewSpendingEntry] = Field(
        default=None,
        description="The parsed entry, when the schema stage passed"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
