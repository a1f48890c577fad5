"""
Data Models Package

This package contains all Pydantic models used in Spendlog.
All data flowing through the system must conform to these schemas.
"""

from spendlog.models.spending import (
    CategoryPrediction,
    ConfidenceLevel,
    CurrencyCode,
    ExtractedEntities,
    MoneyAmount,
    NewSpendingEntry,
    ParsedSpending,
    SpendingCategory,
    SpendingEntry,
    ValidationIssue,
    ValidationResult,
    VoiceProcessRequest,
    generate_entry_id,
)
from spendlog.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Spending models
    "CategoryPrediction",
    "ConfidenceLevel",
    "CurrencyCode",
    "ExtractedEntities",
    "MoneyAmount",
    "NewSpendingEntry",
    "ParsedSpending",
    "SpendingCategory",
    "SpendingEntry",
    "ValidationIssue",
    "ValidationResult",
    "VoiceProcessRequest",
    "generate_entry_id",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
