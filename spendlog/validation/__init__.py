"""Validation package."""

from spendlog.validation.validator import REQUIRED_FIELDS, SpendingValidator

__all__ = ["REQUIRED_FIELDS", "SpendingValidator"]
