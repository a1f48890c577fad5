"""
Two-Stage Validation for spending entries

Entries reach storage from the manual form or from a reviewed voice
parse. Before saving, each payload goes through two stages:

STAGE 1 - SCHEMA VALIDATION:
- Required field presence
- Type and format checks (through the NewSpendingEntry model)

STAGE 2 - SEMANTIC VALIDATION:
- Future and very old dates
- Amounts that look too high or too low
- Possible duplicates of an existing entry

Stage 2 only runs when stage 1 passes. Validation never fixes anything
silently; it reports issues and lets the caller decide.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Mapping, Optional

import structlog
from pydantic import ValidationError

from spendlog.config import AppSettings, get_settings
from spendlog.models.spending import (
    NewSpendingEntry,
    ValidationIssue,
    ValidationResult,
)
from spendlog.services.storage import SpendingStorageInterface, StorageError

logger = structlog.get_logger(__name__)


REQUIRED_FIELDS = ("amount", "category", "description", "date")


class SpendingValidator:
    """
    Validates a spending payload through a two-stage pipeline.

    Stage 1: Schema validation (can run without storage)
    Stage 2: Semantic validation (uses storage for duplicate checks)
    """

    def __init__(
        self,
        spending_storage: Optional[SpendingStorageInterface] = None,
        settings: Optional[AppSettings] = None,
    ):
        """
        Args:
            spending_storage: Storage used for duplicate checking.
                             If None, duplicate checking is skipped.
        """
        self._storage = spending_storage
        self._settings = settings or get_settings().app

    def _validate_schema(
        self,
        payload: Mapping[str, Any],
    ) -> tuple[Optional[NewSpendingEntry], list[ValidationIssue]]:
        """
        Stage 1: Schema validation.

        Returns: (entry or None, list_of_issues)
        """
        issues = []

        for name in REQUIRED_FIELDS:
            if not payload.get(name):
                issues.append(ValidationIssue(
                    field=name,
                    issue_type="missing",
                    message=f"{name} is required",
                    severity="error",
                ))
        if issues:
            return None, issues

        try:
            entry = NewSpendingEntry.model_validate(payload)
        except ValidationError as e:
            for error in e.errors():
                issues.append(ValidationIssue(
                    field=".".join(str(part) for part in error["loc"]) or "entry",
                    issue_type="invalid_value",
                    message=error["msg"],
                    severity="error",
                ))
            return None, issues

        return entry, issues

    def _validate_semantic(
        self,
        entry: NewSpendingEntry,
        today: date,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 2: Semantic validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        max_future_date = today + timedelta(days=self._settings.future_date_tolerance_days)
        if entry.date > max_future_date:
            issues.append(ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Spending date ({entry.date}) is in the future",
                severity="warning",
                suggested_fix="Please verify the date is correct",
            ))

        if entry.date < today - timedelta(days=365 * 2):
            issues.append(ValidationIssue(
                field="date",
                issue_type="suspicious_date",
                message=f"Spending date ({entry.date}) seems unusually old",
                severity="warning",
                suggested_fix="Please verify the date is correct",
            ))

        max_amount = Decimal(str(self._settings.max_spending_amount))
        if entry.amount > max_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({entry.amount:,.2f} {entry.currency.value}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

        if entry.amount < Decimal("1"):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({entry.amount} {entry.currency.value}) seems unusually low",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    async def _check_duplicates(
        self,
        entry: NewSpendingEntry,
    ) -> list[ValidationIssue]:
        """Warn when an entry with the same date, amount and description exists."""
        if self._storage is None:
            return []

        try:
            same_day = await self._storage.list_entries(
                user=entry.user,
                date_from=entry.date,
                date_to=entry.date,
            )
        except StorageError as e:
            logger.warning("duplicate_check_skipped", error=str(e))
            return []

        for existing in same_day:
            if (
                existing.amount == entry.amount
                and existing.currency == entry.currency
                and existing.description.lower() == entry.description.lower()
            ):
                return [ValidationIssue(
                    field="duplicate",
                    issue_type="potential_duplicate",
                    message=(
                        f"An entry for {entry.amount} {entry.currency.value} "
                        f"on {entry.date} may already exist"
                    ),
                    severity="warning",
                    suggested_fix="Please verify this isn't a duplicate entry",
                )]
        return []

    async def validate(
        self,
        payload: Mapping[str, Any],
        check_duplicates: bool = True,
        today: Optional[date] = None,
    ) -> ValidationResult:
        """
        Run full two-stage validation pipeline.

        Args:
            payload: Raw request body for a new spending entry
            check_duplicates: Whether to look for duplicates in storage
            today: Reference date for date checks (defaults to today)

        Returns:
            ValidationResult with all issues found and, when the schema
            stage passed, the parsed entry
        """
        today = today or date.today()
        all_issues = []

        entry, schema_issues = self._validate_schema(payload)
        all_issues.extend(schema_issues)
        schema_valid = entry is not None

        semantic_valid = False
        if entry is not None:
            semantic_valid, semantic_issues = self._validate_semantic(entry, today)
            all_issues.extend(semantic_issues)

            if check_duplicates:
                all_issues.extend(await self._check_duplicates(entry))

        warnings = [issue.message for issue in all_issues if issue.severity == "warning"]

        return ValidationResult(
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=schema_valid and semantic_valid,
            issues=all_issues,
            warnings=warnings,
            entry=entry,
        )
