"""
Main Orchestrator for Spendlog

This module ties the components together and defines the end-to-end
flows for:
1. Voice parsing (utterance -> ParsedSpending proposal)
2. Spending entries (payload -> validate -> save, and listing)

The orchestrator enforces the boundaries:
- Voice parsing only proposes; nothing is saved until the user submits
  the reviewed entry through the spending flow
- Every step is audited
"""

from typing import Any, Mapping, Optional
from uuid import UUID

import structlog

from spendlog.audit import AuditLogger, create_correlation_id
from spendlog.config import get_settings
from spendlog.extraction import CategoryModel, SpendingParser
from spendlog.models.spending import (
    ParsedSpending,
    SpendingCategory,
    SpendingEntry,
    ValidationResult,
)
from spendlog.services.storage import (
    AuditStorageInterface,
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsSpendingStorage,
    InMemorySpendingStorage,
    NotFoundError,
    SpendingStorageInterface,
    StorageError,
)
from spendlog.validation import SpendingValidator

logger = structlog.get_logger(__name__)


STORAGE_SERVICE = "spending_storage"


class VoiceSpendingFlow:
    """
    Orchestrates voice parsing.

    Flow:
    1. Receive the finalized utterance
    2. Parse it into a ParsedSpending proposal
    3. Return the proposal for the user to review

    The flow never writes a spending entry.
    """

    def __init__(
        self,
        parser: Optional[SpendingParser] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._parser = parser or SpendingParser()
        self._audit_logger = audit_logger

    @property
    def parser(self) -> SpendingParser:
        return self._parser

    async def process_utterance(
        self,
        text: str,
        correlation_id: Optional[UUID] = None,
    ) -> ParsedSpending:
        """
        Parse one utterance.

        Unexpected failures are audited and re-raised for the HTTP layer
        to turn into a generic error.
        """
        correlation_id = correlation_id or create_correlation_id()

        if self._audit_logger:
            await self._audit_logger.log_utterance_received(
                text_length=len(text),
                correlation_id=correlation_id,
            )

        try:
            parsed = self._parser.parse(text)
        except Exception as e:
            if self._audit_logger:
                await self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"stage": "parse"},
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            await self._audit_logger.log_utterance_parsed(
                category=parsed.category.value,
                currency=parsed.currency.value,
                amount=str(parsed.amount),
                confidence=parsed.confidence,
                correlation_id=correlation_id,
            )

        return parsed

    async def reject_input(
        self,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Record a request that never reached the parser."""
        if self._audit_logger:
            await self._audit_logger.log_input_rejected(
                reason=reason,
                correlation_id=correlation_id or create_correlation_id(),
            )


class SpendingFlow:
    """
    Orchestrates spending entry persistence.

    Flow:
    1. Validate the submitted payload (two stages)
    2. Refuse payloads with errors, keep warnings for the caller
    3. Assign id and timestamp, append to storage
    """

    def __init__(
        self,
        spending_storage: SpendingStorageInterface,
        validator: Optional[SpendingValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = spending_storage
        self._validator = validator or SpendingValidator(spending_storage)
        self._audit_logger = audit_logger

    async def _storage_failed(self, error: StorageError, correlation_id: Optional[UUID]) -> None:
        if self._audit_logger:
            await self._audit_logger.log_external_service_error(
                service=STORAGE_SERVICE,
                error_message=str(error),
                correlation_id=correlation_id or create_correlation_id(),
            )

    async def list_entries(
        self,
        category: Optional[SpendingCategory] = None,
        user: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> list[SpendingEntry]:
        """
        Saved entries, optionally filtered.

        Storage failures are audited as external service errors and re-raised.
        """
        try:
            return await self._storage.list_entries(category=category, user=user)
        except StorageError as e:
            await self._storage_failed(e, correlation_id)
            raise

    async def get_entry(
        self,
        entry_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> SpendingEntry:
        try:
            entry = await self._storage.get_entry(entry_id)
        except StorageError as e:
            await self._storage_failed(e, correlation_id)
            raise
        if entry is None:
            raise NotFoundError(f"Spending entry not found: {entry_id}")
        return entry

    async def add_entry(
        self,
        payload: Mapping[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> tuple[ValidationResult, Optional[SpendingEntry]]:
        """
        Validate and save a spending entry.

        Returns:
            (validation_result, saved_entry). saved_entry is None when the
            payload had errors.

        Raises:
            StorageError: If the entry passed validation but could not be saved
        """
        correlation_id = correlation_id or create_correlation_id()

        result = await self._validator.validate(payload)

        if result.entry is None or result.has_errors:
            if self._audit_logger:
                await self._audit_logger.log_spending_rejected(
                    issues=[issue.model_dump() for issue in result.issues],
                    correlation_id=correlation_id,
                )
            return result, None

        entry = SpendingEntry.from_new(result.entry)

        try:
            await self._storage.append_entry(entry)
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_save_failed(
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            await self._audit_logger.log_spending_saved(
                entry_id=entry.id,
                category=entry.category.value,
                amount=str(entry.amount),
                currency=entry.currency.value,
                correlation_id=correlation_id,
            )

        return result, entry


def create_app_components(
    use_storage: bool = True,
    category_model: Optional[CategoryModel] = None,
) -> tuple[VoiceSpendingFlow, SpendingFlow, Optional[GoogleSheetsClient]]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to initialize Google Sheets storage.
                    Set to False for testing without Sheets; entries
                    are then kept in memory.
        category_model: Trained classifier to inject into the parser.

    Returns:
        (voice_flow, spending_flow, sheets_client)
    """
    settings = get_settings()

    sheets_client = None
    spending_storage: SpendingStorageInterface = InMemorySpendingStorage()
    audit_storage: Optional[AuditStorageInterface] = None

    if use_storage:
        try:
            sheets_client = GoogleSheetsClient()
            spending_storage = GoogleSheetsSpendingStorage(sheets_client)
            if settings.app.audit_to_sheets:
                audit_storage = GoogleSheetsAuditStorage(sheets_client)
        except Exception as e:
            # Storage not configured - continue in memory
            logger.warning("storage_not_configured", error=str(e))
            sheets_client = None
            spending_storage = InMemorySpendingStorage()
            audit_storage = None

    audit_logger = AuditLogger(audit_storage)

    voice_flow = VoiceSpendingFlow(
        parser=SpendingParser(category_model=category_model, settings=settings.parser),
        audit_logger=audit_logger,
    )

    spending_flow = SpendingFlow(
        spending_storage=spending_storage,
        validator=SpendingValidator(spending_storage, settings=settings.app),
        audit_logger=audit_logger,
    )

    return voice_flow, spending_flow, sheets_client
