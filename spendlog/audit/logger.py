"""
Audit Logger

Every significant action in the system is logged: utterances received and
parsed, requests rejected, spending entries saved or refused, and failures.

The audit logger:
- Is async so it fits the request handlers
- Never breaks the main flow when the audit backend fails
- Supports correlation IDs to trace the events of one request
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from spendlog.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from spendlog.services.storage import AuditStorageInterface


def configure_logging(log_level: str = "INFO") -> None:
    """Route structlog through stdlib logging and render JSON lines."""
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. The audit storage backend, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_utterance_received(
        self,
        text_length: int,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.utterance_received(
            text_length=text_length,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_utterance_parsed(
        self,
        category: str,
        currency: str,
        amount: str,
        confidence: float,
        correlation_id: UUID,
    ) -> None:
        """Log a successful parse. The utterance text itself is not recorded."""
        event = AuditEventBuilder.utterance_parsed(
            category=category,
            currency=currency,
            amount=amount,
            confidence=confidence,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_input_rejected(
        self,
        reason: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.input_rejected(
            reason=reason,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_spending_saved(
        self,
        entry_id: str,
        category: str,
        amount: str,
        currency: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.spending_saved(
            entry_id=entry_id,
            category=category,
            amount=amount,
            currency=currency,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_spending_rejected(
        self,
        issues: list[dict],
        correlation_id: UUID,
    ) -> None:
        """Log a spending entry that failed validation."""
        event = AuditEventBuilder.spending_rejected(
            issues=issues,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_save_failed(
        self,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.save_failed(
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_external_service_error(
        self,
        service: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log external service error."""
        event = AuditEventBuilder.external_service_error(
            service=service,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a request and pass it through all
    subsequent operations.
    """
    return uuid4()
