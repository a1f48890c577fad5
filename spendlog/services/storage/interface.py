"""
Abstract Storage Interface

Business logic talks to storage only through these interfaces, so the
Google Sheets backend can be replaced (or swapped for the in-memory one
in tests) without touching the flows.

The interface is intentionally small: the spending log is append-only
from the application's point of view.
"""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from spendlog.models.audit import AuditEvent
from spendlog.models.spending import CurrencyCode, SpendingCategory, SpendingEntry


class SpendingStorageInterface(ABC):
    """
    Abstract interface for spending entry storage.

    Any storage implementation (Google Sheets, memory, a database)
    must implement these methods.
    """

    @abstractmethod
    async def append_entry(self, entry: SpendingEntry) -> bool:
        """
        Append a spending entry.

        Args:
            entry: The entry to save

        Returns:
            True if saved successfully

        Raises:
            DuplicateError: If an entry with the same id exists
            StorageError: If the save fails
        """
        pass

    @abstractmethod
    async def get_entry(self, entry_id: str) -> Optional[SpendingEntry]:
        """
        Retrieve an entry by its id.

        Returns:
            The entry if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_entries(
        self,
        category: Optional[SpendingCategory] = None,
        user: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[SpendingEntry]:
        """
        List entries in storage order, with optional filters.

        Args:
            category: Only entries in this category
            user: Only entries owned by this user label
            date_from: Entries on or after this date
            date_to: Entries on or before this date
        """
        pass

    async def get_total_by_category(
        self,
        currency: CurrencyCode,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> dict[SpendingCategory, Decimal]:
        """
        Sum of amounts per category for one currency.

        Categories without spending are left out.
        """
        totals: dict[SpendingCategory, Decimal] = {}
        for entry in await self.list_entries(date_from=date_from, date_to=date_to):
            if entry.currency != currency:
                continue
            totals[entry.category] = totals.get(entry.category, Decimal("0")) + entry.amount
        return totals


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (one HTTP request).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
