"""
In-memory storage.

Used when Google Sheets is not configured and in tests. Data lives for
the lifetime of the process.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from spendlog.models.audit import AuditEvent
from spendlog.models.spending import SpendingCategory, SpendingEntry
from spendlog.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    SpendingStorageInterface,
)


class InMemorySpendingStorage(SpendingStorageInterface):

    def __init__(self, entries: Optional[list[SpendingEntry]] = None):
        self._entries: list[SpendingEntry] = list(entries or [])

    async def append_entry(self, entry: SpendingEntry) -> bool:
        if any(existing.id == entry.id for existing in self._entries):
            raise DuplicateError(f"Spending entry already exists: {entry.id}")
        self._entries.append(entry)
        return True

    async def get_entry(self, entry_id: str) -> Optional[SpendingEntry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    async def list_entries(
        self,
        category: Optional[SpendingCategory] = None,
        user: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[SpendingEntry]:
        return [
            entry for entry in self._entries
            if (category is None or entry.category == category)
            and (user is None or entry.user == user)
            and (date_from is None or entry.date >= date_from)
            and (date_to is None or entry.date <= date_to)
        ]


class InMemoryAuditStorage(AuditStorageInterface):

    def __init__(self):
        self.events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self.events if e.correlation_id == correlation_id]
        return sorted(events, key=lambda e: e.timestamp)

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return sorted(self.events, key=lambda e: e.timestamp, reverse=True)[:limit]
