"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Google Sheets is the production backend; the in-memory backend is used when
Sheets is not configured and in tests.
"""

from spendlog.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    DuplicateError,
    NotFoundError,
    SpendingStorageInterface,
    StorageError,
)
from spendlog.services.storage.google_sheets import (
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsSpendingStorage,
    entry_to_row,
    row_to_entry,
)
from spendlog.services.storage.memory import (
    InMemoryAuditStorage,
    InMemorySpendingStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "SpendingStorageInterface",
    # Exceptions
    "ConnectionError",
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # Google Sheets implementation
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
    "GoogleSheetsSpendingStorage",
    "entry_to_row",
    "row_to_entry",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemorySpendingStorage",
]
