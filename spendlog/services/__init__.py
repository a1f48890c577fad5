"""Services package."""

from spendlog.services.storage import (
    AuditStorageInterface,
    ConnectionError,
    DuplicateError,
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsSpendingStorage,
    InMemoryAuditStorage,
    InMemorySpendingStorage,
    NotFoundError,
    SpendingStorageInterface,
    StorageError,
)

__all__ = [
    "AuditStorageInterface",
    "ConnectionError",
    "DuplicateError",
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
    "GoogleSheetsSpendingStorage",
    "InMemoryAuditStorage",
    "InMemorySpendingStorage",
    "NotFoundError",
    "SpendingStorageInterface",
    "StorageError",
]
