"""
Google Sheets Storage Implementation

Spending entries live in the `SpendingTracker` worksheet, one entry per
row, so the owner can read and edit the data directly in Sheets.

TRADEOFFS:
- Not suitable for high-volume data (fine for a personal log)
- No transactions (appends are single-row and atomic enough)
- Limited query capabilities (we filter in Python)

Row layout (columns A to H):
    id | amount | category | description | date | timestamp | user | currency
"""

import json
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional
from uuid import UUID

import gspread
import structlog
from google.oauth2.service_account import Credentials
from pydantic import ValidationError
from tenacity import (
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from spendlog.config import GoogleSheetsSettings, get_settings
from spendlog.models.audit import AuditEvent, AuditEventType, AuditSeverity
from spendlog.models.spending import (
    CurrencyCode,
    SpendingCategory,
    SpendingEntry,
)
from spendlog.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    DuplicateError,
    SpendingStorageInterface,
    StorageError,
)

logger = structlog.get_logger(__name__)


SPENDING_COLUMNS = [
    "id",
    "amount",
    "category",
    "description",
    "date",
    "timestamp",
    "user",
    "currency",
]

AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "entity_type",
    "entity_id",
    "correlation_id",
    "description",
    "details_json",
    "error_message",
    "is_user_action",
]


def _safe_get(row: list, index: int, default: str = "") -> str:
    try:
        value = row[index]
    except IndexError:
        return default
    return str(value).strip() if value not in (None, "") else default


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def _get_or_create_sheet(self, title: str, columns: list[str], rows: int) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            logger.info("worksheet_created", title=title)
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=rows,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def get_spending_sheet(self) -> gspread.Worksheet:
        """Get or create the SpendingTracker worksheet."""
        return self._get_or_create_sheet(
            self._settings.spending_sheet_name, SPENDING_COLUMNS, rows=1000
        )

    def get_audit_sheet(self) -> gspread.Worksheet:
        """Get or create the Audit worksheet."""
        return self._get_or_create_sheet(
            self._settings.audit_sheet_name, AUDIT_COLUMNS, rows=5000
        )


def _sheet_number(amount: Decimal):
    """Amounts go in as numbers so Sheets can sum and chart them."""
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


def entry_to_row(entry: SpendingEntry) -> list:
    """Convert a SpendingEntry to a spreadsheet row."""
    return [
        entry.id,
        _sheet_number(entry.amount),
        entry.category.value,
        entry.description,
        entry.date.isoformat(),
        entry.timestamp.isoformat(),
        entry.user,
        entry.currency.value,
    ]


def row_to_entry(row: list) -> SpendingEntry:
    """
    Convert a spreadsheet row to a SpendingEntry.

    Rows edited by hand may have blank cells: category falls back to
    `other`, user to `sharing` and currency to USD. A row without a
    usable id, amount, description or date raises ValueError or a
    pydantic ValidationError.
    """
    entry_id = _safe_get(row, 0)
    if not entry_id:
        raise ValueError("row has no id")

    try:
        amount = Decimal(_safe_get(row, 1, "0").replace(",", ""))
    except InvalidOperation:
        raise ValueError(f"unparsable amount in row {entry_id}")

    category = _safe_get(row, 2, SpendingCategory.OTHER.value).lower()
    if category not in {c.value for c in SpendingCategory}:
        category = SpendingCategory.OTHER.value

    currency = _safe_get(row, 7, CurrencyCode.USD.value).upper()
    if currency not in {c.value for c in CurrencyCode}:
        currency = CurrencyCode.USD.value

    data = {
        "id": entry_id,
        "amount": amount,
        "category": category,
        "description": _safe_get(row, 3),
        "date": date.fromisoformat(_safe_get(row, 4)),
        "user": _safe_get(row, 6, "sharing"),
        "currency": currency,
    }
    timestamp = _safe_get(row, 5)
    if timestamp:
        data["timestamp"] = datetime.fromisoformat(timestamp)

    return SpendingEntry(**data)


class GoogleSheetsSpendingStorage(SpendingStorageInterface):
    """
    Google Sheets implementation of spending storage.

    Reads fetch the whole worksheet and filter in Python.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _read_entries(self) -> list[SpendingEntry]:
        all_rows = self._client.get_spending_sheet().get_all_values()[1:]  # Skip header

        entries = []
        for row in all_rows:
            if not row or not row[0]:
                continue
            try:
                entries.append(row_to_entry(row))
            except (ValueError, ValidationError) as e:
                logger.warning("spending_row_skipped", entry_id=row[0], error=str(e))
        return entries

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_not_exception_type(DuplicateError),
        reraise=True,
    )
    async def append_entry(self, entry: SpendingEntry) -> bool:
        """Append a spending entry as a new row."""
        try:
            sheet = self._client.get_spending_sheet()
            existing_ids = sheet.col_values(1)[1:]
            if entry.id in existing_ids:
                raise DuplicateError(f"Spending entry already exists: {entry.id}")
            sheet.append_row(entry_to_row(entry), value_input_option="RAW")
            return True
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save spending entry: {e}")

    async def get_entry(self, entry_id: str) -> Optional[SpendingEntry]:
        try:
            for entry in self._read_entries():
                if entry.id == entry_id:
                    return entry
            return None
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to get spending entry: {e}")

    async def list_entries(
        self,
        category: Optional[SpendingCategory] = None,
        user: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[SpendingEntry]:
        """List entries with optional filters."""
        try:
            entries = self._read_entries()
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to list spending entries: {e}")

        return [
            entry for entry in entries
            if (category is None or entry.category == category)
            and (user is None or entry.user == user)
            and (date_from is None or entry.date >= date_from)
            and (date_to is None or entry.date <= date_to)
        ]


class GoogleSheetsAuditStorage(AuditStorageInterface):
    """
    Google Sheets implementation of audit log storage.

    Audit events are append-only.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _row_to_event(self, row: list) -> AuditEvent:
        """Convert a spreadsheet row to an AuditEvent."""
        return AuditEvent(
            event_id=UUID(_safe_get(row, 0)),
            timestamp=datetime.fromisoformat(_safe_get(row, 1)),
            event_type=AuditEventType(_safe_get(row, 2)),
            severity=AuditSeverity(_safe_get(row, 3)),
            entity_type=_safe_get(row, 4) or None,
            entity_id=_safe_get(row, 5) or None,
            correlation_id=UUID(_safe_get(row, 6)) if _safe_get(row, 6) else None,
            description=_safe_get(row, 7),
            details=json.loads(_safe_get(row, 8)) if _safe_get(row, 8) else {},
            error_message=_safe_get(row, 9) or None,
            is_user_action=_safe_get(row, 10).lower() == "true",
        )

    def _read_events(self) -> list[AuditEvent]:
        all_rows = self._client.get_audit_sheet().get_all_values()[1:]

        events = []
        for row in all_rows:
            if not row or not row[0]:
                continue
            try:
                events.append(self._row_to_event(row))
            except (ValueError, ValidationError):
                continue
        return events

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event."""
        try:
            sheet = self._client.get_audit_sheet()
            sheet.append_row(event.to_sheets_row(), value_input_option="RAW")
            return True
        except Exception as e:
            # Audit logging must not break the main flow
            logger.warning("audit_event_not_written", error=str(e), event_id=str(event.event_id))
            return False

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """Get events by correlation ID."""
        try:
            events = [e for e in self._read_events() if e.correlation_id == correlation_id]
        except Exception as e:
            raise StorageError(f"Failed to get audit events: {e}")

        events.sort(key=lambda e: e.timestamp)
        return events

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get recent events."""
        try:
            events = self._read_events()
        except Exception as e:
            raise StorageError(f"Failed to get audit events: {e}")

        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
