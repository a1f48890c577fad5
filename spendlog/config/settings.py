"""
Configuration Management for Spendlog

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here so every external dependency
(Google Sheets, parser tuning, service options) is visible in one place
and validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ParserSettings(BaseSettings):
    """Tuning knobs for the utterance extraction pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="SPENDLOG_PARSER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    category_confidence_floor: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Classifier results below this probability become 'other'"
    )
    timezone: str = Field(
        default="UTC",
        description="IANA timezone used to decide what 'today' means"
    )
    extra_places: str = Field(
        default="",
        description="Comma-separated place names added to the built-in gazetteer"
    )
    extra_organizations: str = Field(
        default="",
        description="Comma-separated brand names added to the built-in gazetteer"
    )

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject timezone names zoneinfo cannot resolve."""
        from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @property
    def extra_places_list(self) -> list[str]:
        return _split_csv(self.extra_places)

    @property
    def extra_organizations_list(self) -> list[str]:
        return _split_csv(self.extra_organizations)


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )

    # Sheet names within the spreadsheet
    spending_sheet_name: str = Field(
        default="SpendingTracker",
        description="Name of the sheet holding spending entries"
    )
    audit_sheet_name: str = Field(
        default="AuditLog",
        description="Name of the sheet for audit logs"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for local structured logs"
    )

    # HTTP service
    api_host: str = Field(
        default="0.0.0.0",
        description="Interface the HTTP service binds to"
    )
    api_port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port the HTTP service listens on"
    )

    # Validation thresholds
    max_spending_amount: float = Field(
        default=10000000.0,
        description="Maximum reasonable spending amount (for sanity checking)"
    )
    future_date_tolerance_days: int = Field(
        default=1,
        ge=0,
        description="How many days in the future a spending date can be"
    )

    # Audit trail
    audit_to_sheets: bool = Field(
        default=True,
        description="Mirror audit events to the audit worksheet when Sheets is configured"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily so the parser can run without
    # Google Sheets being configured.

    @property
    def parser(self) -> ParserSettings:
        return ParserSettings()

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with an
    additional "<name>_error" entry for each failure.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("parser", "google_sheets", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results


def _split_csv(raw: str) -> list[str]:
    return [item.strip().lower() for item in raw.split(",") if item.strip()]
