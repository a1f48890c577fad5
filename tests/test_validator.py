"""Tests for the two-stage spending validator."""

from datetime import date
from decimal import Decimal

import pytest

from spendlog.config import AppSettings
from spendlog.models.spending import SpendingCategory, SpendingEntry
from spendlog.services.storage import InMemorySpendingStorage
from spendlog.validation import SpendingValidator


TODAY = date(2024, 3, 15)


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings(_env_file=None)


@pytest.fixture
def validator(app_settings) -> SpendingValidator:
    return SpendingValidator(settings=app_settings)


def payload(**overrides) -> dict:
    data = {
        "amount": "12.50",
        "category": "coffee",
        "description": "latte",
        "date": "2024-03-15",
    }
    data.update(overrides)
    return data


class TestSchemaStage:

    @pytest.mark.asyncio
    async def test_valid_payload(self, validator):
        result = await validator.validate(payload(), today=TODAY)

        assert result.is_valid is True
        assert result.issues == []
        assert result.entry is not None
        assert result.entry.amount == Decimal("12.50")
        assert result.entry.category == SpendingCategory.COFFEE

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["amount", "category", "description", "date"])
    async def test_missing_required_field(self, validator, field):
        data = payload()
        del data[field]
        result = await validator.validate(data, today=TODAY)

        assert result.schema_valid is False
        assert result.entry is None
        assert [issue.field for issue in result.issues] == [field]
        assert result.issues[0].issue_type == "missing"

    @pytest.mark.asyncio
    async def test_zero_amount_counts_as_missing(self, validator):
        result = await validator.validate(payload(amount=0), today=TODAY)
        assert result.has_errors
        assert result.issues[0].issue_type == "missing"

    @pytest.mark.asyncio
    async def test_unknown_category(self, validator):
        result = await validator.validate(payload(category="yachts"), today=TODAY)

        assert result.schema_valid is False
        assert result.issues[0].field == "category"
        assert result.issues[0].issue_type == "invalid_value"

    @pytest.mark.asyncio
    async def test_negative_amount(self, validator):
        result = await validator.validate(payload(amount=-5), today=TODAY)
        assert result.schema_valid is False
        assert result.issues[0].field == "amount"

    @pytest.mark.asyncio
    async def test_semantic_stage_skipped_when_schema_fails(self, validator):
        result = await validator.validate(payload(category="yachts", date="2099-01-01"), today=TODAY)
        assert result.semantic_valid is False
        assert all(issue.issue_type != "future_date" for issue in result.issues)


class TestSemanticStage:

    @pytest.mark.asyncio
    async def test_future_date_warns(self, validator):
        result = await validator.validate(payload(date="2024-03-20"), today=TODAY)

        assert result.is_valid is True
        assert result.issues[0].issue_type == "future_date"
        assert len(result.warnings) == 1

    @pytest.mark.asyncio
    async def test_tomorrow_is_within_tolerance(self, validator):
        result = await validator.validate(payload(date="2024-03-16"), today=TODAY)
        assert result.issues == []

    @pytest.mark.asyncio
    async def test_old_date_warns(self, validator):
        result = await validator.validate(payload(date="2020-01-01"), today=TODAY)
        assert result.issues[0].issue_type == "suspicious_date"

    @pytest.mark.asyncio
    async def test_huge_amount_warns(self, validator):
        result = await validator.validate(payload(amount="99999999"), today=TODAY)
        assert result.issues[0].issue_type == "suspicious_value"
        assert "unusually high" in result.issues[0].message

    @pytest.mark.asyncio
    async def test_tiny_amount_warns(self, validator):
        result = await validator.validate(payload(amount="0.50"), today=TODAY)
        assert "unusually low" in result.issues[0].message


class TestDuplicates:

    @pytest.mark.asyncio
    async def test_same_entry_is_flagged(self, app_settings):
        storage = InMemorySpendingStorage([
            SpendingEntry(
                amount=Decimal("12.50"),
                category=SpendingCategory.COFFEE,
                description="Latte",
                date=TODAY,
            ),
        ])
        validator = SpendingValidator(storage, settings=app_settings)

        result = await validator.validate(payload(), today=TODAY)

        assert result.is_valid is True
        assert result.issues[0].issue_type == "potential_duplicate"

    @pytest.mark.asyncio
    async def test_duplicate_check_can_be_disabled(self, app_settings):
        storage = InMemorySpendingStorage([
            SpendingEntry(
                amount=Decimal("12.50"),
                category=SpendingCategory.COFFEE,
                description="latte",
                date=TODAY,
            ),
        ])
        validator = SpendingValidator(storage, settings=app_settings)

        result = await validator.validate(payload(), check_duplicates=False, today=TODAY)
        assert result.issues == []
