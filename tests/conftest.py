"""Shared fixtures."""

from datetime import datetime, timezone

import pytest

from spendlog.config import ParserSettings, get_settings
from spendlog.extraction import CategoryModel, SpendingParser


FIXED_NOW = datetime(2024, 3, 15, 12, 30, tzinfo=timezone.utc)  # a Friday


@pytest.fixture(scope="session")
def category_model() -> CategoryModel:
    return CategoryModel.train()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def parser_settings() -> ParserSettings:
    return ParserSettings(_env_file=None)


@pytest.fixture
def parser(category_model, fixed_clock, parser_settings) -> SpendingParser:
    return SpendingParser(
        category_model=category_model,
        clock=fixed_clock,
        settings=parser_settings,
    )


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
