"""Pytest configuration and fixtures for farmqc tests."""

from datetime import datetime, timedelta

import pytest

from farmqc.core.config import FarmqcSettings
from farmqc.core.types import ValidationContext
from farmqc.validate.engine import DataValidationEngine

NOW = datetime(2026, 10, 19, 12, 0, 0)


@pytest.fixture
def now() -> datetime:
    """Reference clock shared by contexts in the tests."""
    return NOW


@pytest.fixture
def settings() -> FarmqcSettings:
    """Explicit settings so tests don't depend on the environment."""
    return FarmqcSettings(
        history_capacity=100,
        cache_enabled=True,
        report_unknown_fields=True,
        log_format="plain",
    )


@pytest.fixture
def engine(settings) -> DataValidationEngine:
    """A fresh engine with its own cache and history."""
    return DataValidationEngine(settings=settings)


@pytest.fixture
def make_context(now):
    """Build a context for an entity kind with the reference clock."""

    def _make(entity_kind: str, operation_kind: str = "create") -> ValidationContext:
        return ValidationContext(
            entity_kind=entity_kind,
            operation_kind=operation_kind,
            user_id="user-1",
            farm_id=1,
            timestamp=now,
        )

    return _make


@pytest.fixture
def base_fields() -> dict:
    """Required base fields in canonical form."""
    return {"status": "active", "updated_at": "2026-10-19T08:00:00"}


@pytest.fixture
def animal_record(base_fields) -> dict:
    """A heavy five-year-old cow."""
    return {**base_fields, "name": "Bessie", "species": "cattle", "age": 5, "weight": 2000}


@pytest.fixture
def crop_record(base_fields) -> dict:
    """Corn planted in spring and harvested in late summer."""
    return {
        **base_fields,
        "crop_type": "corn",
        "planting_date": "2026-04-01",
        "harvest_date": "2026-08-15",
    }


@pytest.fixture
def task_record(base_fields, now) -> dict:
    """A medium-priority task due in ten days."""
    return {
        **base_fields,
        "title": "Repair fence",
        "assignee": "sam",
        "priority": "medium",
        "due_date": (now + timedelta(days=10)).isoformat(),
    }


@pytest.fixture
def inventory_record(base_fields) -> dict:
    """Feed with healthy stock."""
    return {**base_fields, "name": "Layer feed", "quantity": 40, "min_stock": 10, "unit": "kg"}


@pytest.fixture
def weather_record(base_fields) -> dict:
    """A cold snowy reading."""
    return {**base_fields, "temperature": -2, "condition": "snowy", "humidity": 50}
