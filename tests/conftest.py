"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from property_registry.registry import PropertyRegistry
from property_registry.store.property_store import PropertyStore


class StepClock:
    """Deterministic clock advancing one second per reading."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


@pytest.fixture
def clock() -> StepClock:
    """Fresh deterministic clock."""
    return StepClock()


@pytest.fixture
def store(clock: StepClock) -> PropertyStore:
    """Create a fresh store for each test."""
    return PropertyStore(clock=clock)


@pytest.fixture
def registry(clock: StepClock) -> PropertyRegistry:
    """Create a fresh registry for each test."""
    return PropertyRegistry(clock=clock)


@pytest.fixture
def alice() -> str:
    """Sample caller identity."""
    return "owner-alice"


@pytest.fixture
def bob() -> str:
    """Another caller identity."""
    return "owner-bob"


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42
