"""Fixtures for real-time hub tests."""

import pytest

from tests.unit.realtime.fakes import FixedClock, InMemoryHubStore


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def store() -> InMemoryHubStore:
    return InMemoryHubStore()
