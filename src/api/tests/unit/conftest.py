"""Unit test fixtures shared across bounded contexts."""

import pytest
from pydantic import SecretStr


@pytest.fixture
def mock_db_settings():
    """Database settings pointing at a host that is never contacted."""
    from infrastructure.settings import DatabaseSettings

    return DatabaseSettings(
        host="testhost",
        port=5432,
        database="testdb",
        username="testuser",
        password=SecretStr("testpass"),
        pool_min_connections=1,
        pool_max_connections=4,
    )
