"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from propcalc.main import app
from propcalc.api.dependencies import get_rate_tables
from propcalc.calculations.tables import RateTables, get_default_tables


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture(scope="session")
def anyio_backend():
    """Backend for async tests."""
    return "asyncio"


@pytest.fixture
def tables() -> RateTables:
    """Built-in rate tables."""
    return get_default_tables()


@pytest.fixture
def client(tables):
    """Test client pinned to the built-in rate tables."""
    app.dependency_overrides[get_rate_tables] = lambda: tables
    yield TestClient(app)
    app.dependency_overrides.clear()
