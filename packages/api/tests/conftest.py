"""Shared fixtures.

The real app from ``dscr_api.main`` is a module singleton. ``_clean_overrides``
clears dependency_overrides after every test so a mocked session from one
test never leaks into the next.
"""

from unittest.mock import AsyncMock

import pytest
from dscr_db import get_db
from fastapi.testclient import TestClient

from dscr_api.main import app as real_app
from dscr_api.services.catalog import build_default_catalog
from dscr_api.services.requirements import RequirementResolver, get_requirement_resolver


@pytest.fixture(autouse=True)
def _clean_overrides():
    """Clear app dependency overrides after each test."""
    yield
    real_app.dependency_overrides.clear()


@pytest.fixture
def resolver() -> RequirementResolver:
    return RequirementResolver(build_default_catalog())


@pytest.fixture
def make_client(resolver):
    """Factory fixture: wire a mock session into the real app, return TestClient."""

    def _make(session: AsyncMock) -> TestClient:
        async def fake_db():
            yield session

        real_app.dependency_overrides[get_db] = fake_db
        real_app.dependency_overrides[get_requirement_resolver] = lambda: resolver
        return TestClient(real_app)

    return _make
