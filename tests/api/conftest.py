"""Shared fixtures for API tests."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from storefront.api.catalog import get_engine
from storefront.catalog.service import CatalogQueryEngine
from storefront.main import app


@pytest.fixture
def client(catalog_engine: CatalogQueryEngine) -> Generator[TestClient, None, None]:
    """Create test client backed by the in-memory sample catalog."""
    app.dependency_overrides[get_engine] = lambda: catalog_engine
    yield TestClient(app)
    app.dependency_overrides.clear()
