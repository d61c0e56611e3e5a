# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock
from typing import Generator, List

from main import create_app
from fakes import INHERITANCE, FakeGateway, make_permission
from models.permission import Permission, Role


# ============================================================
# Sample data
# ============================================================
@pytest.fixture
def catalog() -> List[Permission]:
    return [
        make_permission("view.invoices", "invoices", "view"),
        make_permission("add.invoices", "invoices", "add"),
        make_permission("modify.invoices", "invoices", "modify"),
        make_permission("delete.invoices", "invoices", "Delete"),
        make_permission("view.clients", "clients", "view"),
        make_permission("export.clients", "clients", "export"),
        make_permission("view.reports", "reports", "viewAll"),
    ]


@pytest.fixture
def roles() -> List[Role]:
    # Deliberately out of display order
    return [
        Role(id="4", name="technician", display_name="Technician", sort_order=4),
        Role(id="1", name="executive", display_name="Executive", sort_order=1),
        Role(id="3", name="sales", display_name="Sales", sort_order=3),
        Role(id="2", name="admin", display_name="Administrator", sort_order=2),
    ]


# ============================================================
# Fake gateway
# ============================================================
@pytest.fixture
def gateway(roles, catalog) -> FakeGateway:
    return FakeGateway(
        roles,
        catalog,
        grants={
            "1": [],
            "2": ["add.invoices"],
            "3": ["view.clients", "export.clients"],
            "4": ["view.invoices"],
        },
    )


# ============================================================
# App / client
# ============================================================
@pytest.fixture(scope="function")
def app():
    """Create a test FastAPI application instance."""
    return create_app()


@pytest.fixture(scope="function")
def client(app, gateway) -> Generator[TestClient, None, None]:
    """Test client with the Supabase gateway swapped for the fake."""
    from routers.role_permissions import get_gateway, get_role_inheritance

    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_role_inheritance] = lambda: INHERITANCE
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides = {}


@pytest.fixture
def mock_supabase_client():
    """Create a mock Supabase client whose query builder chains to itself."""
    mock_client = Mock()
    mock_query = Mock()
    for method in ("select", "eq", "in_", "order", "limit"):
        getattr(mock_query, method).return_value = mock_query
    mock_client.table.return_value = mock_query
    return mock_client


@pytest.fixture(autouse=True)
def reset_cache():
    """Reset open editors before each test."""
    from core.cache import cache_clear
    cache_clear()
    yield
    cache_clear()
