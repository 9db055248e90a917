"""Pytest configuration for all tests."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from app.config import settings
from app.database.supabase_client import get_supabase
from app.main import app
from tests.fakes import FakeSupabase

API = settings.api_prefix
ADMIN_TOKEN = "admin-token"


@pytest.fixture
def supabase() -> FakeSupabase:
    """Fresh in-memory store per test."""
    return FakeSupabase()


@pytest.fixture(autouse=True)
def clear_overrides():
    """Ensure dependency overrides are cleared after each test."""
    yield
    app.dependency_overrides = {}


@pytest_asyncio.fixture
async def client(supabase: FakeSupabase) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with the Supabase dependency overridden."""
    app.dependency_overrides[get_supabase] = lambda: supabase

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac


@pytest.fixture
def admin_role_id(supabase: FakeSupabase) -> str:
    return supabase.add_role(settings.admin_role_name, "Administrator")


@pytest.fixture
def customer_role_id(supabase: FakeSupabase) -> str:
    return supabase.add_role("cliente", "Store customer")


@pytest.fixture
def admin_user(supabase: FakeSupabase, admin_role_id: str) -> str:
    """An administrator who is also the caller when ADMIN_TOKEN is sent."""
    supabase.add_user("admin-1", "admin@example.com", token=ADMIN_TOKEN, role_id=admin_role_id)
    return "admin-1"


@pytest.fixture
def auth_headers() -> dict:
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}
