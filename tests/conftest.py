"""Pytest fixtures for testing."""

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Demo mode regardless of the developer's environment.
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_ANON_KEY"] = ""
os.environ["ENVIRONMENT"] = "development"

from stratify.core.config import Settings, get_settings
from stratify.main import app, build_registry
from stratify.services.dashboard import DashboardSession
from stratify.storage.memory_store import MemoryRecordStore, get_memory_store

DEMO_PASSWORD = "demo123"


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        supabase_url=None,
        supabase_anon_key=None,
        demo_password=DEMO_PASSWORD,
        session_restore_timeout_seconds=0.5,
    )


@pytest.fixture()
def store() -> MemoryRecordStore:
    """Fresh demo store, isolated from every other test."""
    return MemoryRecordStore()


@pytest_asyncio.fixture
async def dashboard(settings: Settings, store: MemoryRecordStore) -> AsyncGenerator[DashboardSession, None]:
    session = DashboardSession(settings, store=store)
    await session.start()
    yield session
    await session.close()


@pytest_asyncio.fixture
async def client_dashboard(dashboard: DashboardSession) -> DashboardSession:
    """Signed in as John Smith (client-manager, TechCorp Inc., org 1)."""
    await dashboard.login("TECH1", "john@company.com", DEMO_PASSWORD)
    return dashboard


@pytest_asyncio.fixture
async def admin_dashboard(dashboard: DashboardSession) -> DashboardSession:
    """Signed in as Dana Whitfield (admin-super, ADMIN code)."""
    await dashboard.login("ADMIN", "dana@stratifyit.ai", DEMO_PASSWORD)
    return dashboard


@pytest_asyncio.fixture(scope="function")
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create test client against a freshly seeded demo store.

    Yields:
        AsyncClient configured for testing
    """
    get_memory_store().reset()
    registry = build_registry(get_settings())
    app.state.registry = registry

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    await registry.close_all()
    get_memory_store().reset()


async def login(ac: AsyncClient, org_code: str, email: str, password: str = DEMO_PASSWORD):
    return await ac.post(
        "/api/auth/login",
        json={"orgCode": org_code, "email": email, "password": password},
    )


@pytest_asyncio.fixture
async def client_user_client(client: AsyncClient) -> AsyncClient:
    response = await login(client, "TECH1", "john@company.com")
    assert response.status_code == 200
    return client


@pytest_asyncio.fixture
async def admin_client(client: AsyncClient) -> AsyncClient:
    response = await login(client, "ADMIN", "dana@stratifyit.ai")
    assert response.status_code == 200
    return client


@pytest_asyncio.fixture
async def consultant_client(client: AsyncClient) -> AsyncClient:
    response = await login(client, "ADMIN", "mike@stratifyit.ai")
    assert response.status_code == 200
    return client
