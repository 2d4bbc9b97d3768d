"""
Fixtures for API tests.

The app runs against the in-memory database through dependency overrides;
its lifespan (and so the real database manager) is never started.
"""

from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.core.dependencies import get_category_client, get_uow_factory
from src.main import app


@pytest_asyncio.fixture
async def client(uow_factory, category_client, user_id) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with the database and category lookup overridden."""
    app.dependency_overrides[get_uow_factory] = lambda: uow_factory
    app.dependency_overrides[get_category_client] = lambda: category_client

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"X-User-ID": user_id},
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
