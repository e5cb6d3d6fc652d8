"""
Integration Test Fixtures.

Fixtures for integration tests - real database, real routers, mocked
third-party HTTP. Requests run in their own sessions that commit like the
production dependency; seed data is committed through `seed`.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from studyshare.backend.core.database import get_db_session

Seeder = Callable[[Callable[[AsyncSession], Awaitable[Any]]], Awaitable[Any]]


@pytest.fixture
def uploads_dir(tmp_path: Path) -> Path:
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def seed(db_session_factory: async_sessionmaker[AsyncSession]) -> Seeder:
    """
    Run a function in its own committed session.

    Usage:
        note = await seed(lambda s: create_note(s, title="Graphs"))
    """

    async def _seed(fn: Callable[[AsyncSession], Awaitable[Any]]) -> Any:
        async with db_session_factory() as session:
            result = await fn(session)
            await session.commit()
            return result

    return _seed


@pytest.fixture
async def client(
    db_session_factory: async_sessionmaker[AsyncSession],
    uploads_dir: Path,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client bound to the test database.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with db_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    with patch("studyshare.backend.main.get_uploads_dir", return_value=uploads_dir), \
         patch("studyshare.backend.core.storage.get_uploads_dir", return_value=uploads_dir), \
         patch("studyshare.backend.api.health.get_session_factory", return_value=db_session_factory):
        from studyshare.backend.main import create_app

        app = create_app()
        app.dependency_overrides[get_db_session] = override_get_db_session

        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as test_client:
            yield test_client

        app.dependency_overrides.clear()
