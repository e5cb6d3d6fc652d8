"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from studyshare.backend.core.session import SessionUser


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Usage:
        def test_repository(mock_db_session: AsyncMock):
            repo = NoteRepository(mock_db_session)
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    session.get = AsyncMock()
    return session


@pytest.fixture
def mock_db_result() -> MagicMock:
    """
    Mock database query result.

    Usage:
        def test_query(mock_db_session, mock_db_result):
            mock_db_result.scalar_one_or_none.return_value = note
            mock_db_session.execute.return_value = mock_db_result
    """
    result = MagicMock()
    result.scalar_one_or_none = MagicMock(return_value=None)
    result.scalars = MagicMock()
    result.scalars.return_value.all = MagicMock(return_value=[])
    result.scalars.return_value.first = MagicMock(return_value=None)
    return result


@pytest.fixture
def alice() -> SessionUser:
    return SessionUser(id="user-alice", name="alice", email="alice@example.com")


@pytest.fixture
def bob() -> SessionUser:
    return SessionUser(id="user-bob", name="bob", email="bob@example.com")


@pytest.fixture
def make_note():
    """Factory for stand-ins of Note rows."""

    def _make(**overrides) -> SimpleNamespace:
        values = {
            "id": "note-1",
            "title": "Graphs",
            "subject": "Maths",
            "uploaded_by": "alice",
            "uploaded_by_id": "user-alice",
            "file": "1700000000000-graphs.pdf",
            "cover_image": "1700000000000-graphs.png",
            "downloads": 0,
            "rating": 0.0,
            "rating_count": 0,
            "ratings": [],
            "approved": False,
            "removed": False,
        }
        values.update(overrides)
        return SimpleNamespace(**values)

    return _make
