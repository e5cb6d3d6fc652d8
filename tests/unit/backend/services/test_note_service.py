"""
Unit Tests for NoteService.

Tests business logic with a mocked repository.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from studyshare.backend.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from studyshare.backend.services.note import NoteService, snapshot_of


def rating_row(user_id: str, value: float) -> SimpleNamespace:
    return SimpleNamespace(user_id=user_id, value=value)


class TestSnapshotOf:
    def test_copies_uploader_and_ratings(self, make_note):
        note = make_note(ratings=[rating_row("bob", 4.0)])

        snap = snapshot_of(note)

        assert snap.uploader_id == "user-alice"
        assert snap.has_rated("bob")
        assert snap.rating == 4.0


class TestRateNote:
    @pytest.fixture
    def service(self, mock_db_session):
        return NoteService(mock_db_session)

    @pytest.mark.asyncio
    async def test_anonymous_rejected_before_lookup(self, service):
        """Should not touch the store without a user."""
        with patch.object(service.repo, "get_visible_or_none", AsyncMock()) as mock_get:
            with pytest.raises(AuthenticationError):
                await service.rate_note("note-1", None, 4)

        mock_get.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_note(self, service, bob):
        with patch.object(service.repo, "get_visible_or_none", AsyncMock(return_value=None)):
            with pytest.raises(NotFoundError) as exc_info:
                await service.rate_note("missing", bob, 4)

        assert exc_info.value.message == "Note not found"

    @pytest.mark.asyncio
    async def test_self_rating_rejected(self, service, alice, make_note):
        with patch.object(service.repo, "get_visible_or_none", AsyncMock(return_value=make_note())), \
             patch.object(service.repo, "add_rating", AsyncMock()) as mock_add:
            with pytest.raises(AuthorizationError):
                await service.rate_note("note-1", alice, 5)

        mock_add.assert_not_called()

    @pytest.mark.asyncio
    async def test_duplicate_rejected(self, service, bob, make_note):
        note = make_note(ratings=[rating_row(bob.id, 3.0)])
        with patch.object(service.repo, "get_visible_or_none", AsyncMock(return_value=note)), \
             patch.object(service.repo, "add_rating", AsyncMock()) as mock_add:
            with pytest.raises(ConflictError):
                await service.rate_note("note-1", bob, 5)

        mock_add.assert_not_called()

    @pytest.mark.asyncio
    async def test_out_of_range_rejected(self, service, bob, make_note):
        with patch.object(service.repo, "get_visible_or_none", AsyncMock(return_value=make_note())):
            with pytest.raises(ValidationError):
                await service.rate_note("note-1", bob, 6)

    @pytest.mark.asyncio
    async def test_non_numeric_rejected(self, service, bob, make_note):
        with patch.object(service.repo, "get_visible_or_none", AsyncMock(return_value=make_note())):
            with pytest.raises(ValidationError):
                await service.rate_note("note-1", bob, "five")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", [None, "abc"])
    async def test_self_rating_checked_before_value(self, service, alice, make_note, raw):
        with patch.object(service.repo, "get_visible_or_none", AsyncMock(return_value=make_note())):
            with pytest.raises(AuthorizationError):
                await service.rate_note("note-1", alice, raw)

    @pytest.mark.asyncio
    async def test_duplicate_checked_before_value(self, service, bob, make_note):
        note = make_note(ratings=[rating_row(bob.id, 3.0)])
        with patch.object(service.repo, "get_visible_or_none", AsyncMock(return_value=note)):
            with pytest.raises(ConflictError):
                await service.rate_note("note-1", bob, "x")

    @pytest.mark.asyncio
    async def test_missing_note_checked_before_value(self, service, bob):
        with patch.object(service.repo, "get_visible_or_none", AsyncMock(return_value=None)):
            with pytest.raises(NotFoundError):
                await service.rate_note("missing", bob, "abc")

    @pytest.mark.asyncio
    async def test_stores_rating_and_returns_aggregate(self, service, bob, make_note):
        note = make_note(ratings=[rating_row("u1", 3.0), rating_row("u2", 4.0)])
        updated = make_note(rating=4.0, rating_count=3)

        with patch.object(service.repo, "get_visible_or_none", AsyncMock(return_value=note)), \
             patch.object(service.repo, "add_rating", AsyncMock()) as mock_add, \
             patch.object(service.repo, "recompute_rating", AsyncMock(return_value=updated)):
            result = await service.rate_note("note-1", bob, "5")

        mock_add.assert_called_once_with("note-1", bob.id, 5.0)
        assert result.rating == 4.0
        assert result.rating_count == 3


class TestPublicViews:
    @pytest.fixture
    def service(self, mock_db_session):
        return NoteService(mock_db_session)

    @pytest.mark.asyncio
    async def test_get_visible_hides_removed(self, service):
        with patch.object(service.repo, "get_visible_or_none", AsyncMock(return_value=None)):
            with pytest.raises(NotFoundError):
                await service.get_visible("removed-note")

    @pytest.mark.asyncio
    async def test_list_defaults_to_newest(self, service):
        with patch.object(service.repo, "list_visible", AsyncMock(return_value=[])) as mock_list:
            await service.list_notes()

        mock_list.assert_called_once_with(search=None, subject=None, sort="newest")

    @pytest.mark.asyncio
    async def test_leaderboard_over_visible_notes(self, service, make_note):
        notes = [
            make_note(uploaded_by="alice", downloads=10, rating=4.0),
            make_note(uploaded_by="bob", downloads=20, rating=3.5),
        ]
        with patch.object(service.repo, "list_visible", AsyncMock(return_value=notes)):
            board = await service.leaderboard()

        assert [e.uploader for e in board] == ["bob", "alice"]

    @pytest.mark.asyncio
    async def test_register_download_counts_visible_note(self, service, make_note):
        note = make_note()
        with patch.object(service.repo, "get_visible_or_none", AsyncMock(return_value=note)), \
             patch.object(service.repo, "increment_downloads", AsyncMock()) as mock_inc:
            result = await service.register_download("note-1")

        assert result is note
        mock_inc.assert_called_once_with("note-1")

    @pytest.mark.asyncio
    async def test_upload_requires_title(self, service, alice):
        with pytest.raises(ValidationError):
            await service.upload(alice, "  ", "Maths", "f.pdf", "c.png")

    @pytest.mark.asyncio
    async def test_upload_records_uploader(self, service, alice, make_note):
        with patch.object(service.repo, "create", AsyncMock(return_value=make_note())) as mock_create:
            await service.upload(alice, "Graphs", "Maths", "f.pdf", "c.png")

        kwargs = mock_create.call_args.kwargs
        assert kwargs["uploaded_by"] == "alice"
        assert kwargs["uploaded_by_id"] == "user-alice"
