"""
Note Service.

Business logic layer for notes: upload, public listings, downloads and
rating submissions. Rating rules and the leaderboard come from the pure
functions in services.ranking; this service loads and stores the data.
"""

from dataclasses import dataclass
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from studyshare.backend.core.config import get_app_config
from studyshare.backend.core.exceptions import AuthenticationError, NotFoundError
from studyshare.backend.core.session import SessionUser
from studyshare.backend.models.note import Note
from studyshare.backend.repositories.note import NoteRepository
from studyshare.backend.services.base import BaseService
from studyshare.backend.services.ranking import (
    LeaderboardEntry,
    RatingEntry,
    RatingSnapshot,
    check_rating,
    compute_leaderboard,
)


@dataclass(frozen=True)
class HomePage:
    top_notes: list[Note]
    leaderboard: list[LeaderboardEntry]


@dataclass(frozen=True)
class RatingResult:
    rating: float
    rating_count: int


def snapshot_of(note: Note) -> RatingSnapshot:
    """Rating view of a stored note."""
    return RatingSnapshot(
        uploader_id=note.uploaded_by_id or "",
        ratings=tuple(RatingEntry(user_id=r.user_id, value=r.value) for r in note.ratings),
    )


class NoteService(BaseService):
    """
    Service for note business logic.

    Public methods never return removed notes.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = NoteRepository(session)

    def check_upload(self, title: str, subject: str) -> None:
        """Reject an upload form before any file is stored."""
        self._validate_required(
            {"title": title, "subject": subject},
            ["title", "subject"],
        )

    async def upload(
        self,
        uploader: SessionUser,
        title: str,
        subject: str,
        file: str,
        cover_image: str,
    ) -> Note:
        """
        Create a note for already stored files.

        Args:
            uploader: Signed-in user, recorded by name and identifier
            title: Note title
            subject: Subject tag
            file: Stored name of the document
            cover_image: Stored name of the cover image

        Returns:
            Created note, pending and not removed
        """
        self.check_upload(title, subject)
        self._log_operation("Uploading note", title=title, uploader_id=uploader.id)

        note = await self._execute_db_operation(
            "upload_note",
            self.repo.create(
                title=title.strip(),
                subject=subject.strip(),
                uploaded_by=uploader.name,
                uploaded_by_id=uploader.id,
                file=file,
                cover_image=cover_image,
            ),
        )

        self._log_operation("Note uploaded", note_id=note.id)
        return note

    async def list_notes(
        self,
        search: str | None = None,
        subject: str | None = None,
        sort: str | None = None,
    ) -> list[Note]:
        """Public listing with optional title search, subject filter and sort."""
        self._log_debug("Listing notes", search=search, subject=subject, sort=sort)
        return await self.repo.list_visible(search=search, subject=subject, sort=sort or "newest")

    async def subjects(self) -> list[str]:
        return await self.repo.distinct_subjects()

    async def leaderboard(self) -> list[LeaderboardEntry]:
        """Top uploaders over all non-removed notes."""
        notes = await self.repo.list_visible()
        size = get_app_config().application.listings.leaderboard_size
        return compute_leaderboard(notes, limit=size)

    async def home(self) -> HomePage:
        listings = get_app_config().application.listings
        return HomePage(
            top_notes=await self.repo.top_rated_visible(listings.home_top_notes),
            leaderboard=await self.leaderboard(),
        )

    async def get_visible(self, note_id: str) -> Note:
        """
        Get a note that has not been removed.

        Raises:
            NotFoundError: If the note is missing or removed
        """
        note = await self.repo.get_visible_or_none(note_id)
        if note is None:
            raise NotFoundError("Note not found")
        return note

    async def register_download(self, note_id: str) -> Note:
        """Count one download and return the note whose file is served."""
        note = await self.get_visible(note_id)
        await self._execute_db_operation(
            "count_download",
            self.repo.increment_downloads(note_id),
        )
        self._log_operation("Note downloaded", note_id=note_id)
        return note

    async def rate_note(self, note_id: str, user: SessionUser | None, raw_value: Any) -> RatingResult:
        """
        Record one user's rating of a note.

        Raises:
            AuthenticationError: No user is signed in
            NotFoundError: The note is missing or removed
            AuthorizationError: The user uploaded the note
            ConflictError: The user already rated the note
            ValidationError: The value is not a number in the configured range
        """
        if user is None:
            raise AuthenticationError("Login required")

        note = await self.get_visible(note_id)

        bounds = get_app_config().application.ratings
        value = check_rating(
            snapshot_of(note),
            user.id,
            raw_value,
            min_value=bounds.min_value,
            max_value=bounds.max_value,
        )

        await self._execute_db_operation(
            "add_rating",
            self.repo.add_rating(note_id, user.id, value),
            conflict_message="You already rated this note",
        )
        note = await self._execute_db_operation(
            "recompute_rating",
            self.repo.recompute_rating(note_id),
        )

        self._log_operation(
            "Note rated",
            note_id=note_id,
            user_id=user.id,
            value=value,
            rating=note.rating,
            rating_count=note.rating_count,
        )
        return RatingResult(rating=note.rating, rating_count=note.rating_count)
