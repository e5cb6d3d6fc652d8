"""
Note Repository.

Data access for notes and their rating rows. Public queries always
exclude removed notes; the admin queries do not.
"""

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from studyshare.backend.models.note import Note, NoteRating
from studyshare.backend.repositories.base import BaseRepository

SORT_NEWEST = "newest"
SORT_OLDEST = "oldest"
SORT_RATING = "rating"


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Inherits standard CRUD operations from BaseRepository
    and adds listing, search, counter and rating queries.
    """

    model = Note
    not_found_message = "Note not found"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_visible_or_none(self, id: str) -> Note | None:
        """A note by ID unless it has been removed."""
        result = await self.session.execute(
            select(Note).where(Note.id == str(id)).where(Note.removed == False)  # noqa: E712
        )
        return result.scalar_one_or_none()

    async def list_visible(
        self,
        search: str | None = None,
        subject: str | None = None,
        sort: str = SORT_NEWEST,
    ) -> list[Note]:
        """
        Non-removed notes for the public listing.

        Args:
            search: Case-insensitive substring of the title
            subject: Exact subject; None or "all" means any
            sort: "rating" (best first), "oldest", anything else newest first
        """
        stmt = select(Note).where(Note.removed == False)  # noqa: E712
        if search:
            stmt = stmt.where(Note.title.icontains(search, autoescape=True))
        if subject and subject != "all":
            stmt = stmt.where(Note.subject == subject)

        if sort == SORT_RATING:
            stmt = stmt.order_by(Note.rating.desc(), Note.created_at.desc())
        elif sort == SORT_OLDEST:
            stmt = stmt.order_by(Note.created_at.asc())
        else:
            stmt = stmt.order_by(Note.created_at.desc())

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def top_rated_visible(self, limit: int) -> list[Note]:
        """Best rated non-removed notes."""
        result = await self.session.execute(
            select(Note)
            .where(Note.removed == False)  # noqa: E712
            .order_by(Note.rating.desc(), Note.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def distinct_subjects(self) -> list[str]:
        """Every subject used by any note, for the filter dropdown."""
        result = await self.session.execute(
            select(Note.subject).distinct().order_by(Note.subject)
        )
        return list(result.scalars().all())

    async def list_all(self) -> list[Note]:
        """All notes, removed included, newest first."""
        result = await self.session.execute(select(Note).order_by(Note.created_at.desc()))
        return list(result.scalars().all())

    async def search_any(self, query: str) -> list[Note]:
        """Notes whose title, subject or uploader name contains the query."""
        result = await self.session.execute(
            select(Note)
            .where(
                or_(
                    Note.title.icontains(query, autoescape=True),
                    Note.subject.icontains(query, autoescape=True),
                    Note.uploaded_by.icontains(query, autoescape=True),
                )
            )
            .order_by(Note.created_at.desc())
        )
        return list(result.scalars().all())

    async def top_by(self, column: str, limit: int) -> list[Note]:
        """All notes ordered by a numeric column, highest first."""
        order_column = getattr(Note, column)
        result = await self.session.execute(
            select(Note)
            .order_by(func.coalesce(order_column, 0).desc(), Note.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def increment_downloads(self, id: str) -> None:
        """Atomically add one to the download counter."""
        await self.session.execute(
            update(Note)
            .where(Note.id == str(id))
            .values(downloads=func.coalesce(Note.downloads, 0) + 1)
            .execution_options(synchronize_session=False)
        )

    async def add_rating(self, note_id: str, user_id: str, value: float) -> NoteRating:
        """Insert a rating row. A second row for the same user violates the unique constraint."""
        rating = NoteRating(note_id=note_id, user_id=user_id, value=value)
        self.session.add(rating)
        await self.session.flush()
        return rating

    async def recompute_rating(self, note_id: str) -> Note:
        """Rewrite the note's mean and count from its rating rows in one statement."""
        values = select(NoteRating.value).where(NoteRating.note_id == note_id)
        await self.session.execute(
            update(Note)
            .where(Note.id == note_id)
            .values(
                rating=select(func.coalesce(func.avg(NoteRating.value), 0.0))
                .where(NoteRating.note_id == note_id)
                .scalar_subquery(),
                rating_count=select(func.count())
                .select_from(values.subquery())
                .scalar_subquery(),
            )
            .execution_options(synchronize_session=False)
        )
        note = await self.get_by_id(note_id)
        await self.session.refresh(note)
        return note
