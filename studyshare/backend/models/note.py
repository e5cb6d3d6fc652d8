"""
Note Models.

A note is an uploaded study document. Its ratings are stored one row per
(note, user) pair; `rating` and `rating_count` on the note are derived from
those rows and rewritten on every insertion.
"""

from sqlalchemy import JSON, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studyshare.backend.models.base import Base, CreatedAtMixin, TimestampMixin, UUIDMixin


class NoteRating(UUIDMixin, CreatedAtMixin, Base):
    """One user's rating of one note."""

    __tablename__ = "note_ratings"
    __table_args__ = (
        UniqueConstraint("note_id", "user_id", name="uq_note_ratings_note_user"),
    )

    note_id: Mapped[str] = mapped_column(
        ForeignKey("notes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    value: Mapped[float] = mapped_column(Float, nullable=False)

    def __repr__(self) -> str:
        return f"<NoteRating(note_id={self.note_id}, user_id={self.user_id}, value={self.value})>"


class Note(UUIDMixin, TimestampMixin, Base):
    """Shared study note with file, cover image, ratings and moderation flags."""

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    subject: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    uploaded_by: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    uploaded_by_id: Mapped[str] = mapped_column(String(64), default="", nullable=False)
    file: Mapped[str] = mapped_column(String(512), nullable=False)
    cover_image: Mapped[str] = mapped_column(String(512), nullable=False)
    downloads: Mapped[int | None] = mapped_column(Integer, default=0, nullable=True)
    rating: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    rating_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    comments: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    approved: Mapped[bool] = mapped_column(default=False, nullable=False)
    removed: Mapped[bool] = mapped_column(default=False, nullable=False, index=True)

    ratings: Mapped[list[NoteRating]] = relationship(
        order_by=NoteRating.created_at,
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, removed={self.removed})>"
