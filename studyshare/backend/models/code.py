"""
Code Models.

Snippets are public, immutable share links. Saved codes are private to
their owner.
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from studyshare.backend.models.base import Base, CreatedAtMixin, UUIDMixin

# Owner recorded for snippets shared without a user session
ANONYMOUS_OWNER = "guest"


class Snippet(UUIDMixin, CreatedAtMixin, Base):
    __tablename__ = "snippets"

    user_id: Mapped[str] = mapped_column(String(64), default=ANONYMOUS_OWNER, nullable=False)
    name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    language: Mapped[str] = mapped_column(String(32), default="", nullable=False)
    code: Mapped[str] = mapped_column(Text, default="", nullable=False)

    def __repr__(self) -> str:
        return f"<Snippet(id={self.id}, name={self.name!r})>"


class SavedCode(UUIDMixin, CreatedAtMixin, Base):
    __tablename__ = "saved_codes"

    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    language: Mapped[str] = mapped_column(String(32), default="", nullable=False)
    code: Mapped[str] = mapped_column(Text, default="", nullable=False)

    def __repr__(self) -> str:
        return f"<SavedCode(id={self.id}, title={self.title!r})>"
