"""
Account Models.

End users and administrators are separate record kinds with separate
session slots.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from studyshare.backend.models.base import Base, CreatedAtMixin, UUIDMixin


class User(UUIDMixin, CreatedAtMixin, Base):
    """
    Registered end user.

    `password` holds a bcrypt hash, or the sentinel "google-auth" for
    accounts created through Google sign-in.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email!r})>"


class Admin(UUIDMixin, CreatedAtMixin, Base):
    """Moderator account, seeded from the command line."""

    __tablename__ = "admins"

    username: Mapped[str] = mapped_column(String(120), unique=True, nullable=False, index=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<Admin(id={self.id}, username={self.username!r})>"
