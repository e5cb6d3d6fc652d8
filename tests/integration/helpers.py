"""
Integration test helpers: seed rows and sign clients in.
"""

from typing import Any

from httpx import AsyncClient, Response
from sqlalchemy.ext.asyncio import AsyncSession

from studyshare.backend.core.config import get_app_config
from studyshare.backend.core.security import create_session_token, hash_password
from studyshare.backend.core.session import ADMIN_SLOT, USER_SLOT
from studyshare.backend.models import Admin, Note, User


async def create_user(session: AsyncSession, name: str, email: str, password: str = "password") -> User:
    user = User(name=name, email=email, password=hash_password(password))
    session.add(user)
    await session.flush()
    return user


async def create_admin(session: AsyncSession, username: str = "root", password: str = "secret") -> Admin:
    admin = Admin(username=username, password=hash_password(password))
    session.add(admin)
    await session.flush()
    return admin


async def create_note(session: AsyncSession, uploader: User | None = None, **values: Any) -> Note:
    defaults = {
        "title": "Graphs",
        "subject": "Maths",
        "uploaded_by": uploader.name if uploader else "someone",
        "uploaded_by_id": uploader.id if uploader else "",
        "file": "1700000000000-graphs.pdf",
        "cover_image": "1700000000000-graphs.png",
    }
    defaults.update(values)
    note = Note(**defaults)
    session.add(note)
    await session.flush()
    return note


def login_as(client: AsyncClient, user: User) -> None:
    """Put a signed user session cookie on the client."""
    token = create_session_token(
        {"sub": user.id, "name": user.name, "email": user.email},
        kind=USER_SLOT,
    )
    client.cookies.set(get_app_config().security.cookies.user_cookie, token)


def login_admin(client: AsyncClient, admin: Admin) -> None:
    token = create_session_token({"sub": admin.id, "username": admin.username}, kind=ADMIN_SLOT)
    client.cookies.set(get_app_config().security.cookies.admin_cookie, token)


def assert_redirect(response: Response, location: str) -> None:
    assert response.status_code == 303, response.text
    assert response.headers["location"] == location
