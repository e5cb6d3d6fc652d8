"""
FastAPI Dependencies.

Shared dependencies for request handling: database session and the
identity gates.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from studyshare.backend.core.database import get_db_session
from studyshare.backend.core.exceptions import LoginRequiredRedirect
from studyshare.backend.core.session import Identity, SessionAdmin, SessionUser, load_identity

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


def get_identity(request: Request) -> Identity:
    """Identity context for the current request (both slots may be empty)."""
    return load_identity(request)


CurrentIdentity = Annotated[Identity, Depends(get_identity)]


def require_user(identity: CurrentIdentity) -> SessionUser:
    """Gate for user pages; anonymous visitors are redirected to /login."""
    if identity.user is None:
        raise LoginRequiredRedirect("/login")
    return identity.user


def require_admin(identity: CurrentIdentity) -> SessionAdmin:
    """Gate for admin pages; redirects to /admin/login."""
    if identity.admin is None:
        raise LoginRequiredRedirect("/admin/login")
    return identity.admin


CurrentUser = Annotated[SessionUser, Depends(require_user)]
CurrentAdmin = Annotated[SessionAdmin, Depends(require_admin)]
