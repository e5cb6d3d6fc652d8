"""
Session Identity.

Each request carries an `Identity` with two independent optional slots,
an end-user and an admin. Each slot is a signed token in its own HTTP-only
cookie; logging in writes the cookie, logging out deletes it.
"""

from dataclasses import dataclass

from starlette.requests import Request
from starlette.responses import Response

from studyshare.backend.core.config import get_app_config
from studyshare.backend.core.exceptions import AuthenticationError
from studyshare.backend.core.logging import get_logger
from studyshare.backend.core.security import create_session_token, decode_session_token

logger = get_logger(__name__)

USER_SLOT = "user"
ADMIN_SLOT = "admin"


@dataclass(frozen=True)
class SessionUser:
    id: str
    name: str
    email: str


@dataclass(frozen=True)
class SessionAdmin:
    id: str
    username: str


@dataclass(frozen=True)
class Identity:
    """Request-scoped identity context."""

    user: SessionUser | None = None
    admin: SessionAdmin | None = None

    @property
    def is_user(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return self.admin is not None


def _cookie_name(slot: str) -> str:
    cookies = get_app_config().security.cookies
    return cookies.admin_cookie if slot == ADMIN_SLOT else cookies.user_cookie


def _read_slot(request: Request, slot: str) -> dict | None:
    token = request.cookies.get(_cookie_name(slot))
    if not token:
        return None
    try:
        return decode_session_token(token, slot)
    except AuthenticationError:
        # Stale or tampered cookie: treat the slot as empty
        return None


def load_identity(request: Request) -> Identity:
    """Build the identity context from the request cookies."""
    user_claims = _read_slot(request, USER_SLOT)
    admin_claims = _read_slot(request, ADMIN_SLOT)

    user = None
    if user_claims is not None:
        user = SessionUser(
            id=user_claims["sub"],
            name=user_claims.get("name", ""),
            email=user_claims.get("email", ""),
        )

    admin = None
    if admin_claims is not None:
        admin = SessionAdmin(id=admin_claims["sub"], username=admin_claims.get("username", ""))

    return Identity(user=user, admin=admin)


def _set_cookie(response: Response, slot: str, token: str) -> None:
    cookies = get_app_config().security.cookies
    response.set_cookie(
        _cookie_name(slot),
        token,
        max_age=get_app_config().security.session.expire_minutes * 60,
        httponly=True,
        secure=cookies.secure,
        samesite=cookies.same_site,
    )


def start_user_session(response: Response, user: SessionUser) -> None:
    """Fill the user slot."""
    token = create_session_token(
        {"sub": user.id, "name": user.name, "email": user.email},
        kind=USER_SLOT,
    )
    _set_cookie(response, USER_SLOT, token)
    logger.info("User session started", extra={"user_id": user.id})


def start_admin_session(response: Response, admin: SessionAdmin) -> None:
    """Fill the admin slot."""
    token = create_session_token(
        {"sub": admin.id, "username": admin.username},
        kind=ADMIN_SLOT,
    )
    _set_cookie(response, ADMIN_SLOT, token)
    logger.info("Admin session started", extra={"admin_id": admin.id})


def end_session(response: Response, slot: str) -> None:
    """Clear one identity slot, leaving the other untouched."""
    response.delete_cookie(_cookie_name(slot))
