"""
Account Pages.

Registration, email/password login, Google sign-in and logout for end
users. Login failures answer in plain text.
"""

import secrets
from datetime import timedelta
from typing import Annotated

from fastapi import APIRouter, Form, Request
from fastapi.responses import PlainTextResponse, RedirectResponse, Response

from studyshare.backend.clients.google_oauth import GoogleOAuthClient
from studyshare.backend.core.config import get_app_config, get_server_base_url
from studyshare.backend.core.dependencies import DbSession
from studyshare.backend.core.exception_handlers import status_for
from studyshare.backend.core.exceptions import (
    ApplicationError,
    AuthenticationError,
    ConflictError,
    NotFoundError,
)
from studyshare.backend.core.logging import get_logger
from studyshare.backend.core.security import create_session_token, decode_session_token
from studyshare.backend.core.session import USER_SLOT, SessionUser, end_session, start_user_session
from studyshare.backend.core.templating import render
from studyshare.backend.models.user import User
from studyshare.backend.services.user import UserService

router = APIRouter()
logger = get_logger(__name__)

OAUTH_STATE_KIND = "oauth_state"
OAUTH_STATE_LIFETIME = timedelta(minutes=10)
REGISTER_FAILED_MESSAGE = "Something went wrong. Please try again."


def session_user(user: User) -> SessionUser:
    return SessionUser(id=user.id, name=user.name, email=user.email)


def _google_redirect_uri() -> str:
    return f"{get_server_base_url()}/auth/google/callback"


@router.get("/register")
async def register_page(request: Request) -> Response:
    return render(request, "register.html", {"error": None})


@router.post("/register")
async def register(
    request: Request,
    db: DbSession,
    name: Annotated[str, Form()] = "",
    email: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
) -> Response:
    try:
        await UserService(db).register(name, email, password)
    except ConflictError as e:
        await db.rollback()
        return render(request, "register.html", {"error": e.message}, status_code=409)
    except ApplicationError as e:
        await db.rollback()
        logger.warning("Registration failed", extra={"error": e.message})
        return render(request, "register.html", {"error": REGISTER_FAILED_MESSAGE}, status_code=status_for(e))
    return RedirectResponse("/login", status_code=303)


@router.get("/login")
async def login_page(request: Request) -> Response:
    return render(request, "login.html", {
        "google_enabled": get_app_config().features.auth_google_enabled,
    })


@router.post("/login")
async def login(
    db: DbSession,
    email: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
) -> Response:
    try:
        user = await UserService(db).authenticate(email, password)
    except (NotFoundError, AuthenticationError) as e:
        return PlainTextResponse(e.message, status_code=status_for(e))

    response = RedirectResponse("/", status_code=303)
    start_user_session(response, session_user(user))
    return response


@router.get("/logout")
async def logout() -> Response:
    response = RedirectResponse("/", status_code=303)
    end_session(response, USER_SLOT)
    return response


@router.get("/auth/google")
async def google_login() -> Response:
    """Send the browser to Google's consent screen."""
    client = GoogleOAuthClient()
    if not get_app_config().features.auth_google_enabled or not client.configured:
        return RedirectResponse("/login", status_code=303)

    state = create_session_token(
        {"sub": secrets.token_urlsafe(16)},
        kind=OAUTH_STATE_KIND,
        expires_delta=OAUTH_STATE_LIFETIME,
    )
    response = RedirectResponse(client.authorization_url(_google_redirect_uri(), state), status_code=303)
    cookies = get_app_config().security.cookies
    response.set_cookie(
        cookies.oauth_state_cookie,
        state,
        max_age=int(OAUTH_STATE_LIFETIME.total_seconds()),
        httponly=True,
        secure=cookies.secure,
        samesite=cookies.same_site,
    )
    return response


@router.get("/auth/google/callback")
async def google_callback(
    request: Request,
    db: DbSession,
    code: str | None = None,
    state: str | None = None,
) -> Response:
    """Finish Google sign-in; first-time accounts are created on the fly."""
    cookies = get_app_config().security.cookies
    failure = RedirectResponse("/login", status_code=303)
    failure.delete_cookie(cookies.oauth_state_cookie)

    expected = request.cookies.get(cookies.oauth_state_cookie)
    if not code or not state or state != expected:
        logger.warning("Google callback rejected", extra={"reason": "state mismatch"})
        return failure

    try:
        decode_session_token(state, OAUTH_STATE_KIND)
        profile = await GoogleOAuthClient().fetch_profile(code, _google_redirect_uri())
        user = await UserService(db).login_external(profile.get("name", ""), profile["email"])
    except ApplicationError as e:
        await db.rollback()
        logger.warning("Google sign-in rejected", extra={"error": e.message})
        return failure

    response = RedirectResponse("/", status_code=303)
    response.delete_cookie(cookies.oauth_state_cookie)
    start_user_session(response, session_user(user))
    return response
