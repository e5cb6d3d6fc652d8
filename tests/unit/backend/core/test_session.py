"""
Unit Tests for the session identity slots.
"""

from starlette.requests import Request
from starlette.responses import Response

from studyshare.backend.core.config import get_app_config
from studyshare.backend.core.security import create_session_token
from studyshare.backend.core.session import (
    ADMIN_SLOT,
    USER_SLOT,
    SessionAdmin,
    SessionUser,
    end_session,
    load_identity,
    start_admin_session,
    start_user_session,
)


def request_with_cookies(cookies: dict[str, str]) -> Request:
    header = "; ".join(f"{k}={v}" for k, v in cookies.items())
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(b"cookie", header.encode())] if header else [],
    }
    return Request(scope)


def cookie_names():
    cookies = get_app_config().security.cookies
    return cookies.user_cookie, cookies.admin_cookie


class TestLoadIdentity:
    def test_anonymous(self):
        identity = load_identity(request_with_cookies({}))

        assert not identity.is_user
        assert not identity.is_admin

    def test_user_slot(self):
        user_cookie, _ = cookie_names()
        token = create_session_token({"sub": "u1", "name": "alice", "email": "a@example.com"}, kind=USER_SLOT)

        identity = load_identity(request_with_cookies({user_cookie: token}))

        assert identity.user == SessionUser(id="u1", name="alice", email="a@example.com")
        assert identity.admin is None

    def test_slots_are_independent(self):
        user_cookie, admin_cookie = cookie_names()
        user_token = create_session_token({"sub": "u1"}, kind=USER_SLOT)
        admin_token = create_session_token({"sub": "a1", "username": "root"}, kind=ADMIN_SLOT)

        identity = load_identity(request_with_cookies({user_cookie: user_token, admin_cookie: admin_token}))

        assert identity.is_user
        assert identity.admin == SessionAdmin(id="a1", username="root")

    def test_user_token_in_admin_cookie_is_ignored(self):
        _, admin_cookie = cookie_names()
        token = create_session_token({"sub": "u1"}, kind=USER_SLOT)

        identity = load_identity(request_with_cookies({admin_cookie: token}))

        assert not identity.is_admin

    def test_tampered_cookie_is_treated_as_empty(self):
        user_cookie, _ = cookie_names()

        identity = load_identity(request_with_cookies({user_cookie: "garbage"}))

        assert not identity.is_user


class TestSessionCookies:
    def test_start_user_session_sets_httponly_cookie(self):
        user_cookie, _ = cookie_names()
        response = Response()

        start_user_session(response, SessionUser(id="u1", name="alice", email="a@example.com"))

        header = response.headers["set-cookie"]
        assert header.startswith(f"{user_cookie}=")
        assert "httponly" in header.lower()

    def test_start_admin_session_uses_admin_cookie(self):
        _, admin_cookie = cookie_names()
        response = Response()

        start_admin_session(response, SessionAdmin(id="a1", username="root"))

        assert response.headers["set-cookie"].startswith(f"{admin_cookie}=")

    def test_end_session_clears_only_its_slot(self):
        _, admin_cookie = cookie_names()
        response = Response()

        end_session(response, ADMIN_SLOT)

        cleared = response.headers.getlist("set-cookie")
        assert len(cleared) == 1
        assert cleared[0].startswith(f"{admin_cookie}=")
