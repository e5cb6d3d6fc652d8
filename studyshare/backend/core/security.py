"""
Security Utilities.

Password hashing and signed session tokens.
"""

from datetime import timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from studyshare.backend.core.config import get_app_config, get_settings
from studyshare.backend.core.exceptions import AuthenticationError
from studyshare.backend.core.logging import get_logger
from studyshare.backend.core.utils import utc_now

logger = get_logger(__name__)

# Stored in place of a hash for accounts created through Google sign-in
EXTERNAL_AUTH_PASSWORD = "google-auth"


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    password_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Returns False for the external-identity sentinel and for any stored
    value that is not a bcrypt hash.
    """
    if not hashed_password or hashed_password == EXTERNAL_AUTH_PASSWORD:
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        return False


def create_session_token(
    data: dict[str, Any],
    kind: str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed session token.

    Args:
        data: Claims to encode (at least "sub")
        kind: Identity slot the token belongs to ("user", "admin", "oauth_state")
        expires_delta: Optional custom lifetime

    Returns:
        Encoded JWT
    """
    settings = get_settings()
    session_config = get_app_config().security.session
    to_encode = data.copy()

    if expires_delta is None:
        expires_delta = timedelta(minutes=session_config.expire_minutes)

    to_encode.update({
        "exp": utc_now() + expires_delta,
        "type": kind,
        "aud": session_config.audience,
    })
    return jwt.encode(to_encode, settings.session_secret, algorithm=session_config.algorithm)


def decode_session_token(token: str, kind: str) -> dict[str, Any]:
    """
    Decode and validate a session token of the given kind.

    Raises:
        AuthenticationError: If the token is invalid, expired, or of another kind
    """
    settings = get_settings()
    session_config = get_app_config().security.session
    try:
        payload = jwt.decode(
            token,
            settings.session_secret,
            algorithms=[session_config.algorithm],
            audience=session_config.audience,
        )
    except JWTError as e:
        logger.warning("Session token decode failed", extra={"error": str(e)})
        raise AuthenticationError("Invalid or expired session")

    if payload.get("type") != kind:
        raise AuthenticationError("Invalid or expired session")
    return payload
