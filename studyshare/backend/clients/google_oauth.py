"""
Google Sign-In.

Authorization-code flow against Google's OAuth endpoints: build the consent
URL, trade the returned code for an access token, and read the profile.
"""

from typing import Any
from urllib.parse import urlencode

import httpx

from studyshare.backend.core.config import get_app_config, get_settings
from studyshare.backend.core.exceptions import ExternalServiceError
from studyshare.backend.core.logging import get_logger

logger = get_logger(__name__)


class GoogleOAuthClient:
    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        app_config = get_app_config()
        settings = get_settings()
        self.config = app_config.services.google_oauth
        self.client_id = settings.google_client_id
        self.client_secret = settings.google_client_secret
        self.timeout = float(app_config.application.timeouts.external_api)
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def authorization_url(self, redirect_uri: str, state: str) -> str:
        query = urlencode({
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": " ".join(self.config.scopes),
            "state": state,
        })
        return f"{self.config.authorize_url}?{query}"

    async def fetch_profile(self, code: str, redirect_uri: str) -> dict[str, Any]:
        """
        Exchange an authorization code and return the user's profile.

        Raises:
            ExternalServiceError: If either call fails or the profile has no email
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                token_response = await client.post(
                    self.config.token_url,
                    data={
                        "code": code,
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "redirect_uri": redirect_uri,
                        "grant_type": "authorization_code",
                    },
                )
                token_response.raise_for_status()
                access_token = token_response.json()["access_token"]

                profile_response = await client.get(
                    self.config.userinfo_url,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                profile_response.raise_for_status()
                profile = profile_response.json()
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.error("Google sign-in failed", extra={"dependency": "google_oauth", "error": str(e)})
            raise ExternalServiceError("Google sign-in failed")

        if not profile.get("email"):
            raise ExternalServiceError("Google account has no email")
        return profile
