"""
Gemini Client.

Single-turn text generation. Every failure becomes a fixed user-facing
reply instead of an exception.
"""

from typing import Any

import aiobreaker
import httpx

from studyshare.backend.core.config import get_app_config, get_settings
from studyshare.backend.core.logging import get_logger
from studyshare.backend.core.resilience import create_circuit_breaker

logger = get_logger(__name__)

EMPTY_MESSAGE_REPLY = "Please type a message."
NO_RESPONSE_REPLY = "No response from AI."
ERROR_REPLY = "AI Error. Try again later."

_breaker: aiobreaker.CircuitBreaker | None = None


def get_breaker() -> aiobreaker.CircuitBreaker:
    global _breaker
    if _breaker is None:
        cb = get_app_config().services.gemini.circuit_breaker
        _breaker = create_circuit_breaker(
            "gemini",
            fail_max=cb.fail_max,
            timeout_duration=cb.timeout_duration,
        )
    return _breaker


def extract_reply(data: Any) -> str:
    """
    Text of the first candidate.

    Raises:
        KeyError, IndexError, TypeError: If a candidate is present but malformed
    """
    if not isinstance(data, dict) or not data.get("candidates"):
        return NO_RESPONSE_REPLY
    return data["candidates"][0]["content"]["parts"][0]["text"]


class GeminiClient:
    def __init__(
        self,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        breaker: aiobreaker.CircuitBreaker | None = None,
    ) -> None:
        app_config = get_app_config()
        gemini = app_config.services.gemini
        self.base_url = gemini.base_url.rstrip("/")
        self.model = gemini.model
        self.api_key = api_key if api_key is not None else get_settings().gemini_api_key
        self.timeout = float(app_config.application.timeouts.external_api)
        self._transport = transport
        self._breaker = breaker

    @property
    def generate_url(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent?key={self.api_key}"

    async def _generate(self, message: str) -> Any:
        payload = {"contents": [{"parts": [{"text": message}]}]}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(self.generate_url, json=payload)
            return response.json()

    async def ask(self, message: str | None) -> str:
        """Reply to a single message."""
        if not message:
            return EMPTY_MESSAGE_REPLY

        breaker = self._breaker or get_breaker()
        try:
            data = await breaker.call_async(self._generate, message)
            reply = extract_reply(data)
        except Exception as e:
            logger.error("Gemini request failed", extra={"dependency": "gemini", "error": str(e)})
            return ERROR_REPLY

        if reply == NO_RESPONSE_REPLY:
            logger.warning("Gemini returned no candidates", extra={"dependency": "gemini", "response": data})
        return reply
