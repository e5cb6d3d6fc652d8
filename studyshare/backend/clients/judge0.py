"""
Judge0 Client.

Runs a code snippet on the public Judge0 API and waits for the result.

Usage:
    client = Judge0Client()
    result = await client.run("python", "print(1)")
    result["stdout"]  # "1\n"
"""

from typing import Any

import aiobreaker
import httpx

from studyshare.backend.core.config import get_app_config
from studyshare.backend.core.exceptions import ExternalServiceError, ValidationError
from studyshare.backend.core.logging import get_logger
from studyshare.backend.core.resilience import create_circuit_breaker

logger = get_logger(__name__)

# Editor language tag -> Judge0 language_id
JUDGE0_LANGUAGES: dict[str, int] = {
    "c": 50,
    "cpp": 54,
    "java": 62,
    "python": 71,
    "js": 63,
}

RESULT_FIELDS = ("stdout", "stderr", "compile_output", "status")

_breaker: aiobreaker.CircuitBreaker | None = None


def get_breaker() -> aiobreaker.CircuitBreaker:
    """Process-wide breaker for the Judge0 dependency."""
    global _breaker
    if _breaker is None:
        cb = get_app_config().services.judge0.circuit_breaker
        _breaker = create_circuit_breaker(
            "judge0",
            fail_max=cb.fail_max,
            timeout_duration=cb.timeout_duration,
        )
    return _breaker


def language_id_for(language: str) -> int:
    """
    Judge0 identifier of an editor language tag.

    Raises:
        ValidationError: If the tag is not supported
    """
    try:
        return JUDGE0_LANGUAGES[language]
    except KeyError:
        raise ValidationError("Unsupported language", details={"language": language})


class Judge0Client:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        breaker: aiobreaker.CircuitBreaker | None = None,
    ) -> None:
        app_config = get_app_config()
        self.base_url = (base_url or app_config.services.judge0.base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else float(
            app_config.application.timeouts.external_api
        )
        self._transport = transport
        self._breaker = breaker

    @property
    def submissions_url(self) -> str:
        return f"{self.base_url}/submissions?base64_encoded=false&wait=true"

    async def _submit(self, payload: dict[str, Any]) -> dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(self.submissions_url, json=payload)
            response.raise_for_status()
            return response.json()

    async def run(self, language: str | None, code: str | None, stdin: str | None = None) -> dict[str, Any]:
        """
        Execute code and return Judge0's stdout, stderr, compile_output and status.

        Raises:
            ValidationError: Missing language/code, or an unsupported language
            ExternalServiceError: The remote call failed or the breaker is open
        """
        if not language or not code:
            raise ValidationError("Language and code are required")
        language_id = language_id_for(language)

        payload = {
            "language_id": language_id,
            "source_code": code,
            "stdin": stdin or "",
        }
        breaker = self._breaker or get_breaker()
        try:
            result = await breaker.call_async(self._submit, payload)
        except aiobreaker.CircuitBreakerError as e:
            logger.warning("Judge0 circuit open", extra={"dependency": "judge0", "error": str(e)})
            raise ExternalServiceError("Server error while running code")
        except (httpx.HTTPError, ValueError) as e:
            logger.error(
                "Judge0 request failed",
                extra={"dependency": "judge0", "language": language, "error": str(e)},
            )
            raise ExternalServiceError("Server error while running code")

        logger.info("Code executed", extra={"dependency": "judge0", "language": language})
        return {field: result.get(field) for field in RESULT_FIELDS}
