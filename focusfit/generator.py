"""
Client for the hosted text-generation API.

The plan pipeline only needs ``generate(prompt) -> str``. ``HttpTextGenerator``
implements it against an OpenAI-compatible ``/chat/completions`` endpoint and
reports every failure as ``TransportFailure``. It never retries.
"""

from typing import Any, Dict, Optional, Protocol

import httpx
import structlog

from focusfit.config import Settings
from focusfit.errors import TransportFailure

logger = structlog.get_logger(__name__)


class TextGenerator(Protocol):
    """Anything that turns a prompt into response text."""

    def generate(self, prompt: str) -> str:
        ...


class HttpTextGenerator:
    """
    Synchronous text-generation client built on httpx.

    Args:
        base_url: API root, e.g. "https://api.openai.com/v1"
        model: Model name sent with every request
        api_key: Bearer token (optional for local gateways)
        timeout: Request timeout in seconds
        temperature: Sampling temperature
        client: Pre-built httpx.Client (tests pass one with a MockTransport)
    """

    def __init__(
        self,
        base_url: str,
        model: str,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        temperature: float = 0.7,
        client: Optional[httpx.Client] = None,
    ):
        self.model = model
        self.temperature = temperature

        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout))
        self._client.headers.update(headers)
        self._url = base_url.rstrip("/") + "/chat/completions"

    @classmethod
    def from_settings(
        cls, settings: Settings, client: Optional[httpx.Client] = None
    ) -> "HttpTextGenerator":
        return cls(
            base_url=settings.generation_api_url,
            model=settings.generation_model,
            api_key=settings.generation_api_key,
            timeout=settings.generation_timeout_seconds,
            temperature=settings.generation_temperature,
            client=client,
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpTextGenerator":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
        }

    def generate(self, prompt: str) -> str:
        """
        Send one prompt and return the response text.

        Raises:
            TransportFailure: On network errors, timeouts, non-2xx responses
                (including 429 quota errors) or an unexpected response body
        """
        try:
            response = self._client.post(self._url, json=self._payload(prompt))
        except httpx.TimeoutException as e:
            logger.warning("generation_timeout", url=self._url, model=self.model)
            raise TransportFailure(f"Generation request timed out: {e}") from e
        except httpx.HTTPError as e:
            logger.warning("generation_request_failed", url=self._url, error=str(e))
            raise TransportFailure(f"Generation request failed: {e}") from e

        if response.status_code >= 400:
            logger.warning(
                "generation_bad_status",
                url=self._url,
                status_code=response.status_code,
                body_preview=response.text[:500] if response.text else "",
            )
            raise TransportFailure(
                f"Generation API returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(
                "generation_body_unexpected",
                url=self._url,
                body_preview=response.text[:500] if response.text else "",
            )
            raise TransportFailure(f"Unexpected generation response body: {e}") from e

        if not isinstance(content, str):
            raise TransportFailure("Generation response content is not text")
        return content
