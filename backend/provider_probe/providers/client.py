"""Base provider client for probe calls."""

from abc import ABC, abstractmethod
from typing import Any

import httpx
from loguru import logger

from provider_probe.models import Candidate, CandidateKind
from provider_probe.providers.errors import MalformedResponse, ProviderError, TransportError
from provider_probe.utils.security import mask_secret

# Re-export for consumers
__all__ = ["ProviderClient", "extract_error_message"]


def extract_error_message(data: Any) -> str | None:
    """Pull ``error.message`` out of a provider error body, if present.

    Both Gemini and OpenAI-compatible APIs report failures as
    ``{"error": {"message": ...}}``; a bare string under ``error`` is
    accepted too. A null or empty ``error`` is not an error.
    """
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if not error:
        return None
    if isinstance(error, dict):
        message = error.get("message") or error.get("status") or error.get("code")
        return str(message) if message is not None else "unknown provider error"
    return str(error)


class ProviderClient(ABC):
    """Base class for the HTTP clients the probe talks to.

    One outbound request per call. No retry transport: fallback
    happens across candidates, never by repeating the same one.
    """

    name: str = ""
    default_base_url: str = ""

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize provider client.

        Args:
            api_key: API key for authentication
            base_url: API base URL override (default: the provider's public endpoint)
            timeout: Request timeout in seconds (default: 30)
            transport: Optional httpx transport, used by tests to stub the network
        """
        self.base_url = base_url or self.default_base_url
        self._api_key = api_key  # Keep private, don't log

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            transport=transport,
            timeout=httpx.Timeout(timeout, connect=min(timeout, 10.0)),
            headers=self._build_headers(),
        )

        logger.debug(
            f"Initialized {self.name} client for {self.base_url} (key={mask_secret(api_key)})"
        )

    @abstractmethod
    def _build_headers(self) -> dict[str, str]:
        """Build request headers. Subclasses implement auth-specific headers."""
        pass

    def _build_params(self) -> dict[str, str]:
        """Query parameters sent with every request."""
        return {}

    @abstractmethod
    async def list_models(self, version: str | None = None) -> list[str]:
        """Discovery call: return the model names the provider exposes."""
        pass

    @abstractmethod
    async def generate(self, model: str, prompt: str, version: str | None = None) -> str:
        """Generation call: send one user message, return the generated text."""
        pass

    async def call(self, candidate: Candidate, prompt: str) -> str | list[str]:
        """Dispatch a candidate to the discovery or generation call."""
        if candidate.kind == CandidateKind.DISCOVERY:
            return await self.list_models(candidate.version)
        assert candidate.model is not None
        return await self.generate(candidate.model, prompt, version=candidate.version)

    async def _request(
        self,
        method: str,
        endpoint: str,
        json_data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send one request and return the decoded JSON body.

        Raises:
            TransportError: Network failure, timeout, or non-2xx without error body
            ProviderError: Body carries an ``error`` object
            MalformedResponse: 2xx with a body that is not a JSON object
        """
        try:
            response = await self._client.request(
                method, endpoint, params=self._build_params() or None, json=json_data
            )
        except httpx.TimeoutException as e:
            raise TransportError(f"Request to {self.name} timed out: {type(e).__name__}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {self.name} failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = None

        message = extract_error_message(data)
        if message is not None:
            logger.debug(f"{self.name} error {response.status_code}: {message}")
            raise ProviderError(message, status_code=response.status_code)

        if response.is_error:
            raise TransportError(f"HTTP {response.status_code} from {self.name}")

        if not isinstance(data, dict):
            raise MalformedResponse(f"{self.name} returned a non-JSON-object body")
        return data

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "ProviderClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
