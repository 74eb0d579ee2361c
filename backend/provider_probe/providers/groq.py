"""Groq client (OpenAI-compatible API)."""

from loguru import logger

from provider_probe.providers.client import ProviderClient
from provider_probe.providers.errors import MalformedResponse

# Default Groq API URL
GROQ_API_URL = "https://api.groq.com/openai"


class GroqClient(ProviderClient):
    """Groq chat-completions client.

    Groq exposes a single API version, so a candidate's version is
    ignored; only its model identifier matters.
    """

    name = "groq"
    default_base_url = GROQ_API_URL

    def _build_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    async def list_models(self, version: str | None = None) -> list[str]:
        data = await self._request("GET", "/v1/models")

        models = data.get("data")
        if not isinstance(models, list):
            raise MalformedResponse("Groq response has no 'data' list")
        try:
            return [m["id"] for m in models]
        except (KeyError, TypeError) as e:
            raise MalformedResponse("Groq model entry without an id") from e

    async def generate(self, model: str, prompt: str, version: str | None = None) -> str:
        request_data = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
        }

        logger.debug(f"Groq request: model={model}")
        data = await self._request("POST", "/v1/chat/completions", json_data=request_data)

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise MalformedResponse("Groq response has no message content") from e
        if not isinstance(content, str):
            raise MalformedResponse("Groq message content is not text")
        return content
