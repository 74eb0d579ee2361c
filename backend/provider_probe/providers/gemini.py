"""Google Gemini (Generative Language API) client."""

from typing import Any

from loguru import logger

from provider_probe.providers.client import ProviderClient
from provider_probe.providers.errors import MalformedResponse

# Default Gemini API URL
GEMINI_API_URL = "https://generativelanguage.googleapis.com"
DEFAULT_GEMINI_VERSION = "v1beta"


class GeminiClient(ProviderClient):
    """Gemini REST client.

    The API key travels as the ``key`` query parameter. API versions
    (``v1``, ``v1beta``) are path prefixes, so a candidate's version
    picks the endpoint directly.
    """

    name = "gemini"
    default_base_url = GEMINI_API_URL

    def _build_headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    def _build_params(self) -> dict[str, str]:
        return {"key": self._api_key}

    async def list_models(self, version: str | None = None) -> list[str]:
        version = version or DEFAULT_GEMINI_VERSION
        logger.debug(f"Gemini discovery: version={version}")
        data = await self._request("GET", f"/{version}/models")

        models = data.get("models")
        if not isinstance(models, list):
            raise MalformedResponse(f"Gemini {version} response has no 'models' list")
        try:
            return [m["name"] for m in models]
        except (KeyError, TypeError) as e:
            raise MalformedResponse(f"Gemini {version} model entry without a name") from e

    async def generate(self, model: str, prompt: str, version: str | None = None) -> str:
        version = version or DEFAULT_GEMINI_VERSION
        model_path = model if model.startswith("models/") else f"models/{model}"
        request_data = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}

        logger.debug(f"Gemini request: model={model}, version={version}")
        data = await self._request(
            "POST", f"/{version}/{model_path}:generateContent", json_data=request_data
        )
        return _extract_text(data)


def _extract_text(data: dict[str, Any]) -> str:
    """Join the text parts of the first candidate."""
    try:
        parts = data["candidates"][0]["content"]["parts"]
        texts = [part["text"] for part in parts if "text" in part]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedResponse("Gemini response has no candidate text") from e
    if not texts:
        raise MalformedResponse("Gemini response has no candidate text")
    return "".join(texts)
