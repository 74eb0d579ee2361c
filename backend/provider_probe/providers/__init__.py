"""Provider clients used by the probe."""

from provider_probe.providers.client import ProviderClient, extract_error_message
from provider_probe.providers.errors import (
    MalformedResponse,
    ProbeError,
    ProviderError,
    TransportError,
)
from provider_probe.providers.gemini import GEMINI_API_URL, GeminiClient
from provider_probe.providers.groq import GROQ_API_URL, GroqClient

# Register all built-in clients on import
from provider_probe.providers.registry import (
    _register_all,
    get_provider_class,
    get_provider_client,
    register_provider,
    registered_providers,
)

_register_all()

__all__ = [
    "ProviderClient",
    "extract_error_message",
    "ProbeError",
    "TransportError",
    "ProviderError",
    "MalformedResponse",
    "GeminiClient",
    "GEMINI_API_URL",
    "GroqClient",
    "GROQ_API_URL",
    "get_provider_class",
    "get_provider_client",
    "register_provider",
    "registered_providers",
]
