"""Provider client registry.

Maps provider names to client classes so a ProviderConfig can be
turned into a client without the probe knowing about vendors.
"""

from typing import Any

from .client import ProviderClient

_providers: dict[str, type[ProviderClient]] = {}


def register_provider(client_cls: type[ProviderClient], *aliases: str) -> None:
    """Register a client class under its name and any aliases."""
    for name in (client_cls.name, *aliases):
        _providers[name] = client_cls


def get_provider_class(name: str) -> type[ProviderClient] | None:
    """Look up the client class for a provider name.

    Names like ``gemini-discovery`` fall back to the part before the
    first dash. Returns None if nothing matches.
    """
    if name in _providers:
        return _providers[name]
    return _providers.get(name.split("-", 1)[0])


def get_provider_client(name: str, api_key: str, **kwargs: Any) -> ProviderClient:
    """Create a client for a provider.

    Raises:
        KeyError: If no client is registered for the provider
    """
    client_cls = get_provider_class(name)
    if client_cls is None:
        raise KeyError(f"No provider client registered for: {name}")
    return client_cls(api_key=api_key, **kwargs)


def registered_providers() -> list[str]:
    """Return the provider names that have clients."""
    return list(_providers.keys())


def _register_all() -> None:
    """Register all built-in provider clients.

    Called once at import time from __init__.py.
    """
    from .gemini import GeminiClient
    from .groq import GroqClient

    register_provider(GeminiClient, "google")
    register_provider(GroqClient)
