"""Pytest fixtures for provider probe tests."""

import asyncio
import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from provider_probe.models import Candidate, ProviderConfig
from provider_probe.providers import ProviderClient

# A scripted outcome: a payload to return, an exception to raise,
# or an async callable producing either.
Outcome = Any


class ScriptedClient(ProviderClient):
    """Provider client whose answers come from a per-candidate script.

    Records every call so tests can assert which candidates were
    actually attempted.
    """

    name = "scripted"
    default_base_url = "http://scripted.test"

    def __init__(self, script: dict[str, Outcome], **kwargs: Any):
        super().__init__(api_key="test-key", **kwargs)
        self.script = script
        self.calls: list[str] = []
        self.closed = False

    def _build_headers(self) -> dict[str, str]:
        return {}

    async def _play(self, key: str) -> Any:
        self.calls.append(key)
        outcome = self.script[key]
        if callable(outcome) and not isinstance(outcome, BaseException):
            outcome = await outcome()
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def list_models(self, version: str | None = None) -> list[str]:
        return await self._play(version or "")

    async def generate(self, model: str, prompt: str, version: str | None = None) -> str:
        return await self._play(model)

    async def close(self) -> None:
        self.closed = True
        await super().close()


@pytest.fixture
def make_config():
    """Build a ProviderConfig from (version, model) pairs."""

    def _make(
        *pairs: tuple[str | None, str | None],
        credential: str | None = "test-key",
        name: str = "gemini",
    ) -> ProviderConfig:
        return ProviderConfig(
            name=name,
            credential=credential,
            candidates=tuple(Candidate(version=v, model=m) for v, m in pairs),
        )

    return _make


@pytest.fixture
async def scripted_client():
    """Factory for ScriptedClient instances, closed after the test."""
    clients: list[ScriptedClient] = []

    def _make(script: dict[str, Outcome]) -> ScriptedClient:
        client = ScriptedClient(script)
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client._client.aclose()


def _hanging(started: asyncio.Event | None = None, seconds: float = 30.0):
    async def _hang() -> Any:
        if started is not None:
            started.set()
        await asyncio.sleep(seconds)
        return "too late"

    return _hang


@pytest.fixture
def hanging():
    """Async outcome that never answers within a test's lifetime."""
    return _hanging


@pytest.fixture
def json_response():
    """Build an httpx.Response with a JSON body."""

    def _make(status_code: int, body: Any) -> httpx.Response:
        return httpx.Response(status_code, content=json.dumps(body).encode())

    return _make


@pytest.fixture
def mock_transport():
    """Build an httpx.MockTransport that records the requests it serves."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.MockTransport:
        requests: list[httpx.Request] = []

        def _handle(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        transport = httpx.MockTransport(_handle)
        transport.requests = requests  # type: ignore[attr-defined]
        return transport

    return _make


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate settings from the developer's environment and .env file."""
    for var in (
        "GEMINI_API_KEY",
        "GROQ_API_KEY",
        "PROVIDER_PROBE_GEMINI_API_KEY",
        "PROVIDER_PROBE_GROQ_API_KEY",
        "PROVIDER_PROBE_TIMEOUT",
        "PROVIDER_PROBE_DEADLINE",
        "PROVIDER_PROBE_PROMPT",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)

    from provider_probe.config import get_settings

    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()
