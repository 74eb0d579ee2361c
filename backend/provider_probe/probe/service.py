"""Probe orchestrator.

Walks a provider's candidates in declared order, one outbound call at
a time, and stops at the first success. Every attempt becomes an
AttemptResult; provider and transport errors never escape a run.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncGenerator, Awaitable
from typing import TypeVar

from loguru import logger

from provider_probe.models import (
    AttemptResult,
    AttemptStatus,
    Candidate,
    ErrorKind,
    ProbeReport,
    ProviderConfig,
)
from provider_probe.providers import (
    ProbeError,
    ProviderClient,
    TransportError,
    get_provider_client,
)

DEFAULT_TIMEOUT = 30.0

T = TypeVar("T")


class _Cancellation:
    """Caller-supplied cancel signal plus an optional whole-run deadline."""

    def __init__(self, event: asyncio.Event | None, deadline: float | None):
        self.event = event
        self._deadline_at = None if deadline is None else time.monotonic() + deadline
        self.stopped_early = False

    @property
    def triggered(self) -> bool:
        if self.event is not None and self.event.is_set():
            return True
        return self._deadline_at is not None and time.monotonic() >= self._deadline_at

    def remaining(self) -> float | None:
        if self._deadline_at is None:
            return None
        return max(0.0, self._deadline_at - time.monotonic())


def _per_attempt_timeout(timeout: float | None) -> float:
    if timeout is None:
        return DEFAULT_TIMEOUT
    if timeout <= 0:
        raise ValueError(f"timeout must be positive, got {timeout}")
    return timeout


async def _bounded(call: Awaitable[T], timeout: float) -> T:
    """Await a provider call, turning a per-attempt timeout into TransportError."""
    try:
        return await asyncio.wait_for(call, timeout)
    except TimeoutError as e:
        raise TransportError(f"No response within {timeout:g}s") from e


async def _attempt(
    client: ProviderClient,
    candidate: Candidate,
    prompt: str,
    timeout: float,
    cancellation: _Cancellation,
) -> AttemptResult:
    """Run one candidate, racing it against the cancel signal and deadline."""
    started = time.perf_counter()
    call = asyncio.ensure_future(_bounded(client.call(candidate, prompt), timeout))
    waiters: set[asyncio.Future] = {call}
    cancel_waiter = None
    if cancellation.event is not None:
        cancel_waiter = asyncio.ensure_future(cancellation.event.wait())
        waiters.add(cancel_waiter)

    try:
        done, _ = await asyncio.wait(
            waiters, timeout=cancellation.remaining(), return_when=asyncio.FIRST_COMPLETED
        )
    finally:
        if cancel_waiter is not None:
            cancel_waiter.cancel()
        if not call.done():
            call.cancel()
            await asyncio.gather(call, return_exceptions=True)

    elapsed_ms = (time.perf_counter() - started) * 1000

    if call not in done:
        cancellation.stopped_early = True
        return AttemptResult(
            candidate=candidate,
            status=AttemptStatus.CANCELLED,
            error_kind=ErrorKind.CANCELLED,
            message="Probe cancelled while the call was in flight",
            elapsed_ms=elapsed_ms,
        )

    try:
        payload = call.result()
    except ProbeError as e:
        return AttemptResult(
            candidate=candidate,
            status=AttemptStatus.FAILURE,
            error_kind=e.kind,
            message=str(e),
            elapsed_ms=elapsed_ms,
        )
    except Exception as e:
        # Anything the client did not classify is treated as a failed call
        logger.opt(exception=e).debug(f"Unclassified error for candidate {candidate}")
        return AttemptResult(
            candidate=candidate,
            status=AttemptStatus.FAILURE,
            error_kind=ErrorKind.TRANSPORT_ERROR,
            message=f"{type(e).__name__}: {e}",
            elapsed_ms=elapsed_ms,
        )

    return AttemptResult(
        candidate=candidate,
        status=AttemptStatus.SUCCESS,
        payload=payload,
        elapsed_ms=elapsed_ms,
    )


async def _run(
    config: ProviderConfig,
    client: ProviderClient | None,
    timeout: float,
    cancellation: _Cancellation,
) -> AsyncGenerator[AttemptResult, None]:
    owns_client = client is None
    if client is None:
        client = get_provider_client(
            config.name, config.credential, base_url=config.base_url, timeout=timeout
        )

    try:
        total = len(config.candidates)
        for index, candidate in enumerate(config.candidates, start=1):
            if cancellation.triggered:
                cancellation.stopped_early = True
                logger.info(f"{config.name}: cancelled before candidate {index}/{total}")
                return

            logger.debug(f"{config.name}: attempting {candidate} ({index}/{total})")
            attempt = await _attempt(client, candidate, config.prompt, timeout, cancellation)

            if attempt.status == AttemptStatus.SUCCESS:
                logger.info(f"{config.name}: {candidate} succeeded in {attempt.elapsed_ms:.0f}ms")
            elif attempt.status == AttemptStatus.CANCELLED:
                logger.info(f"{config.name}: {candidate} cancelled")
            else:
                logger.warning(
                    f"{config.name}: {candidate} failed ({attempt.error_kind}): {attempt.message}"
                )

            yield attempt
            if attempt.status != AttemptStatus.FAILURE:
                return
    finally:
        if owns_client:
            await client.close()


async def iter_attempts(
    config: ProviderConfig,
    *,
    client: ProviderClient | None = None,
    timeout: float | None = None,
    cancel_event: asyncio.Event | None = None,
    deadline: float | None = None,
) -> AsyncGenerator[AttemptResult, None]:
    """Probe a provider, yielding each AttemptResult as it completes.

    Yields nothing when the config has no credential; use ``probe`` to
    get the configuration error as a report.

    Args:
        config: Provider name, credential and ordered candidates
        client: Optional pre-built ProviderClient (left open afterwards)
        timeout: Per-attempt timeout in seconds (default: 30); must be positive
        cancel_event: Setting it aborts the in-flight call and skips the rest
        deadline: Seconds allowed for the whole run, same effect as cancel_event
    """
    per_attempt = _per_attempt_timeout(timeout)
    if not config.has_credential:
        return
    cancellation = _Cancellation(cancel_event, deadline)
    async for attempt in _run(config, client, per_attempt, cancellation):
        yield attempt


async def probe(
    config: ProviderConfig,
    *,
    client: ProviderClient | None = None,
    timeout: float | None = None,
    cancel_event: asyncio.Event | None = None,
    deadline: float | None = None,
) -> ProbeReport:
    """Probe a provider and return the full report.

    A missing credential short-circuits to a ``config_error`` report
    with zero attempts; no client is created and nothing is sent.

    Args:
        config: Provider name, credential and ordered candidates
        client: Optional pre-built ProviderClient (left open afterwards)
        timeout: Per-attempt timeout in seconds (default: 30); must be positive
        cancel_event: Setting it aborts the in-flight call and skips the rest
        deadline: Seconds allowed for the whole run, same effect as cancel_event

    Returns:
        ProbeReport with attempts in candidate order

    Raises:
        ValueError: If timeout is zero or negative
    """
    per_attempt = _per_attempt_timeout(timeout)
    if not config.has_credential:
        logger.warning(f"{config.name}: no API key configured, skipping network calls")
        return ProbeReport.config_error(config.name)

    cancellation = _Cancellation(cancel_event, deadline)
    attempts = [attempt async for attempt in _run(config, client, per_attempt, cancellation)]
    report = ProbeReport.from_attempts(
        config.name, attempts, cancelled=cancellation.stopped_early
    )

    logger.info(f"Probe complete for {config.name}: outcome={report.outcome}")
    return report
