"""Errors raised by provider clients.

The probe converts every one of these into a failed AttemptResult;
they never escape a probe run.
"""

from provider_probe.models import ErrorKind


class ProbeError(Exception):
    """Base error for a single provider call."""

    kind: ErrorKind = ErrorKind.TRANSPORT_ERROR


class TransportError(ProbeError):
    """Network failure, timeout, or HTTP error without a provider error body."""

    kind = ErrorKind.TRANSPORT_ERROR


class ProviderError(ProbeError):
    """Provider answered with an explicit error payload (e.g. unknown model)."""

    kind = ErrorKind.PROVIDER_ERROR

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponse(ProbeError):
    """Success status but the payload could not be parsed."""

    kind = ErrorKind.MALFORMED_RESPONSE


__all__ = ["ProbeError", "TransportError", "ProviderError", "MalformedResponse"]
