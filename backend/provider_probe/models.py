"""Candidate, provider config, attempt and report models.

These are the building blocks shared by the probe orchestrator,
the provider clients and the reporting helpers.
Candidate and ProviderConfig are immutable; AttemptResult and
ProbeReport are created fresh for every run.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MISSING_CREDENTIAL_MESSAGE = "configuration error: missing credential"


class CandidateKind(StrEnum):
    """Which kind of call a candidate maps to."""

    DISCOVERY = "discovery"
    GENERATION = "generation"


class AttemptStatus(StrEnum):
    """Outcome tag of a single attempt."""

    SUCCESS = "success"
    FAILURE = "failure"
    CANCELLED = "cancelled"


class ErrorKind(StrEnum):
    """Diagnostic category attached to a failed or cancelled attempt."""

    MISSING_CREDENTIAL = "missing_credential"
    TRANSPORT_ERROR = "transport_error"
    PROVIDER_ERROR = "provider_error"
    MALFORMED_RESPONSE = "malformed_response"
    CANCELLED = "cancelled"


class ProbeOutcome(StrEnum):
    """Final state of a probe run."""

    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"
    CONFIG_ERROR = "config_error"
    CANCELLED = "cancelled"


class Candidate(BaseModel):
    """One (API version, model identifier) pair to attempt.

    A candidate with only a version is a discovery call (list models).
    A candidate with a model is a generation call; the version, when
    given, selects the API version for providers that expose several.
    """

    model_config = ConfigDict(frozen=True)

    version: str | None = None
    model: str | None = None

    @field_validator("version", "model")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _require_version_or_model(self) -> Candidate:
        if self.version is None and self.model is None:
            raise ValueError("Candidate needs a version, a model, or both")
        return self

    @property
    def kind(self) -> CandidateKind:
        if self.model is None:
            return CandidateKind.DISCOVERY
        return CandidateKind.GENERATION

    @property
    def label(self) -> str:
        """Short human-readable form, e.g. ``v1beta/gemini-pro``."""
        if self.version and self.model:
            return f"{self.version}/{self.model}"
        return self.model or self.version or ""

    def __str__(self) -> str:
        return self.label


class ProviderConfig(BaseModel):
    """Everything needed to probe one provider.

    The credential is kept out of repr and serialized output.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    credential: str | None = Field(default=None, repr=False, exclude=True)
    candidates: tuple[Candidate, ...] = Field(min_length=1)
    prompt: str = "Hi"
    base_url: str | None = None

    @property
    def has_credential(self) -> bool:
        return bool(self.credential and self.credential.strip())


class AttemptResult(BaseModel):
    """Record of one candidate tried during a probe run."""

    candidate: Candidate
    status: AttemptStatus
    payload: Any = None
    error_kind: ErrorKind | None = None
    message: str | None = None
    elapsed_ms: float | None = None

    @property
    def ok(self) -> bool:
        return self.status == AttemptStatus.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "candidate": self.candidate.label,
            "kind": self.candidate.kind.value,
            "status": self.status.value,
        }
        if self.payload is not None:
            data["payload"] = self.payload
        if self.error_kind is not None:
            data["error_kind"] = self.error_kind.value
        if self.message is not None:
            data["message"] = self.message
        if self.elapsed_ms is not None:
            data["elapsed_ms"] = round(self.elapsed_ms, 1)
        return data


class ProbeReport(BaseModel):
    """Ordered record of every attempt in one run plus the final outcome."""

    provider: str
    attempts: list[AttemptResult] = Field(default_factory=list)
    outcome: ProbeOutcome
    error_kind: ErrorKind | None = None
    error: str | None = None

    @property
    def success(self) -> AttemptResult | None:
        """The winning attempt, if any. Always the last one when present."""
        if self.attempts and self.attempts[-1].ok:
            return self.attempts[-1]
        return None

    @property
    def payload(self) -> Any:
        winner = self.success
        return winner.payload if winner is not None else None

    @property
    def succeeded(self) -> bool:
        return self.outcome == ProbeOutcome.SUCCEEDED

    @classmethod
    def from_attempts(
        cls, provider: str, attempts: list[AttemptResult], *, cancelled: bool = False
    ) -> ProbeReport:
        """Derive the final outcome from the attempts of a finished run.

        ``cancelled`` covers a signal that fired between attempts, before
        any in-flight call could be recorded as cancelled.
        """
        if attempts and attempts[-1].status == AttemptStatus.SUCCESS:
            outcome = ProbeOutcome.SUCCEEDED
        elif cancelled or (attempts and attempts[-1].status == AttemptStatus.CANCELLED):
            outcome = ProbeOutcome.CANCELLED
        else:
            outcome = ProbeOutcome.EXHAUSTED
        return cls(provider=provider, attempts=attempts, outcome=outcome)

    @classmethod
    def config_error(cls, provider: str) -> ProbeReport:
        return cls(
            provider=provider,
            outcome=ProbeOutcome.CONFIG_ERROR,
            error_kind=ErrorKind.MISSING_CREDENTIAL,
            error=MISSING_CREDENTIAL_MESSAGE,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "provider": self.provider,
            "outcome": self.outcome.value,
            "attempts": [a.to_dict() for a in self.attempts],
        }
        if self.error is not None:
            data["error"] = self.error
            data["error_kind"] = self.error_kind.value if self.error_kind else None
        if self.success is not None:
            data["via"] = self.success.candidate.label
        return data
