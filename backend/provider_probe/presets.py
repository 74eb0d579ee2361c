"""Preset candidate lists.

Fallback order is data: adding another model to try is a change to
the tuples below, not to the probe.
"""

from dataclasses import dataclass

from provider_probe.models import Candidate, CandidateKind, ProbeReport, ProviderConfig


@dataclass(frozen=True)
class Preset:
    """A named candidate list for one vendor."""

    vendor: str
    candidates: tuple[Candidate, ...]
    description: str = ""


PRESETS: dict[str, Preset] = {
    "gemini-discovery": Preset(
        vendor="gemini",
        candidates=(Candidate(version="v1"), Candidate(version="v1beta")),
        description="List Gemini models on each API version",
    ),
    "gemini": Preset(
        vendor="gemini",
        candidates=(Candidate(model="gemini-1.5-flash"), Candidate(model="gemini-pro")),
        description="Generate with gemini-1.5-flash, fall back to gemini-pro",
    ),
    "groq": Preset(
        vendor="groq",
        candidates=(
            Candidate(model="llama3-8b-8192"),
            Candidate(model="llama-3.3-70b-versatile"),
        ),
        description="Chat completion with Llama 3 on Groq",
    ),
}

# Discovery results that cannot serve a generateContent call
_NON_GENERATIVE_MARKERS = ("embedding", "aqa", "imagen")


def candidates_from_discovery(report: ProbeReport, limit: int = 5) -> tuple[Candidate, ...]:
    """Turn a successful discovery run into generation candidates.

    Model names keep the order the provider listed them in and are
    pinned to the API version that listed them. Returns an empty tuple
    when the report did not succeed with a discovery candidate.
    """
    winner = report.success
    if winner is None or winner.candidate.kind != CandidateKind.DISCOVERY:
        return ()

    candidates: list[Candidate] = []
    for name in winner.payload or []:
        model = str(name).removeprefix("models/")
        if any(marker in model for marker in _NON_GENERATIVE_MARKERS):
            continue
        candidates.append(Candidate(version=winner.candidate.version, model=model))
        if len(candidates) >= limit:
            break
    return tuple(candidates)


def discovery_driven_config(
    discovery: ProbeReport,
    base: ProviderConfig,
    limit: int = 5,
) -> ProviderConfig:
    """Replace a generation config's candidates with discovered models.

    Discovered models are tried first; the preset candidates stay as
    the tail of the fallback list so a discovery miss costs nothing.
    """
    discovered = candidates_from_discovery(discovery, limit=limit)
    seen = {c.model for c in discovered}
    tail = tuple(c for c in base.candidates if c.model not in seen)
    return base.model_copy(update={"candidates": discovered + tail})
