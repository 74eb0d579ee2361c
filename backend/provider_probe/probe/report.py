"""Probe report rendering.

Turns ProbeReports into log lines for the console and a markdown
report suitable for pasting into an issue.
"""

from __future__ import annotations

import importlib.metadata
import platform
from typing import Any

from provider_probe.models import AttemptResult, AttemptStatus, ProbeOutcome, ProbeReport

PAYLOAD_PREVIEW_CHARS = 120


def summary_line(report: ProbeReport) -> str:
    """One-line outcome, e.g. ``gemini: SUCCESS via gemini-1.5-flash``."""
    tried = len(report.attempts)
    noun = "candidate" if tried == 1 else "candidates"

    if report.outcome == ProbeOutcome.SUCCEEDED and report.success is not None:
        return f"{report.provider}: SUCCESS via {report.success.candidate.label}"
    if report.outcome == ProbeOutcome.CONFIG_ERROR:
        return f"{report.provider}: CONFIG ERROR, {report.error}"
    if report.outcome == ProbeOutcome.CANCELLED:
        return f"{report.provider}: CANCELLED after {tried} {noun}"
    return f"{report.provider}: FAILED, tried {tried} {noun}"


def preview_payload(payload: Any, limit: int = PAYLOAD_PREVIEW_CHARS) -> str:
    """Shorten a payload for display. Model lists show a count and the first names."""
    if isinstance(payload, list):
        head = ", ".join(str(item) for item in payload[:5])
        more = f", ... (+{len(payload) - 5})" if len(payload) > 5 else ""
        return f"{len(payload)} models: {head}{more}"
    text = " ".join(str(payload).split())
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


def attempt_line(attempt: AttemptResult) -> str:
    """One line per attempt, for verbose console output and logs."""
    if attempt.status == AttemptStatus.SUCCESS:
        return f"[ok] {attempt.candidate.label}: {preview_payload(attempt.payload)}"
    marker = "cancelled" if attempt.status == AttemptStatus.CANCELLED else "fail"
    return f"[{marker}] {attempt.candidate.label} ({attempt.error_kind}): {attempt.message}"


def attempt_lines(report: ProbeReport) -> list[str]:
    return [attempt_line(a) for a in report.attempts]


def generate_markdown_report(reports: list[ProbeReport]) -> str:
    """Generate a markdown diagnostic report for one or more probe runs.

    The report lists each provider's outcome, every attempt in order
    with its diagnostic, and environment info. Credentials never
    appear: reports do not carry them.

    Args:
        reports: Probe reports, one per provider

    Returns:
        Markdown-formatted report string
    """
    sections: list[str] = []

    sections.append("# Provider Probe Report\n")

    # Summary
    sections.append("## Summary\n")
    for report in reports:
        sections.append(f"- {summary_line(report)}")
    sections.append("")

    # Per-provider attempts
    for report in reports:
        sections.append(f"## {report.provider}\n")
        sections.append(f"- **Outcome:** {report.outcome.value}")
        if report.error:
            sections.append(f"- **Error:** {report.error}")
        sections.append("")

        if not report.attempts:
            sections.append("No candidates attempted.\n")
            continue

        sections.append("| # | Candidate | Kind | Status | Detail |")
        sections.append("|---|-----------|------|--------|--------|")
        for index, attempt in enumerate(report.attempts, start=1):
            if attempt.ok:
                detail = preview_payload(attempt.payload)
            else:
                detail = f"{attempt.error_kind}: {attempt.message}"
            detail = detail.replace("|", "\\|")
            sections.append(
                f"| {index} | `{attempt.candidate.label}` | {attempt.candidate.kind.value} "
                f"| {attempt.status.value} | {detail} |"
            )
        sections.append("")

    # Environment
    sections.append("## Environment\n")
    for key, value in _get_environment_info():
        sections.append(f"- **{key}:** {value}")
    sections.append("")

    return "\n".join(sections)


def _get_environment_info() -> list[tuple[str, str]]:
    """Gather environment information for the report."""
    info: list[tuple[str, str]] = []

    info.append(("OS", f"{platform.system()} {platform.release()}"))
    info.append(("Python", platform.python_version()))

    for lib_name in ("provider-probe", "httpx"):
        try:
            info.append((lib_name, importlib.metadata.version(lib_name)))
        except importlib.metadata.PackageNotFoundError:
            continue

    return info
