"""Provider probe package.

Walks an ordered list of candidates for one provider, stopping at the
first success and recording every attempt.

Usage:
    from provider_probe.probe import probe

    report = await probe(config)
    print(summary_line(report))
"""

from .report import attempt_lines, generate_markdown_report, summary_line
from .service import DEFAULT_TIMEOUT, iter_attempts, probe

__all__ = [
    "DEFAULT_TIMEOUT",
    "attempt_lines",
    "generate_markdown_report",
    "iter_attempts",
    "probe",
    "summary_line",
]
