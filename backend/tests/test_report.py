"""Tests for probe report rendering."""

from provider_probe.models import (
    AttemptResult,
    AttemptStatus,
    Candidate,
    ErrorKind,
    ProbeReport,
)
from provider_probe.probe.report import (
    attempt_line,
    attempt_lines,
    generate_markdown_report,
    preview_payload,
    summary_line,
)


def _failure(model: str, message: str = "model not found") -> AttemptResult:
    return AttemptResult(
        candidate=Candidate(model=model),
        status=AttemptStatus.FAILURE,
        error_kind=ErrorKind.PROVIDER_ERROR,
        message=message,
    )


def _success(model: str, payload="Hello!") -> AttemptResult:
    return AttemptResult(
        candidate=Candidate(model=model), status=AttemptStatus.SUCCESS, payload=payload
    )


class TestSummaryLine:
    """Tests for summary_line()."""

    def test_success(self) -> None:
        report = ProbeReport.from_attempts(
            "gemini", [_failure("gemini-1.5-flash"), _success("gemini-pro")]
        )
        assert summary_line(report) == "gemini: SUCCESS via gemini-pro"

    def test_failed(self) -> None:
        report = ProbeReport.from_attempts("gemini", [_failure("a"), _failure("b")])
        assert summary_line(report) == "gemini: FAILED, tried 2 candidates"

    def test_failed_single(self) -> None:
        report = ProbeReport.from_attempts("groq", [_failure("a")])
        assert summary_line(report) == "groq: FAILED, tried 1 candidate"

    def test_config_error(self) -> None:
        report = ProbeReport.config_error("groq")
        assert summary_line(report) == "groq: CONFIG ERROR, configuration error: missing credential"

    def test_cancelled(self) -> None:
        cancelled = AttemptResult(
            candidate=Candidate(model="b"),
            status=AttemptStatus.CANCELLED,
            error_kind=ErrorKind.CANCELLED,
            message="Probe cancelled while the call was in flight",
        )
        report = ProbeReport.from_attempts("gemini", [_failure("a"), cancelled])
        assert summary_line(report) == "gemini: CANCELLED after 2 candidates"


class TestAttemptLines:
    """Tests for per-attempt rendering."""

    def test_success_line_shows_payload(self) -> None:
        assert attempt_line(_success("gemini-pro")) == "[ok] gemini-pro: Hello!"

    def test_failure_line_shows_kind_and_message(self) -> None:
        line = attempt_line(_failure("bad-model"))
        assert line == "[fail] bad-model (provider_error): model not found"

    def test_lines_follow_attempt_order(self) -> None:
        report = ProbeReport.from_attempts("gemini", [_failure("a"), _success("b")])
        lines = attempt_lines(report)
        assert lines[0].startswith("[fail] a")
        assert lines[1].startswith("[ok] b")


class TestPreviewPayload:
    """Tests for preview_payload()."""

    def test_long_text_truncated(self) -> None:
        preview = preview_payload("x" * 500, limit=20)
        assert len(preview) == 20
        assert preview.endswith("...")

    def test_whitespace_collapsed(self) -> None:
        assert preview_payload("Hello\n\n  there") == "Hello there"

    def test_model_list(self) -> None:
        names = [f"models/m{i}" for i in range(7)]
        preview = preview_payload(names)
        assert preview.startswith("7 models: models/m0, models/m1")
        assert preview.endswith("(+2)")


class TestMarkdownReport:
    """Tests for generate_markdown_report()."""

    def test_contains_summary_and_attempt_table(self) -> None:
        reports = [
            ProbeReport.from_attempts(
                "gemini", [_failure("gemini-1.5-flash", "a | b"), _success("gemini-pro")]
            ),
            ProbeReport.config_error("groq"),
        ]

        md = generate_markdown_report(reports)

        assert md.startswith("# Provider Probe Report")
        assert "- gemini: SUCCESS via gemini-pro" in md
        assert "- groq: CONFIG ERROR" in md
        assert "| 1 | `gemini-1.5-flash` | generation | failure |" in md
        assert "a \\| b" in md
        assert "No candidates attempted." in md
        assert "## Environment" in md
        assert "**Python:**" in md
