from __future__ import annotations

from pathlib import Path

from streamhealth.analysis import analyze_lines
from streamhealth.config import AnalyzerSettings
from streamhealth.reporting import render_markdown_report, write_markdown_report


def test_render_markdown_report_contains_verdict_and_metrics(healthy_session_lines: list[str]) -> None:
    report = analyze_lines(healthy_session_lines)

    text = render_markdown_report(report, source=Path("session.log"))

    assert text.startswith("# Stream Health Report")
    assert "**Overall health:** Good" in text
    assert "**Log file:** `session.log`" in text
    assert "| Score | 100.00 |" in text
    assert "- Lost frame events: 0" in text
    assert "  - all-other: 89" in text
    assert "Scoring Settings" not in text


def test_write_markdown_report_creates_parent_dirs(tmp_path: Path, healthy_session_lines: list[str]) -> None:
    report = analyze_lines(healthy_session_lines)
    target = tmp_path / "reports" / "session.md"

    written = write_markdown_report(report, target, settings=AnalyzerSettings())

    content = written.read_text(encoding="utf-8")
    assert written == target
    assert "## Scoring Settings" in content
    assert "- warmup_seconds: 30" in content
