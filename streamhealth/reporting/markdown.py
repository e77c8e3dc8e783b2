# File: streamhealth/reporting/markdown.py
from __future__ import annotations

import textwrap
from pathlib import Path
from typing import List, Optional

from streamhealth.analysis.models import FRAME_SIZE_BUCKETS, HealthReport
from streamhealth.config import AnalyzerSettings


def _format_metrics(report: HealthReport) -> str:
    return textwrap.dedent(
        f"""
        ## Metrics

        | Metric | Value |
        | --- | --- |
        | Frame loss | {report.frame_lost_metric:.4f} |
        | Frame size changes | {report.frame_size_change_metric:.4f} |
        | Frame size | {report.frame_size_metric:.4f} |
        | Score | {report.score:.2f} |
        """
    ).strip()


def _format_signals(report: HealthReport) -> str:
    lines = ["## Session Signals", ""]
    lines.append(f"- Total time: {report.total_time} ({report.total_seconds} s)")
    lines.append(f"- Lost frame events: {report.lost_frame_events}")
    lines.append(f"- Max connection bitrate: {report.max_bitrate} bps")
    lines.append(f"- Frame size changes: {report.frame_size_changes}")
    lines.append(f"- Kept records: {report.kept_record_count}")
    lines.append("- Seconds per frame size:")
    for bucket in FRAME_SIZE_BUCKETS:
        lines.append(f"  - {bucket}: {report.frame_size_buckets.get(bucket, 0)}")
    return "\n".join(lines)


def _format_settings(settings: AnalyzerSettings) -> str:
    lines = ["## Scoring Settings", ""]
    for key, value in settings.to_dict().items():
        lines.append(f"- {key}: {value}")
    return "\n".join(lines)


def render_markdown_report(
    report: HealthReport,
    source: Optional[Path] = None,
    settings: Optional[AnalyzerSettings] = None,
) -> str:
    summary_lines: List[str] = [
        "# Stream Health Report",
        "",
        f"**Overall health:** {report.overall_health.value}",
    ]
    if source is not None:
        summary_lines.append(f"**Log file:** `{source}`")
    summary_lines.append("")

    summary_lines.append(_format_metrics(report))
    summary_lines.append("")
    summary_lines.append(_format_signals(report))
    summary_lines.append("")

    if settings is not None:
        summary_lines.append(_format_settings(settings))
        summary_lines.append("")

    return "\n".join(summary_lines).strip() + "\n"


def write_markdown_report(
    report: HealthReport,
    report_path: Path,
    source: Optional[Path] = None,
    settings: Optional[AnalyzerSettings] = None,
) -> Path:
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(render_markdown_report(report, source, settings), encoding="utf-8")
    return report_path
