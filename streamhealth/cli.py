# File: streamhealth/cli.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from streamhealth.analysis.models import FRAME_SIZE_BUCKETS, HealthReport, HealthVerdict
from streamhealth.analysis.session_analyzer import SessionAnalyzer
from streamhealth.config import AnalyzerSettings, configure_logging, load_settings
from streamhealth.errors import (
    ConfigError,
    DegenerateMetricError,
    IncompleteSessionError,
    MalformedLineError,
)
from streamhealth.livestats.source import iter_log_lines
from streamhealth.reporting.markdown import write_markdown_report

app = typer.Typer(help="LiveStats stream health analyzer")
console = Console()

VERDICT_STYLES = {
    HealthVerdict.GOOD: "green",
    HealthVerdict.MARGINAL: "yellow",
    HealthVerdict.POOR: "red",
}


def _resolve_log_file(log_file: Optional[Path]) -> Path:
    if log_file is None:
        log_file = Path(typer.prompt("File name").strip())
    if not log_file.is_file():
        console.print(
            "Sorry, the file could not be opened or found. Please make sure it exists. Have a great day!"
        )
        raise typer.Exit(code=2)
    return log_file


def _load_settings_or_exit(config: Optional[Path], log_level: Optional[str]) -> AnalyzerSettings:
    try:
        settings = load_settings(config)
        configure_logging(log_level or settings.log_level)
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    return settings


def _run_session(log_file: Path, settings: AnalyzerSettings, skip_malformed: bool) -> SessionAnalyzer:
    analyzer = SessionAnalyzer(settings)
    try:
        for line in iter_log_lines(log_file):
            analyzer.feed_line(line, skip_malformed=skip_malformed)
    except MalformedLineError as exc:
        console.print(f"[red]Malformed log line:[/red] {escape(exc.line)}")
        console.print("Re-run with --skip-malformed to ignore lines without the LVST prefix.")
        raise typer.Exit(code=1) from exc
    return analyzer


def _metrics_table(report: HealthReport) -> Table:
    table = Table(title="Stream Health Metrics", box=box.SIMPLE_HEAVY)
    table.add_column("Metric")
    table.add_column("Value")
    table.add_row("Total time", f"{report.total_time} ({report.total_seconds} s)")
    table.add_row("Lost frame events", str(report.lost_frame_events))
    table.add_row("Frame loss metric", f"{report.frame_lost_metric:.4f}")
    table.add_row("Frame size change metric", f"{report.frame_size_change_metric:.4f}")
    table.add_row("Frame size metric", f"{report.frame_size_metric:.4f}")
    table.add_row("Score", f"{report.score:.2f}")
    table.add_row("Max connection bitrate", str(report.max_bitrate))
    for bucket in FRAME_SIZE_BUCKETS:
        table.add_row(f"Seconds at {bucket}", str(report.frame_size_buckets.get(bucket, 0)))
    return table


def _print_partial(analyzer: SessionAnalyzer) -> None:
    partial = Table(title="Partial Session Signals", box=box.MINIMAL_HEAVY_HEAD)
    partial.add_column("Signal")
    partial.add_column("Value")
    partial.add_row("Total time", str(analyzer.total_time or "N/A"))
    partial.add_row("Lost frame events", str(analyzer.lost_frame_events))
    partial.add_row("Frame loss metric", f"{analyzer.frame_lost_metric:.4f}")
    partial.add_row("Frame size changes", str(analyzer.frame_size_changes))
    console.print(partial)


@app.command("analyze")
def analyze(
    log_file: Optional[Path] = typer.Argument(None, help="LiveStats log file to analyze."),
    details: bool = typer.Option(False, "--details", "-d", help="Print every metric, not just the verdict."),
    skip_malformed: bool = typer.Option(
        False, "--skip-malformed", help="Ignore lines without the LVST prefix instead of aborting."
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML scoring profile."),
    report_path: Optional[Path] = typer.Option(None, "--report", help="Write a markdown report to this path."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level, e.g. DEBUG."),
) -> None:
    log_file = _resolve_log_file(log_file)
    settings = _load_settings_or_exit(config, log_level)
    analyzer = _run_session(log_file, settings, skip_malformed)

    try:
        report = analyzer.finalize()
    except IncompleteSessionError as exc:
        console.print(f"[red]Incomplete session:[/red] {escape(str(exc))}")
        _print_partial(analyzer)
        raise typer.Exit(code=1) from exc
    except DegenerateMetricError as exc:
        console.print(f"[red]Cannot score session ({exc.metric}):[/red] {escape(str(exc))}")
        _print_partial(analyzer)
        raise typer.Exit(code=1) from exc

    style = VERDICT_STYLES[report.overall_health]
    console.print(f"Stream health: [{style}]{report.overall_health.value}[/{style}]")
    if analyzer.malformed_lines:
        console.print(f"Skipped malformed lines: {analyzer.malformed_lines}")

    if details:
        console.print(_metrics_table(report))

    if report_path is not None:
        written = write_markdown_report(report, report_path, source=log_file, settings=settings)
        console.print(f"Report saved to: {written}")


@app.command("records")
def list_records(
    log_file: Path = typer.Argument(..., help="LiveStats log file to inspect."),
    skip_malformed: bool = typer.Option(False, "--skip-malformed"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML scoring profile."),
) -> None:
    log_file = _resolve_log_file(log_file)
    settings = _load_settings_or_exit(config, None)
    analyzer = _run_session(log_file, settings, skip_malformed)

    table = Table(title="Kept Records", box=box.MINIMAL_HEAVY_HEAD)
    table.add_column("Timestamp")
    table.add_column("Category")
    table.add_column("Fields")
    for record in analyzer.kept_records:
        table.add_row(str(record.timestamp), record.category.label, str(len(record.fields)))
    console.print(table)
    console.print(
        Panel(
            f"Records read: {analyzer.records_seen} | Kept: {len(analyzer.kept_records)}",
            title="LiveStats Records",
            subtitle=escape(str(log_file)),
            expand=False,
        )
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
