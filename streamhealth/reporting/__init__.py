# File: streamhealth/reporting/__init__.py
"""Report rendering for finished sessions."""

from .markdown import render_markdown_report, write_markdown_report

__all__ = [
    "render_markdown_report",
    "write_markdown_report",
]
