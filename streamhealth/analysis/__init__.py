# File: streamhealth/analysis/__init__.py
"""Session analysis and scoring."""

from .models import HealthReport, HealthVerdict
from .session_analyzer import SessionAnalyzer, SessionPhase, analyze_lines, parse_frame_size

__all__ = [
    "HealthReport",
    "HealthVerdict",
    "SessionAnalyzer",
    "SessionPhase",
    "analyze_lines",
    "parse_frame_size",
]
