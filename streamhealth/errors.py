# File: streamhealth/errors.py
"""Exception types raised by the LiveStats parser and session analyzer."""

from __future__ import annotations

from typing import Optional


class StreamHealthError(RuntimeError):
    """Base class for every error the stream health tooling raises on purpose."""


class MalformedLineError(StreamHealthError, ValueError):
    """Raised when a log line does not carry the four LVST prefix tokens."""

    def __init__(self, line: str, token_count: int) -> None:
        self.line = line
        self.token_count = token_count
        super().__init__(
            f"Malformed LiveStats line: expected at least 4 tokens, got {token_count}: {line!r}"
        )


class IncompleteSessionError(StreamHealthError):
    """Raised when a session is finalized before APP.SHUTDOWN was seen."""


class DegenerateMetricError(StreamHealthError):
    """Raised when a metric cannot be computed because its divisor is zero."""

    def __init__(self, metric: str, message: Optional[str] = None) -> None:
        self.metric = metric
        super().__init__(message or f"Cannot compute {metric}: divisor is zero.")


class ConfigError(StreamHealthError):
    """Raised when a scoring profile cannot be loaded."""
