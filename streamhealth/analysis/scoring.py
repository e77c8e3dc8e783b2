# File: streamhealth/analysis/scoring.py
"""Metric formulas used to turn session counters into a health verdict."""

from __future__ import annotations

from typing import Mapping, Optional

from streamhealth.analysis.models import (
    BUCKET_180,
    BUCKET_240,
    BUCKET_OTHER,
    HealthVerdict,
)
from streamhealth.config import AnalyzerSettings
from streamhealth.errors import DegenerateMetricError

BUCKET_WEIGHTS = {BUCKET_180: 16, BUCKET_240: 8, BUCKET_OTHER: 1}


def bucket_for(frame_size: Optional[str]) -> str:
    if frame_size == BUCKET_180:
        return BUCKET_180
    if frame_size == BUCKET_240:
        return BUCKET_240
    return BUCKET_OTHER


def frame_lost_metric(lost_frame_events: int) -> float:
    """Halve the metric for every Encoder sample that reported lost frames."""
    return 0.5 ** float(lost_frame_events)


def frame_size_change_metric(frame_size_changes: int, total_seconds: int) -> float:
    if total_seconds <= 0:
        raise DegenerateMetricError(
            "frame_size_change_metric",
            f"Cannot compute frame_size_change_metric: session lasted {total_seconds} seconds.",
        )
    return 1.0 - frame_size_changes / total_seconds


def bitrate_factor(max_bitrate: int, settings: AnalyzerSettings) -> int:
    if max_bitrate <= settings.low_bitrate_limit:
        return 16
    if max_bitrate <= settings.mid_bitrate_limit:
        return 8
    return 1


def frame_size_metric(total_seconds: int, buckets: Mapping[str, int], k: int) -> float:
    weighted = sum(weight * buckets.get(name, 0) for name, weight in BUCKET_WEIGHTS.items())
    if weighted == 0:
        raise DegenerateMetricError(
            "frame_size_metric",
            "Cannot compute frame_size_metric: no frame-size time was recorded in any bucket.",
        )
    return float(k) * float(total_seconds) / float(weighted)


def verdict_for(score: float, settings: AnalyzerSettings) -> HealthVerdict:
    if score >= settings.good_score:
        return HealthVerdict.GOOD
    if score >= settings.marginal_score:
        return HealthVerdict.MARGINAL
    return HealthVerdict.POOR
