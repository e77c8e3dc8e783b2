# File: streamhealth/analysis/models.py
from __future__ import annotations

from enum import Enum
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field

from streamhealth.livestats.models import ElapsedTime

BUCKET_180 = "180"
BUCKET_240 = "240"
BUCKET_OTHER = "all-other"
FRAME_SIZE_BUCKETS = (BUCKET_180, BUCKET_240, BUCKET_OTHER)


class HealthVerdict(str, Enum):
    GOOD = "Good"
    MARGINAL = "Marginal"
    POOR = "Poor"


class HealthReport(BaseModel):
    """Final, read-only verdict for one transmission session."""

    model_config = ConfigDict(frozen=True)

    total_time: ElapsedTime
    lost_frame_events: int = 0
    frame_lost_metric: float
    frame_size_change_metric: float
    frame_size_metric: float
    score: float
    overall_health: HealthVerdict = HealthVerdict.POOR

    max_bitrate: int = 0
    frame_size_changes: int = 0
    frame_size_buckets: Dict[str, int] = Field(default_factory=dict)
    kept_record_count: int = 0

    @property
    def total_seconds(self) -> int:
        return self.total_time.total_seconds
