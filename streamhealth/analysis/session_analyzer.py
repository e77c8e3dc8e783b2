# File: streamhealth/analysis/session_analyzer.py
from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Dict, Iterable, List, Optional

from streamhealth.analysis import scoring
from streamhealth.analysis.models import FRAME_SIZE_BUCKETS, HealthReport
from streamhealth.config import AnalyzerSettings
from streamhealth.errors import IncompleteSessionError, MalformedLineError
from streamhealth.livestats.models import (
    SESSION_ORIGIN,
    Category,
    ElapsedTime,
    LogRecord,
    Timestamp,
)
from streamhealth.livestats.tokenizer import parse_line

logger = logging.getLogger(__name__)

ACTION_FIELD = "Action"
STARTUP_ACTION = "APP.STARTUP"
SHUTDOWN_ACTION = "APP.SHUTDOWN"
LIVE_VIDEO_FIELD = "LiveVideo"
LOST_FRAMES_FIELD = "number_of_lost_video_frames"
SMOOTHED_BPS_FIELD = "received_bps_smoothed"
INSTANT_BPS_FIELD = "received_bps_instantaneous"


class SessionPhase(Enum):
    WAITING_FOR_STARTUP = auto()
    WARMING_UP = auto()
    STREAMING = auto()
    ENDED = auto()


def parse_frame_size(live_video: str) -> Optional[str]:
    """
    Return the text between the first ``x`` and the next ``t``.

    ``1920x1080t@29.97(30000/1001)|h264|yuv420p`` gives ``"1080"``.
    """
    x_index = live_video.find("x")
    if x_index < 0:
        return None
    t_index = live_video.find("t", x_index + 1)
    if t_index < 0:
        return None
    return live_video[x_index + 1 : t_index]


class SessionAnalyzer:
    """
    Folds the records of one transmission session into a ``HealthReport``.

    Records must arrive in session order. The analyzer keeps only the last
    record per category plus the records that survived de-duplication, so
    memory does not grow with the raw log size.
    """

    def __init__(self, settings: Optional[AnalyzerSettings] = None) -> None:
        self.settings = settings or AnalyzerSettings()

        self._warmup_start: Optional[Timestamp] = None
        self._session_end: Optional[Timestamp] = None
        self._total_time: Optional[ElapsedTime] = None

        self._last_kept: Dict[Category, LogRecord] = {}
        self._kept_records: List[LogRecord] = []
        self._lost_frame_events = 0
        self._max_bitrate = 0

        self._frame_size_buckets: Dict[str, int] = {name: 0 for name in FRAME_SIZE_BUCKETS}
        self._frame_size_changes = 0
        self._current_frame_size: Optional[str] = None
        self._frame_size_window_start: Optional[Timestamp] = None

        self.records_seen = 0
        self.malformed_lines = 0

    # -------------------------------------------------------------------------
    # Read-only view of the session state
    # -------------------------------------------------------------------------
    @property
    def phase(self) -> SessionPhase:
        if self._session_end is not None:
            return SessionPhase.ENDED
        if self._warmup_start is None:
            return SessionPhase.WAITING_FOR_STARTUP
        if self._last_kept or self._current_frame_size is not None:
            return SessionPhase.STREAMING
        return SessionPhase.WARMING_UP

    @property
    def total_time(self) -> Optional[ElapsedTime]:
        return self._total_time

    @property
    def lost_frame_events(self) -> int:
        return self._lost_frame_events

    @property
    def frame_lost_metric(self) -> float:
        return scoring.frame_lost_metric(self._lost_frame_events)

    @property
    def max_bitrate(self) -> int:
        return self._max_bitrate

    @property
    def frame_size_changes(self) -> int:
        return self._frame_size_changes

    @property
    def current_frame_size(self) -> Optional[str]:
        return self._current_frame_size

    @property
    def frame_size_buckets(self) -> Dict[str, int]:
        return dict(self._frame_size_buckets)

    @property
    def kept_records(self) -> List[LogRecord]:
        return list(self._kept_records)

    # -------------------------------------------------------------------------
    # Feeding records
    # -------------------------------------------------------------------------
    def feed_line(self, line: str, skip_malformed: bool = False) -> Optional[LogRecord]:
        """
        Parse and feed one raw line.

        :param skip_malformed: when True a line without the LVST prefix is logged
            and counted in ``malformed_lines`` instead of aborting the session.
        :return: the parsed record, or None when a malformed line was skipped.
        """
        try:
            record = parse_line(line)
        except MalformedLineError as exc:
            if not skip_malformed:
                raise
            self.malformed_lines += 1
            logger.warning("Skipping malformed line (%d tokens): %r", exc.token_count, line)
            return None
        self.feed(record)
        return record

    def feed(self, record: LogRecord) -> bool:
        """Apply one record to the session state; return True if it was kept."""
        self.records_seen += 1
        session_just_ended = self._handle_session_markers(record)

        kept = False
        if not self._in_warmup(record.timestamp) and record.category is not Category.UNKNOWN:
            kept = self._update_signals(record)
            # Frame-size time stops at the first APP.SHUTDOWN.
            if self._session_end is None:
                self._track_frame_size(record)

        if session_just_ended:
            self._close_frame_size_window(record.timestamp)
        return kept

    def feed_all(self, records: Iterable[LogRecord]) -> "SessionAnalyzer":
        for record in records:
            self.feed(record)
        return self

    # -------------------------------------------------------------------------
    # Per-record steps
    # -------------------------------------------------------------------------
    def _handle_session_markers(self, record: LogRecord) -> bool:
        if record.category is not Category.SYSTEM_DETAILS:
            return False

        action = record.get(ACTION_FIELD)
        if action == STARTUP_ACTION and self._warmup_start is None:
            self._warmup_start = record.timestamp
            logger.debug("Session startup at %s", record.timestamp)
        elif action == SHUTDOWN_ACTION:
            self._session_end = record.timestamp
            if self._total_time is None:
                start = self._warmup_start or SESSION_ORIGIN
                self._total_time = record.timestamp.elapsed_since(start)
                logger.debug("Session shutdown at %s after %s", record.timestamp, self._total_time)
                return True
        return False

    def _in_warmup(self, timestamp: Timestamp) -> bool:
        if self._warmup_start is None:
            return False
        return timestamp.is_within(self._warmup_start, self.settings.warmup_seconds)

    def _update_signals(self, record: LogRecord) -> bool:
        previous = self._last_kept.get(record.category)
        if previous is not None and record.timestamp.is_within(previous.timestamp, self.settings.dedup_seconds):
            return False

        self._last_kept[record.category] = record
        self._kept_records.append(record)

        if record.category is Category.ENCODER:
            if record.int_field(LOST_FRAMES_FIELD) > 0:
                self._lost_frame_events += 1
                logger.debug("Lost video frames reported at %s", record.timestamp)
        elif record.category is Category.CONNECTION_TX:
            # The smoothed rate gates the update but the instantaneous rate is stored.
            if record.int_field(SMOOTHED_BPS_FIELD) > self._max_bitrate:
                self._max_bitrate = record.int_field(INSTANT_BPS_FIELD)
        return True

    def _track_frame_size(self, record: LogRecord) -> None:
        if record.category is not Category.ENCODER:
            return
        live_video = record.get(LIVE_VIDEO_FIELD)
        if live_video is None:
            return

        frame_size = parse_frame_size(live_video)
        if frame_size is None:
            logger.debug("Cannot derive a frame size from LiveVideo=%r at %s", live_video, record.timestamp)
            return

        if self._current_frame_size is None:
            self._current_frame_size = frame_size
            self._frame_size_window_start = record.timestamp
            return

        if frame_size != self._current_frame_size:
            self._add_frame_size_time(record.timestamp)
            logger.debug(
                "Frame size changed %s -> %s at %s", self._current_frame_size, frame_size, record.timestamp
            )
            self._frame_size_changes += 1
            self._current_frame_size = frame_size
            self._frame_size_window_start = record.timestamp

    def _close_frame_size_window(self, timestamp: Timestamp) -> None:
        if self._current_frame_size is None:
            return
        self._add_frame_size_time(timestamp)

    def _add_frame_size_time(self, timestamp: Timestamp) -> None:
        start = self._frame_size_window_start or timestamp
        seconds = timestamp.elapsed_since(start).total_seconds
        self._frame_size_buckets[scoring.bucket_for(self._current_frame_size)] += seconds

    # -------------------------------------------------------------------------
    # Finalize
    # -------------------------------------------------------------------------
    def finalize(self) -> HealthReport:
        """
        Compute the three metrics and the overall verdict.

        :raises IncompleteSessionError: APP.SHUTDOWN was never seen.
        :raises DegenerateMetricError: the session has zero length or no frame-size data.
        """
        if self._total_time is None:
            raise IncompleteSessionError("Session has no APP.SHUTDOWN record; cannot compute stream health.")

        total_seconds = self._total_time.total_seconds
        frame_lost = scoring.frame_lost_metric(self._lost_frame_events)
        size_change = scoring.frame_size_change_metric(self._frame_size_changes, total_seconds)
        k = scoring.bitrate_factor(self._max_bitrate, self.settings)
        frame_size = scoring.frame_size_metric(total_seconds, self._frame_size_buckets, k)

        score = min(frame_lost, size_change, frame_size) * 100
        verdict = scoring.verdict_for(score, self.settings)
        logger.debug("Session score %.2f -> %s", score, verdict.value)

        return HealthReport(
            total_time=self._total_time,
            lost_frame_events=self._lost_frame_events,
            frame_lost_metric=frame_lost,
            frame_size_change_metric=size_change,
            frame_size_metric=frame_size,
            score=score,
            overall_health=verdict,
            max_bitrate=self._max_bitrate,
            frame_size_changes=self._frame_size_changes,
            frame_size_buckets=dict(self._frame_size_buckets),
            kept_record_count=len(self._kept_records),
        )


def analyze_lines(
    lines: Iterable[str],
    settings: Optional[AnalyzerSettings] = None,
    skip_malformed: bool = False,
) -> HealthReport:
    """Fold raw LVST lines into a finalized ``HealthReport``."""
    analyzer = SessionAnalyzer(settings)
    for line in lines:
        analyzer.feed_line(line, skip_malformed=skip_malformed)
    return analyzer.finalize()
