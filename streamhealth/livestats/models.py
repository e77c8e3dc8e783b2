# File: streamhealth/livestats/models.py
"""Value types shared by the LiveStats tokenizer, decoders and analyzer."""

from __future__ import annotations

import re
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d+)?|\.\d+)(?:[eE][+-]?\d+)?)")


def to_int(value: Optional[str]) -> int:
    """Parse the leading integer of ``value``; anything unparseable is 0."""
    if value is None:
        return 0
    match = _INT_PREFIX.match(str(value))
    if not match:
        return 0
    return int(match.group(1))


def to_float(value: Optional[str]) -> float:
    """Parse the leading real number of ``value``; anything unparseable is 0.0."""
    if value is None:
        return 0.0
    match = _FLOAT_PREFIX.match(str(value))
    if not match:
        return 0.0
    return float(match.group(1))


class Category(str, Enum):
    SYSTEM_DETAILS = "SD"
    CONNECTION_META = "CD"
    CELL_NETWORK = "CN"
    WIFI_NETWORK = "WF"
    CONNECTION_TX = "CX"
    ENCODER = "EN"
    GPS = "GP"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_code(cls, code: str) -> "Category":
        """Map a raw category token to a member; unrecognized codes become UNKNOWN."""
        try:
            return cls(code)
        except ValueError:
            return cls.UNKNOWN

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS: Dict[Category, str] = {
    Category.SYSTEM_DETAILS: "SystemDetails",
    Category.CONNECTION_META: "ConnectionMeta",
    Category.CELL_NETWORK: "CellNetwork",
    Category.WIFI_NETWORK: "WifiNetwork",
    Category.CONNECTION_TX: "ConnectionTx",
    Category.ENCODER: "Encoder",
    Category.GPS: "Gps",
    Category.UNKNOWN: "Unknown",
}


class ElapsedTime(BaseModel):
    """Whole minutes and seconds between two timestamps of one session."""

    model_config = ConfigDict(frozen=True)

    minutes: int
    seconds: int

    @property
    def total_seconds(self) -> int:
        return self.minutes * 60 + self.seconds

    def __str__(self) -> str:
        return f"{self.minutes}m {self.seconds:02d}s"


class Timestamp(BaseModel):
    """
    A LiveStats ``MM.SS.mmm`` timestamp.

    There is no date or hour component, so ordering only means something
    inside one session. Milliseconds are kept for display but do not take part
    in elapsed time arithmetic.
    """

    model_config = ConfigDict(frozen=True)

    minutes: int = 0
    seconds: int = 0
    milliseconds: int = 0
    text: str = ""

    @classmethod
    def from_text(cls, text: str) -> "Timestamp":
        pieces = text.split(".")
        padded = pieces + [""] * (3 - len(pieces))
        return cls(
            minutes=to_int(padded[0]),
            seconds=to_int(padded[1]),
            milliseconds=to_int(padded[2]),
            text=text,
        )

    def elapsed_since(self, start: "Timestamp") -> ElapsedTime:
        end_minutes, end_seconds = self.minutes, self.seconds
        if end_seconds < start.seconds:
            end_seconds += 60
            end_minutes -= 1

        minutes = end_minutes - start.minutes
        seconds = end_seconds - start.seconds
        if seconds >= 60:
            seconds -= 60
            minutes += 1
        return ElapsedTime(minutes=minutes, seconds=seconds)

    def is_within(self, start: "Timestamp", window_seconds: int) -> bool:
        """True when this timestamp falls in ``[start, start + window_seconds)``."""
        total = self.elapsed_since(start).total_seconds
        return 0 <= total < window_seconds

    def __str__(self) -> str:
        return self.text or f"{self.minutes:02d}.{self.seconds:02d}.{self.milliseconds:03d}"


SESSION_ORIGIN = Timestamp(text="00.00.000")


class LogRecord(BaseModel):
    """One parsed LVST line."""

    model_config = ConfigDict(frozen=True)

    timestamp: Timestamp
    version_tag: str
    category: Category
    fields: Dict[str, str] = Field(default_factory=dict)
    raw_data: str = ""

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.fields.get(key, default)

    def int_field(self, key: str) -> int:
        return to_int(self.fields.get(key))

    def float_field(self, key: str) -> float:
        return to_float(self.fields.get(key))

    def __str__(self) -> str:
        return (
            f"Timestamp: {self.timestamp}, Software Version: {self.version_tag}, "
            f"Category: {self.category.label}, Data: {self.fields}"
        )
