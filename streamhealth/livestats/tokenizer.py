# File: streamhealth/livestats/tokenizer.py
"""Split LVST lines into their prefix tokens and build ``LogRecord`` objects.

All LiveStats lines start the same way::

    53.38.818 3.1.0.DEV LVST SD [Action=APP.STARTUP]
    |-------- |------------- |- |-------------------
    timestamp version tag    |  data
                             category
"""

from __future__ import annotations

from typing import NamedTuple

from streamhealth.errors import MalformedLineError
from streamhealth.livestats.decoders import decode_fields
from streamhealth.livestats.models import Category, LogRecord, Timestamp

PREFIX_TOKENS = 4


class LineTokens(NamedTuple):
    timestamp: str
    version_tag: str
    category: Category
    raw_data: str


def tokenize_line(line: str) -> LineTokens:
    tokens = line.split()
    if len(tokens) < PREFIX_TOKENS:
        raise MalformedLineError(line, len(tokens))

    return LineTokens(
        timestamp=tokens[0],
        version_tag=f"{tokens[1]} {tokens[2]}",
        category=Category.from_code(tokens[3]),
        raw_data=" ".join(tokens[PREFIX_TOKENS:]),
    )


def parse_line(line: str) -> LogRecord:
    """Tokenize ``line`` and decode its data with the matching category decoder."""
    tokens = tokenize_line(line)
    return LogRecord(
        timestamp=Timestamp.from_text(tokens.timestamp),
        version_tag=tokens.version_tag,
        category=tokens.category,
        fields=decode_fields(tokens.category, tokens.raw_data),
        raw_data=tokens.raw_data,
    )
