# File: streamhealth/livestats/__init__.py
"""LiveStats line parsing."""

from .decoders import DECODERS, decode_fields
from .models import Category, ElapsedTime, LogRecord, Timestamp, to_float, to_int
from .source import iter_log_lines
from .tokenizer import LineTokens, parse_line, tokenize_line

__all__ = [
    "DECODERS",
    "Category",
    "ElapsedTime",
    "LineTokens",
    "LogRecord",
    "Timestamp",
    "decode_fields",
    "iter_log_lines",
    "parse_line",
    "to_float",
    "to_int",
    "tokenize_line",
]
