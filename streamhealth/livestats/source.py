# File: streamhealth/livestats/source.py
from __future__ import annotations

from pathlib import Path
from typing import Iterator


def iter_log_lines(path: Path | str) -> Iterator[str]:
    """Yield the non-blank lines of a LiveStats log in file order, without newlines."""
    with Path(path).open("r", encoding="utf-8", errors="replace") as handle:
        for line in handle:
            line = line.rstrip("\r\n")
            if not line.strip():
                continue
            yield line
