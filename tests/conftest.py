from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

HEALTHY_SESSION_LOG = """
40.34.992 3.1.0.DEV LVST SD [CoreState=DCTxS_STARTUP_CONNECTION_DIAL]
00.00.000 3.1.0.DEV LVST SD [Action=APP.STARTUP]
00.10.000 3.1.0.DEV LVST EN [174|5000000|0|4038667|4009768|128144|0|*|7498|100|0|0|4|0.831324] [LiveVideo=320x180t@29.97(30000/1001)|h264|yuv420p]
00.20.115 3.1.0.DEV LVST CD [1|9|WLAN] [NI.Type=WFI] [NI.Name=ASUS EZ N 802.11b/g/n Wireless USB Adapter]
00.31.000 3.1.0.DEV LVST EN [174|5000000|0|4038667|4009768|128144|0|*|7498|100|0|0|0|0.831324] [LiveVideo=1280x720t@29.97(30000/1001)|h264|yuv420p] [LiveAudio=48000Hz|stereo(2)|opus|s16|(1000|20)]
00.35.000 3.1.0.DEV LVST CX [1|10|6|2500000|33.00|100.00|22.14|0| 7|1.5841|5000000|0|2000000|2100000|1.00]
00.41.595 3.1.0.DEV LVST SD [Action=STREAM.START|GTG=3000]
00.45.000 3.1.0.DEV LVST EN [174|5000000|0|4038667|4009768|128144|0|*|7498|100|0|0|0|0.831324] [LiveVideo=1280x720t@29.97(30000/1001)|h264|yuv420p]
01.00.000 3.1.0.DEV LVST GP [1|10|UMTS] [State=Fix|NumSatellites=8|Latitude=43.482953|Longitude=-80.537306]
02.00.000 3.1.0.DEV LVST SD [Action=APP.SHUTDOWN]
"""

INCOMPLETE_SESSION_LOG = """
00.00.000 3.1.0.DEV LVST SD [Action=APP.STARTUP]
00.40.000 3.1.0.DEV LVST EN [174|5000000|0|4038667|4009768|128144|0|*|7498|100|0|0|0|0.831324]
"""


def _lines(text: str) -> list[str]:
    return [line for line in text.strip().splitlines() if line.strip()]


@pytest.fixture
def healthy_session_lines() -> list[str]:
    return _lines(HEALTHY_SESSION_LOG)


@pytest.fixture
def incomplete_session_lines() -> list[str]:
    return _lines(INCOMPLETE_SESSION_LOG)


@pytest.fixture
def write_log(tmp_path: Path) -> Callable[[list[str]], Path]:
    def _write(lines: list[str], name: str = "session.log") -> Path:
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write
