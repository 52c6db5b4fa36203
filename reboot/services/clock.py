from __future__ import annotations

import time
from datetime import datetime, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from tzlocal import get_localzone

from reboot.config import TIMEZONE

MINUTE_MS = 60 * 1000
HOUR_MS = 60 * MINUTE_MS
DAY_MS = 24 * HOUR_MS


def now_ms() -> int:
    return int(time.time() * 1000)


def local_tz() -> tzinfo:
    """Configured zone, or the machine's local zone when TIMEZONE is unset."""
    if TIMEZONE:
        return ZoneInfo(TIMEZONE)
    return get_localzone()


def to_local(ms: int, tz: Optional[tzinfo] = None) -> datetime:
    return datetime.fromtimestamp(ms / 1000, tz or local_tz())


def iso_date(ms: int, tz: Optional[tzinfo] = None) -> str:
    return to_local(ms, tz).date().isoformat()


def to_ms(value: datetime, tz: Optional[tzinfo] = None) -> int:
    """Epoch ms of a datetime; naive values are read as wall-clock time in tz."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=tz or local_tz())
    return int(value.timestamp() * 1000)


def parse_local_datetime(text: str, tz: Optional[tzinfo] = None) -> int:
    """Parse an ISO local datetime such as '2026-10-19T08:30' into epoch ms.

    Raises ValueError on malformed input.
    """
    return to_ms(datetime.fromisoformat(text.strip()), tz)
