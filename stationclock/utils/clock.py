"""Mini README: Wall-clock helpers shared by the ledger and the receipts.

Structure:
    * Clock - callable protocol returning the current epoch time in milliseconds.
    * system_clock - the real clock used outside tests.
    * today_key - ``YYYY-MM-DD`` date key in the venue time zone.
    * from_epoch_ms - aware datetime for an epoch millisecond value.

Everything time-dependent takes a ``Clock`` so tests can drive time
explicitly instead of sleeping.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Optional, Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    def __call__(self) -> int: ...


def system_clock() -> int:
    """Current epoch time in whole milliseconds."""

    return time.time_ns() // 1_000_000


def from_epoch_ms(epoch_ms: int, zone: ZoneInfo) -> datetime:
    return datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc).astimezone(zone)


def today_key(zone: ZoneInfo, now_ms: Optional[int] = None) -> str:
    """Return the calendar date of ``now_ms`` in ``zone`` as ``YYYY-MM-DD``."""

    if now_ms is None:
        now_ms = system_clock()
    return from_epoch_ms(now_ms, zone).date().isoformat()
