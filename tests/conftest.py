"""Mini README: Shared fixtures for the Station Clock test-suite.

Structure:
    * FakeClock - settable epoch-millisecond clock so tests never sleep.
    * clock / billiard_service / game_room_service - ready-wired services
      backed by in-memory stores.
"""

from __future__ import annotations

from zoneinfo import ZoneInfo

import pytest

from stationclock.billing import BILLIARD, GAME_ROOM
from stationclock.sessions import LedgerService
from stationclock.storage import InMemoryLedgerStore

TUNIS = ZoneInfo("Africa/Tunis")
# 2024-06-01 10:00:00 in Tunis (UTC+1).
T0 = 1_717_232_400_000


class FakeClock:
    def __init__(self, now_ms: int = T0) -> None:
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, milliseconds: int) -> None:
        self.now_ms += milliseconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def billiard_service(clock: FakeClock) -> LedgerService:
    return LedgerService(BILLIARD, InMemoryLedgerStore(), clock=clock, zone=TUNIS)


@pytest.fixture
def game_room_service(clock: FakeClock) -> LedgerService:
    return LedgerService(GAME_ROOM, InMemoryLedgerStore(), clock=clock, zone=TUNIS)
