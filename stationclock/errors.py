"""Mini README: Exception hierarchy shared by every Station Clock module.

Structure:
    * StationClockError - common base so callers can catch desk failures.
    * Persistence errors - InvalidPersistedState, LedgerNotFound,
      LedgerReadFailure, PersistenceWriteFailure.
    * Caller errors - InvalidStationId, InvalidPlayerCount, DoubleStart.

None of these are fatal. The service recovers from the persistence family
locally and the web layer maps the caller family onto HTTP status codes.
"""

from __future__ import annotations

from typing import Iterable, Optional


class StationClockError(Exception):
    """Base class for all errors raised by Station Clock."""


class InvalidPersistedState(StationClockError, ValueError):
    """The stored ledger document is malformed or breaks an invariant."""


class LedgerNotFound(StationClockError):
    """No ledger has been persisted yet."""


class LedgerReadFailure(StationClockError):
    """The persisted ledger exists but could not be read."""


class PersistenceWriteFailure(StationClockError):
    """Writing the ledger failed; the in-memory copy stays authoritative."""


class InvalidStationId(StationClockError, ValueError):
    """A station id outside the venue's fixed pool was requested."""

    def __init__(self, station_id: object, station_count: int) -> None:
        super().__init__(
            f"Station {station_id!r} does not exist (valid ids are 1..{station_count})"
        )
        self.station_id = station_id
        self.station_count = station_count


class InvalidPlayerCount(StationClockError, ValueError):
    """The player count is not one the venue prices."""

    def __init__(self, player_count: object, allowed: Iterable[int]) -> None:
        allowed = tuple(allowed)
        super().__init__(
            f"Player count {player_count!r} is not supported (expected one of {allowed})"
        )
        self.player_count = player_count
        self.allowed = allowed


class DoubleStart(StationClockError):
    """Start was requested for a station that is already running."""

    def __init__(self, station_id: int, start_time_ms: Optional[int]) -> None:
        super().__init__(f"Station {station_id} is already running")
        self.station_id = station_id
        self.start_time_ms = start_time_ms
