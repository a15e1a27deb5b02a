"""Mini README: Session billing service owning one venue's ledger.

Structure:
    * Outcome - result of a mutating call (ledger, optional receipt, persistence status).
    * StationView / LiveSnapshot - read-only live view for dashboards.
    * LedgerService - load, start, stop, reset, restore and snapshot.

The service is the single writer of its ledger: every mutation runs under
one lock, computes a new ``Ledger`` value, swaps it in and only then asks the
store to persist it. A failed write is logged and reported on the outcome
but never rolls the in-memory state back, so the desk keeps working with a
possibly stale file. Two processes sharing one ledger file still overwrite
each other (last write wins).
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple
from zoneinfo import ZoneInfo

from ..billing.ledger import (
    Ledger,
    Receipt,
    Station,
    compute_cost,
    live_cost,
    live_elapsed,
    round_amount,
)
from ..billing.rates import VenueConfig
from ..errors import (
    DoubleStart,
    InvalidPersistedState,
    InvalidPlayerCount,
    InvalidStationId,
    LedgerNotFound,
    LedgerReadFailure,
    PersistenceWriteFailure,
)
from ..logging_utils import get_logger
from ..storage.base import LedgerStore
from ..utils.clock import Clock, system_clock, today_key

LOGGER = get_logger(__name__)

DEFAULT_ZONE = ZoneInfo("Africa/Tunis")


@dataclass(frozen=True)
class Outcome:
    """What a start/stop/reset/restore call did."""

    ledger: Ledger
    receipt: Optional[Receipt] = None
    changed: bool = True
    persisted: bool = True
    warning: Optional[str] = None


@dataclass(frozen=True)
class StationView:
    station_id: int
    running: bool
    start_time_ms: Optional[int]
    player_count: Optional[int]
    rate_per_minute: float
    elapsed_ms: int
    cost: float

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.station_id,
            "running": self.running,
            "startTime": self.start_time_ms,
            "playerCount": self.player_count,
            "ratePerMinute": self.rate_per_minute,
            "elapsedMs": self.elapsed_ms,
            "cost": round_amount(self.cost),
        }


@dataclass(frozen=True)
class LiveSnapshot:
    """Ledger as seen at ``taken_at_ms``; live figures are never persisted."""

    taken_at_ms: int
    date_key: str
    revenue: float
    stations: Tuple[StationView, ...]

    @property
    def any_running(self) -> bool:
        return any(view.running for view in self.stations)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "takenAt": self.taken_at_ms,
            "date": self.date_key,
            "revenue": self.revenue,
            "anyRunning": self.any_running,
            "stations": [view.as_dict() for view in self.stations],
        }


class LedgerService:
    """Apply station transitions to a venue ledger and persist the result."""

    def __init__(
        self,
        venue: VenueConfig,
        store: LedgerStore,
        *,
        clock: Clock = system_clock,
        zone: ZoneInfo = DEFAULT_ZONE,
    ) -> None:
        self.venue = venue
        self.store = store
        self.clock = clock
        self.zone = zone
        self._lock = threading.RLock()
        self._ledger: Optional[Ledger] = None
        self.last_receipt: Optional[Receipt] = None
        LOGGER.debug(
            "Ledger service for venue '%s' using %s store", venue.key, store.backend_name
        )

    @property
    def ledger(self) -> Ledger:
        """Current in-memory ledger, loading it on first access."""

        with self._lock:
            if self._ledger is None:
                self.load()
            return self._ledger

    def load(self) -> Ledger:
        """Read the persisted ledger, falling back to a fresh one on any problem."""

        with self._lock:
            try:
                ledger = Ledger.from_document(self.store.read(), self.venue)
            except LedgerNotFound:
                LOGGER.info("No persisted ledger for '%s'; starting fresh", self.venue.key)
            except (InvalidPersistedState, LedgerReadFailure) as error:
                LOGGER.warning("Discarding unusable ledger for '%s': %s", self.venue.key, error)
            else:
                self._ledger = ledger
                LOGGER.info(
                    "Loaded ledger %s for '%s' (%s running, revenue %.3f)",
                    ledger.date_key,
                    self.venue.key,
                    ledger.running_count,
                    ledger.revenue,
                )
                return ledger

            ledger = self._fresh_ledger()
            self._commit(ledger)
            return ledger

    def start(
        self, station_id: int, player_count: Optional[int] = None, *, strict: bool = False
    ) -> Outcome:
        """Start a session, freezing the station's rate until it stops.

        Starting a running station changes nothing; it raises ``DoubleStart``
        when ``strict`` is set and otherwise returns an unchanged outcome.
        """

        with self._lock:
            station = self._station(station_id)
            player_count = self._check_player_count(player_count)
            if station.running:
                error = DoubleStart(station_id, station.start_time_ms)
                if strict:
                    raise error
                LOGGER.warning("Ignoring start: %s", error)
                return Outcome(ledger=self.ledger, changed=False, warning=str(error))

            now = self.clock()
            rate = self.venue.rate_for(station_id, player_count)
            ledger = self.ledger.with_station(station.started(now, rate, player_count))
            persisted, warning = self._commit(ledger)
            LOGGER.info(
                "Started %s %s at %s (rate %.2f/min, players %s)",
                self.venue.station_noun.lower(),
                station_id,
                now,
                rate,
                player_count,
            )
            return Outcome(ledger=ledger, persisted=persisted, warning=warning)

    def stop(self, station_id: int) -> Outcome:
        """Stop a station; a running session is billed and yields a receipt."""

        with self._lock:
            station = self._station(station_id)
            current = self.ledger
            if not station.running or station.start_time_ms is None:
                ledger = current.with_station(station.cleared())
                persisted, warning = self._commit(ledger)
                LOGGER.info(
                    "Stop on idle %s %s; nothing billed",
                    self.venue.station_noun.lower(),
                    station_id,
                )
                return Outcome(ledger=ledger, persisted=persisted, warning=warning)

            end = self.clock()
            elapsed = live_elapsed(station, end)
            if end < station.start_time_ms:
                LOGGER.warning(
                    "Clock moved backwards on %s %s (start %s, now %s); billing 0 ms",
                    self.venue.station_noun.lower(),
                    station_id,
                    station.start_time_ms,
                    end,
                )
            rate = station.rate_per_minute
            if rate is None:
                rate = self.venue.rate_for(station_id, station.player_count)
            cost = compute_cost(elapsed, rate)
            ledger = current.with_station(
                station.cleared(), revenue=round_amount(current.revenue + cost)
            )
            receipt = Receipt(
                station_id=station_id,
                started_at_ms=station.start_time_ms,
                ended_at_ms=end,
                duration_ms=elapsed,
                rate_per_minute=rate,
                amount_tnd=round_amount(cost),
                date_key=today_key(self.zone, end),
                player_count=station.player_count,
            )
            persisted, warning = self._commit(ledger)
            self.last_receipt = receipt
            LOGGER.info(
                "Stopped %s %s after %s ms: %.3f TND (revenue %.3f)",
                self.venue.station_noun.lower(),
                station_id,
                elapsed,
                receipt.amount_tnd,
                ledger.revenue,
            )
            return Outcome(ledger=ledger, receipt=receipt, persisted=persisted, warning=warning)

    def reset(self) -> Outcome:
        """Discard every session and the revenue; no receipts are issued."""

        with self._lock:
            discarded = self.ledger.running_count
            ledger = self._fresh_ledger()
            persisted, warning = self._commit(ledger)
            self.last_receipt = None
            LOGGER.info(
                "Ledger for '%s' reset (%s running sessions discarded)", self.venue.key, discarded
            )
            return Outcome(ledger=ledger, persisted=persisted, warning=warning)

    def restore(self, payload: Mapping[str, Any]) -> Outcome:
        """Replace the ledger with an operator-supplied document, normalised."""

        with self._lock:
            ledger = Ledger.from_payload(payload, self.venue, today_key(self.zone, self.clock()))
            persisted, warning = self._commit(ledger)
            LOGGER.info(
                "Ledger for '%s' restored (date %s, revenue %.3f)",
                self.venue.key,
                ledger.date_key,
                ledger.revenue,
            )
            return Outcome(ledger=ledger, persisted=persisted, warning=warning)

    def snapshot(self, now_ms: Optional[int] = None) -> LiveSnapshot:
        """Live elapsed time and running cost for every station; never mutates."""

        with self._lock:
            ledger = self.ledger
        now = self.clock() if now_ms is None else now_ms
        views = tuple(self._view(station, now) for station in ledger.stations)
        return LiveSnapshot(
            taken_at_ms=now, date_key=ledger.date_key, revenue=ledger.revenue, stations=views
        )

    def _view(self, station: Station, now: int) -> StationView:
        rate = station.rate_per_minute
        if rate is None:
            rate = self.venue.rate_for(station.station_id, station.player_count)
        return StationView(
            station_id=station.station_id,
            running=station.running,
            start_time_ms=station.start_time_ms,
            player_count=station.player_count,
            rate_per_minute=rate,
            elapsed_ms=live_elapsed(station, now),
            cost=live_cost(station, now, self.venue),
        )

    def _station(self, station_id: int) -> Station:
        if not self.venue.has_station(station_id):
            raise InvalidStationId(station_id, self.venue.station_count)
        return self.ledger.station(station_id)

    def _check_player_count(self, player_count: Optional[int]) -> Optional[int]:
        if player_count is None or not self.venue.uses_player_count:
            return None
        if isinstance(player_count, bool) or player_count not in self.venue.player_counts:
            raise InvalidPlayerCount(player_count, self.venue.player_counts)
        return player_count

    def _fresh_ledger(self) -> Ledger:
        return Ledger.default(self.venue, today_key(self.zone, self.clock()))

    def _commit(self, ledger: Ledger) -> Tuple[bool, Optional[str]]:
        """Swap in ``ledger`` then persist it; returns (persisted, warning)."""

        self._ledger = ledger
        try:
            self.store.write(ledger.as_document())
        except PersistenceWriteFailure as error:
            LOGGER.warning("Ledger kept in memory only, persisted copy may be stale: %s", error)
            return False, f"Saved copy may be stale: {error}"
        return True, None
