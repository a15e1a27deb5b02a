"""Mini README: Ledger values and the billing arithmetic.

Structure:
    * Station - one billable table or console slot, running or stopped.
    * Ledger - the day's station states plus accumulated revenue.
    * Receipt - display-only record of one completed session.
    * compute_cost / round_amount / live_elapsed / live_cost - pure helpers.

A ledger is a plain value. ``Ledger.from_document`` is the strict parser used
when loading persisted state and raises ``InvalidPersistedState`` on any
structural defect; ``Ledger.from_payload`` is the forgiving parser used when
an operator restores state by hand and always produces a valid ledger. Both
read and write the field names of the original JSON file (``startTime``,
``playerCount``, ``ratePerMinute``) so existing data files stay compatible.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Mapping, Optional

from ..errors import InvalidPersistedState, InvalidStationId
from .rates import VenueConfig

MS_PER_MINUTE = 60_000
AMOUNT_DECIMALS = 3
AMOUNT_QUANTUM = Decimal(1).scaleb(-AMOUNT_DECIMALS)


def compute_cost(elapsed_ms: float, rate_per_minute: float) -> float:
    """Price a duration: continuous minutes times the per-minute rate."""

    return (elapsed_ms / MS_PER_MINUTE) * rate_per_minute


def round_amount(value: float) -> float:
    """Round a money amount to millimes for storage and display.

    Exact ties round away from zero (0.0625 -> 0.063), as printed tickets do;
    the built-in ``round`` would pick the even digit instead.
    """

    quantized = Decimal(value).quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_UP)
    return float(quantized)


@dataclass(slots=True)
class Station:
    """A billable unit; ``running`` holds exactly when a start time is set."""

    station_id: int
    running: bool = False
    start_time_ms: Optional[int] = None
    player_count: Optional[int] = None
    rate_per_minute: Optional[float] = None

    def __post_init__(self) -> None:
        if self.running != (self.start_time_ms is not None):
            raise ValueError(
                f"Station {self.station_id}: running={self.running} "
                f"with start_time_ms={self.start_time_ms}"
            )

    def started(
        self, now_ms: int, rate_per_minute: float, player_count: Optional[int] = None
    ) -> "Station":
        return replace(
            self,
            running=True,
            start_time_ms=now_ms,
            player_count=player_count,
            rate_per_minute=rate_per_minute,
        )

    def cleared(self) -> "Station":
        return Station(station_id=self.station_id)

    def as_document(self) -> Dict[str, Any]:
        return {
            "id": self.station_id,
            "running": self.running,
            "startTime": self.start_time_ms,
            "playerCount": self.player_count,
            "ratePerMinute": self.rate_per_minute,
        }


def live_elapsed(station: Station, now_ms: int) -> int:
    """Milliseconds the current session has run; 0 when stopped or clock skewed."""

    if not station.running or station.start_time_ms is None:
        return 0
    return max(0, now_ms - station.start_time_ms)


def live_cost(station: Station, now_ms: int, venue: VenueConfig) -> float:
    rate = station.rate_per_minute
    if rate is None:
        rate = venue.rate_for(station.station_id, station.player_count)
    return compute_cost(live_elapsed(station, now_ms), rate)


@dataclass(frozen=True)
class Receipt:
    """Completed session, produced once per stop of a running station."""

    station_id: int
    started_at_ms: int
    ended_at_ms: int
    duration_ms: int
    rate_per_minute: float
    amount_tnd: float
    date_key: str
    player_count: Optional[int] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "stationId": self.station_id,
            "startedAt": self.started_at_ms,
            "endedAt": self.ended_at_ms,
            "durationMs": self.duration_ms,
            "ratePerMinute": self.rate_per_minute,
            "amountTND": self.amount_tnd,
            "playerCount": self.player_count,
            "dateKey": self.date_key,
        }


@dataclass(slots=True)
class Ledger:
    """Daily state: date key, revenue and the venue's fixed station pool."""

    date_key: str
    revenue: float = 0.0
    stations: List[Station] = field(default_factory=list)

    @classmethod
    def default(cls, venue: VenueConfig, date_key: str) -> "Ledger":
        """Fresh ledger: zero revenue and every station stopped."""

        return cls(
            date_key=date_key,
            revenue=0.0,
            stations=[Station(station_id=station_id) for station_id in venue.station_ids],
        )

    def station(self, station_id: int) -> Station:
        for station in self.stations:
            if station.station_id == station_id:
                return station
        raise InvalidStationId(station_id, len(self.stations))

    def with_station(self, updated: Station, *, revenue: Optional[float] = None) -> "Ledger":
        """Return a copy with one station replaced and, optionally, new revenue."""

        stations = [
            updated if station.station_id == updated.station_id else station
            for station in self.stations
        ]
        return Ledger(
            date_key=self.date_key,
            revenue=self.revenue if revenue is None else revenue,
            stations=stations,
        )

    @property
    def running_count(self) -> int:
        return sum(1 for station in self.stations if station.running)

    def as_document(self) -> Dict[str, Any]:
        return {
            "date": self.date_key,
            "revenue": self.revenue,
            "stations": [station.as_document() for station in self.stations],
        }

    @classmethod
    def from_document(cls, document: object, venue: VenueConfig) -> "Ledger":
        """Parse persisted state, rejecting anything that breaks an invariant."""

        if not isinstance(document, Mapping):
            raise InvalidPersistedState("Ledger document must be a JSON object")
        date_key = document.get("date")
        if not isinstance(date_key, str) or not _is_date_key(date_key):
            raise InvalidPersistedState(f"Invalid date key: {date_key!r}")
        revenue = document.get("revenue")
        if not _is_number(revenue) or revenue < 0:
            raise InvalidPersistedState(f"Invalid revenue: {revenue!r}")
        raw_stations = document.get("stations")
        if not isinstance(raw_stations, list):
            raise InvalidPersistedState("Ledger stations must be a list")
        if len(raw_stations) != venue.station_count:
            raise InvalidPersistedState(
                f"Expected {venue.station_count} stations, found {len(raw_stations)}"
            )

        stations: Dict[int, Station] = {}
        for raw in raw_stations:
            station = _parse_station_strict(raw, venue)
            if station.station_id in stations:
                raise InvalidPersistedState(f"Duplicate station id {station.station_id}")
            stations[station.station_id] = station
        return cls(
            date_key=date_key,
            revenue=float(revenue),
            stations=[stations[station_id] for station_id in venue.station_ids],
        )

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], venue: VenueConfig, date_key: str) -> "Ledger":
        """Normalise an arbitrary payload into a valid ledger.

        Missing or malformed fields fall back to defaults: the given date
        key, zero revenue and stopped stations. Stations are matched by id,
        extra entries are ignored and a station claiming to run without a
        numeric start time is treated as stopped.
        """

        raw_date = payload.get("date")
        if isinstance(raw_date, str) and _is_date_key(raw_date):
            date_key = raw_date
        raw_revenue = payload.get("revenue")
        revenue = float(raw_revenue) if _is_number(raw_revenue) and raw_revenue > 0 else 0.0

        raw_stations = payload.get("stations")
        by_id: Dict[int, Mapping[str, Any]] = {}
        if isinstance(raw_stations, list):
            for raw in raw_stations:
                if isinstance(raw, Mapping) and venue.has_station(raw.get("id")):
                    by_id.setdefault(raw["id"], raw)

        stations = [
            _parse_station_lenient(by_id.get(station_id), station_id, venue)
            for station_id in venue.station_ids
        ]
        return cls(date_key=date_key, revenue=revenue, stations=stations)


def _is_number(value: object) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _is_date_key(value: str) -> bool:
    try:
        return date.fromisoformat(value).isoformat() == value
    except ValueError:
        return False


def _as_epoch_ms(value: object) -> Optional[int]:
    """Accept integral numbers only; JavaScript clients send whole milliseconds."""

    if _is_number(value) and float(value).is_integer():
        return int(value)
    return None


def _parse_station_strict(raw: object, venue: VenueConfig) -> Station:
    if not isinstance(raw, Mapping):
        raise InvalidPersistedState("Station entries must be JSON objects")
    station_id = raw.get("id")
    if not venue.has_station(station_id):
        raise InvalidPersistedState(f"Invalid station id: {station_id!r}")
    running = raw.get("running")
    if not isinstance(running, bool):
        raise InvalidPersistedState(f"Station {station_id}: running must be a boolean")

    raw_start = raw.get("startTime")
    start_time_ms = _as_epoch_ms(raw_start)
    if raw_start is not None and start_time_ms is None:
        raise InvalidPersistedState(f"Station {station_id}: invalid startTime {raw_start!r}")
    if running != (start_time_ms is not None):
        raise InvalidPersistedState(
            f"Station {station_id}: running={running} disagrees with startTime"
        )

    player_count = raw.get("playerCount")
    if player_count is not None and (
        isinstance(player_count, bool) or player_count not in venue.player_counts
    ):
        raise InvalidPersistedState(f"Station {station_id}: invalid playerCount {player_count!r}")
    rate = raw.get("ratePerMinute")
    if rate is not None and (not _is_number(rate) or rate < 0):
        raise InvalidPersistedState(f"Station {station_id}: invalid ratePerMinute {rate!r}")

    return Station(
        station_id=station_id,
        running=running,
        start_time_ms=start_time_ms,
        player_count=None if player_count is None else int(player_count),
        rate_per_minute=None if rate is None else float(rate),
    )


def _parse_station_lenient(
    raw: Optional[Mapping[str, Any]], station_id: int, venue: VenueConfig
) -> Station:
    if raw is None or raw.get("running") is not True:
        return Station(station_id=station_id)
    start_time_ms = _as_epoch_ms(raw.get("startTime"))
    if start_time_ms is None:
        return Station(station_id=station_id)
    player_count = raw.get("playerCount")
    if isinstance(player_count, bool) or player_count not in venue.player_counts:
        player_count = None
    rate = raw.get("ratePerMinute")
    return Station(
        station_id=station_id,
        running=True,
        start_time_ms=start_time_ms,
        player_count=None if player_count is None else int(player_count),
        rate_per_minute=float(rate) if _is_number(rate) and rate >= 0 else None,
    )
