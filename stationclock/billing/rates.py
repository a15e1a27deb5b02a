"""Mini README: Rate tables and venue configuration.

Structure:
    * RateTable - immutable lookup of per-minute prices with a fallback rate.
    * VenueConfig - station count, rate table and player-count options of a venue.
    * VenueRegistry - maps venue keys to configurations.
    * BILLIARD / GAME_ROOM - the two venues the desk ships with.

Rates are configuration, not state: a table is built once and never changes
for the lifetime of the process. ``RateTable.rate_for`` is total, so every
station id (even one outside the table) resolves to a price.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class RateTable:
    """Per-minute prices keyed by station id and, optionally, player count."""

    default_rate: float
    by_station: Mapping[int, float] = field(default_factory=dict)
    by_station_and_players: Mapping[Tuple[int, int], float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        rates = [self.default_rate, *self.by_station.values(), *self.by_station_and_players.values()]
        if any(rate < 0 for rate in rates):
            raise ValueError("Rates must not be negative")
        # Freeze the lookups so callers cannot alter prices after start-up.
        object.__setattr__(self, "by_station", MappingProxyType(dict(self.by_station)))
        object.__setattr__(
            self, "by_station_and_players", MappingProxyType(dict(self.by_station_and_players))
        )

    def rate_for(self, station_id: int, player_count: Optional[int] = None) -> float:
        """Resolve the price for a station, most specific entry first."""

        if player_count is not None:
            rate = self.by_station_and_players.get((station_id, player_count))
            if rate is not None:
                return rate
        return self.by_station.get(station_id, self.default_rate)


@dataclass(frozen=True)
class VenueConfig:
    """Everything that differs between venues sharing the billing engine."""

    key: str
    label: str
    station_count: int
    rate_table: RateTable
    player_counts: Tuple[int, ...] = ()
    station_noun: str = "Station"

    def __post_init__(self) -> None:
        if self.station_count < 1:
            raise ValueError("A venue needs at least one station")

    @property
    def uses_player_count(self) -> bool:
        return bool(self.player_counts)

    @property
    def station_ids(self) -> range:
        return range(1, self.station_count + 1)

    def has_station(self, station_id: object) -> bool:
        return isinstance(station_id, int) and not isinstance(station_id, bool) and (
            1 <= station_id <= self.station_count
        )

    def rate_for(self, station_id: int, player_count: Optional[int] = None) -> float:
        if not self.uses_player_count:
            player_count = None
        return self.rate_table.rate_for(station_id, player_count)

    def describe_rates(self) -> Dict[str, float]:
        """Flatten the rate table for display, e.g. ``{"#3": 0.21}``."""

        described: Dict[str, float] = {}
        for station_id in self.station_ids:
            if self.uses_player_count:
                for players in self.player_counts:
                    described[f"#{station_id} ({players}P)"] = self.rate_for(station_id, players)
            else:
                described[f"#{station_id}"] = self.rate_for(station_id)
        return described


class VenueRegistry:
    """Simple registry for mapping venue keys to configurations."""

    def __init__(self) -> None:
        self._venues: Dict[str, VenueConfig] = {}

    def register(self, venue: VenueConfig) -> None:
        identifier = venue.key.lower()
        LOGGER.debug("Registering venue '%s'", identifier)
        self._venues[identifier] = venue

    def available_venues(self) -> Iterable[str]:
        """Return venue keys in display order."""

        return sorted(self._venues.keys())

    def get(self, key: str) -> VenueConfig:
        venue = self._venues.get(key.lower())
        if venue is None:
            raise KeyError(f"Unknown venue '{key}'")
        return venue


BILLIARD = VenueConfig(
    key="billiard",
    label="Billiard",
    station_count=4,
    rate_table=RateTable(
        default_rate=0.20,
        by_station={1: 0.20, 2: 0.20, 3: 0.21, 4: 0.25},
    ),
    station_noun="Table",
)

_GAME_ROOM_RATES = {
    (station_id, players): rate
    for station_id in range(1, 7)
    for players, rate in ((2, 0.15), (4, 0.25))
}
_GAME_ROOM_RATES.update({(7, 2): 0.20, (7, 4): 0.30})

GAME_ROOM = VenueConfig(
    key="game-room",
    label="Game Room",
    station_count=7,
    rate_table=RateTable(default_rate=0.15, by_station_and_players=_GAME_ROOM_RATES),
    player_counts=(2, 4),
    station_noun="Station",
)

VENUES = VenueRegistry()
VENUES.register(BILLIARD)
VENUES.register(GAME_ROOM)
