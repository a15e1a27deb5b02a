"""Mini README: Tests for rate tables and the venue registry.

Confirms the built-in price lists and that rate lookups are total.
"""

from __future__ import annotations

import pytest

from stationclock.billing import BILLIARD, GAME_ROOM, VENUES, RateTable, VenueConfig


def test_billiard_rates_follow_table_number():
    assert [BILLIARD.rate_for(station_id) for station_id in BILLIARD.station_ids] == [
        0.20,
        0.20,
        0.21,
        0.25,
    ]
    assert BILLIARD.station_count == 4
    assert not BILLIARD.uses_player_count


def test_billiard_ignores_player_count():
    assert BILLIARD.rate_for(4, 2) == pytest.approx(0.25)


def test_game_room_rates_follow_player_count():
    assert GAME_ROOM.station_count == 7
    assert GAME_ROOM.rate_for(1, 2) == pytest.approx(0.15)
    assert GAME_ROOM.rate_for(1, 4) == pytest.approx(0.25)
    assert GAME_ROOM.rate_for(7, 4) == pytest.approx(0.30)


def test_rate_lookup_falls_back_to_default():
    assert GAME_ROOM.rate_for(3) == pytest.approx(0.15)
    assert BILLIARD.rate_for(99) == pytest.approx(0.20)
    assert GAME_ROOM.rate_for(99, 4) == pytest.approx(0.15)


def test_rate_table_is_read_only_and_rejects_negative_rates():
    table = RateTable(default_rate=0.1, by_station={1: 0.3})
    with pytest.raises(TypeError):
        table.by_station[1] = 0.0  # type: ignore[index]
    with pytest.raises(ValueError):
        RateTable(default_rate=-0.1)


def test_venue_requires_stations():
    with pytest.raises(ValueError):
        VenueConfig(key="empty", label="Empty", station_count=0, rate_table=RateTable(0.1))


def test_registry_lookup():
    assert list(VENUES.available_venues()) == ["billiard", "game-room"]
    assert VENUES.get("Game-Room") is GAME_ROOM
    with pytest.raises(KeyError):
        VENUES.get("bowling")


def test_describe_rates_lists_every_station():
    described = GAME_ROOM.describe_rates()
    assert len(described) == 14
    assert described["#7 (4P)"] == pytest.approx(0.30)
    assert BILLIARD.describe_rates()["#3"] == pytest.approx(0.21)
