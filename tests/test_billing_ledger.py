"""Mini README: Tests for ledger values, parsing and the cost arithmetic.

Structure:
    * cost helpers - continuous minutes, rounding, clock-skew clamping.
    * from_document - strict parsing of persisted ledgers.
    * from_payload - forgiving normalisation of operator uploads.
"""

from __future__ import annotations

import pytest

from stationclock.billing import (
    BILLIARD,
    GAME_ROOM,
    Ledger,
    Station,
    compute_cost,
    live_cost,
    live_elapsed,
    round_amount,
)
from stationclock.errors import InvalidPersistedState, InvalidStationId


def _document(**overrides):
    document = Ledger.default(BILLIARD, "2024-06-01").as_document()
    document.update(overrides)
    return document


def test_compute_cost_uses_continuous_minutes():
    assert compute_cost(600_000, 0.20) == pytest.approx(2.0)
    assert compute_cost(90_000, 0.20) == pytest.approx(0.3)
    assert compute_cost(0, 0.25) == 0


def test_round_amount_keeps_three_decimals():
    assert round_amount(0.12345) == pytest.approx(0.123)
    assert round_amount(2.0004) == pytest.approx(2.0)


@pytest.mark.parametrize(
    "value, expected",
    [(0.0625, 0.063), (0.1875, 0.188), (0.3125, 0.313), (1.0625, 1.063)],
)
def test_round_amount_breaks_ties_upwards(value, expected):
    assert round_amount(value) == expected


def test_station_rejects_running_without_start_time():
    with pytest.raises(ValueError):
        Station(station_id=1, running=True)
    with pytest.raises(ValueError):
        Station(station_id=1, running=False, start_time_ms=5)


def test_live_elapsed_is_zero_when_stopped_or_clock_went_back():
    running = Station(station_id=1, running=True, start_time_ms=10_000, rate_per_minute=0.2)
    assert live_elapsed(running, 70_000) == 60_000
    assert live_elapsed(running, 5_000) == 0
    assert live_elapsed(Station(station_id=1), 70_000) == 0


def test_live_cost_prefers_frozen_rate_then_venue_rate():
    frozen = Station(station_id=4, running=True, start_time_ms=0, rate_per_minute=0.5)
    assert live_cost(frozen, 60_000, BILLIARD) == pytest.approx(0.5)
    legacy = Station(station_id=4, running=True, start_time_ms=0)
    assert live_cost(legacy, 60_000, BILLIARD) == pytest.approx(0.25)


def test_default_ledger_has_fixed_stopped_pool():
    ledger = Ledger.default(GAME_ROOM, "2024-06-01")
    assert [station.station_id for station in ledger.stations] == list(range(1, 8))
    assert ledger.revenue == 0
    assert ledger.running_count == 0
    with pytest.raises(InvalidStationId):
        ledger.station(8)


def test_document_round_trip_preserves_running_station():
    ledger = Ledger.default(GAME_ROOM, "2024-06-01").with_station(
        Station(station_id=3, running=True, start_time_ms=123, player_count=4, rate_per_minute=0.25),
        revenue=12.5,
    )
    assert Ledger.from_document(ledger.as_document(), GAME_ROOM) == ledger


def test_from_document_accepts_legacy_files_without_optional_fields():
    document = {
        "date": "2024-06-01",
        "revenue": 3,
        "stations": [
            {"id": 2, "running": False, "startTime": None},
            {"id": 1, "running": True, "startTime": 1000},
            {"id": 3, "running": False, "startTime": None},
            {"id": 4, "running": False, "startTime": None},
        ],
    }
    ledger = Ledger.from_document(document, BILLIARD)
    assert [station.station_id for station in ledger.stations] == [1, 2, 3, 4]
    assert ledger.station(1).start_time_ms == 1000
    assert ledger.station(1).rate_per_minute is None
    assert ledger.revenue == pytest.approx(3.0)


@pytest.mark.parametrize(
    "document",
    [
        [],
        _document(stations=_document()["stations"][:3]),
        _document(revenue=-1),
        _document(revenue="12"),
        _document(date="01/06/2024"),
        _document(stations="nope"),
    ],
)
def test_from_document_rejects_structural_defects(document):
    with pytest.raises(InvalidPersistedState):
        Ledger.from_document(document, BILLIARD)


def test_from_document_rejects_inconsistent_station():
    document = _document()
    document["stations"][0] = {"id": 1, "running": True, "startTime": None}
    with pytest.raises(InvalidPersistedState):
        Ledger.from_document(document, BILLIARD)

    document = _document()
    document["stations"][1]["id"] = 1
    with pytest.raises(InvalidPersistedState):
        Ledger.from_document(document, BILLIARD)


def test_from_payload_normalises_garbage():
    payload = {
        "date": 42,
        "revenue": -5,
        "stations": [
            {"id": 1, "running": True, "startTime": "soon"},
            {"id": 2, "running": True, "startTime": 500, "playerCount": 3, "ratePerMinute": "x"},
            {"id": 9, "running": True, "startTime": 500},
            "junk",
        ],
    }
    ledger = Ledger.from_payload(payload, GAME_ROOM, "2024-06-02")
    assert ledger.date_key == "2024-06-02"
    assert ledger.revenue == 0
    assert len(ledger.stations) == 7
    assert not ledger.station(1).running
    restored = ledger.station(2)
    assert restored.running and restored.start_time_ms == 500
    assert restored.player_count is None
    assert restored.rate_per_minute is None


def test_from_payload_keeps_valid_fields():
    payload = {
        "date": "2024-05-31",
        "revenue": 7.25,
        "stations": [{"id": 5, "running": True, "startTime": 10, "playerCount": 4, "ratePerMinute": 0.25}],
    }
    ledger = Ledger.from_payload(payload, GAME_ROOM, "2024-06-02")
    assert ledger.date_key == "2024-05-31"
    assert ledger.revenue == pytest.approx(7.25)
    assert ledger.station(5) == Station(
        station_id=5, running=True, start_time_ms=10, player_count=4, rate_per_minute=0.25
    )
