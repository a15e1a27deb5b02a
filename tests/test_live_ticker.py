"""Mini README: Tests for the cooperative live ticker."""

from __future__ import annotations

import asyncio

import pytest

from stationclock.sessions import LiveTicker


def test_ticker_emits_until_max_ticks(billiard_service, clock):
    billiard_service.start(1)
    seen = []

    def record(snapshot):
        seen.append(snapshot.stations[0].elapsed_ms)
        clock.advance(1_000)

    async def scenario():
        ticker = LiveTicker(billiard_service.snapshot, record, interval=0.001, max_ticks=3)
        ticker.start()
        await ticker.wait()
        return ticker

    ticker = asyncio.run(scenario())

    assert ticker.ticks == 3
    assert not ticker.running
    assert seen == [0, 1_000, 2_000]


def test_cancelling_ticker_leaves_ledger_alone(billiard_service):
    billiard_service.start(2)
    before = billiard_service.ledger
    writes = billiard_service.store.write_count
    seen = []

    async def callback(snapshot):
        seen.append(snapshot)

    async def scenario():
        ticker = LiveTicker(billiard_service.snapshot, callback, interval=60)
        ticker.start()
        await asyncio.sleep(0.01)
        await ticker.stop()
        return ticker

    ticker = asyncio.run(scenario())

    assert ticker.ticks == 1
    assert len(seen) == 1
    assert not ticker.running
    assert billiard_service.ledger == before
    assert billiard_service.store.write_count == writes


def test_ticker_rejects_non_positive_interval(billiard_service):
    with pytest.raises(ValueError):
        LiveTicker(billiard_service.snapshot, print, interval=0)
