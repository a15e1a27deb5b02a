"""Mini README: Tests for receipt formatting helpers."""

from __future__ import annotations

from stationclock.billing import BILLIARD, GAME_ROOM, Receipt
from stationclock.receipts import (
    format_amount,
    format_hms,
    format_timestamp,
    receipt_context,
    render_text_receipt,
)

from conftest import T0, TUNIS


def _receipt(**overrides) -> Receipt:
    values = dict(
        station_id=1,
        started_at_ms=T0,
        ended_at_ms=T0 + 600_000,
        duration_ms=600_000,
        rate_per_minute=0.2,
        amount_tnd=2.0,
        date_key="2024-06-01",
    )
    values.update(overrides)
    return Receipt(**values)


def test_format_hms():
    assert format_hms(0) == "00:00:00"
    assert format_hms(3_723_999) == "01:02:03"
    assert format_hms(-5_000) == "00:00:00"


def test_format_timestamp_in_tunis():
    assert format_timestamp(T0, TUNIS) == "01/06/2024, 10:00:00"


def test_format_amount_uses_millimes():
    assert format_amount(0.125) == "0.125 TND"
    assert format_amount(2) == "2.000 TND"


def test_receipt_context_labels():
    context = receipt_context(_receipt(), BILLIARD, TUNIS)
    assert context["title"] == "Billiard Receipt"
    assert context["station_label"] == "Table"
    assert context["station"] == "#1"
    assert context["end"] == "01/06/2024, 10:10:00"
    assert context["rate"] == "0.20 TND / min"
    assert context["total"] == "2.000 TND"
    assert "players" not in context


def test_text_receipt_lists_players_when_known():
    text = render_text_receipt(
        _receipt(station_id=2, player_count=4, rate_per_minute=0.25, amount_tnd=2.5),
        GAME_ROOM,
        TUNIS,
    )
    assert "Game Room Receipt" in text
    assert "Players" in text
    assert "00:10:00" in text
    assert text.splitlines()[-2].endswith("2.500 TND")


def test_amounts_on_a_half_millime_round_up():
    assert format_amount(0.0625) == "0.063 TND"
