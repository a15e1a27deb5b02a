"""Mini README: Receipt presentation helpers.

Structure:
    * format_hms - ``HH:MM:SS`` for a millisecond duration.
    * format_timestamp - ``DD/MM/YYYY, HH:MM:SS`` in the venue time zone.
    * receipt_context - display strings shared by the HTML and text tickets.
    * render_text_receipt - fixed-width ticket for terminals and printers.

Rates print with two decimals and totals with three (millimes), matching the
paper tickets handed to customers.
"""

from __future__ import annotations

from typing import Dict, List
from zoneinfo import ZoneInfo

from ..billing.ledger import Receipt, round_amount
from ..billing.rates import VenueConfig
from ..utils.clock import from_epoch_ms

TICKET_WIDTH = 32


def format_hms(duration_ms: int) -> str:
    total_seconds = max(0, duration_ms // 1000)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_timestamp(epoch_ms: int, zone: ZoneInfo) -> str:
    return from_epoch_ms(epoch_ms, zone).strftime("%d/%m/%Y, %H:%M:%S")


def format_amount(amount: float) -> str:
    return f"{round_amount(amount):.3f} TND"


def receipt_context(receipt: Receipt, venue: VenueConfig, zone: ZoneInfo) -> Dict[str, str]:
    """Return the labelled values printed on a ticket, in display order."""

    context = {
        "title": f"{venue.label} Receipt",
        "date": f"{receipt.date_key} ({zone.key})",
        "station_label": venue.station_noun,
        "station": f"#{receipt.station_id}",
        "start": format_timestamp(receipt.started_at_ms, zone),
        "end": format_timestamp(receipt.ended_at_ms, zone),
        "duration": format_hms(receipt.duration_ms),
        "rate": f"{receipt.rate_per_minute:.2f} TND / min",
        "total": format_amount(receipt.amount_tnd),
    }
    if receipt.player_count is not None:
        context["players"] = str(receipt.player_count)
    return context


def render_text_receipt(receipt: Receipt, venue: VenueConfig, zone: ZoneInfo) -> str:
    context = receipt_context(receipt, venue, zone)
    rule = "-" * TICKET_WIDTH

    def row(label: str, value: str) -> str:
        return f"{label}{value.rjust(TICKET_WIDTH - len(label))}"

    lines: List[str] = [
        context["title"].center(TICKET_WIDTH),
        context["date"].center(TICKET_WIDTH),
        rule,
        row(venue.station_noun, f"#{receipt.station_id}"),
    ]
    if "players" in context:
        lines.append(row("Players", context["players"]))
    lines.extend(
        [
            row("Start", context["start"]),
            row("End", context["end"]),
            row("Duration", context["duration"]),
            row("Rate", context["rate"]),
            rule,
            row("Total", context["total"]),
            "Thank you".center(TICKET_WIDTH),
        ]
    )
    return "\n".join(lines)
