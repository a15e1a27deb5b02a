"""Mini README: Session lifecycle for venue stations.

Exports ``LedgerService`` (the single writer of a venue's ledger), its result
types and ``LiveTicker`` for periodic read-only refreshes. ``build_service``
wires a service from settings for the web app and the CLI.
"""

from __future__ import annotations

from ..billing.rates import VENUES
from ..configuration import StationClockSettings
from ..storage import create_store
from .service import LedgerService, LiveSnapshot, Outcome, StationView
from .ticker import LiveTicker


def build_service(settings: StationClockSettings) -> LedgerService:
    """Create a service for the configured venue, store and time zone."""

    venue = VENUES.get(settings.venue)
    return LedgerService(venue, create_store(settings, venue), zone=settings.zone)


__all__ = [
    "LedgerService",
    "LiveSnapshot",
    "LiveTicker",
    "Outcome",
    "StationView",
    "build_service",
]
