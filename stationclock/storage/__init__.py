"""Mini README: Persistence back-ends for the ledger.

Re-exports the ``LedgerStore`` contract, the JSON file and in-memory
implementations and ``create_store``, which picks one from settings.
"""

from __future__ import annotations

from ..billing.rates import VenueConfig
from ..configuration import StationClockSettings
from ..logging_utils import get_logger
from .base import LedgerStore
from .json_store import JsonFileLedgerStore
from .memory_store import InMemoryLedgerStore

LOGGER = get_logger(__name__)


def create_store(settings: StationClockSettings, venue: VenueConfig) -> LedgerStore:
    """Build the configured store; file stores keep one JSON file per venue."""

    if settings.storage_backend == "memory":
        LOGGER.warning("Using in-memory ledger storage; state is lost on exit")
        return InMemoryLedgerStore()
    return JsonFileLedgerStore(settings.data_directory / f"{venue.key}.json")


__all__ = ["InMemoryLedgerStore", "JsonFileLedgerStore", "LedgerStore", "create_store"]
