"""Mini README: Billing values for station sessions.

The package groups the ledger value types (``Station``, ``Ledger``,
``Receipt``), the pure cost arithmetic and the rate tables that price each
venue. Nothing here performs I/O; persistence lives in ``storage`` and state
transitions in ``sessions``.
"""

from .ledger import (
    Ledger,
    Receipt,
    Station,
    compute_cost,
    live_cost,
    live_elapsed,
    round_amount,
)
from .rates import BILLIARD, GAME_ROOM, VENUES, RateTable, VenueConfig, VenueRegistry

__all__ = [
    "BILLIARD",
    "GAME_ROOM",
    "Ledger",
    "RateTable",
    "Receipt",
    "Station",
    "VENUES",
    "VenueConfig",
    "VenueRegistry",
    "compute_cost",
    "live_cost",
    "live_elapsed",
    "round_amount",
]
