"""Mini README: Core package initializer for Station Clock.

Station Clock keeps the session timers and the daily takings of a game room
or billiard venue. Sub-packages are split by concern: ``billing`` holds the
ledger values and rate tables, ``storage`` the persistence back-ends,
``sessions`` the service that mutates the ledger, ``receipts`` the ticket
rendering and ``interface`` the FastAPI control desk.
"""

from .logging_utils import get_logger

__version__ = "0.3.0"

__all__ = ["get_logger", "__version__"]
