"""Mini README: Abstract persistence contract for ledger documents.

Structure:
    * LedgerStore - read/write interface implemented by each back-end.

Stores move plain JSON-compatible documents, not ``Ledger`` objects, so the
validation rules live in one place (``Ledger.from_document``). A store only
promises that ``write`` replaces the whole document atomically: a reader
never observes a half-written ledger.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class LedgerStore(ABC):
    """Base interface for ledger persistence back-ends."""

    backend_name: str = "generic"

    @abstractmethod
    def read(self) -> Dict[str, Any]:
        """Return the persisted document.

        Raises ``LedgerNotFound`` when nothing was written yet and
        ``LedgerReadFailure`` when the stored bytes cannot be decoded.
        """

    @abstractmethod
    def write(self, document: Dict[str, Any]) -> None:
        """Atomically replace the persisted document.

        Raises ``PersistenceWriteFailure`` when the write did not land.
        """

    def metadata(self) -> Dict[str, str]:
        """Return diagnostic metadata for UI displays."""

        return {"backend": self.backend_name}
