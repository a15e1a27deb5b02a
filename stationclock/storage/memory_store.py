"""Mini README: In-memory ledger store for tests and throwaway sessions.

Documents are deep-copied on the way in and out so callers cannot mutate the
"persisted" copy by accident. ``fail_writes`` simulates a broken disk.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Optional

from ..errors import LedgerNotFound, PersistenceWriteFailure
from .base import LedgerStore


class InMemoryLedgerStore(LedgerStore):
    """Keep the ledger document in process memory."""

    backend_name = "memory"

    def __init__(self, document: Optional[Dict[str, Any]] = None) -> None:
        self._document = copy.deepcopy(document)
        self.fail_writes = False
        self.write_count = 0

    def read(self) -> Dict[str, Any]:
        if self._document is None:
            raise LedgerNotFound("No ledger stored in memory")
        return copy.deepcopy(self._document)

    def write(self, document: Dict[str, Any]) -> None:
        if self.fail_writes:
            raise PersistenceWriteFailure("In-memory store configured to fail writes")
        self._document = copy.deepcopy(document)
        self.write_count += 1

    @property
    def document(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._document)
