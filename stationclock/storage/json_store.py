"""Mini README: Flat-file JSON ledger store.

Structure:
    * JsonFileLedgerStore - one pretty-printed JSON file per venue.

Writes go to a temporary file in the target directory which is then moved
over the old file with ``os.replace``, so a crash mid-write leaves either the
previous ledger or the new one on disk, never a truncated mix.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict

from ..errors import LedgerNotFound, LedgerReadFailure, PersistenceWriteFailure
from ..logging_utils import get_logger
from .base import LedgerStore

LOGGER = get_logger(__name__)


class JsonFileLedgerStore(LedgerStore):
    """Persist the ledger document as JSON at ``path``."""

    backend_name = "file"

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        LOGGER.debug("Ledger file store at %s", self.path)

    def read(self) -> Dict[str, Any]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as error:
            raise LedgerNotFound(f"No ledger at {self.path}") from error
        except (OSError, UnicodeDecodeError) as error:
            raise LedgerReadFailure(f"Could not read {self.path}: {error}") from error
        try:
            return json.loads(raw)
        except (ValueError, RecursionError) as error:
            raise LedgerReadFailure(f"{self.path} is not valid JSON: {error}") from error

    def write(self, document: Dict[str, Any]) -> None:
        temp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                temp_name = handle.name
                json.dump(document, handle, indent=2)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_name, self.path)
        except (OSError, TypeError, ValueError) as error:
            if temp_name is not None and os.path.exists(temp_name):
                os.unlink(temp_name)
            raise PersistenceWriteFailure(f"Could not write {self.path}: {error}") from error
        LOGGER.debug("Ledger written to %s", self.path)

    def metadata(self) -> Dict[str, str]:
        return {"backend": self.backend_name, "path": str(self.path)}
