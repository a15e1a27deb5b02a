"""Mini README: Receipt rendering for completed sessions.

The ledger only produces ``Receipt`` values; this package turns them into
something a customer can read, either plain text for the CLI or the context
fed to the printable HTML ticket of the web interface.
"""

from .formatting import (
    format_amount,
    format_hms,
    format_timestamp,
    receipt_context,
    render_text_receipt,
)

__all__ = [
    "format_amount",
    "format_hms",
    "format_timestamp",
    "receipt_context",
    "render_text_receipt",
]
