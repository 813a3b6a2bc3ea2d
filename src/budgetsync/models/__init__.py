"""Domain models shared by readers and writers."""

from budgetsync.models.transaction import (
    Account,
    CanonicalTransaction,
    RawTransaction,
    SourceRecord,
    format_milliunits,
    milliunits_from_amount,
)

__all__ = [
    "Account",
    "CanonicalTransaction",
    "RawTransaction",
    "SourceRecord",
    "format_milliunits",
    "milliunits_from_amount",
]
