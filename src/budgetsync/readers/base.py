"""Reader protocol for transaction sources."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from budgetsync.models.transaction import SourceRecord


@runtime_checkable
class Reader(Protocol):
    """Reads every available transaction from one source."""

    @property
    def name(self) -> str:
        """Reader identifier used in logs."""
        ...

    def bulk(self) -> list[SourceRecord]:
        """Return all transactions with the account they belong to.

        Raises:
            TransportError: If any part of the read fails.
        """
        ...
