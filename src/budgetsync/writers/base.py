"""Writer protocol and the summary every writer reports."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from typing import Literal, Protocol, runtime_checkable

from budgetsync.models.transaction import SourceRecord

WriteEventKind = Literal["truncated", "skipped", "failed"]


@dataclass(frozen=True, slots=True)
class WriteEvent:
    """Something noteworthy that happened to one record during a batch."""

    kind: WriteEventKind
    account: str
    date: date | None
    detail: str


@dataclass
class BatchSummary:
    """Outcome of one writer batch."""

    writer: str
    sent: int = 0
    skipped: int = 0
    failed: int = 0
    events: list[WriteEvent] = field(default_factory=list)

    def events_of(self, kind: WriteEventKind) -> list[WriteEvent]:
        return [event for event in self.events if event.kind == kind]


@runtime_checkable
class Writer(Protocol):
    """Consumes every record read during a run in a single batch."""

    @property
    def name(self) -> str:
        """Writer identifier used in summaries and logs."""
        ...

    def bulk(self, records: Iterable[SourceRecord]) -> BatchSummary:
        """Write ``records``.

        Raises:
            TransportError: If the batch could not be delivered.
        """
        ...
