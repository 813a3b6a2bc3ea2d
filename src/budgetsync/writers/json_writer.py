"""Writer that prints mapped transactions as JSON instead of sending them."""

from __future__ import annotations

from collections.abc import Iterable
import json
import sys
from typing import Any, TextIO

from loguru import logger

from budgetsync.errors import ConfigError, MappingError
from budgetsync.mapping.mapper import TransactionMapper
from budgetsync.models.transaction import CanonicalTransaction, SourceRecord
from budgetsync.writers.base import BatchSummary, WriteEvent


def transaction_to_dict(txn: CanonicalTransaction) -> dict[str, Any]:
    return {
        "account": {"iban": txn.account.iban, "name": txn.account.name},
        "id": txn.id,
        "date": txn.date.isoformat(),
        "payee": txn.payee,
        "memo": txn.memo,
        "amount": txn.amount,
    }


class JSONWriter:
    """Dumps every mapped transaction of a run to a text stream."""

    name = "json"

    def __init__(self, mapper: TransactionMapper, *, stream: TextIO | None = None) -> None:
        self._mapper = mapper
        self._stream = stream

    def bulk(self, records: Iterable[SourceRecord]) -> BatchSummary:
        summary = BatchSummary(writer=self.name)
        rows: list[dict[str, Any]] = []
        for record in records:
            try:
                txn = self._mapper.map(record.account, record.raw)
            except (MappingError, ConfigError) as e:
                logger.bind(account=record.account.name, error=str(e)).warning(
                    "Failed to parse transaction on {}: {}", record.account.name, e
                )
                summary.failed += 1
                summary.events.append(
                    WriteEvent(
                        kind="failed",
                        account=record.account.name,
                        date=None,
                        detail=str(e),
                    )
                )
                continue
            rows.append(transaction_to_dict(txn))

        stream = self._stream or sys.stdout
        json.dump(rows, stream, indent=2, ensure_ascii=False)
        stream.write("\n")
        summary.sent = len(rows)
        return summary
