from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
import re

from budgetsync.core.config import MappingConfig
from budgetsync.errors import ConfigError, MappingError
from budgetsync.infra.clients.ynab import (
    MAX_MEMO_SIZE,
    MAX_PAYEE_SIZE,
    YNABClient,
    YNABTransaction,
)
from budgetsync.mapping.mapper import TransactionMapper, mapper_for_bank
from budgetsync.models.transaction import (
    CanonicalTransaction,
    SourceRecord,
    format_milliunits,
)
from budgetsync.writers.base import BatchSummary, WriteEvent
from budgetsync.writers.ynab.accounts import resolve_account_id
from budgetsync.writers.ynab.import_id import ImportIdMaker
from budgetsync.writers.ynab.logger import YNABWriterLogger

_WHITESPACE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def truncate(text: str, max_size: int) -> tuple[str, bool]:
    """Cut ``text`` when it is longer than ``max_size``.

    The cut keeps ``max_size - 1`` characters. Payees and memos already in
    YNAB were cut at that length, so the boundary stays where it is.
    """
    if len(text) > max_size:
        return text[: max_size - 1], True
    return text, False


@dataclass
class _Batch:
    transactions: list[YNABTransaction] = field(default_factory=list)
    skipped: int = 0
    failed: int = 0
    events: list[WriteEvent] = field(default_factory=list)


class YNABWriter:
    """
    Sends every transaction of a run to YNAB in one bulk create request.

    Records that cannot be mapped are logged, counted as failed and left out;
    the rest of the batch still goes through. The request itself is all or
    nothing.
    """

    name = "ynab"

    def __init__(
        self,
        config: MappingConfig,
        *,
        client: YNABClient | None = None,
        mapper: TransactionMapper | None = None,
        writer_logger: YNABWriterLogger | None = None,
    ) -> None:
        """
        Initialize the writer.

        Args:
            config: Mapping and destination configuration for this run
            client: YNAB client (built from config when omitted)
            mapper: Transaction mapper (selected by config.bank_id when omitted)
            writer_logger: Logger for batch events
        """
        self._config = config
        self._client = client or YNABClient(
            token=config.token, base_url=config.base_url
        )
        self._mapper = mapper or mapper_for_bank(config)
        self._import_ids = ImportIdMaker.from_config(config)
        self._logger = writer_logger or YNABWriterLogger()

    def bulk(self, records: Iterable[SourceRecord]) -> BatchSummary:
        """Map raw records and write them as one batch."""
        batch = _Batch()
        for record in records:
            try:
                txn = self._mapper.map(record.account, record.raw)
            except (MappingError, ConfigError) as e:
                self._fail(batch, record.account.name, None, e)
                continue
            self._add(batch, txn)
        return self._send(batch)

    def write(self, transactions: Iterable[CanonicalTransaction]) -> BatchSummary:
        """Write already-mapped transactions as one batch."""
        batch = _Batch()
        for txn in transactions:
            self._add(batch, txn)
        return self._send(batch)

    def to_ynab(
        self, txn: CanonicalTransaction
    ) -> tuple[YNABTransaction, list[WriteEvent]]:
        """Build the YNAB transaction for ``txn``.

        Raises:
            UnknownAccountError: If the IBAN has no configured YNAB account.
        """
        account_id = resolve_account_id(txn.account.iban, self._config.account_map)
        events: list[WriteEvent] = []

        memo, memo_cut = truncate(collapse_whitespace(txn.memo), MAX_MEMO_SIZE)
        if memo_cut:
            events.append(self._truncated(txn, "memo", MAX_MEMO_SIZE))

        payee, payee_cut = truncate(collapse_whitespace(txn.payee), MAX_PAYEE_SIZE)
        if payee_cut:
            events.append(self._truncated(txn, "payee", MAX_PAYEE_SIZE))

        if txn.account.iban in self._config.swap_flow:
            txn = txn.negated()

        ynab_txn = YNABTransaction(
            account_id=account_id,
            date=txn.date.isoformat(),
            amount=format_milliunits(txn.amount),
            payee_name=payee,
            memo=memo,
            import_id=self._import_ids.make(txn),
            cleared=self._config.cleared,
            approved=False,
        )
        return ynab_txn, events

    def _truncated(
        self, txn: CanonicalTransaction, field_name: str, max_size: int
    ) -> WriteEvent:
        self._logger.truncated(field_name, txn.account.name, txn.date, max_size)
        return WriteEvent(
            kind="truncated",
            account=txn.account.name,
            date=txn.date,
            detail=f"{field_name} truncated to {max_size} characters",
        )

    def _fail(
        self, batch: _Batch, account_name: str, txn_date: date | None, error: Exception
    ) -> None:
        self._logger.failed(account_name, error)
        batch.failed += 1
        batch.events.append(
            WriteEvent(
                kind="failed", account=account_name, date=txn_date, detail=str(error)
            )
        )

    def _add(self, batch: _Batch, txn: CanonicalTransaction) -> None:
        if txn.date < self._config.from_date:
            self._logger.skipped(txn.account.name, txn.date, self._config.from_date)
            batch.skipped += 1
            batch.events.append(
                WriteEvent(
                    kind="skipped",
                    account=txn.account.name,
                    date=txn.date,
                    detail=f"before {self._config.from_date.isoformat()}",
                )
            )
            return

        try:
            ynab_txn, events = self.to_ynab(txn)
        except (MappingError, ConfigError) as e:
            self._fail(batch, txn.account.name, txn.date, e)
            return
        batch.transactions.append(ynab_txn)
        batch.events.extend(events)

    def _send(self, batch: _Batch) -> BatchSummary:
        summary = BatchSummary(
            writer=self.name,
            skipped=batch.skipped,
            failed=batch.failed,
            events=batch.events,
        )
        if not batch.transactions:
            self._logger.nothing_to_write()
            return summary

        self._logger.request(self._config.budget_id, batch.transactions)
        body = self._client.create_transactions(
            self._config.budget_id, batch.transactions
        )
        self._logger.response(self._config.budget_id, body)

        summary.sent = len(batch.transactions)
        self._logger.write_complete(summary.sent, summary.skipped, summary.failed)
        return summary
