"""Logging for YNAB batch writes."""

from __future__ import annotations

from datetime import date

import loguru
from loguru import logger

from budgetsync.infra.clients.ynab import YNABTransaction, YNABTransactionsPayload


class YNABWriterLogger:
    """Handles all logging for YNABWriter with business logic separated."""

    def __init__(self, logger_instance: loguru.Logger = logger) -> None:
        self._logger = logger_instance

    def truncated(
        self, field: str, account_name: str, txn_date: date, max_size: int
    ) -> None:
        """Log a memo or payee cut down to YNAB's field size."""
        self._logger.bind(
            field=field, account=account_name, date=txn_date.isoformat()
        ).warning(
            "{} on account {} on date {} is too long - truncated to {} characters",
            field.capitalize(),
            account_name,
            txn_date.isoformat(),
            max_size,
        )

    def skipped(self, account_name: str, txn_date: date, from_date: date) -> None:
        self._logger.bind(account=account_name, date=txn_date.isoformat()).debug(
            "Skipping transaction on {} dated {} (before {})",
            account_name,
            txn_date.isoformat(),
            from_date.isoformat(),
        )

    def failed(self, account_name: str, error: Exception) -> None:
        """Log a transaction dropped from the batch."""
        self._logger.bind(account=account_name, error=str(error)).warning(
            "Failed to parse transaction on {}: {}", account_name, error
        )

    def nothing_to_write(self) -> None:
        self._logger.info("No transactions to write")

    def request(self, budget_id: str, transactions: list[YNABTransaction]) -> None:
        """Log the outgoing batch. The serialized payload is built only at DEBUG."""
        payload = YNABTransactionsPayload(transactions=transactions)
        self._logger.bind(budget_id=budget_id, count=len(transactions)).opt(
            lazy=True
        ).debug(
            "Sending {} transaction(s) to YNAB budget {}: {}",
            lambda: len(transactions),
            lambda: budget_id,
            payload.model_dump_json,
        )

    def response(self, budget_id: str, body: str) -> None:
        self._logger.bind(budget_id=budget_id).debug("YNAB responded: {}", body)

    def write_complete(self, sent: int, skipped: int, failed: int) -> None:
        """Log summary of a successful batch write."""
        self._logger.bind(sent=sent, skipped=skipped, failed=failed).info(
            "Successfully sent {} transaction(s) to YNAB. "
            "{} got skipped and {} failed.",
            sent,
            skipped,
            failed,
        )
