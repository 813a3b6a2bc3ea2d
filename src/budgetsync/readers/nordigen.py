from __future__ import annotations

from collections.abc import Sequence

import loguru
from loguru import logger

from budgetsync.core.config import NordigenConfig
from budgetsync.infra.clients.nordigen import NordigenClient
from budgetsync.models.transaction import Account, SourceRecord


class NordigenReaderLogger:
    """Handles all logging for NordigenReader."""

    def __init__(self, logger_instance: loguru.Logger = logger) -> None:
        self._logger = logger_instance

    def fetch_start(self, account_id: str) -> None:
        self._logger.bind(account_id=account_id).info(
            "Reading transactions for account {}", account_id
        )

    def fetch_complete(self, account: Account, count: int) -> None:
        self._logger.bind(iban=account.iban, count=count).info(
            "Read {} booked transaction(s) from {}", count, account.name
        )


class NordigenReader:
    """Reads booked transactions for every configured Nordigen account."""

    name = "nordigen"

    def __init__(
        self,
        client: NordigenClient,
        account_ids: Sequence[str],
        *,
        reader_logger: NordigenReaderLogger | None = None,
    ) -> None:
        self._client = client
        self._account_ids = list(account_ids)
        self._logger = reader_logger or NordigenReaderLogger()

    @classmethod
    def from_config(cls, config: NordigenConfig) -> NordigenReader:
        client = NordigenClient(
            access_token=config.access_token, base_url=config.base_url
        )
        return cls(client, config.account_ids)

    def bulk(self) -> list[SourceRecord]:
        """Read every account fully. The first failure aborts the read.

        Raises:
            NordigenClientError: If any account or transaction request fails.
        """
        records: list[SourceRecord] = []
        for account_id in self._account_ids:
            self._logger.fetch_start(account_id)
            account = self._client.get_account(account_id)
            transactions = self._client.get_transactions(account_id)
            records.extend(SourceRecord(account=account, raw=raw) for raw in transactions)
            self._logger.fetch_complete(account, len(transactions))
        return records
