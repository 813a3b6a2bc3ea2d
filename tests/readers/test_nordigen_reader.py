from __future__ import annotations

import pytest

from budgetsync.infra.clients.nordigen import NordigenClientError
from budgetsync.models.transaction import Account, RawTransaction
from budgetsync.readers.nordigen import NordigenReader


class MockNordigenClient:
    """Mock NordigenClient for testing."""

    def __init__(
        self,
        *,
        transactions: dict[str, list[RawTransaction]],
        fail_on: str | None = None,
    ) -> None:
        self._transactions = transactions
        self._fail_on = fail_on
        self.requested: list[str] = []

    def get_account(self, account_id: str) -> Account:
        return Account(iban=f"IBAN-{account_id}", name=f"Account {account_id}")

    def get_transactions(self, account_id: str) -> list[RawTransaction]:
        self.requested.append(account_id)
        if account_id == self._fail_on:
            raise NordigenClientError("Nordigen API error (500): boom")
        return self._transactions[account_id]


class TestNordigenReader:
    def test_reads_all_accounts(self) -> None:
        client = MockNordigenClient(
            transactions={
                "a": [RawTransaction(amount="1"), RawTransaction(amount="2")],
                "b": [RawTransaction(amount="3")],
            }
        )
        reader = NordigenReader(client, ["a", "b"])  # type: ignore[arg-type]

        records = reader.bulk()

        assert [r.raw.amount for r in records] == ["1", "2", "3"]
        assert records[0].account == Account(iban="IBAN-a", name="Account a")
        assert records[2].account.iban == "IBAN-b"

    def test_failure_aborts_read(self) -> None:
        client = MockNordigenClient(
            transactions={"a": [RawTransaction(amount="1")], "c": []},
            fail_on="b",
        )
        reader = NordigenReader(client, ["a", "b", "c"])  # type: ignore[arg-type]

        with pytest.raises(NordigenClientError):
            reader.bulk()

        assert client.requested == ["a", "b"]
