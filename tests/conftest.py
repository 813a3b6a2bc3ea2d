"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from typing import Any

import pytest

from budgetsync.core.config import (
    ClearedStatus,
    MappingConfig,
    PayeeSource,
    TransactionIdField,
)
from budgetsync.infra.clients.ynab import YNABClientError, YNABTransaction
from budgetsync.models.transaction import Account, RawTransaction, SourceRecord

DK_ACCOUNT = Account(iban="DK001", name="Checking")


def make_raw(**overrides: Any) -> RawTransaction:
    """Create a raw Nordigen transaction with sensible defaults."""
    fields: dict[str, Any] = {
        "transaction_id": "txn-1",
        "internal_transaction_id": "abc123",
        "booking_date": "2023-05-02",
        "value_date": "2023-05-01",
        "amount": "-123.45",
        "currency": "DKK",
        "remittance_information_unstructured": "2023.04.29 Shop",
        "debtor_name": "",
        "creditor_name": "",
        "additional_information": "",
    }
    fields.update(overrides)
    return RawTransaction(**fields)


def make_config(**overrides: Any) -> MappingConfig:
    fields: dict[str, Any] = {
        "budget_id": "budget-1",
        "token": "secret-token",
        "account_map": {"DK001": "acct-1"},
        "payee_source": (PayeeSource.NAME,),
        "transaction_id": TransactionIdField.INTERNAL_TRANSACTION_ID,
        "from_date": date(2023, 1, 1),
        "import_id_v1": date(2022, 12, 1),
        "import_id_v2": date(2023, 6, 1),
        "cleared": ClearedStatus.CLEARED,
    }
    fields.update(overrides)
    return MappingConfig(**fields)


class FakeYNABClient:
    """Records create_transactions calls instead of sending them."""

    def __init__(self, *, error: YNABClientError | None = None) -> None:
        self._error = error
        self.calls: list[tuple[str, list[YNABTransaction]]] = []

    def create_transactions(
        self, budget_id: str, transactions: list[YNABTransaction]
    ) -> str:
        self.calls.append((budget_id, list(transactions)))
        if self._error is not None:
            raise self._error
        return '{"data": {"transaction_ids": []}}'


@pytest.fixture
def account() -> Account:
    return DK_ACCOUNT


@pytest.fixture
def config() -> MappingConfig:
    return make_config()


@pytest.fixture
def raw_factory() -> Callable[..., RawTransaction]:
    return make_raw


@pytest.fixture
def record_factory() -> Callable[..., SourceRecord]:
    def _make(account: Account = DK_ACCOUNT, **overrides: Any) -> SourceRecord:
        return SourceRecord(account=account, raw=make_raw(**overrides))

    return _make


@pytest.fixture
def ynab_client() -> FakeYNABClient:
    return FakeYNABClient()


@pytest.fixture
def failing_ynab_client() -> FakeYNABClient:
    return FakeYNABClient(
        error=YNABClientError("failed to send request: 400 Bad Request")
    )


@pytest.fixture
def config_factory() -> Callable[..., MappingConfig]:
    return make_config
