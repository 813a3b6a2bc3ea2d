"""Transaction mappers, selected once per run by bank identity.

Every bank uses ``DefaultMapper`` unless a bank-specific mapper has been
registered for its aggregator bank id. Bank-specific mappers ignore the payee
and identifier configuration and apply fixed rules instead.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from budgetsync.core.config import MappingConfig, PayeeSource, TransactionIdField
from budgetsync.errors import UnknownTransactionIdFieldError
from budgetsync.mapping.dates import resolve_transaction_date
from budgetsync.mapping.payee import resolve_payee, strip_non_alphanumeric
from budgetsync.models.transaction import (
    Account,
    CanonicalTransaction,
    RawTransaction,
    milliunits_from_amount,
)

MapperFactory = Callable[[MappingConfig], "TransactionMapper"]


@runtime_checkable
class TransactionMapper(Protocol):
    """Turns one aggregator transaction into a canonical transaction."""

    def map(self, account: Account, raw: RawTransaction) -> CanonicalTransaction:
        """Map ``raw`` read from ``account``.

        Raises:
            MappingError: If the amount or date cannot be parsed.
            ConfigError: If a configured choice is not recognized.
        """
        ...


@dataclass(frozen=True, slots=True)
class DefaultMapper:
    """Mapping for all banks unless a more specific mapper exists."""

    payee_source: Sequence[PayeeSource | str]
    transaction_id: TransactionIdField | str

    def _transaction_id(self, raw: RawTransaction) -> str:
        try:
            field = TransactionIdField(self.transaction_id)
        except ValueError as e:
            raise UnknownTransactionIdFieldError(
                f"unrecognized TransactionID: {self.transaction_id!r}"
            ) from e
        if field is TransactionIdField.INTERNAL_TRANSACTION_ID:
            return raw.internal_transaction_id
        return raw.transaction_id

    def map(self, account: Account, raw: RawTransaction) -> CanonicalTransaction:
        amount = milliunits_from_amount(raw.amount)
        return CanonicalTransaction(
            account=account,
            id=self._transaction_id(raw),
            date=resolve_transaction_date(raw),
            payee=resolve_payee(self.payee_source, raw, amount),
            memo=raw.remittance_information_unstructured,
            amount=amount,
        )


@dataclass(frozen=True, slots=True)
class NordeaMapper:
    """Nordea puts the merchant in the remittance text and ids internally."""

    def map(self, account: Account, raw: RawTransaction) -> CanonicalTransaction:
        amount = milliunits_from_amount(raw.amount)
        return CanonicalTransaction(
            account=account,
            id=raw.internal_transaction_id,
            date=resolve_transaction_date(raw),
            payee=strip_non_alphanumeric(raw.remittance_information_unstructured),
            memo=raw.remittance_information_unstructured,
            amount=amount,
        )


def _default_factory(config: MappingConfig) -> TransactionMapper:
    return DefaultMapper(
        payee_source=config.payee_source,
        transaction_id=config.transaction_id,
    )


_BANK_MAPPERS: dict[str, MapperFactory] = {
    "NORDEA_NDEADKKK": lambda _config: NordeaMapper(),
}


def register_bank_mapper(bank_id: str, factory: MapperFactory) -> None:
    """Register a bank-specific mapper factory for an aggregator bank id."""
    _BANK_MAPPERS[bank_id] = factory


def mapper_for_bank(config: MappingConfig) -> TransactionMapper:
    """Return the mapper for ``config.bank_id``, falling back to the default."""
    factory = _BANK_MAPPERS.get(config.bank_id, _default_factory)
    return factory(config)
