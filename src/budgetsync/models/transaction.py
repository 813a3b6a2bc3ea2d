from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from pydantic import BaseModel, ConfigDict

from budgetsync.errors import AmountParseError

_MILLIUNITS_PER_UNIT = Decimal(1000)


@dataclass(frozen=True, slots=True)
class Account:
    """A source bank account, keyed by IBAN."""

    iban: str
    name: str


class RawTransaction(BaseModel):
    """
    Aggregator-native transaction, flattened from the Nordigen payload.

    Note: Fields mirror what the aggregator returns and are only consumed by
    the mappers. Missing text fields default to the empty string.
    """

    model_config = ConfigDict(frozen=True)

    transaction_id: str = ""
    internal_transaction_id: str = ""
    booking_date: str = ""
    value_date: str = ""
    amount: str
    currency: str = ""
    remittance_information_unstructured: str = ""
    debtor_name: str = ""
    creditor_name: str = ""
    additional_information: str = ""


@dataclass(frozen=True, slots=True)
class SourceRecord:
    """A raw transaction together with the account it was read from."""

    account: Account
    raw: RawTransaction


@dataclass(frozen=True, slots=True)
class CanonicalTransaction:
    """Bank transaction normalized for the budgeting backend.

    Amounts are signed milliunits (1/1000 of the major currency unit).
    """

    account: Account
    id: str
    date: date
    payee: str
    memo: str
    amount: int

    def negated(self) -> CanonicalTransaction:
        return replace(self, amount=-self.amount)


def milliunits_from_amount(amount: str) -> int:
    """Convert a decimal amount string (e.g. ``"-123.45"``) to milliunits.

    Fractions of a milliunit round half away from zero.

    Raises:
        AmountParseError: If the string is not a finite decimal number.
    """
    try:
        value = Decimal(amount.strip())
    except (InvalidOperation, AttributeError) as e:
        raise AmountParseError(f"failed to convert {amount!r} to a number") from e
    if not value.is_finite():
        raise AmountParseError(f"failed to convert {amount!r} to a number")

    milliunits = (value * _MILLIUNITS_PER_UNIT).to_integral_value(ROUND_HALF_UP)
    return int(milliunits)


def format_milliunits(milliunits: int) -> str:
    return str(milliunits)
