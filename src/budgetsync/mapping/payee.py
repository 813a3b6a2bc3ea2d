"""Pick a payee name from the transaction fields, in configured order."""

from __future__ import annotations

from collections.abc import Sequence
import re

from budgetsync.core.config import PayeeSource
from budgetsync.errors import UnknownPayeeSourceError
from budgetsync.models.transaction import RawTransaction

_NON_LETTERS = re.compile(r"[^\W\d_]+")


def strip_non_alphanumeric(text: str) -> str:
    """Replace every run of non-letters with one space and trim.

    Digits go too: some banks embed amounts and dates in the remittance text,
    which would otherwise create a new payee per transaction.
    """
    return " ".join(_NON_LETTERS.findall(text))


def _name_payee(raw: RawTransaction, amount: int) -> str:
    # Inflows come from the debtor, outflows go to the creditor.
    if amount > 0:
        return raw.debtor_name or raw.creditor_name
    return raw.creditor_name or raw.debtor_name


def payee_from_source(
    source: PayeeSource | str, raw: RawTransaction, amount: int
) -> str:
    """Return the payee one source yields, possibly empty.

    Raises:
        UnknownPayeeSourceError: If ``source`` is not a known tag.
    """
    try:
        tag = PayeeSource(source)
    except ValueError as e:
        raise UnknownPayeeSourceError(f"unrecognized PayeeSource: {source!r}") from e

    if tag is PayeeSource.UNSTRUCTURED:
        return strip_non_alphanumeric(raw.remittance_information_unstructured)
    if tag is PayeeSource.NAME:
        return _name_payee(raw, amount)
    return raw.additional_information


def resolve_payee(
    sources: Sequence[PayeeSource | str], raw: RawTransaction, amount: int
) -> str:
    """Return the first non-empty payee from ``sources``.

    An empty string is a valid result when no source yields anything.
    """
    for source in sources:
        payee = payee_from_source(source, raw, amount)
        if payee:
            return payee
    return ""
