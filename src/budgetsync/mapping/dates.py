"""Resolve a transaction date from the aggregator's date signals."""

from __future__ import annotations

from datetime import date, datetime
import re

from budgetsync.errors import NoDateError
from budgetsync.models.transaction import RawTransaction

_ISO_FORMAT = "%Y-%m-%d"
_REMITTANCE_FORMAT = "%Y.%m.%d"
_REMITTANCE_DATE = re.compile(r"^\d{4}\.\d{2}\.\d{2}")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _parse(value: str, fmt: str) -> date | None:
    if fmt == _ISO_FORMAT and not _ISO_DATE.match(value):
        return None
    try:
        return datetime.strptime(value, fmt).date()
    except ValueError:
        return None


def remittance_date(remittance: str) -> date | None:
    """Return the ``YYYY.MM.DD`` date leading the remittance text, if any."""
    match = _REMITTANCE_DATE.search(remittance)
    if match is None:
        return None
    return _parse(match.group(0), _REMITTANCE_FORMAT)


def resolve_date(value_date: str, booking_date: str, remittance: str) -> date:
    """Return the earliest date among the parsable signals.

    Value and booking dates lag the purchase at some banks, while others put
    the real date at the start of the remittance text.

    Raises:
        NoDateError: If none of the three signals can be parsed.
    """
    candidates = [
        parsed
        for parsed in (
            remittance_date(remittance),
            _parse(value_date, _ISO_FORMAT),
            _parse(booking_date, _ISO_FORMAT),
        )
        if parsed is not None
    ]
    if not candidates:
        raise NoDateError(
            "failed to parse any dates "
            f"(value={value_date!r}, booking={booking_date!r})"
        )
    return min(candidates)


def resolve_transaction_date(raw: RawTransaction) -> date:
    return resolve_date(
        raw.value_date, raw.booking_date, raw.remittance_information_unstructured
    )
