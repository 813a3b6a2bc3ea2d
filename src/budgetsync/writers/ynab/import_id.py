"""Versioned YNAB import ids.

YNAB refuses a transaction whose ``import_id`` it has already seen on the
account, which is the only thing keeping repeated runs from importing the same
bank transaction twice. An import id must therefore never change for a
transaction once it has been sent.

Generators are kept in an append-only table of ``(cutover, generator)`` pairs,
newest first. A transaction uses the first generator whose cutover is on or
before the transaction's own date, so older transactions keep the scheme they
were first imported with. New versions go at the top of the table. The table
is checked in the order given, never by cutover date, so a newer version wins
from its cutover on even if an older cutover is configured later.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
import hashlib

from budgetsync.core.config import MappingConfig
from budgetsync.models.transaction import CanonicalTransaction, format_milliunits

IMPORT_ID_PREFIX = "YBBR"
IMPORT_ID_V2_LENGTH = 32

ImportIdGenerator = Callable[[CanonicalTransaction], str]


def import_id_v1(txn: CanonicalTransaction) -> str:
    """Memo, amount and date. Collides across accounts with identical rows."""
    digest = hashlib.sha256(txn.memo.encode("utf-8")).digest()
    amount = format_milliunits(txn.amount)
    return f"{IMPORT_ID_PREFIX}:{amount}:{txn.date.isoformat()}:{digest[:2].hex()}"


def import_id_v2(txn: CanonicalTransaction) -> str:
    """Account IBAN, transaction id, date and amount, in that order."""
    seed = "".join(
        (
            txn.account.iban,
            txn.id,
            txn.date.isoformat(),
            format_milliunits(txn.amount),
        )
    )
    digest = hashlib.sha256(seed.encode("utf-8")).hexdigest()
    return f"{IMPORT_ID_PREFIX}:{digest}"[:IMPORT_ID_V2_LENGTH]


@dataclass(frozen=True, slots=True)
class ImportIdVersion:
    name: str
    cutover: date
    generate: ImportIdGenerator


class ImportIdMaker:
    """Picks the import id generator for a transaction by its date."""

    def __init__(
        self,
        versions: list[ImportIdVersion],
        *,
        fallback: ImportIdGenerator = import_id_v1,
    ) -> None:
        self._versions = list(versions)
        self._fallback = fallback

    @classmethod
    def from_config(cls, config: MappingConfig) -> ImportIdMaker:
        return cls(
            [
                ImportIdVersion("v2", config.import_id_v2, import_id_v2),
                ImportIdVersion("v1", config.import_id_v1, import_id_v1),
            ]
        )

    def _version_for(self, txn_date: date) -> ImportIdVersion | None:
        for version in self._versions:
            if txn_date >= version.cutover:
                return version
        return None

    def version_for(self, txn_date: date) -> str | None:
        """Name of the version used for ``txn_date``, None for the fallback."""
        version = self._version_for(txn_date)
        return version.name if version else None

    def make(self, txn: CanonicalTransaction) -> str:
        version = self._version_for(txn.date)
        if version is None:
            return self._fallback(txn)
        return version.generate(txn)
