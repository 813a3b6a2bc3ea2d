"""YNAB writer: account lookup, import ids and the batch write."""

from budgetsync.writers.ynab.accounts import resolve_account_id
from budgetsync.writers.ynab.import_id import (
    ImportIdMaker,
    ImportIdVersion,
    import_id_v1,
    import_id_v2,
)
from budgetsync.writers.ynab.writer import YNABWriter

__all__ = [
    "YNABWriter",
    "resolve_account_id",
    # Import ids
    "ImportIdMaker",
    "ImportIdVersion",
    "import_id_v1",
    "import_id_v2",
]
