"""Exception hierarchy shared across readers, mappers and writers.

Three families matter to callers:

- ``ConfigError``: an invalid configuration choice. Fatal at startup.
- ``MappingError``: a single transaction could not be mapped. Writers log,
  count and drop the record, then carry on with the batch.
- ``TransportError``: talking to the aggregator or the budgeting API failed.
  Fails the whole run.
"""

from __future__ import annotations


class BudgetSyncError(Exception):
    """Base error for budgetsync failures."""


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigError(BudgetSyncError):
    """Missing or invalid configuration."""


class UnknownPayeeSourceError(ConfigError):
    """A payee source tag is not one of the supported sources."""


class UnknownTransactionIdFieldError(ConfigError):
    """The configured transaction identifier field is not supported."""


# ---------------------------------------------------------------------------
# Per-record mapping
# ---------------------------------------------------------------------------


class MappingError(BudgetSyncError):
    """A single transaction could not be mapped."""


class AmountParseError(MappingError):
    """The transaction amount is not a finite decimal number."""


class NoDateError(MappingError):
    """None of the date signals on a transaction could be parsed."""


class UnknownAccountError(MappingError):
    """No destination account is configured for a source IBAN."""


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


class TransportError(BudgetSyncError):
    """Talking to an external service failed."""
