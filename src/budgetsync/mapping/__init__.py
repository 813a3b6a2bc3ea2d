"""Aggregator-to-canonical transaction mapping."""

from budgetsync.mapping.dates import resolve_date, resolve_transaction_date
from budgetsync.mapping.mapper import (
    DefaultMapper,
    NordeaMapper,
    TransactionMapper,
    mapper_for_bank,
    register_bank_mapper,
)
from budgetsync.mapping.payee import resolve_payee, strip_non_alphanumeric

__all__ = [
    # Mappers
    "TransactionMapper",
    "DefaultMapper",
    "NordeaMapper",
    "mapper_for_bank",
    "register_bank_mapper",
    # Field resolution
    "resolve_date",
    "resolve_transaction_date",
    "resolve_payee",
    "strip_non_alphanumeric",
]
