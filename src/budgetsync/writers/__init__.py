"""Destinations for the transactions read during a run."""

from budgetsync.writers.base import BatchSummary, WriteEvent, Writer

__all__ = ["BatchSummary", "WriteEvent", "Writer"]
