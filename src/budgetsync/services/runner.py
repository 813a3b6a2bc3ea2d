"""Three-phase run: read everything, then hand it all to each writer."""

from __future__ import annotations

from collections.abc import Callable, Sequence
import time

import loguru
from loguru import logger

from budgetsync.errors import BudgetSyncError, TransportError
from budgetsync.models.transaction import SourceRecord
from budgetsync.readers.base import Reader
from budgetsync.writers.base import BatchSummary, Writer


class RunError(BudgetSyncError):
    """A run stopped before completing."""


class ReadError(RunError):
    """A reader failed; nothing was written."""


class WriteError(RunError):
    """A writer failed to deliver its batch."""


class RunnerLogger:
    """Handles all logging for the run loop."""

    def __init__(self, logger_instance: loguru.Logger = logger) -> None:
        self._logger = logger_instance

    def read_complete(self, reader: str, count: int) -> None:
        self._logger.bind(reader=reader, count=count).info(
            "Reader {} returned {} transaction(s)", reader, count
        )

    def run_succeeded(self, summaries: Sequence[BatchSummary]) -> None:
        for summary in summaries:
            self._logger.bind(
                writer=summary.writer,
                sent=summary.sent,
                skipped=summary.skipped,
                failed=summary.failed,
            ).info(
                "Run succeeded for {}: {} sent, {} skipped, {} failed",
                summary.writer,
                summary.sent,
                summary.skipped,
                summary.failed,
            )

    def run_failed(self, error: Exception, interval: float) -> None:
        self._logger.bind(error=str(error)).error(
            "Run failed: {} (retrying in {}s)", error, interval
        )


def run(
    readers: Sequence[Reader],
    writers: Sequence[Writer],
    *,
    runner_logger: RunnerLogger | None = None,
) -> list[BatchSummary]:
    """Read all readers, then write the combined records with every writer.

    A failing reader aborts the run before any writer is called.

    Raises:
        ReadError: If a reader fails.
        WriteError: If a writer fails to deliver its batch.
    """
    log = runner_logger or RunnerLogger()

    records: list[SourceRecord] = []
    for reader in readers:
        try:
            read = reader.bulk()
        except TransportError as e:
            raise ReadError(f"reading from {reader.name}: {e}") from e
        log.read_complete(reader.name, len(read))
        records.extend(read)

    summaries: list[BatchSummary] = []
    for writer in writers:
        try:
            summaries.append(writer.bulk(records))
        except TransportError as e:
            raise WriteError(f"writing to {writer.name}: {e}") from e

    log.run_succeeded(summaries)
    return summaries


def run_forever(
    readers: Sequence[Reader],
    writers: Sequence[Writer],
    *,
    interval: float,
    max_runs: int | None = None,
    sleep: Callable[[float], None] = time.sleep,
    runner_logger: RunnerLogger | None = None,
) -> None:
    """Repeat ``run`` every ``interval`` seconds.

    A failed run is logged and the loop carries on. ``max_runs`` bounds the
    loop (None runs until interrupted).
    """
    log = runner_logger or RunnerLogger()
    runs = 0
    while max_runs is None or runs < max_runs:
        try:
            run(readers, writers, runner_logger=log)
        except RunError as e:
            log.run_failed(e, interval)
        runs += 1
        if max_runs is None or runs < max_runs:
            sleep(interval)
