from __future__ import annotations

from datetime import date
import os
import sys

from dotenv import load_dotenv
from loguru import logger
import typer

from budgetsync.core.config import (
    load_mapping_config_from_env,
    load_nordigen_config_from_env,
)
from budgetsync.errors import BudgetSyncError
from budgetsync.mapping.mapper import mapper_for_bank
from budgetsync.models.transaction import Account, CanonicalTransaction
from budgetsync.readers.nordigen import NordigenReader
from budgetsync.services.runner import run, run_forever
from budgetsync.writers.base import Writer
from budgetsync.writers.json_writer import JSONWriter
from budgetsync.writers.ynab.import_id import (
    ImportIdMaker,
    ImportIdVersion,
    import_id_v1,
    import_id_v2,
)
from budgetsync.writers.ynab.writer import YNABWriter

# Load environment variables from .env
load_dotenv()

app = typer.Typer(
    help="budgetsync: import Nordigen bank transactions into YNAB.",
    no_args_is_help=True,
)


def configure_logging(*, debug: bool = False) -> None:
    level = "DEBUG" if debug else os.environ.get("BUDGETSYNC_LOG_LEVEL", "INFO")
    logger.remove()
    logger.add(
        sys.stderr,
        format="{time:YYYY-MM-DD HH:mm:ss} [{level}] {name}: {message}",
        level=level.upper(),
    )


@app.command("run")
def run_cmd(
    writers: list[str] = typer.Option(  # noqa: B008
        ["ynab"], "--writer", help="Writer to send transactions to (ynab, json)"
    ),
    interval: float = typer.Option(
        0, help="Seconds between runs; 0 runs once and exits"
    ),
    debug: bool = typer.Option(False, help="Enable debug logging"),
) -> None:
    """Read transactions from Nordigen and write them to every writer."""
    configure_logging(debug=debug)

    try:
        config = load_mapping_config_from_env()
        reader = NordigenReader.from_config(load_nordigen_config_from_env())
    except BudgetSyncError as e:
        logger.error("Invalid configuration: {}", e)
        raise typer.Exit(code=2) from e

    selected: list[Writer] = []
    for name in writers:
        if name == "ynab":
            selected.append(YNABWriter(config))
        elif name == "json":
            selected.append(JSONWriter(mapper_for_bank(config)))
        else:
            logger.error("Unknown writer: {}", name)
            raise typer.Exit(code=2)

    if interval > 0:
        run_forever([reader], selected, interval=interval)
        return

    try:
        run([reader], selected)
    except BudgetSyncError as e:
        logger.error("Run failed: {}", e)
        raise typer.Exit(code=1) from e


def _iso_date(value: str, option: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise typer.BadParameter(
            f"{value!r} is not a YYYY-MM-DD date", param_hint=option
        ) from e


@app.command("import-id")
def import_id_cmd(
    iban: str = typer.Option(..., help="Source account IBAN"),
    transaction_id: str = typer.Option(..., "--id", help="Raw transaction id"),
    txn_date: str = typer.Option(..., "--date", help="Transaction date YYYY-MM-DD"),
    amount: int = typer.Option(..., help="Amount in milliunits"),
    memo: str = typer.Option("", help="Transaction memo"),
    v1: str = typer.Option("2022-12-01", help="V1 cutover date"),
    v2: str = typer.Option("2023-06-01", help="V2 cutover date"),
) -> None:
    """Print the import id YNAB would receive for a transaction."""
    txn = CanonicalTransaction(
        account=Account(iban=iban, name=iban),
        id=transaction_id,
        date=_iso_date(txn_date, "--date"),
        payee="",
        memo=memo,
        amount=amount,
    )
    maker = ImportIdMaker(
        [
            ImportIdVersion("v2", _iso_date(v2, "--v2"), import_id_v2),
            ImportIdVersion("v1", _iso_date(v1, "--v1"), import_id_v1),
        ]
    )
    version = maker.version_for(txn.date) or "v1"
    typer.echo(f"{maker.make(txn)} ({version})")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
