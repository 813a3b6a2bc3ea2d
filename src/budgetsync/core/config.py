from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
import json
import os

from budgetsync.errors import (
    ConfigError,
    UnknownPayeeSourceError,
    UnknownTransactionIdFieldError,
)

DEFAULT_YNAB_BASE_URL = "https://api.youneedabudget.com/v1"
DEFAULT_NORDIGEN_BASE_URL = "https://bankaccountdata.gocardless.com"


class PayeeSource(StrEnum):
    UNSTRUCTURED = "unstructured"
    NAME = "name"
    ADDITIONAL = "additional"


class TransactionIdField(StrEnum):
    INTERNAL_TRANSACTION_ID = "InternalTransactionId"
    TRANSACTION_ID = "TransactionId"


class ClearedStatus(StrEnum):
    CLEARED = "cleared"
    UNCLEARED = "uncleared"
    RECONCILED = "reconciled"


@dataclass(frozen=True, slots=True)
class MappingConfig:
    """Per-run mapping and destination configuration. Read-only."""

    budget_id: str
    token: str
    account_map: Mapping[str, str]
    bank_id: str = ""
    payee_source: tuple[PayeeSource, ...] = (PayeeSource.NAME, PayeeSource.UNSTRUCTURED)
    transaction_id: TransactionIdField = TransactionIdField.TRANSACTION_ID
    swap_flow: frozenset[str] = field(default_factory=frozenset)
    from_date: date = date(2000, 1, 1)
    import_id_v1: date = date(2022, 12, 1)
    import_id_v2: date = date(2023, 6, 1)
    cleared: ClearedStatus = ClearedStatus.UNCLEARED
    base_url: str = DEFAULT_YNAB_BASE_URL


@dataclass(frozen=True, slots=True)
class NordigenConfig:
    """Access details for the aggregator reader."""

    access_token: str
    account_ids: tuple[str, ...]
    base_url: str = DEFAULT_NORDIGEN_BASE_URL


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def parse_payee_sources(values: Sequence[str]) -> tuple[PayeeSource, ...]:
    sources: list[PayeeSource] = []
    for value in values:
        try:
            sources.append(PayeeSource(value.strip()))
        except ValueError as e:
            raise UnknownPayeeSourceError(
                f"unrecognized PayeeSource: {value!r}"
            ) from e
    return tuple(sources)


def parse_transaction_id_field(value: str) -> TransactionIdField:
    try:
        return TransactionIdField(value.strip())
    except ValueError as e:
        raise UnknownTransactionIdFieldError(
            f"unrecognized TransactionID: {value!r}"
        ) from e


def parse_cleared_status(value: str) -> ClearedStatus:
    try:
        return ClearedStatus(value.strip().lower())
    except ValueError as e:
        raise ConfigError(
            "YNAB_CLEARED must be one of cleared, uncleared or reconciled"
        ) from e


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _require_env(name: str) -> str:
    value = os.environ.get(name, "").strip()
    if not value:
        raise ConfigError(f"Missing required environment variable: {name}")
    return value


def _date_from_env(name: str, default: date) -> date:
    value = os.environ.get(name, "").strip()
    if not value:
        return default
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be a YYYY-MM-DD date, got {value!r}") from e


def _account_map_from_env(name: str) -> dict[str, str]:
    raw = _require_env(name)
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"{name} must be a JSON object: {e}") from e
    if not isinstance(parsed, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in parsed.items()
    ):
        raise ConfigError(f"{name} must map IBAN strings to account id strings")
    return parsed


# ---------------------------------------------------------------------------
# Loaders
# ---------------------------------------------------------------------------


def load_mapping_config_from_env() -> MappingConfig:
    """Load mapping config from env and validate startup requirements.

    Required env vars: YNAB_BUDGETID, YNAB_TOKEN, YNAB_ACCOUNTMAP.

    Raises:
        ConfigError: If a required variable is missing or a choice is invalid.
    """
    budget_id = _require_env("YNAB_BUDGETID")
    token = _require_env("YNAB_TOKEN")
    account_map = _account_map_from_env("YNAB_ACCOUNTMAP")

    payee_source = parse_payee_sources(
        _split_list(os.environ.get("NORDIGEN_PAYEE_SOURCE", "name,unstructured"))
    )
    if not payee_source:
        raise ConfigError("NORDIGEN_PAYEE_SOURCE must name at least one source")

    return MappingConfig(
        budget_id=budget_id,
        token=token,
        account_map=account_map,
        bank_id=os.environ.get("NORDIGEN_BANKID", "").strip(),
        payee_source=payee_source,
        transaction_id=parse_transaction_id_field(
            os.environ.get("NORDIGEN_TRANSACTION_ID", "TransactionId")
        ),
        swap_flow=frozenset(_split_list(os.environ.get("YNAB_SWAPFLOW", ""))),
        from_date=_date_from_env("YNAB_FROM_DATE", date(2000, 1, 1)),
        import_id_v1=_date_from_env("YNAB_IMPORT_ID_V1", date(2022, 12, 1)),
        import_id_v2=_date_from_env("YNAB_IMPORT_ID_V2", date(2023, 6, 1)),
        cleared=parse_cleared_status(os.environ.get("YNAB_CLEARED", "uncleared")),
        base_url=os.environ.get("YNAB_BASE_URL", DEFAULT_YNAB_BASE_URL).strip(),
    )


def load_nordigen_config_from_env() -> NordigenConfig:
    """Load aggregator reader config from env.

    Required env vars: NORDIGEN_ACCESS_TOKEN, NORDIGEN_ACCOUNT_IDS.
    """
    access_token = _require_env("NORDIGEN_ACCESS_TOKEN")
    account_ids = tuple(_split_list(_require_env("NORDIGEN_ACCOUNT_IDS")))
    return NordigenConfig(
        access_token=access_token,
        account_ids=account_ids,
        base_url=os.environ.get(
            "NORDIGEN_BASE_URL", DEFAULT_NORDIGEN_BASE_URL
        ).strip(),
    )
