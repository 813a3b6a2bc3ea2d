from __future__ import annotations

import http.client
import json
from typing import Any, Self, cast
import urllib.error
import urllib.parse
import urllib.request

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from budgetsync.core.config import DEFAULT_NORDIGEN_BASE_URL
from budgetsync.errors import TransportError
from budgetsync.models.transaction import Account, RawTransaction


class NordigenClientError(TransportError):
    """Base error for Nordigen client failures."""


class NordigenBaseModel(BaseModel):
    """Shared base for Nordigen response models (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def parse(cls, data: Any) -> Self:
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise NordigenClientError(
                f"Unexpected Nordigen response for {cls.__name__}: {e}"
            ) from e


class AccountDetailsModel(NordigenBaseModel):
    resource_id: str | None = None
    iban: str | None = None
    name: str | None = None
    owner_name: str | None = None


class AccountDetailsResponse(NordigenBaseModel):
    account: AccountDetailsModel

    def to_account(self, account_id: str) -> Account:
        details = self.account
        return Account(
            iban=details.iban or account_id,
            name=details.name or details.owner_name or account_id,
        )


class TransactionAmountModel(NordigenBaseModel):
    amount: str
    currency: str = ""


class NordigenTransactionModel(NordigenBaseModel):
    transaction_id: str | None = None
    internal_transaction_id: str | None = None
    booking_date: str | None = None
    value_date: str | None = None
    transaction_amount: TransactionAmountModel
    remittance_information_unstructured: str | None = None
    remittance_information_unstructured_array: list[str] | None = None
    debtor_name: str | None = None
    creditor_name: str | None = None
    additional_information: str | None = None

    def to_raw(self) -> RawTransaction:
        remittance = self.remittance_information_unstructured
        if remittance is None and self.remittance_information_unstructured_array:
            remittance = " ".join(self.remittance_information_unstructured_array)
        return RawTransaction(
            transaction_id=self.transaction_id or "",
            internal_transaction_id=self.internal_transaction_id or "",
            booking_date=self.booking_date or "",
            value_date=self.value_date or "",
            amount=self.transaction_amount.amount,
            currency=self.transaction_amount.currency,
            remittance_information_unstructured=remittance or "",
            debtor_name=self.debtor_name or "",
            creditor_name=self.creditor_name or "",
            additional_information=self.additional_information or "",
        )


class BookedPendingModel(NordigenBaseModel):
    booked: list[NordigenTransactionModel] = Field(default_factory=list)
    pending: list[dict[str, Any]] = Field(default_factory=list)


class TransactionsResponse(NordigenBaseModel):
    transactions: BookedPendingModel


class NordigenClient:
    """Read-only access to the Nordigen (GoCardless) account data API.

    Expects an already-authorized access token; the requisition flow lives
    outside this package.
    """

    def __init__(
        self,
        *,
        access_token: str,
        base_url: str = DEFAULT_NORDIGEN_BASE_URL,
        timeout: float = 30.0,
    ) -> None:
        self._access_token = access_token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    def _parse_json_response(self, body: str) -> dict[str, Any]:
        try:
            return cast(dict[str, Any], json.loads(body))
        except json.JSONDecodeError as e:
            raise NordigenClientError(
                f"Failed to parse Nordigen response as JSON: {e}: {body}"
            ) from e

    def _get(self, path: str) -> dict[str, Any]:
        url = self._base_url + path
        req = urllib.request.Request(  # noqa: S310
            url,
            headers={
                "Accept": "application/json",
                "Authorization": f"Bearer {self._access_token}",
            },
            method="GET",
        )

        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:  # noqa: S310
                body = resp.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            err_body = e.read().decode("utf-8", "ignore")
            raise NordigenClientError(
                f"Nordigen API error ({e.code}): {err_body}"
            ) from e
        except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
            raise NordigenClientError(
                f"Network error calling Nordigen API: {e!r}"
            ) from e

        return self._parse_json_response(body)

    # High-level APIs -----------------------------------------------------

    def get_account(self, account_id: str) -> Account:
        """Return the IBAN and display name of an account."""
        quoted = urllib.parse.quote(account_id)
        resp = AccountDetailsResponse.parse(
            self._get(f"/api/v2/accounts/{quoted}/details/")
        )
        return resp.to_account(account_id)

    def get_transactions(self, account_id: str) -> list[RawTransaction]:
        """Return booked transactions for an account. Pending ones are ignored."""
        quoted = urllib.parse.quote(account_id)
        resp = TransactionsResponse.parse(
            self._get(f"/api/v2/accounts/{quoted}/transactions/")
        )
        return [txn.to_raw() for txn in resp.transactions.booked]
