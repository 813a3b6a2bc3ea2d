from __future__ import annotations

import http.client
import urllib.error
import urllib.parse
import urllib.request

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from budgetsync.core.config import DEFAULT_YNAB_BASE_URL, ClearedStatus
from budgetsync.errors import TransportError

MAX_MEMO_SIZE = 200
MAX_PAYEE_SIZE = 100


class YNABClientError(TransportError):
    """Base error for YNAB client failures."""


class YNABTransaction(BaseModel):
    """A single transaction as YNAB's bulk create endpoint expects it."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    account_id: str
    date: str
    amount: str
    payee_name: str = Field(max_length=MAX_PAYEE_SIZE)
    memo: str = Field(max_length=MAX_MEMO_SIZE)
    import_id: str
    cleared: ClearedStatus
    approved: bool = False


class YNABTransactionsPayload(BaseModel):
    transactions: list[YNABTransaction]


class YNABClient:
    def __init__(
        self,
        *,
        token: str,
        base_url: str = DEFAULT_YNAB_BASE_URL,
        timeout: float = 30.0,
    ) -> None:
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    def transactions_url(self, budget_id: str) -> str:
        return f"{self._base_url}/budgets/{urllib.parse.quote(budget_id)}/transactions"

    def _encode(self, transactions: list[YNABTransaction]) -> bytes:
        try:
            payload = YNABTransactionsPayload(transactions=transactions)
            return payload.model_dump_json().encode("utf-8")
        except (ValidationError, ValueError, TypeError) as e:
            raise YNABClientError(f"Failed to encode YNAB request: {e}") from e

    def _post(self, url: str, data: bytes) -> tuple[int, str, str]:
        req = urllib.request.Request(  # noqa: S310
            url,
            data=data,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self._token}",
            },
            method="POST",
        )

        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:  # noqa: S310
                body = resp.read().decode("utf-8", "ignore")
                return resp.status, resp.reason, body
        except urllib.error.HTTPError as e:
            err_body = e.read().decode("utf-8", "ignore")
            raise YNABClientError(
                f"failed to send request: {e.code} {e.reason}: {err_body}"
            ) from e
        except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
            raise YNABClientError(f"Network error calling YNAB API: {e!r}") from e

    # High-level APIs -----------------------------------------------------

    def create_transactions(
        self, budget_id: str, transactions: list[YNABTransaction]
    ) -> str:
        """Create ``transactions`` in one request. Anything but 201 fails.

        Returns the response body.

        Raises:
            YNABClientError: If encoding fails or YNAB does not answer 201.
        """
        data = self._encode(transactions)
        status, reason, body = self._post(self.transactions_url(budget_id), data)
        if status != 201:
            raise YNABClientError(f"failed to send request: {status} {reason}: {body}")
        return body
