"""Tests for the YNAB HTTP client."""

from __future__ import annotations

import http.client
import io
import json
from unittest.mock import MagicMock, patch
import urllib.error

import pytest

from budgetsync.core.config import ClearedStatus
from budgetsync.infra.clients.ynab import YNABClient, YNABClientError, YNABTransaction

_URLOPEN = "budgetsync.infra.clients.ynab.urllib.request.urlopen"


def _make_transaction(**overrides) -> YNABTransaction:
    fields = {
        "account_id": "acct-1",
        "date": "2023-04-29",
        "amount": "-123450",
        "payee_name": "Shop",
        "memo": "2023.04.29 Shop",
        "import_id": "YBBR:-123450:2023-04-29:ba78",
        "cleared": ClearedStatus.CLEARED,
    }
    fields.update(overrides)
    return YNABTransaction(**fields)


def _response(status: int, reason: str, body: bytes = b"") -> MagicMock:
    resp = MagicMock()
    resp.status = status
    resp.reason = reason
    resp.read.return_value = body
    cm = MagicMock()
    cm.__enter__.return_value = resp
    return cm


class TestCreateTransactions:
    def test_posts_single_request_with_bearer_token(self) -> None:
        client = YNABClient(token="secret", base_url="https://ynab.test/v1/")

        with patch(_URLOPEN, return_value=_response(201, "Created")) as urlopen:
            client.create_transactions("budget-1", [_make_transaction()])

        assert urlopen.call_count == 1
        req = urlopen.call_args.args[0]
        assert req.full_url == "https://ynab.test/v1/budgets/budget-1/transactions"
        assert req.get_method() == "POST"
        assert req.get_header("Authorization") == "Bearer secret"
        body = json.loads(req.data.decode("utf-8"))
        assert body == {
            "transactions": [
                {
                    "account_id": "acct-1",
                    "date": "2023-04-29",
                    "amount": "-123450",
                    "payee_name": "Shop",
                    "memo": "2023.04.29 Shop",
                    "import_id": "YBBR:-123450:2023-04-29:ba78",
                    "cleared": "cleared",
                    "approved": False,
                }
            ]
        }

    def test_non_created_success_status_fails(self) -> None:
        client = YNABClient(token="secret")

        with patch(_URLOPEN, return_value=_response(200, "OK")):
            with pytest.raises(YNABClientError, match="200 OK"):
                client.create_transactions("budget-1", [_make_transaction()])

    def test_http_error_carries_status(self) -> None:
        client = YNABClient(token="secret")
        error = urllib.error.HTTPError(
            "https://api.youneedabudget.com/v1/budgets/budget-1/transactions",
            400,
            "Bad Request",
            hdrs=None,  # type: ignore[arg-type]
            fp=io.BytesIO(b'{"error": {"detail": "invalid"}}'),
        )

        with patch(_URLOPEN, side_effect=error):
            with pytest.raises(YNABClientError, match="400 Bad Request"):
                client.create_transactions("budget-1", [_make_transaction()])

    def test_returns_response_body(self) -> None:
        client = YNABClient(token="secret")
        body = b'{"data": {"transaction_ids": ["t-1"]}}'

        with patch(_URLOPEN, return_value=_response(201, "Created", body)):
            result = client.create_transactions("budget-1", [_make_transaction()])

        assert json.loads(result) == {"data": {"transaction_ids": ["t-1"]}}

    @pytest.mark.parametrize(
        "error",
        [
            TimeoutError("timed out"),
            ConnectionResetError("reset by peer"),
            http.client.RemoteDisconnected("closed"),
        ],
    )
    def test_connection_failures_are_client_errors(self, error) -> None:
        client = YNABClient(token="secret")

        with patch(_URLOPEN, side_effect=error):
            with pytest.raises(YNABClientError, match="Network error"):
                client.create_transactions("budget-1", [_make_transaction()])


class TestYNABTransaction:
    def test_rejects_payee_over_limit(self) -> None:
        with pytest.raises(ValueError):
            _make_transaction(payee_name="x" * 101)

    def test_approved_defaults_false(self) -> None:
        assert _make_transaction().approved is False
