from __future__ import annotations

from collections.abc import Mapping

from budgetsync.errors import UnknownAccountError


def resolve_account_id(iban: str, account_map: Mapping[str, str]) -> str:
    """Return the YNAB account id configured for ``iban``.

    Raises:
        UnknownAccountError: If the IBAN has no entry in ``account_map``.
    """
    try:
        return account_map[iban]
    except KeyError as e:
        raise UnknownAccountError(
            f"no account for: {iban} in map: {sorted(account_map)}"
        ) from e
