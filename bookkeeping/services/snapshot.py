"""Immutable ledger snapshot handed to the engine by the data-fetch layer."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from bookkeeping.models import Account, Posting
from bookkeeping.services.account_tree import AccountTree


class LedgerSnapshot:
    """Accounts plus postings, frozen for the duration of one computation.

    Postings whose account is not part of the snapshot are kept but ignored
    by the aggregator; callers routinely pass the whole company ledger with
    only the account types relevant to one statement.
    """

    __slots__ = ("_accounts", "_postings", "_tree")

    def __init__(self, accounts: Iterable[Account], postings: Iterable[Posting]) -> None:
        self._accounts = tuple(accounts)
        self._postings = tuple(postings)
        self._tree = AccountTree(self._accounts)

    @classmethod
    def from_records(
        cls,
        accounts: Iterable[Mapping[str, Any]],
        postings: Iterable[Mapping[str, Any]],
    ) -> LedgerSnapshot:
        """Build a snapshot from plain dicts (rows fetched by the data layer)."""
        return cls(
            [Account.model_validate(row) for row in accounts],
            [Posting.model_validate(row) for row in postings],
        )

    @property
    def accounts(self) -> tuple[Account, ...]:
        return self._accounts

    @property
    def postings(self) -> tuple[Posting, ...]:
        return self._postings

    @property
    def tree(self) -> AccountTree:
        return self._tree

    def __repr__(self) -> str:
        return f"<LedgerSnapshot accounts={len(self._accounts)} postings={len(self._postings)}>"
