"""Chart-of-accounts tree over an immutable account snapshot."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from bookkeeping.constants.error_ids import ErrorIds
from bookkeeping.logger import get_logger
from bookkeeping.models import Account, AccountType, Posting, lookup_account_type
from bookkeeping.utils.exceptions import MalformedTreeError, ReportError, raise_cycle, raise_dangling_parent

logger = get_logger(__name__)


def _name_key(account: Account) -> tuple[str, str]:
    return (account.name.casefold(), account.id)


def _wanted_types(account_types: tuple[AccountType | str, ...]) -> set[AccountType | str]:
    return {lookup_account_type(value) or value for value in account_types}


class AccountTree:
    """Arena of accounts keyed by id with explicit parent edges.

    Traversals carry an explicit visited set and fail with
    MalformedTreeError instead of recursing forever on a cycle.
    """

    def __init__(self, accounts: Iterable[Account]) -> None:
        self._accounts: dict[str, Account] = {}
        for account in accounts:
            if account.id in self._accounts:
                raise MalformedTreeError(f"Duplicate account id {account.id}", account_id=account.id)
            self._accounts[account.id] = account

        children: dict[str, list[Account]] = {}
        roots: list[Account] = []
        for account in self._accounts.values():
            if account.parent_id is None:
                roots.append(account)
                continue
            if account.parent_id not in self._accounts:
                logger.error(
                    "Account references unknown parent",
                    error_id=ErrorIds.DANGLING_PARENT,
                    account_id=account.id,
                    parent_id=account.parent_id,
                )
                raise_dangling_parent(account.id, account.parent_id)
            children.setdefault(account.parent_id, []).append(account)

        self._children = {parent_id: sorted(items, key=_name_key) for parent_id, items in children.items()}
        self._roots = sorted(roots, key=_name_key)

    def __contains__(self, account_id: object) -> bool:
        return account_id in self._accounts

    def __iter__(self) -> Iterator[Account]:
        return iter(self._accounts.values())

    def __len__(self) -> int:
        return len(self._accounts)

    def get(self, account_id: str) -> Account:
        try:
            return self._accounts[account_id]
        except KeyError as exc:
            raise ReportError(f"Account {account_id} not found") from exc

    def find(self, account_id: str) -> Account | None:
        return self._accounts.get(account_id)

    @property
    def roots(self) -> list[Account]:
        return list(self._roots)

    def children_of(self, account_id: str) -> list[Account]:
        """Direct children sorted by name."""
        return list(self._children.get(account_id, ()))

    def has_children(self, account_id: str) -> bool:
        return account_id in self._children

    def top_level(self, *account_types: AccountType | str) -> list[Account]:
        """Accounts without a parent whose type is one of ``account_types``."""
        wanted = _wanted_types(account_types)
        return [account for account in self._roots if account.type in wanted]

    def of_type(self, *account_types: AccountType | str) -> list[Account]:
        wanted = _wanted_types(account_types)
        return sorted((a for a in self._accounts.values() if a.type in wanted), key=_name_key)

    def section(self, *account_types: AccountType | str) -> AccountTree:
        """Sub-tree holding only the accounts of ``account_types``.

        An account whose parent has another type becomes a root of the
        section, so one statement section never nests a foreign account type.
        """
        wanted = _wanted_types(account_types)
        members = [account for account in self._accounts.values() if account.type in wanted]
        member_ids = {account.id for account in members}
        return AccountTree(
            account
            if account.parent_id is None or account.parent_id in member_ids
            else account.model_copy(update={"parent_id": None})
            for account in members
        )

    def descendant_ids(self, account: Account | str, visited: set[str] | None = None) -> frozenset[str]:
        """Ids of the account and everything below it."""
        account_id = account if isinstance(account, str) else account.id
        self.get(account_id)
        seen = set() if visited is None else visited
        self._collect(account_id, seen, [])
        return frozenset(seen)

    def _collect(self, account_id: str, visited: set[str], path: list[str]) -> None:
        if account_id in visited:
            logger.error(
                "Cycle detected in account tree",
                error_id=ErrorIds.MALFORMED_ACCOUNT_TREE,
                account_id=account_id,
                path=path,
            )
            raise_cycle(account_id, path=path)
        visited.add(account_id)
        path.append(account_id)
        for child in self._children.get(account_id, ()):
            self._collect(child.id, visited, path)
        path.pop()

    def depth(self, account: Account) -> int:
        """Number of ancestors above the account."""
        level = 0
        visited = {account.id}
        current = account
        while current.parent_id is not None:
            if current.parent_id in visited:
                logger.error(
                    "Cycle detected in account tree",
                    error_id=ErrorIds.MALFORMED_ACCOUNT_TREE,
                    account_id=current.parent_id,
                )
                raise_cycle(current.parent_id, path=list(visited))
            visited.add(current.parent_id)
            current = self._accounts[current.parent_id]
            level += 1
        return level

    def has_any_postings(self, account: Account, postings: Iterable[Posting] | Any) -> bool:
        """True when the account or any descendant has at least one posting.

        ``postings`` may be an iterable of Posting or a precomputed set of
        account ids that carry postings.
        """
        ids = self.descendant_ids(account)
        if isinstance(postings, (set, frozenset)):
            return not ids.isdisjoint(postings)
        return any(posting.account_id in ids for posting in postings)

    def parents_with_postings(self, postings: Iterable[Posting] | Any) -> list[Account]:
        """Accounts with at least one child whose subtree carries postings."""
        if isinstance(postings, (set, frozenset)):
            posted = frozenset(postings)
        else:
            posted = frozenset(posting.account_id for posting in postings)
        return [
            account
            for account in sorted(self._accounts.values(), key=_name_key)
            if any(self.has_any_postings(child, posted) for child in self.children_of(account.id))
        ]

    def validate(self, *, check_cycles: bool = True) -> None:
        """Raise MalformedTreeError for the first cycle found.

        Dangling parents are rejected at construction. Accounts caught in a
        cycle are unreachable from any root, so each account is expanded on
        its own rather than only from the roots.
        """
        if not check_cycles:
            return
        for account_id in self._accounts:
            self.descendant_ids(account_id)

    def ensure_rooted(self) -> None:
        """Raise MalformedTreeError unless every account reaches a root.

        An account inside a parent cycle, or hanging below one, is unreachable
        from the roots and would otherwise vanish from a depth-first listing.
        """
        for account in sorted(self._accounts.values(), key=_name_key):
            self.depth(account)
