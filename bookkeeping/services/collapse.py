"""Collapse/expand policy for hierarchical report rows.

Collapse state is a frozenset of account ids passed in by the caller. A
collapsed parent shows its rolled-up balance and hides its children; an
expanded parent shows only its own postings with the children listed below.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal

from bookkeeping.models import Account, Posting
from bookkeeping.services.account_tree import AccountTree
from bookkeeping.services.balances import BalanceAggregator, RangeLike

CollapseState = frozenset[str]


@dataclass(frozen=True)
class RowSpec:
    account: Account
    level: int
    is_parent: bool
    collapsed: bool


def _posted_ids(postings: Iterable[Posting] | frozenset[str] | set[str]) -> frozenset[str]:
    if isinstance(postings, (set, frozenset)):
        return frozenset(postings)
    return frozenset(posting.account_id for posting in postings)


def is_parent(tree: AccountTree, account: Account, posted: frozenset[str]) -> bool:
    """An account counts as a parent when some child subtree carries postings."""
    return any(tree.has_any_postings(child, posted) for child in tree.children_of(account.id))


def effective_value(
    aggregator: BalanceAggregator,
    account: Account,
    span: RangeLike,
    state: CollapseState,
) -> Decimal:
    if account.id in state and aggregator.descendants_have_postings(account, span):
        return aggregator.rolled_up_balance(account, span)
    return aggregator.direct_balance(account, span)


def visible_rows(
    tree: AccountTree,
    top_level_accounts: Sequence[Account],
    state: CollapseState,
    postings: Iterable[Posting] | frozenset[str] | set[str],
) -> list[RowSpec]:
    """Rows in display order, depth first.

    Children of a collapsed account are not emitted. A child row is emitted
    only when its subtree has postings.
    """
    posted = _posted_ids(postings)
    rows: list[RowSpec] = []

    def emit(account: Account, level: int) -> None:
        parent = is_parent(tree, account, posted)
        collapsed = parent and account.id in state
        rows.append(RowSpec(account=account, level=level, is_parent=parent, collapsed=collapsed))
        if not parent or collapsed:
            return
        for child in tree.children_of(account.id):
            if tree.has_any_postings(child, posted):
                emit(child, level + 1)

    for account in top_level_accounts:
        emit(account, 0)
    return rows


def toggle(state: CollapseState, account_id: str) -> CollapseState:
    """Flip one account between collapsed and expanded."""
    if account_id in state:
        return frozenset(state) - {account_id}
    return frozenset(state) | {account_id}


def collapse_all(tree: AccountTree, postings: Iterable[Posting] | frozenset[str] | set[str]) -> CollapseState:
    """State in which every parent with postings is collapsed."""
    posted = _posted_ids(postings)
    return frozenset(account.id for account in tree.parents_with_postings(posted))


def expand_all() -> CollapseState:
    return frozenset()
