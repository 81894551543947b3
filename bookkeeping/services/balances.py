"""Direct and rolled-up account balances over arbitrary date ranges."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Protocol

from bookkeeping.config import settings
from bookkeeping.constants.error_ids import ErrorIds
from bookkeeping.logger import get_logger
from bookkeeping.models import Account, AccountType, DateRange, Period, Posting, lookup_account_type
from bookkeeping.services.account_tree import AccountTree
from bookkeeping.services.sign_convention import signed_amount
from bookkeeping.services.snapshot import LedgerSnapshot
from bookkeeping.utils.exceptions import UnmappedAccountTypeError, raise_cycle

logger = get_logger(__name__)

_ZERO = Decimal("0")

ROLLED_UP = "rolled_up"


class _Span(Protocol):
    start: date | None
    end: date | None


RangeLike = _Span | None
TypeSelector = Iterable[AccountType | str] | AccountType | str


def _as_types(account_types: TypeSelector) -> tuple[AccountType | str, ...]:
    if isinstance(account_types, str):
        return (account_types,)
    return tuple(account_types)


def _bounds(span: RangeLike) -> tuple[date | None, date | None]:
    if span is None:
        return None, None
    return span.start, span.end


@dataclass
class _AccountLedger:
    """Postings of one account sorted by (date, id) with running sums."""

    postings: list[Posting] = field(default_factory=list)
    dates: list[date] = field(default_factory=list)
    signed: list[Decimal] = field(default_factory=lambda: [_ZERO])
    debits: list[Decimal] = field(default_factory=lambda: [_ZERO])
    credits: list[Decimal] = field(default_factory=lambda: [_ZERO])

    def slice(self, start: date | None, end: date | None) -> tuple[int, int]:
        lo = 0 if start is None else bisect_left(self.dates, start)
        hi = len(self.dates) if end is None else bisect_right(self.dates, end)
        return lo, max(lo, hi)


def _build_ledger(account: Account, postings: list[Posting]) -> _AccountLedger:
    ledger = _AccountLedger()
    for posting in sorted(postings, key=lambda p: (p.date, p.id)):
        try:
            amount = signed_amount(account.type, posting.debit, posting.credit)
        except UnmappedAccountTypeError as exc:
            raise UnmappedAccountTypeError(account.type, account_id=account.id) from exc
        ledger.postings.append(posting)
        ledger.dates.append(posting.date)
        ledger.signed.append(ledger.signed[-1] + amount)
        ledger.debits.append(ledger.debits[-1] + posting.debit)
        ledger.credits.append(ledger.credits[-1] + posting.credit)
    return ledger


class BalanceAggregator:
    """Balance queries over one ledger snapshot.

    Postings are indexed per account once at construction. Every query is a
    pair of binary searches on the account's dates plus a prefix-sum
    difference, so slicing the same ledger into many periods stays cheap.
    Rolled-up results are memoized on the instance; create a new aggregator
    for every snapshot.
    """

    def __init__(self, tree: AccountTree, postings: Iterable[Posting]) -> None:
        self.tree = tree
        grouped: dict[str, list[Posting]] = {}
        skipped = 0
        for posting in postings:
            if posting.account_id not in tree:
                skipped += 1
                continue
            grouped.setdefault(posting.account_id, []).append(posting)
        if skipped:
            logger.debug("Ignoring postings for accounts outside the snapshot", count=skipped)

        self._ledgers = {
            account_id: _build_ledger(tree.get(account_id), items) for account_id, items in grouped.items()
        }
        self._memo: dict[tuple[str, str, date | None, date | None], Decimal] = {}
        self._sections: dict[frozenset[AccountType | str], BalanceAggregator] = {}

    @classmethod
    def from_snapshot(cls, snapshot: LedgerSnapshot) -> BalanceAggregator:
        return cls(snapshot.tree, snapshot.postings)

    def for_types(self, account_types: TypeSelector) -> BalanceAggregator:
        """Aggregator over the section of the tree holding ``account_types``.

        Rolled-up balances of the section never include accounts of other
        types, so the rows of one statement section add up to its type
        total. Posting indexes are shared; the view is built once and kept.
        """
        types = _as_types(account_types)
        key = frozenset(lookup_account_type(value) or value for value in types)
        view = self._sections.get(key)
        if view is None:
            view = self._view(self.tree.section(*types))
            self._sections[key] = view
        return view

    def _view(self, tree: AccountTree) -> BalanceAggregator:
        view = object.__new__(type(self))
        view.tree = tree
        view._ledgers = {account_id: ledger for account_id, ledger in self._ledgers.items() if account_id in tree}
        view._memo = {}
        view._sections = {}
        return view

    def posted_ids(self, span: RangeLike = None) -> frozenset[str]:
        """Ids of accounts with at least one posting dated within ``span``."""
        start, end = _bounds(span)
        found = set()
        for account_id, ledger in self._ledgers.items():
            lo, hi = ledger.slice(start, end)
            if hi > lo:
                found.add(account_id)
        return frozenset(found)

    def _resolve(self, account: Account | str) -> Account:
        return self.tree.get(account) if isinstance(account, str) else account

    def direct_balance(self, account: Account | str, span: RangeLike = None) -> Decimal:
        """Signed sum of the account's own postings dated within ``span``."""
        account = self._resolve(account)
        ledger = self._ledgers.get(account.id)
        if ledger is None:
            return _ZERO
        lo, hi = ledger.slice(*_bounds(span))
        return ledger.signed[hi] - ledger.signed[lo]

    def rolled_up_balance(
        self,
        account: Account | str,
        span: RangeLike = None,
        visited: set[str] | None = None,
    ) -> Decimal:
        """Direct balance plus the rolled-up balance of every child.

        Children keep their own sign convention. Revisiting an account on the
        way down means the parent links form a cycle.
        """
        account = self._resolve(account)
        start, end = _bounds(span)
        key = (account.id, ROLLED_UP, start, end)
        cached = self._memo.get(key)
        if cached is not None:
            return cached

        visited = set() if visited is None else visited
        if account.id in visited:
            logger.error(
                "Cycle detected while rolling up balances",
                error_id=ErrorIds.MALFORMED_ACCOUNT_TREE,
                account_id=account.id,
            )
            raise_cycle(account.id, path=sorted(visited))
        visited.add(account.id)

        total = self.direct_balance(account, span)
        for child in self.tree.children_of(account.id):
            total += self.rolled_up_balance(child, span, visited)

        visited.discard(account.id)
        self._memo[key] = total
        return total

    def balance(self, account: Account | str, span: RangeLike = None, *, rolled_up: bool = False) -> Decimal:
        if rolled_up:
            return self.rolled_up_balance(account, span)
        return self.direct_balance(account, span)

    def period_balances(
        self, account: Account | str, periods: Sequence[Period], *, rolled_up: bool = False
    ) -> dict[str, Decimal]:
        """Balance per period keyed by ``Period.key``."""
        return {period.key: self.balance(account, period, rolled_up=rolled_up) for period in periods}

    def has_postings(self, account: Account | str, span: RangeLike = None, *, include_descendants: bool = True) -> bool:
        account = self._resolve(account)
        ids = self.tree.descendant_ids(account) if include_descendants else frozenset({account.id})
        start, end = _bounds(span)
        for account_id in ids:
            ledger = self._ledgers.get(account_id)
            if ledger is None:
                continue
            lo, hi = ledger.slice(start, end)
            if hi > lo:
                return True
        return False

    def descendants_have_postings(self, account: Account | str, span: RangeLike = None) -> bool:
        account = self._resolve(account)
        return any(self.has_postings(child, span) for child in self.tree.children_of(account.id))

    def is_significant(
        self,
        account: Account | str,
        span: RangeLike = None,
        collapsed: frozenset[str] | set[str] = frozenset(),
    ) -> bool:
        """Whether a report row for the account should be rendered.

        A row is insignificant when the figure it would show rounds to zero
        and nothing below it carries postings within ``span``.
        """
        account = self._resolve(account)
        if self.descendants_have_postings(account, span):
            return True
        shown = self.balance(account, span, rolled_up=account.id in collapsed)
        return abs(shown) >= settings.significance_threshold

    def type_total(self, account_types: TypeSelector, span: RangeLike = None) -> Decimal:
        """Sum of direct balances over every account whose own type is listed.

        For trees whose subtrees share the type of their top-level account
        this equals ``top_level_total``; unlike it, an account nested under a
        parent of another type is still counted exactly once in its own
        section.
        """
        return sum(
            (self.direct_balance(account, span) for account in self.tree.of_type(*_as_types(account_types))),
            _ZERO,
        )

    def top_level_total(self, account_types: TypeSelector, span: RangeLike = None) -> Decimal:
        """Sum of rolled-up balances of the top-level accounts of the types."""
        return sum(
            (self.rolled_up_balance(account, span) for account in self.tree.top_level(*_as_types(account_types))),
            _ZERO,
        )

    def gross_totals(
        self, account_types: TypeSelector, span: RangeLike = None
    ) -> tuple[Decimal, Decimal]:
        """Unsigned (debit, credit) sums over accounts of the listed types."""
        start, end = _bounds(span)
        debit = credit = _ZERO
        for account in self.tree.of_type(*_as_types(account_types)):
            ledger = self._ledgers.get(account.id)
            if ledger is None:
                continue
            lo, hi = ledger.slice(start, end)
            debit += ledger.debits[hi] - ledger.debits[lo]
            credit += ledger.credits[hi] - ledger.credits[lo]
        return debit, credit

    def postings_for(
        self,
        account: Account | str,
        span: RangeLike = None,
        *,
        include_descendants: bool = False,
    ) -> list[Posting]:
        """Postings behind a report cell, ordered by (date, id)."""
        account = self._resolve(account)
        ids = self.tree.descendant_ids(account) if include_descendants else frozenset({account.id})
        start, end = _bounds(span)
        found: list[Posting] = []
        for account_id in ids:
            ledger = self._ledgers.get(account_id)
            if ledger is None:
                continue
            lo, hi = ledger.slice(start, end)
            found.extend(ledger.postings[lo:hi])
        found.sort(key=lambda p: (p.date, p.id))
        return found


def as_of(day: date) -> DateRange:
    """Cumulative range from the history epoch through ``day``."""
    return DateRange(start=settings.history_start, end=day)


def before(day: date) -> DateRange:
    """Cumulative range covering all history strictly before ``day``."""
    return as_of(day - timedelta(days=1))
