"""Exception hierarchy for report computation."""

from typing import NoReturn


class ReportError(Exception):
    """Raised when report generation fails or input is invalid."""

    pass


class MalformedTreeError(ReportError):
    """Raised when the account graph has a cycle or a dangling parent link.

    A rolled-up balance over a malformed subtree would be understated, so the
    computation for that subtree fails instead of truncating.
    """

    def __init__(self, message: str, *, account_id: str) -> None:
        super().__init__(message)
        self.account_id = account_id


class UnmappedAccountTypeError(ReportError):
    """Raised when an account type has no entry in the sign convention table."""

    def __init__(self, account_type: object, *, account_id: str | None = None) -> None:
        where = f" (account {account_id})" if account_id else ""
        super().__init__(f"Unmapped account type: {account_type!r}{where}")
        self.account_type = account_type
        self.account_id = account_id


def raise_cycle(account_id: str, *, path: list[str] | None = None) -> NoReturn:
    trail = " -> ".join([*(path or []), account_id])
    raise MalformedTreeError(f"Cycle detected in account tree at {account_id}: {trail}", account_id=account_id)


def raise_dangling_parent(account_id: str, parent_id: str) -> NoReturn:
    raise MalformedTreeError(
        f"Account {account_id} references unknown parent {parent_id}",
        account_id=account_id,
    )
