"""Normal-balance sign convention.

Every signed figure in the engine comes from ``signed_amount``; no other
module decides whether a debit counts as an increase.
"""

from __future__ import annotations

import enum
from decimal import Decimal
from typing import Any

from bookkeeping.constants.error_ids import ErrorIds
from bookkeeping.logger import get_logger
from bookkeeping.models import Account, AccountType, Posting, lookup_account_type
from bookkeeping.utils.exceptions import UnmappedAccountTypeError

logger = get_logger(__name__)


class NormalBalance(str, enum.Enum):
    DEBIT = "debit"
    CREDIT = "credit"


_NORMAL_BALANCE: dict[AccountType, NormalBalance] = {
    AccountType.REVENUE: NormalBalance.CREDIT,
    AccountType.COGS: NormalBalance.DEBIT,
    AccountType.EXPENSE: NormalBalance.DEBIT,
    AccountType.ASSET: NormalBalance.DEBIT,
    AccountType.BANK_ACCOUNT: NormalBalance.DEBIT,
    AccountType.LIABILITY: NormalBalance.CREDIT,
    AccountType.EQUITY: NormalBalance.CREDIT,
    AccountType.CREDIT_CARD: NormalBalance.CREDIT,
}


def coerce_account_type(value: Any, *, account_id: str | None = None) -> AccountType:
    """Resolve a raw type to an AccountType or raise UnmappedAccountTypeError."""
    matched = lookup_account_type(value)
    if matched is None or matched not in _NORMAL_BALANCE:
        logger.error(
            "Account type has no sign convention",
            error_id=ErrorIds.UNMAPPED_ACCOUNT_TYPE,
            account_type=str(value),
            account_id=account_id,
        )
        raise UnmappedAccountTypeError(value, account_id=account_id)
    return matched


def normal_balance(account_type: Any) -> NormalBalance:
    return _NORMAL_BALANCE[coerce_account_type(account_type)]


def signed_amount(account_type: Any, debit: Decimal, credit: Decimal) -> Decimal:
    """Turn a debit/credit pair into an amount signed for the account type.

    Revenue, Liability, Equity and Credit Card grow with credits; COGS,
    Expense, Asset and Bank Account grow with debits.
    """
    if normal_balance(account_type) is NormalBalance.DEBIT:
        return debit - credit
    return credit - debit


def signed_posting_amount(posting: Posting, account: Account) -> Decimal:
    if posting.account_id != account.id:
        raise ValueError(f"Posting {posting.id} does not belong to account {account.id}")
    try:
        return signed_amount(account.type, posting.debit, posting.credit)
    except UnmappedAccountTypeError as exc:
        raise UnmappedAccountTypeError(account.type, account_id=account.id) from exc
