"""Snapshot models package."""

from bookkeeping.models.account import (
    ASSET_TYPES,
    BALANCE_SHEET_TYPES,
    EQUITY_TYPES,
    INCOME_STATEMENT_TYPES,
    LIABILITY_TYPES,
    Account,
    AccountType,
    lookup_account_type,
)
from bookkeeping.models.period import DateRange, Granularity, Period
from bookkeeping.models.posting import Posting, PostingSource

__all__ = [
    "ASSET_TYPES",
    "BALANCE_SHEET_TYPES",
    "EQUITY_TYPES",
    "INCOME_STATEMENT_TYPES",
    "LIABILITY_TYPES",
    "Account",
    "AccountType",
    "DateRange",
    "Granularity",
    "Period",
    "Posting",
    "PostingSource",
    "lookup_account_type",
]
