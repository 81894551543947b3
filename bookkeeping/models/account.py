"""Account model for the chart of accounts snapshot."""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class AccountType(str, enum.Enum):
    """Account type classification."""

    REVENUE = "Revenue"
    COGS = "COGS"
    EXPENSE = "Expense"
    ASSET = "Asset"
    LIABILITY = "Liability"
    EQUITY = "Equity"
    BANK_ACCOUNT = "Bank Account"
    CREDIT_CARD = "Credit Card"


INCOME_STATEMENT_TYPES = (AccountType.REVENUE, AccountType.COGS, AccountType.EXPENSE)
ASSET_TYPES = (AccountType.ASSET, AccountType.BANK_ACCOUNT)
LIABILITY_TYPES = (AccountType.LIABILITY, AccountType.CREDIT_CARD)
EQUITY_TYPES = (AccountType.EQUITY,)
BALANCE_SHEET_TYPES = ASSET_TYPES + LIABILITY_TYPES + EQUITY_TYPES

_TYPE_LOOKUP: dict[str, AccountType] = {}
for _member in AccountType:
    _TYPE_LOOKUP[_member.value.casefold()] = _member
    _TYPE_LOOKUP[_member.name.casefold()] = _member


def lookup_account_type(value: Any) -> AccountType | None:
    """Match a raw type value to an AccountType, case-insensitively.

    Accepts either the display value ("Bank Account") or the member name
    ("BANK_ACCOUNT"). Returns None when nothing matches.
    """
    if isinstance(value, AccountType):
        return value
    if not isinstance(value, str):
        return None
    return _TYPE_LOOKUP.get(value.strip().casefold())


class Account(BaseModel):
    """
    Account represents a ledger account in the chart of accounts.

    ``type`` keeps the raw string when it does not match a known AccountType
    so that the sign convention can reject it explicitly.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    type: AccountType | str
    parent_id: str | None = None
    subtype: str | None = None

    @field_validator("id", "parent_id", mode="before")
    @classmethod
    def _stringify_ids(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value or None
        return str(value)

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> Any:
        matched = lookup_account_type(value)
        return matched if matched is not None else value

    @property
    def is_top_level(self) -> bool:
        return self.parent_id is None

    def __repr__(self) -> str:
        type_label = self.type.value if isinstance(self.type, AccountType) else self.type
        return f"<Account {self.name} ({type_label})>"
