"""Posting model: one dated debit/credit line against one account."""

from __future__ import annotations

import datetime as dt
import enum
from decimal import Decimal
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

_STORAGE_QUANTUM = Decimal("0.0001")


class PostingSource(str, enum.Enum):
    """Where a posting was entered."""

    LEDGER = "ledger"
    MANUAL = "manual"


class Posting(BaseModel):
    """A single ledger posting.

    Amounts are kept as Decimal. Floats are rounded to storage precision
    (4 places) so binary artifacts such as 0.1 + 0.2 never reach the totals.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    date: dt.date
    account_id: str = Field(validation_alias=AliasChoices("account_id", "chart_account_id"))
    debit: Decimal = Field(default=Decimal("0"), ge=0)
    credit: Decimal = Field(default=Decimal("0"), ge=0)
    source: PostingSource = PostingSource.LEDGER
    description: str | None = None
    transaction_id: str | None = None

    @field_validator("id", "account_id", "transaction_id", mode="before")
    @classmethod
    def _stringify_ids(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator("date", mode="before")
    @classmethod
    def _calendar_date(cls, value: Any) -> Any:
        # Time of day and timezone never move a posting to another bucket.
        if isinstance(value, dt.datetime):
            return value.date()
        return value

    @field_validator("source", mode="before")
    @classmethod
    def _source_alias(cls, value: Any) -> Any:
        # Bank-feed rows arrive tagged "journal".
        if isinstance(value, str) and value.strip().lower() == "journal":
            return PostingSource.LEDGER
        return value

    @field_validator("debit", "credit", mode="before")
    @classmethod
    def _exact_amount(cls, value: Any) -> Any:
        if value is None or value == "":
            return Decimal("0")
        if isinstance(value, float):
            return Decimal(str(value)).quantize(_STORAGE_QUANTUM)
        return value

    @property
    def net_debit(self) -> Decimal:
        return self.debit - self.credit
