"""Test fixtures and configuration."""

from dataclasses import dataclass
from datetime import date

import pytest
import structlog

from bookkeeping.models import Account, AccountType, Posting
from bookkeeping.services.snapshot import LedgerSnapshot
from tests.factories import AccountFactory, balanced_entry


@pytest.fixture(autouse=True)
def reset_structlog():
    """Keep structlog at its defaults so one test's configuration never leaks."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()


@dataclass
class CompanyLedger:
    accounts: dict[str, Account]
    postings: list[Posting]

    @property
    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(self.accounts.values(), self.postings)

    def __getitem__(self, key: str) -> Account:
        return self.accounts[key]


@pytest.fixture
def company() -> CompanyLedger:
    """A small company with one quarter of activity after a December start.

    Positions at 2024-03-31: bank 1470, equipment 300, loan 400, card 50,
    capital 920. Net income: 200 in December 2023, 200 in Q1 2024.
    """
    accounts = {
        "bank": AccountFactory.build(id="bank", name="Checking", type=AccountType.BANK_ACCOUNT),
        "equipment": AccountFactory.build(id="equipment", name="Equipment", type=AccountType.ASSET),
        "loan": AccountFactory.build(id="loan", name="Bank Loan", type=AccountType.LIABILITY),
        "card": AccountFactory.build(id="card", name="Visa", type=AccountType.CREDIT_CARD),
        "capital": AccountFactory.build(id="capital", name="Owner Capital", type=AccountType.EQUITY),
        "sales": AccountFactory.build(id="sales", name="Sales", type=AccountType.REVENUE),
        "materials": AccountFactory.build(id="materials", name="Materials", type=AccountType.COGS),
        "travel": AccountFactory.build(id="travel", name="Travel", type=AccountType.EXPENSE),
        "taxis": AccountFactory.build(id="taxis", name="Taxis", type=AccountType.EXPENSE, parent_id="travel"),
        "flights": AccountFactory.build(id="flights", name="Flights", type=AccountType.EXPENSE, parent_id="travel"),
        "rent": AccountFactory.build(id="rent", name="Rent", type=AccountType.EXPENSE),
    }
    a = accounts
    postings = [
        *balanced_entry(date(2023, 12, 1), debit=a["bank"], credit=a["capital"], amount="1000"),
        *balanced_entry(date(2023, 12, 20), debit=a["bank"], credit=a["sales"], amount="200"),
        *balanced_entry(date(2024, 1, 15), debit=a["bank"], credit=a["sales"], amount="500"),
        *balanced_entry(date(2024, 1, 20), debit=a["materials"], credit=a["bank"], amount="100"),
        *balanced_entry(date(2024, 2, 3), debit=a["taxis"], credit=a["card"], amount="50"),
        *balanced_entry(date(2024, 2, 10), debit=a["equipment"], credit=a["bank"], amount="300"),
        *balanced_entry(date(2024, 3, 5), debit=a["bank"], credit=a["loan"], amount="400"),
        *balanced_entry(date(2024, 3, 20), debit=a["capital"], credit=a["bank"], amount="80"),
        *balanced_entry(date(2024, 3, 25), debit=a["rent"], credit=a["bank"], amount="150"),
    ]
    return CompanyLedger(accounts=accounts, postings=postings)
