"""Tests for display formatting helpers."""

from datetime import date
from decimal import Decimal

import pytest

from bookkeeping.services import formatting
from bookkeeping.services.formatting import format_amount, format_percentage, percentage_of_base, statement_base
from bookkeeping.services.reporting import generate_balance_sheet, generate_cash_flow, generate_income_statement


def test_percentage_of_base() -> None:
    assert percentage_of_base(Decimal("25"), Decimal("200")) == Decimal("12.5")
    assert percentage_of_base(Decimal("25"), Decimal("-200")) == Decimal("12.5")
    assert percentage_of_base(Decimal("1"), Decimal("3")) == Decimal("33.3")
    assert percentage_of_base(Decimal("5"), Decimal("0")) is None


def test_format_percentage() -> None:
    assert format_percentage(Decimal("25"), Decimal("200")) == "12.5%"
    assert format_percentage(Decimal("-50"), Decimal("200")) == "-25.0%"
    assert format_percentage(Decimal("25"), Decimal("0")) == "—"


def test_format_amount() -> None:
    assert format_amount(Decimal("1234.5")) == "1,234.50"
    assert format_amount(Decimal("-98765.432")) == "-98,765.43"
    assert format_amount(Decimal("0.004")) == "—"


def test_placeholder_comes_from_settings(monkeypatch) -> None:
    monkeypatch.setattr(formatting.settings, "zero_placeholder", "-")
    assert format_amount(Decimal("0")) == "-"


def test_percentage_places_from_settings(monkeypatch) -> None:
    monkeypatch.setattr(formatting.settings, "percentage_places", 2)
    assert format_percentage(Decimal("1"), Decimal("3")) == "33.33%"


class TestStatementBase:
    def test_income_statement_uses_revenue_or_net_income(self, company) -> None:
        report = generate_income_statement(
            company.snapshot, start_date=date(2024, 1, 1), end_date=date(2024, 3, 31), granularity="total"
        )
        assert statement_base(report) == Decimal("500.00")
        assert statement_base(report, use_net_income=True) == Decimal("200.00")

    def test_balance_sheet_uses_total_assets(self, company) -> None:
        report = generate_balance_sheet(
            company.snapshot, start_date=date(2024, 1, 1), end_date=date(2024, 3, 31), granularity="total"
        )
        assert statement_base(report) == Decimal("1770.00")
        assert format_percentage(report.total_assets, statement_base(report)) == "100.0%"

    def test_cash_flow_uses_financing_change(self, company) -> None:
        report = generate_cash_flow(
            company.snapshot, start_date=date(2024, 1, 1), end_date=date(2024, 3, 31), granularity="total"
        )
        assert statement_base(report) == Decimal("370.00")

    def test_cash_flow_without_financing_falls_back_to_one(self, company) -> None:
        report = generate_cash_flow(
            company.snapshot, start_date=date(2024, 1, 1), end_date=date(2024, 1, 31), granularity="total"
        )
        assert statement_base(report) == Decimal("1")

    def test_rejects_other_objects(self) -> None:
        with pytest.raises(TypeError):
            statement_base(object())
