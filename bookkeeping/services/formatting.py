"""Display helpers: percentage-of-base and amount formatting."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from bookkeeping.config import settings
from bookkeeping.schemas.reporting import (
    BalanceSheetResponse,
    CashFlowResponse,
    IncomeStatementResponse,
)

_ONE = Decimal("1")
_HUNDRED = Decimal("100")


def _places(count: int) -> Decimal:
    return Decimal(1).scaleb(-count)


def percentage_of_base(amount: Decimal, base: Decimal) -> Decimal | None:
    """``amount`` as a percentage of ``|base|``; None when the base is zero."""
    if base == 0:
        return None
    percentage = Decimal(amount) / abs(Decimal(base)) * _HUNDRED
    return percentage.quantize(_places(settings.percentage_places), rounding=ROUND_HALF_UP)


def format_percentage(amount: Decimal, base: Decimal) -> str:
    percentage = percentage_of_base(amount, base)
    if percentage is None:
        return settings.zero_placeholder
    return f"{percentage}%"


def format_amount(amount: Decimal) -> str:
    """Thousands-separated amount at money precision; placeholder for zero."""
    amount = Decimal(amount)
    if abs(amount) < settings.significance_threshold:
        return settings.zero_placeholder
    quantized = amount.quantize(settings.money_quantum, rounding=ROUND_HALF_UP)
    return f"{quantized:,}"


def income_statement_base(report: IncomeStatementResponse, *, use_net_income: bool = False) -> Decimal:
    """Revenue by default, Net Income when the view is normalised to it."""
    return report.net_income if use_net_income else report.total_revenue


def balance_sheet_base(report: BalanceSheetResponse) -> Decimal:
    """Total Assets is the 100% row of a balance sheet."""
    return abs(report.total_assets)


def cash_flow_base(report: CashFlowResponse) -> Decimal:
    # A zero financing change would make every cell undefined.
    base = abs(report.summary.financing_activities)
    return base if base != 0 else _ONE


def statement_base(
    report: IncomeStatementResponse | BalanceSheetResponse | CashFlowResponse,
    *,
    use_net_income: bool = False,
) -> Decimal:
    """Percentage base designated for each statement shape."""
    if isinstance(report, IncomeStatementResponse):
        return income_statement_base(report, use_net_income=use_net_income)
    if isinstance(report, BalanceSheetResponse):
        return balance_sheet_base(report)
    if isinstance(report, CashFlowResponse):
        return cash_flow_base(report)
    raise TypeError(f"Unsupported report type: {type(report).__name__}")
