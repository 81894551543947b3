"""Pydantic schemas for financial statement output."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from bookkeeping.models import Granularity


class PeriodColumn(BaseModel):
    """One column of a bucketed statement."""

    key: str
    label: str
    start: date
    end: date
    label_start: date
    label_end: date


class ReportLine(BaseModel):
    """Account row of a statement section.

    ``amount`` and ``per_period`` carry the figure the row displays under the
    current collapse state; the direct and rolled-up figures are always
    reported alongside so renderers never have to recompute them.
    """

    account_id: str | None = None
    group_key: str | None = None
    label: str
    account_type: str | None = None
    parent_id: str | None = None
    level: int = 0
    is_parent: bool = False
    collapsed: bool = False
    direct_total: Decimal
    rolled_up_total: Decimal
    amount: Decimal
    per_period: dict[str, Decimal] = Field(default_factory=dict)
    per_period_direct: dict[str, Decimal] = Field(default_factory=dict)
    per_period_rolled_up: dict[str, Decimal] = Field(default_factory=dict)


class SummaryLine(BaseModel):
    """Computed row such as a section total, Net Income or Retained Earnings."""

    group_key: str
    label: str
    total: Decimal
    per_period: dict[str, Decimal] = Field(default_factory=dict)


class IncomeStatementComparison(BaseModel):
    """Net income of the preceding range of equal length."""

    previous_start: date
    previous_end: date
    previous_net_income: Decimal
    net_income_change: Decimal


class IncomeStatementResponse(BaseModel):
    """Income statement response schema."""

    start_date: date
    end_date: date
    granularity: Granularity
    periods: list[PeriodColumn]
    revenue: list[ReportLine]
    cogs: list[ReportLine]
    expenses: list[ReportLine]
    total_revenue: Decimal
    total_cogs: Decimal
    gross_profit: Decimal
    total_expenses: Decimal
    net_income: Decimal
    totals: list[SummaryLine]
    comparison: IncomeStatementComparison | None = None


class BalanceSheetResponse(BaseModel):
    """Balance sheet response schema.

    Positions are cumulative from the start of history up to ``as_of_date``
    (and up to each period end for ``per_period`` values).
    """

    start_date: date
    end_date: date
    as_of_date: date
    granularity: Granularity
    periods: list[PeriodColumn]
    assets: list[ReportLine]
    liabilities: list[ReportLine]
    equity: list[ReportLine]
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    retained_earnings: Decimal
    net_income: Decimal
    totals: list[SummaryLine]
    equation_delta: Decimal
    is_balanced: bool


class CashFlowSummary(BaseModel):
    """Cash flow summary totals."""

    operating_activities: Decimal
    investing_activities: Decimal
    financing_activities: Decimal
    net_cash_flow: Decimal
    beginning_cash: Decimal
    ending_cash: Decimal
    bank_balance_end: Decimal
    cash_reconciliation_delta: Decimal


class CashFlowResponse(BaseModel):
    """Cash flow statement response schema (indirect method)."""

    start_date: date
    end_date: date
    granularity: Granularity
    periods: list[PeriodColumn]
    operating: list[SummaryLine]
    investing: list[SummaryLine]
    financing: list[SummaryLine]
    beginning_cash: SummaryLine
    ending_cash: SummaryLine
    summary: CashFlowSummary
    period_summaries: dict[str, CashFlowSummary] = Field(default_factory=dict)
