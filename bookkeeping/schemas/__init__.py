from bookkeeping.schemas.reporting import (
    BalanceSheetResponse,
    CashFlowResponse,
    CashFlowSummary,
    IncomeStatementComparison,
    IncomeStatementResponse,
    PeriodColumn,
    ReportLine,
    SummaryLine,
)

__all__ = [
    "BalanceSheetResponse",
    "CashFlowResponse",
    "CashFlowSummary",
    "IncomeStatementComparison",
    "IncomeStatementResponse",
    "PeriodColumn",
    "ReportLine",
    "SummaryLine",
]
