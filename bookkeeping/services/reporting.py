"""Reporting service for financial statements."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from bookkeeping.config import settings
from bookkeeping.constants.error_ids import ErrorIds
from bookkeeping.logger import get_logger, log_exception, log_timing
from bookkeeping.models import (
    ASSET_TYPES,
    EQUITY_TYPES,
    LIABILITY_TYPES,
    AccountType,
    DateRange,
    Granularity,
    Period,
)
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
from bookkeeping.services.balances import BalanceAggregator, RangeLike, as_of, before
from bookkeeping.services.collapse import CollapseState, visible_rows
from bookkeeping.services.periods import as_calendar_date, partition, previous_period
from bookkeeping.services.snapshot import LedgerSnapshot
from bookkeeping.utils.exceptions import ReportError

logger = get_logger(__name__)

_ZERO = Decimal("0")

LedgerSource = LedgerSnapshot | BalanceAggregator


def _quantize_money(amount: Decimal | int) -> Decimal:
    if isinstance(amount, int):
        amount = Decimal(amount)
    return amount.quantize(settings.money_quantum, rounding=ROUND_HALF_UP)


def _aggregator_for(source: LedgerSource) -> BalanceAggregator:
    if isinstance(source, BalanceAggregator):
        return source
    return BalanceAggregator.from_snapshot(source)


def _resolve_granularity(granularity: Granularity | str | None) -> Granularity | str:
    return settings.default_granularity if granularity is None else granularity


def _period_columns(periods: Sequence[Period]) -> list[PeriodColumn]:
    return [
        PeriodColumn(
            key=period.key,
            label=period.label,
            start=period.start,
            end=period.end,
            label_start=period.label_start,
            label_end=period.label_end,
        )
        for period in periods
    ]


def _type_label(value: AccountType | str) -> str:
    return value.value if isinstance(value, AccountType) else str(value)


def _net_income(aggregator: BalanceAggregator, span: RangeLike) -> Decimal:
    revenue = aggregator.type_total(AccountType.REVENUE, span)
    cogs = aggregator.type_total(AccountType.COGS, span)
    expenses = aggregator.type_total(AccountType.EXPENSE, span)
    return revenue - cogs - expenses


def _summary_line(group_key: str, label: str, total: Decimal, per_period: dict[str, Decimal]) -> SummaryLine:
    return SummaryLine(
        group_key=group_key,
        label=label,
        total=_quantize_money(total),
        per_period={key: _quantize_money(value) for key, value in per_period.items()},
    )


def _build_section_lines(
    aggregator: BalanceAggregator,
    account_types: Sequence[AccountType],
    *,
    total_span: RangeLike,
    periods: Sequence[Period],
    collapsed: CollapseState,
    point_in_time: bool = False,
) -> list[ReportLine]:
    """Rows for one statement section.

    The section is the sub-tree of accounts of ``account_types``; its roots
    with postings in ``total_span`` are expanded depth first. An account that
    cannot reach a root fails the section instead of being left out. Leaf rows whose displayed figure rounds to zero are
    dropped; parent rows always stay so their children keep a home.
    """
    section = aggregator.for_types(account_types)
    tree = section.tree
    tree.ensure_rooted()
    posted = section.posted_ids(total_span)
    top_level = [account for account in tree.roots if tree.has_any_postings(account, posted)]

    lines: list[ReportLine] = []
    for row in visible_rows(tree, top_level, collapsed, posted):
        account = row.account
        direct = section.direct_balance(account, total_span)
        rolled_up = section.rolled_up_balance(account, total_span)
        shown = rolled_up if row.collapsed else direct
        if not row.is_parent and abs(shown) < settings.significance_threshold:
            continue

        per_period_direct: dict[str, Decimal] = {}
        per_period_rolled_up: dict[str, Decimal] = {}
        for period in periods:
            span = as_of(period.end) if point_in_time else period
            per_period_direct[period.key] = _quantize_money(section.direct_balance(account, span))
            per_period_rolled_up[period.key] = _quantize_money(section.rolled_up_balance(account, span))

        lines.append(
            ReportLine(
                account_id=account.id,
                label=account.name,
                account_type=_type_label(account.type),
                parent_id=account.parent_id,
                level=row.level,
                is_parent=row.is_parent,
                collapsed=row.collapsed,
                direct_total=_quantize_money(direct),
                rolled_up_total=_quantize_money(rolled_up),
                amount=_quantize_money(shown),
                per_period=per_period_rolled_up if row.collapsed else per_period_direct,
                per_period_direct=per_period_direct,
                per_period_rolled_up=per_period_rolled_up,
            )
        )
    return lines


def _synthetic_line(group_key: str, label: str, total: Decimal, per_period: dict[str, Decimal]) -> ReportLine:
    amount = _quantize_money(total)
    quantized = {key: _quantize_money(value) for key, value in per_period.items()}
    return ReportLine(
        group_key=group_key,
        label=label,
        account_type=AccountType.EQUITY.value,
        direct_total=amount,
        rolled_up_total=amount,
        amount=amount,
        per_period=quantized,
        per_period_direct=dict(quantized),
        per_period_rolled_up=dict(quantized),
    )


# =============================================================================
# Income Statement
# =============================================================================


def generate_income_statement(
    source: LedgerSource,
    *,
    start_date: date,
    end_date: date,
    granularity: Granularity | str | None = None,
    collapsed: CollapseState = frozenset(),
    compare_previous: bool = False,
) -> IncomeStatementResponse:
    """Generate an income statement for ``[start_date, end_date]``.

    Net Income = Revenue - COGS - Expense, per period and for the whole range.
    An inverted range yields no periods and zero totals.
    """
    start_date = as_calendar_date(start_date)
    end_date = as_calendar_date(end_date)
    granularity = _resolve_granularity(granularity)

    with log_timing(
        "income_statement",
        logger=logger,
        start_date=start_date.isoformat(),
        end_date=end_date.isoformat(),
        granularity=getattr(granularity, "value", granularity),
    ) as timing:
        try:
            periods = partition(start_date, end_date, granularity)
            aggregator = _aggregator_for(source)
            span = DateRange(start=start_date, end=end_date)

            sections = {
                account_type: _build_section_lines(
                    aggregator,
                    (account_type,),
                    total_span=span,
                    periods=periods,
                    collapsed=collapsed,
                )
                for account_type in (AccountType.REVENUE, AccountType.COGS, AccountType.EXPENSE)
            }

            def per_type(account_type: AccountType) -> dict[str, Decimal]:
                return {period.key: aggregator.type_total(account_type, period) for period in periods}

            revenue = aggregator.type_total(AccountType.REVENUE, span)
            cogs = aggregator.type_total(AccountType.COGS, span)
            expenses = aggregator.type_total(AccountType.EXPENSE, span)
            gross_profit = revenue - cogs
            net_income = gross_profit - expenses

            revenue_by_period = per_type(AccountType.REVENUE)
            cogs_by_period = per_type(AccountType.COGS)
            expenses_by_period = per_type(AccountType.EXPENSE)
            gross_by_period = {key: revenue_by_period[key] - cogs_by_period[key] for key in revenue_by_period}
            net_by_period = {key: gross_by_period[key] - expenses_by_period[key] for key in gross_by_period}

            comparison = None
            if compare_previous and start_date <= end_date:
                previous = previous_period(start_date, end_date)
                previous_net_income = _net_income(aggregator, previous)
                comparison = IncomeStatementComparison(
                    previous_start=previous.start,
                    previous_end=previous.end,
                    previous_net_income=_quantize_money(previous_net_income),
                    net_income_change=_quantize_money(net_income - previous_net_income),
                )
        except ReportError as exc:
            log_exception(
                logger,
                exc,
                "Income statement generation failed",
                include_traceback=False,
                error_id=ErrorIds.REPORT_GENERATION_FAILED,
            )
            raise

        timing["line_count"] = sum(len(lines) for lines in sections.values())
        timing["period_count"] = len(periods)

    return IncomeStatementResponse(
        start_date=start_date,
        end_date=end_date,
        granularity=granularity,
        periods=_period_columns(periods),
        revenue=sections[AccountType.REVENUE],
        cogs=sections[AccountType.COGS],
        expenses=sections[AccountType.EXPENSE],
        total_revenue=_quantize_money(revenue),
        total_cogs=_quantize_money(cogs),
        gross_profit=_quantize_money(gross_profit),
        total_expenses=_quantize_money(expenses),
        net_income=_quantize_money(net_income),
        totals=[
            _summary_line("total_revenue", "Total Revenue", revenue, revenue_by_period),
            _summary_line("total_cogs", "Total COGS", cogs, cogs_by_period),
            _summary_line("gross_profit", "Gross Profit", gross_profit, gross_by_period),
            _summary_line("total_expenses", "Total Expenses", expenses, expenses_by_period),
            _summary_line("net_income", "Net Income", net_income, net_by_period),
        ],
        comparison=comparison,
    )


# =============================================================================
# Balance Sheet
# =============================================================================


def generate_balance_sheet(
    source: LedgerSource,
    *,
    start_date: date,
    end_date: date,
    granularity: Granularity | str | None = None,
    collapsed: CollapseState = frozenset(),
) -> BalanceSheetResponse:
    """Generate a balance sheet as of ``end_date``.

    Account positions are cumulative from ``settings.history_start``. Retained
    Earnings is the net income of everything before ``start_date``; the net
    income of the range itself is shown as a synthetic equity line, so

        Total Assets == Total Liabilities + Total Equity + Retained Earnings

    holds for any ledger whose postings balance.
    """
    start_date = as_calendar_date(start_date)
    end_date = as_calendar_date(end_date)
    granularity = _resolve_granularity(granularity)

    with log_timing(
        "balance_sheet",
        logger=logger,
        start_date=start_date.isoformat(),
        end_date=end_date.isoformat(),
        granularity=getattr(granularity, "value", granularity),
    ) as timing:
        try:
            periods = partition(start_date, end_date, granularity)
            aggregator = _aggregator_for(source)

            if start_date > end_date:
                # Nothing to report; keep every figure at zero.
                cumulative = DateRange(start=start_date, end=end_date)
                current = cumulative
                prior = cumulative
            else:
                cumulative = as_of(end_date)
                current = DateRange(start=start_date, end=end_date)
                prior = before(start_date)

            def section(account_types: Sequence[AccountType]) -> list[ReportLine]:
                if start_date > end_date:
                    return []
                return _build_section_lines(
                    aggregator,
                    account_types,
                    total_span=cumulative,
                    periods=periods,
                    collapsed=collapsed,
                    point_in_time=True,
                )

            assets = section(ASSET_TYPES)
            liabilities = section(LIABILITY_TYPES)
            equity = section(EQUITY_TYPES)

            total_assets = aggregator.type_total(ASSET_TYPES, cumulative)
            total_liabilities = aggregator.type_total(LIABILITY_TYPES, cumulative)
            equity_accounts = aggregator.type_total(EQUITY_TYPES, cumulative)
            retained_earnings = _net_income(aggregator, prior)
            net_income = _net_income(aggregator, current)
            total_equity = equity_accounts + net_income

            assets_by_period: dict[str, Decimal] = {}
            liabilities_by_period: dict[str, Decimal] = {}
            equity_by_period: dict[str, Decimal] = {}
            net_income_by_period: dict[str, Decimal] = {}
            retained_by_period: dict[str, Decimal] = {}
            for period in periods:
                position = as_of(period.end)
                period_net_income = _net_income(aggregator, DateRange(start=start_date, end=period.end))
                assets_by_period[period.key] = aggregator.type_total(ASSET_TYPES, position)
                liabilities_by_period[period.key] = aggregator.type_total(LIABILITY_TYPES, position)
                equity_by_period[period.key] = aggregator.type_total(EQUITY_TYPES, position) + period_net_income
                net_income_by_period[period.key] = period_net_income
                retained_by_period[period.key] = retained_earnings

            if start_date <= end_date:
                equity.append(_synthetic_line("net_income", "Net Income", net_income, net_income_by_period))

            raw_delta = total_assets - (total_liabilities + total_equity + retained_earnings)
            equation_delta = _quantize_money(raw_delta)
            is_balanced = abs(raw_delta) <= settings.balance_tolerance
            if not is_balanced:
                logger.warning(
                    "Balance sheet does not balance",
                    error_id=ErrorIds.BALANCE_SHEET_IMBALANCE,
                    as_of_date=end_date.isoformat(),
                    equation_delta=str(equation_delta),
                )
        except ReportError as exc:
            log_exception(
                logger,
                exc,
                "Balance sheet generation failed",
                include_traceback=False,
                error_id=ErrorIds.REPORT_GENERATION_FAILED,
            )
            raise

        timing["line_count"] = len(assets) + len(liabilities) + len(equity)
        timing["is_balanced"] = is_balanced

    liabilities_and_equity = {
        key: liabilities_by_period[key] + equity_by_period[key] + retained_by_period[key]
        for key in liabilities_by_period
    }
    return BalanceSheetResponse(
        start_date=start_date,
        end_date=end_date,
        as_of_date=end_date,
        granularity=granularity,
        periods=_period_columns(periods),
        assets=assets,
        liabilities=liabilities,
        equity=equity,
        total_assets=_quantize_money(total_assets),
        total_liabilities=_quantize_money(total_liabilities),
        total_equity=_quantize_money(total_equity),
        retained_earnings=_quantize_money(retained_earnings),
        net_income=_quantize_money(net_income),
        totals=[
            _summary_line("total_assets", "Total Assets", total_assets, assets_by_period),
            _summary_line("total_liabilities", "Total Liabilities", total_liabilities, liabilities_by_period),
            _summary_line("total_equity", "Total Equity", total_equity, equity_by_period),
            _summary_line("retained_earnings", "Retained Earnings", retained_earnings, retained_by_period),
            _summary_line(
                "total_liabilities_and_equity",
                "Total Liabilities & Equity",
                total_liabilities + total_equity + retained_earnings,
                liabilities_and_equity,
            ),
        ],
        equation_delta=equation_delta,
        is_balanced=is_balanced,
    )


# =============================================================================
# Cash Flow
# =============================================================================


class _CashFlowFigures:
    """Unquantized cash-flow components for one span."""

    __slots__ = (
        "revenue",
        "cogs",
        "expenses",
        "net_income",
        "increase_in_assets",
        "increase_in_liabilities",
        "owner_contributions",
        "owner_distributions",
    )

    def __init__(self, aggregator: BalanceAggregator, span: RangeLike) -> None:
        self.revenue = aggregator.type_total(AccountType.REVENUE, span)
        self.cogs = aggregator.type_total(AccountType.COGS, span)
        self.expenses = aggregator.type_total(AccountType.EXPENSE, span)
        self.net_income = self.revenue - self.cogs - self.expenses
        # Bank accounts are the cash being explained, not an investment.
        self.increase_in_assets = aggregator.type_total(AccountType.ASSET, span)
        self.increase_in_liabilities = aggregator.type_total(LIABILITY_TYPES, span)
        equity_debits, equity_credits = aggregator.gross_totals(EQUITY_TYPES, span)
        self.owner_contributions = equity_credits
        self.owner_distributions = -equity_debits

    @property
    def net_investing_change(self) -> Decimal:
        return -self.increase_in_assets

    @property
    def net_financing_change(self) -> Decimal:
        return self.increase_in_liabilities + self.owner_contributions + self.owner_distributions

    @property
    def net_cash_flow(self) -> Decimal:
        return self.net_income + self.net_investing_change + self.net_financing_change


def _cash_flow_summary(
    figures: _CashFlowFigures, beginning_cash: Decimal, bank_balance_end: Decimal
) -> tuple[CashFlowSummary, Decimal]:
    ending_cash = beginning_cash + figures.net_cash_flow
    summary = CashFlowSummary(
        operating_activities=_quantize_money(figures.net_income),
        investing_activities=_quantize_money(figures.net_investing_change),
        financing_activities=_quantize_money(figures.net_financing_change),
        net_cash_flow=_quantize_money(figures.net_cash_flow),
        beginning_cash=_quantize_money(beginning_cash),
        ending_cash=_quantize_money(ending_cash),
        bank_balance_end=_quantize_money(bank_balance_end),
        cash_reconciliation_delta=_quantize_money(ending_cash - bank_balance_end),
    )
    return summary, ending_cash


def generate_cash_flow(
    source: LedgerSource,
    *,
    start_date: date,
    end_date: date,
    granularity: Granularity | str | None = None,
) -> CashFlowResponse:
    """Generate an indirect-method cash flow statement.

    EndingCash = BeginningCash + Operating + Investing + Financing. The first
    period starts from the bank balance before ``start_date``; every later
    period starts from the previous period's ending cash.
    """
    start_date = as_calendar_date(start_date)
    end_date = as_calendar_date(end_date)
    granularity = _resolve_granularity(granularity)

    with log_timing(
        "cash_flow",
        logger=logger,
        start_date=start_date.isoformat(),
        end_date=end_date.isoformat(),
        granularity=getattr(granularity, "value", granularity),
    ) as timing:
        try:
            periods = partition(start_date, end_date, granularity)
            aggregator = _aggregator_for(source)

            if start_date > end_date:
                empty = DateRange(start=start_date, end=end_date)
                totals = _CashFlowFigures(aggregator, empty)
                opening_cash = _ZERO
                bank_balance_end = _ZERO
            else:
                totals = _CashFlowFigures(aggregator, DateRange(start=start_date, end=end_date))
                opening_cash = aggregator.type_total(AccountType.BANK_ACCOUNT, before(start_date))
                bank_balance_end = aggregator.type_total(AccountType.BANK_ACCOUNT, as_of(end_date))

            by_period: dict[str, _CashFlowFigures] = {}
            period_summaries: dict[str, CashFlowSummary] = {}
            beginning_by_period: dict[str, Decimal] = {}
            ending_by_period: dict[str, Decimal] = {}
            running_cash = opening_cash
            for period in periods:
                figures = _CashFlowFigures(aggregator, period)
                by_period[period.key] = figures
                bank_at_period_end = aggregator.type_total(AccountType.BANK_ACCOUNT, as_of(period.end))
                beginning_by_period[period.key] = running_cash
                period_summaries[period.key], running_cash = _cash_flow_summary(
                    figures, running_cash, bank_at_period_end
                )
                ending_by_period[period.key] = running_cash

            summary, ending_cash = _cash_flow_summary(totals, opening_cash, bank_balance_end)
            if summary.cash_reconciliation_delta != 0:
                logger.warning(
                    "Indirect cash flow does not reconcile to bank balance",
                    error_id=ErrorIds.CASH_RECONCILIATION_GAP,
                    end_date=end_date.isoformat(),
                    ending_cash=str(summary.ending_cash),
                    bank_balance_end=str(summary.bank_balance_end),
                    cash_reconciliation_delta=str(summary.cash_reconciliation_delta),
                )
        except ReportError as exc:
            log_exception(
                logger,
                exc,
                "Cash flow generation failed",
                include_traceback=False,
                error_id=ErrorIds.REPORT_GENERATION_FAILED,
            )
            raise

        timing["period_count"] = len(periods)

    def line(group_key: str, label: str, attribute: str) -> SummaryLine:
        return _summary_line(
            group_key,
            label,
            getattr(totals, attribute),
            {key: getattr(figures, attribute) for key, figures in by_period.items()},
        )

    return CashFlowResponse(
        start_date=start_date,
        end_date=end_date,
        granularity=granularity,
        periods=_period_columns(periods),
        operating=[
            line("revenue", "Revenue", "revenue"),
            line("cogs", "COGS", "cogs"),
            line("expenses", "Expenses", "expenses"),
            line("net_income", "Net Income", "net_income"),
        ],
        investing=[
            line("increase_in_assets", "Increase in Assets", "increase_in_assets"),
            line("net_investing_change", "Investing Change", "net_investing_change"),
        ],
        financing=[
            line("increase_in_liabilities", "Increase in Liabilities", "increase_in_liabilities"),
            line("owner_contributions", "Owner Contributions", "owner_contributions"),
            line("owner_distributions", "Owner Distributions", "owner_distributions"),
            line("net_financing_change", "Financing Change", "net_financing_change"),
        ],
        beginning_cash=_summary_line("beginning_cash", "Beginning Bank Balance", opening_cash, beginning_by_period),
        ending_cash=_summary_line("ending_cash", "Ending Bank Balance", ending_cash, ending_by_period),
        summary=summary,
        period_summaries=period_summaries,
    )
