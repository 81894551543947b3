"""Services package."""

from bookkeeping.services.account_tree import AccountTree
from bookkeeping.services.balances import BalanceAggregator, as_of, before
from bookkeeping.services.collapse import (
    CollapseState,
    RowSpec,
    collapse_all,
    effective_value,
    expand_all,
    toggle,
    visible_rows,
)
from bookkeeping.services.formatting import (
    balance_sheet_base,
    cash_flow_base,
    format_amount,
    format_percentage,
    income_statement_base,
    percentage_of_base,
    statement_base,
)
from bookkeeping.services.periods import (
    DateRangePreset,
    months_in_range,
    partition,
    period_for_key,
    previous_period,
    quarters_in_range,
    resolve_preset,
)
from bookkeeping.services.reporting import (
    generate_balance_sheet,
    generate_cash_flow,
    generate_income_statement,
)
from bookkeeping.services.sign_convention import (
    NormalBalance,
    coerce_account_type,
    normal_balance,
    signed_amount,
    signed_posting_amount,
)
from bookkeeping.services.snapshot import LedgerSnapshot

__all__ = [
    "AccountTree",
    "BalanceAggregator",
    "CollapseState",
    "DateRangePreset",
    "LedgerSnapshot",
    "NormalBalance",
    "RowSpec",
    "as_of",
    "balance_sheet_base",
    "before",
    "cash_flow_base",
    "coerce_account_type",
    "collapse_all",
    "effective_value",
    "expand_all",
    "format_amount",
    "format_percentage",
    "generate_balance_sheet",
    "generate_cash_flow",
    "generate_income_statement",
    "income_statement_base",
    "months_in_range",
    "normal_balance",
    "partition",
    "percentage_of_base",
    "period_for_key",
    "previous_period",
    "quarters_in_range",
    "resolve_preset",
    "signed_amount",
    "signed_posting_amount",
    "toggle",
    "visible_rows",
]
