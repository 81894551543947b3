"""Stable error identifiers attached to log events as ``error_id``."""


class ErrorIds:
    MALFORMED_ACCOUNT_TREE = "BK-TREE-001"
    DANGLING_PARENT = "BK-TREE-002"
    UNMAPPED_ACCOUNT_TYPE = "BK-SIGN-001"
    UNSUPPORTED_GRANULARITY = "BK-PERIOD-001"
    UNSUPPORTED_PRESET = "BK-PERIOD-002"
    BALANCE_SHEET_IMBALANCE = "BK-REPORT-001"
    CASH_RECONCILIATION_GAP = "BK-REPORT-002"
    REPORT_GENERATION_FAILED = "BK-REPORT-003"
