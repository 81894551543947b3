"""Shared constants."""

from bookkeeping.constants.error_ids import ErrorIds

__all__ = ["ErrorIds"]
