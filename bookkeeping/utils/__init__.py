"""Utility functions and helpers."""

from .exceptions import (
    MalformedTreeError,
    ReportError,
    UnmappedAccountTypeError,
    raise_cycle,
    raise_dangling_parent,
)

__all__ = [
    "MalformedTreeError",
    "ReportError",
    "UnmappedAccountTypeError",
    "raise_cycle",
    "raise_dangling_parent",
]
