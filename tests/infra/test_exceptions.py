"""Unit tests for exception utilities."""

import pytest

from bookkeeping.constants import ErrorIds
from bookkeeping.utils.exceptions import (
    MalformedTreeError,
    ReportError,
    UnmappedAccountTypeError,
    raise_cycle,
    raise_dangling_parent,
)


class TestRaiseCycle:
    def test_message_includes_path(self):
        with pytest.raises(MalformedTreeError) as exc_info:
            raise_cycle("a", path=["a", "b"])
        assert exc_info.value.account_id == "a"
        assert str(exc_info.value) == "Cycle detected in account tree at a: a -> b -> a"

    def test_is_a_report_error(self):
        with pytest.raises(ReportError):
            raise_cycle("a")


class TestRaiseDanglingParent:
    def test_basic_usage(self):
        with pytest.raises(MalformedTreeError) as exc_info:
            raise_dangling_parent("child", "ghost")
        assert exc_info.value.account_id == "child"
        assert "unknown parent ghost" in str(exc_info.value)


class TestUnmappedAccountType:
    def test_carries_raw_type(self):
        error = UnmappedAccountTypeError("Gizmo", account_id="acc-9")
        assert error.account_type == "Gizmo"
        assert error.account_id == "acc-9"
        assert str(error) == "Unmapped account type: 'Gizmo' (account acc-9)"
        assert isinstance(error, ReportError)


def test_error_ids_are_unique() -> None:
    values = [value for name, value in vars(ErrorIds).items() if name.isupper()]
    assert len(values) == len(set(values))
    assert all(value.startswith("BK-") for value in values)
