"""Tests for logging helpers."""

import logging

import structlog
from structlog.dev import ConsoleRenderer
from structlog.processors import JSONRenderer

from bookkeeping import logger as logger_module


def test_select_renderer_uses_console_in_debug(monkeypatch) -> None:
    monkeypatch.setattr(logger_module.settings, "debug", True)
    renderer = logger_module._select_renderer()
    assert isinstance(renderer, ConsoleRenderer)


def test_select_renderer_uses_json_in_production(monkeypatch) -> None:
    monkeypatch.setattr(logger_module.settings, "debug", False)
    renderer = logger_module._select_renderer()
    assert isinstance(renderer, JSONRenderer)


def test_resolve_level(monkeypatch) -> None:
    monkeypatch.setattr(logger_module.settings, "debug", False)
    monkeypatch.setattr(logger_module.settings, "log_level", "WARNING")
    assert logger_module._resolve_level() == logging.WARNING

    monkeypatch.setattr(logger_module.settings, "log_level", "NOT_A_LEVEL")
    assert logger_module._resolve_level() == logging.INFO

    monkeypatch.setattr(logger_module.settings, "debug", True)
    assert logger_module._resolve_level() == logging.DEBUG


def test_configure_logging_installs_processor_formatter(monkeypatch) -> None:
    monkeypatch.setattr(logger_module.settings, "debug", False)
    calls: list[dict] = []
    monkeypatch.setattr(logger_module.logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    logger_module.configure_logging()

    assert len(calls) == 1
    (handler,) = calls[0]["handlers"]
    assert isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)
    assert calls[0]["level"] == logging.INFO
    assert calls[0]["force"] is True


# =============================================================================
# Timing Utilities Tests
# =============================================================================


def test_log_timing_basic(capsys) -> None:
    """Test log_timing context manager logs operation with timing."""
    test_logger = logger_module.get_logger("test_timing")

    with logger_module.log_timing("balance_sheet", logger=test_logger):
        pass

    captured = capsys.readouterr()
    assert "balance_sheet completed" in captured.out
    assert "duration_ms" in captured.out


def test_log_timing_with_context(capsys) -> None:
    """Test log_timing includes additional context."""
    test_logger = logger_module.get_logger("test_timing")

    with logger_module.log_timing("cash_flow", logger=test_logger, granularity="quarter"):
        pass

    captured = capsys.readouterr()
    assert "cash_flow completed" in captured.out
    assert "granularity" in captured.out


def test_log_timing_yields_mutable_dict(capsys) -> None:
    """Test log_timing yields a dict that can be updated."""
    test_logger = logger_module.get_logger("test_timing")

    with logger_module.log_timing("income_statement", logger=test_logger) as ctx:
        ctx["line_count"] = 42

    captured = capsys.readouterr()
    assert "line_count" in captured.out
    assert ctx["duration_ms"] >= 0


def test_log_timing_logs_even_when_body_raises(capsys) -> None:
    test_logger = logger_module.get_logger("test_timing")

    try:
        with logger_module.log_timing("partition", logger=test_logger):
            raise ValueError("boom")
    except ValueError:
        pass

    captured = capsys.readouterr()
    assert "partition completed" in captured.out


# =============================================================================
# Exception Logging Tests
# =============================================================================


def test_log_exception_basic(capsys) -> None:
    """Test log_exception logs exception with context."""
    test_logger = logger_module.get_logger("test_exception")

    try:
        raise ValueError("Test error message")
    except ValueError as exc:
        logger_module.log_exception(test_logger, exc, "Failed to roll up")

    captured = capsys.readouterr()
    assert "Failed to roll up" in captured.out
    assert "ValueError" in captured.out
    assert "Test error message" in captured.out


def test_log_exception_with_extra_context(capsys) -> None:
    """Test log_exception includes extra context fields."""
    test_logger = logger_module.get_logger("test_exception")

    try:
        raise KeyError("missing_account")
    except KeyError as exc:
        logger_module.log_exception(test_logger, exc, "Lookup failed", account_id="acc-1", include_traceback=False)

    captured = capsys.readouterr()
    assert "Lookup failed" in captured.out
    assert "account_id" in captured.out


def test_log_exception_custom_level(capsys) -> None:
    test_logger = logger_module.get_logger("test_exception")

    try:
        raise RuntimeError("Soft failure")
    except RuntimeError as exc:
        logger_module.log_exception(test_logger, exc, "Recovered", level="warning", include_traceback=False)

    captured = capsys.readouterr()
    assert "Recovered" in captured.out
    assert "warning" in captured.out
