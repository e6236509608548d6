"""
------------------------------------------------------------------------------
Project:        ShopFlux
File:           tests/unit/test_logger.py
Version:        1.0.0
Producer:       ShopFlux Team
Generator:      Antigravity
Description:    Unit tests for the centralized logging system.
------------------------------------------------------------------------------
"""

import logging

import pytest

from shopflux.logger import get_logger, log_report_run, set_component_level, setup_logging


def _flush():
    for handler in logging.getLogger("shopflux").handlers:
        handler.flush()


def test_logger_namespace():
    """Verify that get_logger returns a child of the shopflux root."""
    logger = get_logger("filters")
    assert logger.name == "shopflux.filters"
    assert get_logger("shopflux.filters") is logger


def test_logging_to_file(tmp_path):
    """Verify that logs are correctly written to a file."""
    log_file = tmp_path / "logs" / "app.log"
    setup_logging(level="DEBUG", log_file=str(log_file))

    get_logger("testcomp").debug("Logging to file test message")
    _flush()

    assert log_file.exists()
    assert "Logging to file test message" in log_file.read_text()


def test_component_level_overrides(tmp_path):
    """Verify that specific components can have different log levels."""
    log_file = tmp_path / "component.log"
    setup_logging(level="INFO", log_file=str(log_file), component_levels={"testcomp": "DEBUG"})

    get_logger("testcomp").debug("COMPONENT DEBUG MESSAGE")
    get_logger("othercomp").debug("OTHER DEBUG MESSAGE")
    _flush()

    content = log_file.read_text()
    assert "COMPONENT DEBUG MESSAGE" in content
    assert "OTHER DEBUG MESSAGE" not in content


def test_invalid_component_level_is_ignored():
    set_component_level("othercomp", "CHATTY")
    assert get_logger("othercomp").level == logging.NOTSET


def test_setup_is_idempotent():
    setup_logging(level="INFO")
    setup_logging(level="INFO")
    assert len(logging.getLogger("shopflux").handlers) == 1


def test_report_run_trace(tmp_path):
    log_file = tmp_path / "runs.log"
    setup_logging(level="WARNING", log_file=str(log_file))

    log_report_run("daily_sales", "sales", 10, 3, grouped=True)
    _flush()
    assert "RUN:" not in log_file.read_text()

    set_component_level("reporting.runs", "DEBUG")
    log_report_run("daily_sales", "sales", 10, 3, grouped=True)
    _flush()
    assert "RUN: daily_sales | SOURCE: sales | IN: 10 | OUT: 3 | GROUPED" in log_file.read_text()


def test_levels_are_case_insensitive():
    setup_logging(level="info", component_levels={"testcomp": " debug "})
    assert logging.getLogger("shopflux").level == logging.INFO
    assert get_logger("testcomp").level == logging.DEBUG
    assert get_logger("shopflux") is logging.getLogger("shopflux")
