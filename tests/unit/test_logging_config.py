"""
Unit tests for structured logging setup.
"""

from __future__ import annotations

import logging
from typing import Generator

import pytest
import structlog

from weather_booking.logging_config import QUIET_LOGGERS, setup_logging


@pytest.fixture(autouse=True)
def restore_logging() -> Generator[None, None, None]:
    yield
    setup_logging()


@pytest.mark.unit
def test_info_level_renders_json() -> None:
    setup_logging("INFO")

    processors = structlog.get_config()["processors"]
    assert processors[0] is structlog.contextvars.merge_contextvars
    assert isinstance(processors[-1], structlog.processors.JSONRenderer)


@pytest.mark.unit
def test_debug_level_renders_console() -> None:
    setup_logging("DEBUG")

    assert isinstance(structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer)


@pytest.mark.unit
def test_library_loggers_are_quieted() -> None:
    setup_logging("DEBUG")

    for name in QUIET_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING
