"""Tests for root logger setup."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from birdcode_map.services.logging import QUIET_LOGGERS, configure_logging


@pytest.fixture(autouse=True)
def restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    quiet_levels = {name: logging.getLogger(name).level for name in QUIET_LOGGERS}
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, quiet_level in quiet_levels.items():
        logging.getLogger(name).setLevel(quiet_level)


class TestConfigureLogging:
    """configure_logging levels and format."""

    def test_default_level(self) -> None:
        configure_logging(force=True)
        assert logging.getLogger().level == logging.INFO

    def test_debug_level(self) -> None:
        configure_logging(debug=True, force=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_http_loggers_quiet_by_default(self) -> None:
        configure_logging(force=True)
        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_http_loggers_verbose_with_debug(self) -> None:
        configure_logging(debug=True, force=True)
        assert logging.getLogger("httpx").level == logging.DEBUG

    def test_format(self) -> None:
        configure_logging(force=True)
        formatter = logging.getLogger().handlers[0].formatter
        assert formatter is not None
        record = logging.LogRecord("birdcode_map.store", logging.INFO, "", 0, "wrote %s", ("x",), None)
        assert formatter.format(record) == "INFO    birdcode_map.store: wrote x"
