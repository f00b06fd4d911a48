"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from truckflow.config.logging import configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    app = logging.getLogger("truckflow")
    app_level = app.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    app.setLevel(app_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("truckflow").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_quiet_by_default(self) -> None:
        configure_logging()
        assert logging.getLogger("truckflow").level == logging.WARNING

    def test_sqlalchemy_kept_at_warning(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("sqlalchemy").level == logging.WARNING

    def test_single_root_handler(self) -> None:
        configure_logging()
        configure_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_json_mode(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("truckflow.test").warning("lock timeout", truck_id="T1")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "lock timeout"
        assert parsed["truck_id"] == "T1"
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "truckflow.test"
        assert "timestamp" in parsed

    def test_stdlib_loggers_are_structured(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("truckflow.services.lifecycle").info("Rejected dock for truck %s", "T1")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Rejected dock for truck T1"
        assert parsed["logger"] == "truckflow.services.lifecycle"
        assert parsed["level"] == "info"

    def test_debug_suppressed_when_not_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        logging.getLogger("truckflow.services.lifecycle").debug("hidden")
        assert capfd.readouterr().err == ""
