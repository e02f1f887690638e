"""Unit tests for structlog configuration."""

from __future__ import annotations

import logging

import pytest
import structlog

from es_commerce.config import EngineSettings
from es_commerce.observability.logging import JsonLoggerFactory, configure_logging, get_logger


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestJsonLoggerFactory:
    def test_installs_processor_formatter(self, restore_logging: logging.Logger) -> None:
        JsonLoggerFactory.configure(logging.WARNING)
        assert restore_logging.level == logging.WARNING
        assert len(restore_logging.handlers) == 1
        formatter = restore_logging.handlers[0].formatter
        assert isinstance(formatter, structlog.stdlib.ProcessorFormatter)

    def test_configure_logging_reads_settings(self, restore_logging: logging.Logger) -> None:
        configure_logging(EngineSettings(log_level="debug", log_json=False))
        assert restore_logging.level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self, restore_logging: logging.Logger) -> None:
        configure_logging(EngineSettings(log_level="chatty"))
        assert restore_logging.level == logging.INFO


class TestGetLogger:
    def test_binds_initial_values(self) -> None:
        with structlog.testing.capture_logs() as logs:
            get_logger("test", component="drain").info("hello", n=1)
        assert logs == [{"component": "drain", "n": 1, "event": "hello", "log_level": "info"}]
