"""
Tests for structured logging setup.

Requires Python 3.11+.
"""

import json
from typing import Generator

import pytest
import structlog

from watchrun.utils.config import LoggingSettings, load_settings
from watchrun.utils.logger import LoggerMixin, configure_logging, get_logger


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Restore structlog defaults so later tests do not write to closed streams."""
    yield
    structlog.reset_defaults()


class Component(LoggerMixin):
    """Minimal LoggerMixin user."""


class TestConfigureLogging:
    """Test cases for configure_logging."""

    def test_json_goes_to_stderr(self, capsys: pytest.CaptureFixture[str]):
        """Test that log lines never land on stdout."""
        settings = load_settings()
        settings.logging = LoggingSettings(format="json")
        configure_logging(settings)

        get_logger("test").warning("watch_registration_failed", path="gone")
        captured = capsys.readouterr()

        assert captured.out == ""
        entry = json.loads(captured.err.strip().splitlines()[-1])
        assert entry["event"] == "watch_registration_failed"
        assert entry["path"] == "gone"
        assert entry["level"] == "warning"
        assert entry["app"] == "watchrun"

    def test_level_filtering(self, capsys: pytest.CaptureFixture[str]):
        """Test that messages below the configured level are dropped."""
        settings = load_settings()
        settings.logging = LoggingSettings(level="WARNING")
        configure_logging(settings)

        get_logger("test").info("hidden")
        get_logger("test").error("shown")
        err = capsys.readouterr().err

        assert "hidden" not in err
        assert "shown" in err


class TestLoggerMixin:
    """Test cases for LoggerMixin."""

    def test_logger_is_cached_per_instance(self):
        """Test that the bound logger is created once per object."""
        component = Component()

        assert component.log is component.log
