"""
Tests for settings helpers and logging setup.
"""
import logging

from datachat.core import config
from datachat.core.logger import get_logger


class TestSettings:

    def test_defaults(self):
        assert config.settings.MAX_UPLOAD_SIZE == 10 * 1024 * 1024
        assert config.settings.ALLOWED_EXTENSIONS == {".csv", ".json", ".sql"}
        assert config.settings.CHART_MAX_ROWS == 50

    def test_environment_helpers(self, monkeypatch):
        monkeypatch.setattr(config.settings, "ENVIRONMENT", "Production")
        assert config.is_production()
        assert not config.is_development()

        monkeypatch.setattr(config.settings, "ENVIRONMENT", "development")
        assert config.is_development()


class TestLogger:

    def test_handlers_not_duplicated(self):
        first = get_logger("datachat.tests.logger")
        second = get_logger("datachat.tests.logger")

        assert first is second
        assert len(first.handlers) == 1
        assert isinstance(first.handlers[0], logging.StreamHandler)
