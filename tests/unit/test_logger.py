"""Unit tests for logging helpers."""

import logging

import pytest
import structlog
from structlog.testing import capture_logs

from bgmtv.config import get_settings
from bgmtv.utils.logger import LogTimer, get_logger, setup_logging


@pytest.fixture
def reset_structlog():
    yield
    structlog.reset_defaults()
    get_settings.cache_clear()


class TestLogTimer:
    """Test the operation timer."""

    def test_logs_start_and_complete(self):
        with capture_logs() as logs:
            logger = structlog.get_logger("timer-test")
            with LogTimer(logger, "GET /v0/subjects/3559", path="/v0/subjects/3559") as timer:
                timer.extra_context["status"] = 200

        assert [entry["log_level"] for entry in logs] == ["debug", "info"]
        assert logs[0]["event"] == "[START] GET /v0/subjects/3559"
        assert logs[1]["event"] == "[COMPLETE] GET /v0/subjects/3559"
        assert logs[1]["status"] == 200
        assert logs[1]["path"] == "/v0/subjects/3559"
        assert timer.duration >= 0

    def test_logs_failure_and_reraises(self):
        with capture_logs() as logs:
            logger = structlog.get_logger("timer-test")
            with pytest.raises(RuntimeError):
                with LogTimer(logger, "GET /v0/me"):
                    raise RuntimeError("boom")

        failed = logs[-1]
        assert failed["log_level"] == "error"
        assert failed["event"] == "[FAILED] GET /v0/me"
        assert failed["error_type"] == "RuntimeError"
        assert failed["error"] == "boom"


class TestGetLogger:
    def test_binds_context(self):
        with capture_logs() as logs:
            get_logger("bgmtv.test", request_id="abc").info("hello")

        assert logs == [{"event": "hello", "log_level": "info", "request_id": "abc"}]


class TestSetupLogging:
    def test_sets_root_level(self, monkeypatch, reset_structlog):
        monkeypatch.setenv("BGM_APP_ENV", "production")
        get_settings.cache_clear()

        setup_logging("warning")

        assert logging.getLogger().level == logging.WARNING
        assert logging.getLogger("aiohttp").level == logging.WARNING

    def test_uses_settings_level(self, monkeypatch, reset_structlog):
        monkeypatch.setenv("BGM_LOG_LEVEL", "DEBUG")
        get_settings.cache_clear()

        setup_logging()

        assert logging.getLogger().level == logging.DEBUG
