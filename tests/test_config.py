"""
Tests for configuration modules functionality.
"""
import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from config.api import APIConfig, CircuitBreakerState
from config.settings import Settings
from utils.logger_setup import setup_logging


class TestSettings:
    """Test Settings configuration class."""

    def test_project_root_detection(self):
        project_root = Settings.PROJECT_ROOT
        assert isinstance(project_root, Path)
        assert (project_root / "src").exists()

    def test_filter_timing(self):
        assert Settings.FILTER_DEBOUNCE_MS == 500
        assert 0 < Settings.TIMER_PUMP_INTERVAL_SECONDS < Settings.FILTER_DEBOUNCE_MS / 1000

    @pytest.mark.parametrize(
        "name,level",
        [("DEBUG", logging.DEBUG), ("warning", logging.WARNING), ("nonsense", logging.INFO)],
    )
    def test_get_log_level(self, name, level):
        assert Settings.get_log_level(name) == level

    def test_ensure_directories(self, tmp_path):
        with patch.object(Settings, "LOGS_DIR", tmp_path / "logs"):
            Settings.ensure_directories()
            assert (tmp_path / "logs").is_dir()


class TestAPIConfig:
    """Test APIConfig URLs and policy constants."""

    def test_urls_from_explicit_base(self):
        assert APIConfig.get_files_url("http://h/api/") == "http://h/api/files/"
        assert APIConfig.get_file_url("abc", "http://h/api") == "http://h/api/files/abc/"
        assert APIConfig.get_stats_url("http://h/api") == "http://h/api/files/stats/"

    def test_urls_default_to_base_url(self):
        assert APIConfig.get_files_url().startswith(APIConfig.BASE_URL)

    def test_retry_policy(self):
        assert APIConfig.MAX_RETRIES >= 1
        assert APIConfig.RETRY_BASE_DELAY <= APIConfig.RETRY_MAX_DELAY

    def test_circuit_breaker_states(self):
        assert {state.value for state in CircuitBreakerState} == {"closed", "open", "half_open"}


class TestLoggerSetup:
    def test_writes_rotating_file(self, tmp_path):
        logger = setup_logging("filehub.test.file", log_level=logging.DEBUG, log_dir=tmp_path, console_output=False)
        logger.debug("hello")
        for handler in logger.handlers:
            handler.flush()

        assert (tmp_path / "filehub_test_file.log").read_text().strip().endswith("hello")

    def test_idempotent(self, tmp_path):
        first = setup_logging("filehub.test.once", log_dir=tmp_path, console_output=False)
        handler_count = len(first.handlers)
        second = setup_logging("filehub.test.once", log_dir=tmp_path, console_output=False)
        assert second is first
        assert len(second.handlers) == handler_count


class TestDependencyContainer:
    def test_services_built_lazily_and_shared(self, tmp_path):
        from core.dependencies import DependencyContainer

        with patch("core.dependencies.setup_logging", return_value=logging.getLogger("filehub.test.di")), \
                patch.object(Settings, "LOGS_DIR", tmp_path / "logs"):
            container = DependencyContainer(base_url="http://h/api")

        assert container.catalog_service is container.catalog_service
        assert container.catalog_service.client is container.client
        assert container.client.base_url == "http://h/api"
        assert container.get_logger() is container.logger
