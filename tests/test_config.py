"""
Tests for environment-backed configuration and logging setup.
"""

import logging

import pytest

from tastream import SMA, ConfigurationError
from tastream.config import MAX_PERIOD, Config, IndicatorConfig, LogConfig, get_config
from tastream.utils import get_logger, setup_logger
from tastream.utils.logger import LOGGER_NAME


class TestConfig:
    """Config singleton loaded from the environment."""

    def test_defaults(self, env_config):
        config = env_config()
        assert config.log.level == "INFO"
        assert config.log.log_to_file is False
        assert config.indicators.max_period == MAX_PERIOD

    def test_singleton(self):
        assert get_config() is get_config()

    def test_env_overrides(self, env_config):
        config = env_config(
            TASTREAM_LOG_LEVEL="debug",
            TASTREAM_LOG_TO_FILE="yes",
            TASTREAM_LOG_DIR="/tmp/tastream-logs",
            TASTREAM_MAX_PERIOD="500",
        )
        assert config.log.level == "DEBUG"
        assert config.log.log_to_file is True
        assert config.log.log_dir == "/tmp/tastream-logs"
        assert config.indicators.max_period == 500
        assert "max_period=500" in config.summary_short()

    def test_max_period_limits_indicators(self, env_config):
        env_config(TASTREAM_MAX_PERIOD="50")
        assert SMA(period=50).period == 50
        with pytest.raises(ConfigurationError, match="TASTREAM_MAX_PERIOD"):
            SMA(period=51)

    def test_dotenv_file(self, env_config, monkeypatch, tmp_path):
        # Register the variable with monkeypatch so teardown removes what load_dotenv sets
        monkeypatch.setenv("TASTREAM_MAX_PERIOD", "0")
        monkeypatch.delenv("TASTREAM_MAX_PERIOD")
        env_file = tmp_path / ".env"
        env_file.write_text("TASTREAM_MAX_PERIOD=75\n", encoding="utf-8")

        config = env_config(str(env_file))
        assert config.indicators.max_period == 75

    @pytest.mark.parametrize("env", [
        {"TASTREAM_MAX_PERIOD": "lots"},
        {"TASTREAM_MAX_PERIOD": "0"},
        {"TASTREAM_LOG_LEVEL": "LOUD"},
        {"TASTREAM_LOG_TO_FILE": "maybe"},
    ])
    def test_invalid_env(self, env_config, env):
        with pytest.raises(ConfigurationError):
            env_config(**env)


class TestConfigDataclasses:
    """Validation on the sub-config dataclasses."""

    def test_log_level_normalized(self):
        assert LogConfig(level="warning").level == "WARNING"

    def test_bad_log_level(self):
        with pytest.raises(ConfigurationError, match="Unknown log level"):
            LogConfig(level="chatty")

    def test_bad_max_period(self):
        with pytest.raises(ConfigurationError):
            IndicatorConfig(max_period=0)


class TestLogger:
    """Module loggers hang off the 'tastream' logger."""

    def test_child_logger_name(self):
        logger = get_logger("factory")
        assert isinstance(logger, logging.Logger)
        assert logger.name == f"{LOGGER_NAME}.factory"

    def test_root_logger_has_console_handler(self):
        root = logging.getLogger(LOGGER_NAME)
        assert root.handlers
        assert root.propagate is False

    def test_unnamed_logger_is_package_logger(self):
        assert get_logger() is logging.getLogger(LOGGER_NAME)

    def test_file_logging(self, tmp_path):
        setup_logger(log_dir=str(tmp_path), log_level="DEBUG", log_to_file=True)
        try:
            get_logger("state").debug("snapshot written")
            for handler in logging.getLogger(LOGGER_NAME).handlers:
                handler.flush()
            log_files = list(tmp_path.glob("tastream_*.log"))
            assert len(log_files) == 1
            assert "tastream.state | snapshot written" in log_files[0].read_text(encoding="utf-8")
        finally:
            for handler in logging.getLogger(LOGGER_NAME).handlers:
                handler.close()
            setup_logger()
