"""
Tests for configuration loading and logging setup.
"""

import logging

import pytest

from astrocore.config import (
    AstroCoreConfig, ConfigManager, LogLevel, LoggingConfig, XisfConfig, configure_logging
)
from astrocore.exceptions import ConfigurationError

ENV_VARS = (
    "ASTROCORE_XISF_FALLBACK_WIDTH",
    "ASTROCORE_XISF_FALLBACK_HEIGHT",
    "ASTROCORE_XISF_FALLBACK_OFFSET",
    "ASTROCORE_XISF_FALLBACK_SIZE",
    "ASTROCORE_LOG_LEVEL",
    "ASTROCORE_LOG_FILE",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestConfigManager:

    def test_defaults_without_file(self, tmp_path):
        config = ConfigManager(config_file=str(tmp_path / "missing.ini")).load_config()

        assert config.xisf == XisfConfig()
        assert config.xisf.fallback_width == 3856
        assert config.xisf.fallback_offset == 28672
        assert config.logging.level == LogLevel.INFO

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "astrocore.ini"
        path.write_text(
            "[xisf]\n"
            "fallback_width = 640\n"
            "fallback_height = 480\n"
            "\n"
            "[logging]\n"
            "level = debug\n"
            "console_output = false\n"
            "format = %(levelname)s %(message)s\n"
        )
        config = ConfigManager(config_file=str(path)).load_config()

        assert config.xisf.fallback_width == 640
        assert config.xisf.fallback_height == 480
        assert config.xisf.fallback_size == 16812160
        assert config.logging.level == LogLevel.DEBUG
        assert config.logging.console_output is False
        assert config.logging.format == "%(levelname)s %(message)s"

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "astrocore.ini"
        path.write_text("[xisf]\nfallback_width = 640\n")
        monkeypatch.setenv("ASTROCORE_XISF_FALLBACK_WIDTH", "1024")
        monkeypatch.setenv("ASTROCORE_LOG_LEVEL", "warning")
        monkeypatch.setenv("ASTROCORE_LOG_FILE", str(tmp_path / "astrocore.log"))

        config = ConfigManager(config_file=str(path)).load_config()

        assert config.xisf.fallback_width == 1024
        assert config.logging.level == LogLevel.WARNING
        assert config.logging.file_path == str(tmp_path / "astrocore.log")

    def test_config_is_cached(self, tmp_path):
        manager = ConfigManager(config_file=str(tmp_path / "missing.ini"))
        assert manager.load_config() is manager.load_config()

    def test_invalid_geometry(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ASTROCORE_XISF_FALLBACK_WIDTH", "0")

        with pytest.raises(ConfigurationError) as excinfo:
            ConfigManager(config_file=str(tmp_path / "missing.ini")).load_config()

        assert excinfo.value.error_code == "INVALID_CONFIG"

    def test_non_numeric_environment_value(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ASTROCORE_XISF_FALLBACK_OFFSET", "lots")

        with pytest.raises(ConfigurationError):
            ConfigManager(config_file=str(tmp_path / "missing.ini")).load_config()

    def test_invalid_file_value(self, tmp_path):
        path = tmp_path / "astrocore.ini"
        path.write_text("[xisf]\nfallback_size = huge\n")

        with pytest.raises(ConfigurationError):
            ConfigManager(config_file=str(path)).load_config()

    def test_save_and_reload(self, tmp_path):
        path = tmp_path / "conf" / "astrocore.ini"
        config = AstroCoreConfig()
        config.xisf.fallback_offset = 4096
        config.logging.level = LogLevel.ERROR

        ConfigManager(config_file=str(path)).save_config(config)
        reloaded = ConfigManager(config_file=str(path)).load_config()

        assert reloaded.xisf.fallback_offset == 4096
        assert reloaded.logging.level == LogLevel.ERROR
        assert reloaded.logging.format == config.logging.format


class TestConfigureLogging:

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "astrocore.log"
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging(LoggingConfig(level=LogLevel.DEBUG, file_path=str(log_file), console_output=False))
            logging.getLogger("astrocore.test").debug("hello from the test")
            for handler in root.handlers:
                handler.flush()

            assert root.level == logging.DEBUG
            assert "hello from the test" in log_file.read_text()
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
