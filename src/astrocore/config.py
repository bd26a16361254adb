"""
Configuration management for astrocore.

Provides environment-aware configuration with validation. The XISF fallback
values are the geometry and data location used when a container's header does
not yield a usable image location.
"""

import os
import logging
import configparser
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field
from enum import Enum

from .exceptions import ConfigurationError


class LogLevel(Enum):
    """Enumeration for log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class XisfConfig:
    """XISF reader settings."""
    fallback_width: int = 3856
    fallback_height: int = 2180
    fallback_offset: int = 28672
    fallback_size: int = 16812160


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: LogLevel = LogLevel.INFO
    file_path: Optional[str] = None
    console_output: bool = True
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class AstroCoreConfig:
    """Main library configuration."""
    xisf: XisfConfig = field(default_factory=XisfConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigManager:
    """Configuration manager with environment support."""

    def __init__(self, config_file: Optional[str] = None, env_prefix: str = "ASTROCORE"):
        self.config_file = config_file or self._find_config_file()
        self.env_prefix = env_prefix
        self._config: Optional[AstroCoreConfig] = None

    def _find_config_file(self) -> str:
        """Find configuration file in standard locations."""
        possible_paths = [
            "astrocore.ini",
            os.path.expanduser("~/.astrocore/config.ini"),
            os.path.expanduser("~/.config/astrocore.ini"),
        ]

        for path in possible_paths:
            if os.path.exists(path):
                return path

        # Return default path if none found
        return "astrocore.ini"

    def load_config(self) -> AstroCoreConfig:
        """Load configuration from file and environment variables."""
        if self._config is not None:
            return self._config

        config = AstroCoreConfig()

        if os.path.exists(self.config_file):
            self._load_from_file(config)

        self._load_from_env(config)
        self._validate_config(config)

        self._config = config
        return config

    def _load_from_file(self, config: AstroCoreConfig):
        """Load configuration from INI file."""
        parser = configparser.ConfigParser()
        parser.read(self.config_file)

        try:
            if parser.has_section("xisf"):
                xisf_section = parser["xisf"]
                config.xisf.fallback_width = xisf_section.getint("fallback_width", config.xisf.fallback_width)
                config.xisf.fallback_height = xisf_section.getint("fallback_height", config.xisf.fallback_height)
                config.xisf.fallback_offset = xisf_section.getint("fallback_offset", config.xisf.fallback_offset)
                config.xisf.fallback_size = xisf_section.getint("fallback_size", config.xisf.fallback_size)

            if parser.has_section("logging"):
                log_section = parser["logging"]
                config.logging.level = LogLevel(log_section.get("level", config.logging.level.value).upper())
                config.logging.file_path = log_section.get("file_path", config.logging.file_path)
                config.logging.console_output = log_section.getboolean("console_output", config.logging.console_output)
                config.logging.format = log_section.get("format", config.logging.format, raw=True)
        except ValueError as e:
            raise ConfigurationError(f"Invalid value in {self.config_file}: {e}", error_code="INVALID_CONFIG")

    def _load_from_env(self, config: AstroCoreConfig):
        """Load configuration from environment variables."""
        try:
            if env_val := os.getenv(f"{self.env_prefix}_XISF_FALLBACK_WIDTH"):
                config.xisf.fallback_width = int(env_val)
            if env_val := os.getenv(f"{self.env_prefix}_XISF_FALLBACK_HEIGHT"):
                config.xisf.fallback_height = int(env_val)
            if env_val := os.getenv(f"{self.env_prefix}_XISF_FALLBACK_OFFSET"):
                config.xisf.fallback_offset = int(env_val)
            if env_val := os.getenv(f"{self.env_prefix}_XISF_FALLBACK_SIZE"):
                config.xisf.fallback_size = int(env_val)
            if env_val := os.getenv(f"{self.env_prefix}_LOG_LEVEL"):
                config.logging.level = LogLevel(env_val.upper())
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment override: {e}", error_code="INVALID_CONFIG")

        if env_val := os.getenv(f"{self.env_prefix}_LOG_FILE"):
            config.logging.file_path = env_val

    def _validate_config(self, config: AstroCoreConfig):
        """Validate configuration settings."""
        if config.xisf.fallback_width < 1 or config.xisf.fallback_height < 1:
            raise ConfigurationError("XISF fallback geometry must be at least 1x1", error_code="INVALID_CONFIG")

        if config.xisf.fallback_offset < 0 or config.xisf.fallback_size < 0:
            raise ConfigurationError("XISF fallback offset and size must not be negative", error_code="INVALID_CONFIG")

    def save_config(self, config: AstroCoreConfig):
        """Save configuration to file."""
        parser = configparser.ConfigParser(interpolation=None)

        parser.add_section("xisf")
        parser["xisf"]["fallback_width"] = str(config.xisf.fallback_width)
        parser["xisf"]["fallback_height"] = str(config.xisf.fallback_height)
        parser["xisf"]["fallback_offset"] = str(config.xisf.fallback_offset)
        parser["xisf"]["fallback_size"] = str(config.xisf.fallback_size)

        parser.add_section("logging")
        parser["logging"]["level"] = config.logging.level.value
        if config.logging.file_path:
            parser["logging"]["file_path"] = config.logging.file_path
        parser["logging"]["console_output"] = str(config.logging.console_output)
        parser["logging"]["format"] = config.logging.format

        config_dir = os.path.dirname(self.config_file)
        if config_dir:
            os.makedirs(config_dir, exist_ok=True)
        with open(self.config_file, 'w') as f:
            parser.write(f)


# Global config manager instance
config_manager = ConfigManager()


def get_config() -> AstroCoreConfig:
    """Get the current library configuration."""
    return config_manager.load_config()


def configure_logging(config: Optional[LoggingConfig] = None) -> None:
    """
    Configure process-wide logging from a LoggingConfig.

    Intended for applications and scripts; the library itself only ever
    obtains module loggers.

    Args:
        config: Logging settings, defaults to the loaded configuration
    """
    if config is None:
        config = get_config().logging

    handlers = []
    if config.file_path:
        log_dir = os.path.dirname(os.path.abspath(config.file_path))
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(config.file_path, mode='a'))
    if config.console_output or not handlers:
        handlers.append(logging.StreamHandler())

    logging.basicConfig(
        level=getattr(logging, config.level.value),
        format=config.format,
        handlers=handlers,
        force=True,
    )
