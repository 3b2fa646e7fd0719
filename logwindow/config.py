"""Configuration management for logwindow.

This module handles loading and accessing configuration from:
1. logwindow.toml file in the data directory
2. Environment variables (LOGWINDOW_* prefix)
3. Default values

Environment variables override config file values, which override defaults.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import toml

from logwindow.core.constants import DEFAULT_CHUNK_SIZE, DEFAULT_WINDOW_SIZE

CONFIG_FILENAME = "logwindow.toml"


@dataclass
class ReaderConfig:
    """Defaults for readers created by the command line."""

    window_size: int = DEFAULT_WINDOW_SIZE
    chunk_size: int = DEFAULT_CHUNK_SIZE
    follow_interval: float = 1.0  # seconds between polls in follow mode


@dataclass
class PathConfig:
    """Directory path configuration."""

    data_dir: Path | None = None


@dataclass
class LoggingConfig:
    """Logging configuration."""

    log_level: str = "WARNING"
    log_file: Path | None = None


@dataclass
class Config:
    """Main configuration container."""

    reader: ReaderConfig = field(default_factory=ReaderConfig)
    paths: PathConfig = field(default_factory=PathConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self) -> None:
        """Resolve paths after initialization."""
        if self.paths.data_dir is None:
            self.paths.data_dir = _default_data_dir()


def _default_data_dir() -> Path:
    data_dir_str = os.environ.get("LOGWINDOW_DATA_DIR")
    if data_dir_str:
        return Path(data_dir_str)
    # Default: ~/.logwindow on Unix or %APPDATA%/logwindow on Windows
    if sys.platform == "win32":
        return Path(os.environ.get("APPDATA", "")) / "logwindow"
    return Path.home() / ".logwindow"


def _get_env_int(key: str, default: int) -> int:
    """Get a positive integer from environment variable."""
    value = os.environ.get(key)
    if value is not None:
        try:
            parsed = int(value)
        except ValueError:
            return default
        if parsed > 0:
            return parsed
    return default


def _get_env_float(key: str, default: float) -> float:
    """Get a positive float from environment variable."""
    value = os.environ.get(key)
    if value is not None:
        try:
            parsed = float(value)
        except ValueError:
            return default
        if parsed > 0:
            return parsed
    return default


def _get_env_str(key: str, default: str | None) -> str | None:
    """Get string from environment variable."""
    return os.environ.get(key, default)


def _get_env_path(key: str, default: Path | None) -> Path | None:
    """Get path from environment variable."""
    value = os.environ.get(key)
    if value:
        return Path(value)
    return default


def _load_config_file(data_dir: Path) -> dict[str, Any]:
    """Load configuration from logwindow.toml in ``data_dir``."""
    config_path = data_dir / CONFIG_FILENAME
    if not config_path.exists():
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            return toml.load(f)
    except (OSError, toml.TomlDecodeError):
        return {}


def _positive(value: Any, default: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        return value
    return default


def _apply_file_config(config: Config, file_config: dict[str, Any]) -> Config:
    """Apply configuration from file to config object."""
    if "reader" in file_config:
        reader = file_config["reader"]
        window_size = _positive(reader.get("window_size"), config.reader.window_size)
        chunk_size = _positive(reader.get("chunk_size"), config.reader.chunk_size)
        config.reader.window_size = int(window_size)
        config.reader.chunk_size = int(chunk_size)
        config.reader.follow_interval = float(
            _positive(reader.get("follow_interval"), config.reader.follow_interval)
        )

    if "paths" in file_config:
        paths = file_config["paths"]
        if "data_dir" in paths:
            config.paths.data_dir = Path(paths["data_dir"])

    if "logging" in file_config:
        logging = file_config["logging"]
        config.logging.log_level = logging.get("log_level", config.logging.log_level)
        if "log_file" in logging:
            config.logging.log_file = Path(logging["log_file"])

    return config


def _apply_env_overrides(config: Config) -> Config:
    """Apply environment variable overrides to config."""
    config.reader.window_size = _get_env_int(
        "LOGWINDOW_WINDOW_SIZE", config.reader.window_size
    )
    config.reader.chunk_size = _get_env_int(
        "LOGWINDOW_CHUNK_SIZE", config.reader.chunk_size
    )
    config.reader.follow_interval = _get_env_float(
        "LOGWINDOW_FOLLOW_INTERVAL", config.reader.follow_interval
    )

    config.paths.data_dir = _get_env_path("LOGWINDOW_DATA_DIR", config.paths.data_dir)

    config.logging.log_level = (
        _get_env_str("LOGWINDOW_LOG_LEVEL", config.logging.log_level)
        or config.logging.log_level
    )
    config.logging.log_file = _get_env_path(
        "LOGWINDOW_LOG_FILE", config.logging.log_file
    )

    return config


def load_config() -> Config:
    """Load configuration from defaults, file, and environment.

    Priority (highest to lowest):
    1. Environment variables (LOGWINDOW_*)
    2. logwindow.toml file
    3. Default values

    Returns:
        Config: The loaded configuration object
    """
    config = Config()

    file_config = _load_config_file(_default_data_dir())
    if file_config:
        config = _apply_file_config(config, file_config)

    config = _apply_env_overrides(config)

    return config


# Global config instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance.

    Returns:
        Config: The configuration object
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> Config:
    """Reload configuration from file and environment.

    Returns:
        Config: The reloaded configuration object
    """
    global _config
    _config = load_config()
    return _config


__all__ = [
    "Config",
    "ReaderConfig",
    "PathConfig",
    "LoggingConfig",
    "load_config",
    "get_config",
    "reload_config",
]
