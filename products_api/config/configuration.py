"""Configuration module for the Products API.

Loads settings from environment-specific config files:
- APP_ENV=dev  → config_dev.yaml
- APP_ENV=test → config_test.yaml
- Default      → config.yaml

Environment variables (optionally from a .env file) override the YAML values.
Fails fast with clear error messages if required configuration is missing.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv


# Levels understood by both logging and uvicorn
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def _get_project_root() -> Path:
    """Get the project root directory (where config.yaml lives)."""
    # Navigate from products_api/config/ up to project root
    return Path(__file__).parent.parent.parent


def _get_config_filename() -> str:
    """Get config filename based on APP_ENV environment variable.

    Returns:
        Config filename:
        - APP_ENV=dev  → config_dev.yaml
        - APP_ENV=test → config_test.yaml
        - Default      → config.yaml
    """
    app_env = os.environ.get("APP_ENV", "").lower()

    if app_env == "dev":
        return "config_dev.yaml"
    elif app_env == "test":
        return "config_test.yaml"
    else:
        return "config.yaml"


def _load_yaml_config() -> dict:
    """Load configuration from environment-specific config file."""
    config_filename = _get_config_filename()
    config_path = _get_project_root() / config_filename

    if not config_path.exists():
        raise ConfigurationError(
            f"Configuration file not found: {config_path}. "
            f"Set APP_ENV to 'dev' or 'test', or create {config_filename}."
        )

    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


def _get_optional_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get optional environment variable with default."""
    return os.environ.get(key, default)


@dataclass(frozen=True)
class DatabaseConfig:
    """Azure SQL connection configuration.

    The connection string names server and database only; the credential is
    an access token attached at connect time.
    """
    connection_string: str
    connection_string_for_token: Optional[str]


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""
    level: str


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration container."""
    database: DatabaseConfig
    logging: LoggingConfig


def load_config() -> AppConfig:
    """
    Load and validate all application configuration.

    Loads the YAML file selected by APP_ENV, then applies environment
    overrides (NORTHWIND_CONNECTION_STRING, CONNECTION_STRING_FOR_TOKEN,
    LOG_LEVEL).

    Returns:
        AppConfig: Validated application configuration.

    Raises:
        ConfigurationError: If required configuration is missing.
    """
    # Load environment variables from .env file
    load_dotenv()

    # Load YAML configuration
    yaml_config = _load_yaml_config()

    # Build Database config
    db_section = yaml_config.get("database", {}) or {}
    connection_strings = yaml_config.get("connection_strings", {}) or {}

    connection_string = _get_optional_env(
        "NORTHWIND_CONNECTION_STRING",
        db_section.get("connection_string", connection_strings.get("northwind")),
    )
    if not connection_string:
        raise ConfigurationError(
            "Database connection string is not configured. Set "
            "'database.connection_string' in the config file or the "
            "NORTHWIND_CONNECTION_STRING environment variable."
        )

    database_config = DatabaseConfig(
        connection_string=connection_string,
        connection_string_for_token=_get_optional_env(
            "CONNECTION_STRING_FOR_TOKEN",
            db_section.get("connection_string_for_token"),
        ),
    )

    # Build Logging config
    logging_section = yaml_config.get("logging", {}) or {}
    raw_level = str(_get_optional_env("LOG_LEVEL", logging_section.get("level", "INFO"))).upper()

    # Aliases resolve to their canonical name: WARN → WARNING, FATAL → CRITICAL
    level = logging.getLevelName(logging.getLevelName(raw_level))
    if level not in LOG_LEVELS:
        raise ConfigurationError(
            f"Unknown logging level: '{raw_level}'. Use one of {', '.join(LOG_LEVELS)}."
        )

    logging_config = LoggingConfig(level=level)

    return AppConfig(
        database=database_config,
        logging=logging_config,
    )


# Module-level singleton for convenience
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the application configuration singleton.

    Lazy-loads configuration on first access.
    Config file is selected based on APP_ENV environment variable.

    Returns:
        AppConfig: Application configuration.

    Raises:
        ConfigurationError: If required configuration is missing.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_environment() -> str:
    """Get current environment name.

    Returns:
        'dev', 'test', or 'default' based on APP_ENV.
    """
    app_env = os.environ.get("APP_ENV", "").lower()
    return app_env if app_env in ("dev", "test") else "default"


def reset_config() -> None:
    """Reset the config singleton. Useful for testing."""
    global _config
    _config = None
