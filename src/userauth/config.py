"""Configuration management for the user registration service.

This module provides utilities for loading and validating configuration
from environment variables.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from userauth.auth import HashPoolConfig, PasswordHasher

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

LOGGER = logging.getLogger(__name__)

_PORT_UPPER_BOUND = 65536
_DEFAULT_PORT = 3000
_DEFAULT_HOST = "127.0.0.1"


def configure_logging(app_config: AppConfig) -> None:
    """Configure logging based on the application configuration.

    :param app_config: The application configuration instance
    """
    if not app_config.logging_level:
        logging.basicConfig(level=logging.INFO)
        return

    numeric_level = getattr(logging, app_config.logging_level.upper(), None)
    if not isinstance(numeric_level, int):
        LOGGER.warning("Invalid log level: %s, using INFO", app_config.logging_level)
        numeric_level = logging.INFO
    logging.basicConfig(level=numeric_level)


@dataclass
class AppConfig:
    """Holds application configuration loaded from environment variables."""

    logging_level: str | None
    root_path: str

    host: str
    port: int

    bcrypt_rounds: int
    hash_worker_count: int
    hash_timeout: int | None

    def __post_init__(self) -> None:
        """Initialize derived configuration attributes."""
        self.hash_config = HashPoolConfig(
            rounds=self.bcrypt_rounds,
            worker_count=self.hash_worker_count,
            timeout=self.hash_timeout,
        )


def get_env_str(var_name: str, default: str) -> str:
    """Get an environment variable as a string.

    :param var_name: Name of the environment variable
    :param default: Default value if the variable is not set
    :return: The environment variable value
    """
    return os.getenv(var_name, default)


def get_env_optional_int(
    var_name: str,
    default: int | None,
    value_checker: Callable[[int], bool] | None = None,
) -> int | None:
    """Get an environment variable as an integer with optional constraints.

    To indicate None, set the environment variable to an empty string.
    To indicate the default, leave the environment variable unset.
    To indicate an integer value, set the environment variable to that integer.

    :param var_name: Name of the environment variable
    :param default: Default value if the variable is not set
    :param value_checker: Optional function to validate the value
    :return: The environment variable value as an integer
    :raises ValueError: If the value does not meet the constraints or is not an integer
    """
    value_str = os.getenv(var_name)
    if value_str is None:
        return default

    if value_str == "":
        return None

    if not value_str.isnumeric():
        msg = f"Environment variable {var_name} must be an integer, got: {value_str}"
        raise ValueError(msg)

    value = int(value_str)

    if value_checker and not value_checker(value):
        msg = f"Environment variable {var_name} has invalid value: {value}"
        raise ValueError(msg)

    return value


def get_env_int(
    var_name: str,
    default: int,
    value_checker: Callable[[int], bool] | None = None,
) -> int:
    """Get an environment variable as an integer, empty meaning the default.

    :param var_name: Name of the environment variable
    :param default: Default value if the variable is unset or empty
    :param value_checker: Optional function to validate the value
    :return: The environment variable value as an integer
    :raises ValueError: If the value does not meet the constraints or is not an integer
    """
    value = get_env_optional_int(var_name, default, value_checker)
    return default if value is None else value


def load_config_from_env(env_file: str | Path | None) -> AppConfig:
    """Load application configuration from environment variables.

    :param env_file: Optional .env file loaded before reading the environment
    :return: An AppConfig instance populated with environment variable values
    """
    if env_file:
        load_dotenv(dotenv_path=env_file)

    return AppConfig(
        logging_level=get_env_str("LOGGING_LEVEL", "INFO"),
        root_path=get_env_str("ROOT_PATH", ""),
        host=get_env_str("HOST", _DEFAULT_HOST),
        port=get_env_int(
            "PORT",
            _DEFAULT_PORT,
            lambda port: 0 < port < _PORT_UPPER_BOUND,
        ),
        bcrypt_rounds=get_env_int(
            "BCRYPT_ROUNDS",
            PasswordHasher.DEFAULT_ROUNDS,
            PasswordHasher.valid_rounds,
        ),
        hash_worker_count=get_env_int(
            "HASH_WORKER_COUNT",
            HashPoolConfig.DEFAULT_WORKER_COUNT,
            lambda count: count > 0,
        ),
        hash_timeout=get_env_optional_int(
            "HASH_TIMEOUT",
            HashPoolConfig.NO_TIMEOUT,
            HashPoolConfig.valid_timeout,
        ),
    )
