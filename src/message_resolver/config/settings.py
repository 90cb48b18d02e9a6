"""
Configuration Management

Handles resolver configuration with environment variable support.
Values come from the process environment, optionally seeded from a .env file.
"""

import os
import logging
from pathlib import Path
from typing import List, Optional, Tuple
from dotenv import load_dotenv

from message_resolver.config.constants import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_TAG_NAMES,
    DEFAULT_TRUNCATE_LENGTH,
    ENV_COMPONENTS,
    ENV_DEBUG,
    ENV_EXTRA_TAGS,
    ENV_LOG_FILE,
    ENV_LOG_JSON,
    ENV_LOG_LEVEL,
    ENV_MAX_DEPTH,
    ENV_TRUNCATE,
    LIST_SEPARATOR,
)
from message_resolver.lib.exceptions import InvalidConfigurationException

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}


def parse_list(value: Optional[str]) -> List[str]:
    """
    Split a comma-separated setting into trimmed, non-empty entries

    Args:
        value: Raw setting value

    Returns:
        Entries in their original order
    """
    if not value:
        return []
    return [item.strip() for item in value.split(LIST_SEPARATOR) if item.strip()]


class Config:
    """
    Configuration management with environment variable handling

    Loads configuration from environment variables and .env files.
    Provides type-safe access to configuration values with defaults.
    """

    def __init__(self, env_file: Optional[str] = None):
        """
        Initialize configuration

        Args:
            env_file: Path to .env file (optional, defaults to .env in current directory)
        """
        # Load .env file if it exists
        if env_file:
            env_path = Path(env_file)
            if env_path.exists():
                load_dotenv(env_path)
                logger.info(f"Loaded configuration from {env_file}")
        else:
            # Try to load from default locations
            default_paths = [Path('.env'), Path('.env.local')]
            for path in default_paths:
                if path.exists():
                    load_dotenv(path)
                    logger.info(f"Loaded configuration from {path}")
                    break

    # Resolver Configuration
    @property
    def components(self) -> List[str]:
        """
        Get target components

        Returns:
            Component names whose messages are structured
        """
        return parse_list(os.getenv(ENV_COMPONENTS))

    @property
    def tag_names(self) -> Tuple[str, ...]:
        """
        Get extraction tag names

        Returns:
            Default tags followed by any extra configured tags
        """
        extra = [name for name in parse_list(os.getenv(ENV_EXTRA_TAGS)) if name not in DEFAULT_TAG_NAMES]
        return DEFAULT_TAG_NAMES + tuple(extra)

    @property
    def max_depth(self) -> int:
        """
        Get the nested JSON unpack limit

        Returns:
            Positive number of unpack levels

        Raises:
            InvalidConfigurationException: If the value is not a positive integer
        """
        return self._positive_int(ENV_MAX_DEPTH, DEFAULT_MAX_DEPTH)

    @property
    def truncate_length(self) -> int:
        """
        Get the message length echoed in failure warnings

        Returns:
            Positive number of characters
        """
        return self._positive_int(ENV_TRUNCATE, DEFAULT_TRUNCATE_LENGTH)

    # Logging Configuration
    @property
    def log_level(self) -> str:
        """
        Get logging level

        Returns:
            Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        return os.getenv(ENV_LOG_LEVEL, 'INFO').upper()

    @property
    def log_file(self) -> Optional[str]:
        """
        Get log file path

        Returns:
            Path to log file or None for console-only logging
        """
        return os.getenv(ENV_LOG_FILE)

    @property
    def log_json(self) -> bool:
        """
        Check whether log records are rendered as JSON lines

        Returns:
            True if JSON output is enabled
        """
        return os.getenv(ENV_LOG_JSON, 'False').lower() in ('true', '1', 'yes')

    # Development Configuration
    @property
    def debug_mode(self) -> bool:
        """
        Check if debug mode is enabled

        Returns:
            True if debug mode is enabled
        """
        return os.getenv(ENV_DEBUG, 'False').lower() in ('true', '1', 'yes')

    def _positive_int(self, name: str, default: int) -> int:
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError:
            raise InvalidConfigurationException(
                f"{name} must be an integer",
                {'variable': name, 'value': raw}
            )
        if value < 1:
            raise InvalidConfigurationException(
                f"{name} must be at least 1",
                {'variable': name, 'value': raw}
            )
        return value

    def validate(self) -> List[str]:
        """
        Validate configuration

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.log_level not in VALID_LOG_LEVELS:
            errors.append(f"Invalid log level: {self.log_level}")

        for name, default in ((ENV_MAX_DEPTH, DEFAULT_MAX_DEPTH), (ENV_TRUNCATE, DEFAULT_TRUNCATE_LENGTH)):
            try:
                self._positive_int(name, default)
            except InvalidConfigurationException as e:
                errors.append(e.message)

        if not self.components:
            logger.warning(f"{ENV_COMPONENTS} is empty; every message will pass through unchanged")

        return errors


# Global configuration instance
config = Config()
