"""
Configuration package for the message resolver.
"""

from .settings import Config, config, parse_list
from .constants import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_TAG_NAMES,
    DEFAULT_TRUNCATE_LENGTH,
    FALLBACK_TEXT_KEY,
    RESOLVER_NAME,
)

__all__ = [
    "Config",
    "config",
    "parse_list",
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_TAG_NAMES",
    "DEFAULT_TRUNCATE_LENGTH",
    "FALLBACK_TEXT_KEY",
    "RESOLVER_NAME",
]
