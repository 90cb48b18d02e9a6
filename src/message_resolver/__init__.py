"""
Message Resolver

Best-effort structuring of free-form log messages into JSON documents.
"""

__version__ = "1.0.0"

from .resolver import ComponentFilter, MessageResolver
from .factory import create_resolver
from .lib.type_converter import TypeConverter, dumps
from .lib.logging_config import JSONFormatter, configure_from_settings, setup_logging
from .utils.parse_utils import ExtractionPatternSet, normalize_quotes

__all__ = [
    "ComponentFilter",
    "MessageResolver",
    "create_resolver",
    "TypeConverter",
    "dumps",
    "JSONFormatter",
    "setup_logging",
    "configure_from_settings",
    "ExtractionPatternSet",
    "normalize_quotes",
]
