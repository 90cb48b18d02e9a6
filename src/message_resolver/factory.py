"""
Resolver Factory

Builds MessageResolver instances from explicit arguments, falling back to
environment configuration for anything not given.
"""

import logging
from typing import Iterable, Optional

from message_resolver.config.constants import DEFAULT_TAG_NAMES
from message_resolver.config.settings import Config
from message_resolver.lib.exceptions import InvalidConfigurationException
from message_resolver.lib.type_converter import TypeConverter
from message_resolver.resolver import MessageResolver
from message_resolver.utils.parse_utils import ExtractionPatternSet

logger = logging.getLogger(__name__)


def create_resolver(
    components: Optional[Iterable[str]] = None,
    extra_tags: Optional[Iterable[str]] = None,
    max_depth: Optional[int] = None,
    config: Optional[Config] = None
) -> MessageResolver:
    """
    Create a resolver

    Args:
        components: Target component names (defaults to configuration)
        extra_tags: Tag names added after api and proxy (defaults to configuration)
        max_depth: Nested JSON unpack limit (defaults to configuration)
        config: Configuration source (a fresh Config if omitted)

    Returns:
        Configured MessageResolver

    Raises:
        InvalidConfigurationException: If a configured value is invalid
        InvalidPatternException: If a tag name is invalid
    """
    config = config or Config()

    if components is None:
        components = config.components
    components = list(components)

    if extra_tags is None:
        tag_names = config.tag_names
    else:
        tag_names = DEFAULT_TAG_NAMES + tuple(
            name for name in extra_tags if name not in DEFAULT_TAG_NAMES
        )

    if max_depth is None:
        max_depth = config.max_depth
    elif max_depth < 1:
        raise InvalidConfigurationException(
            "max_depth must be at least 1",
            {"max_depth": max_depth}
        )

    logger.debug(f"Creating resolver: components={components}, tags={list(tag_names)}, max_depth={max_depth}")

    return MessageResolver(
        components=components,
        patterns=ExtractionPatternSet(tag_names),
        converter=TypeConverter(max_depth=max_depth),
        truncate_length=config.truncate_length
    )
