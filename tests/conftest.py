import logging
from typing import Generator

import pytest

from message_resolver.lib.type_converter import TypeConverter
from message_resolver.resolver import MessageResolver


@pytest.fixture
def resolver() -> MessageResolver:
    """Resolver that structures messages from the 'orders' component."""
    return MessageResolver(components=["orders"])


@pytest.fixture
def converter() -> TypeConverter:
    return TypeConverter()


@pytest.fixture
def restore_root_logging() -> Generator[logging.Logger, None, None]:
    """Put the root logger's handlers and level back after a test reconfigures it."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    try:
        yield root_logger
    finally:
        for handler in list(root_logger.handlers):
            if handler not in handlers:
                handler.close()
        root_logger.handlers[:] = handlers
        root_logger.setLevel(level)
