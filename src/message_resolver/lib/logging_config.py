"""
Logging Configuration

Structured JSON logging whose message field is resolved into a document
for configured components.
"""

import json
import logging
import logging.handlers
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from message_resolver.config.constants import LOG_FILE_BACKUP_COUNT, LOG_FILE_MAX_BYTES
from message_resolver.config.settings import Config
from message_resolver.lib.type_converter import TypeConverter


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging

    When a resolver is attached, the message of every record is passed
    through it together with the record's logger name: messages from
    eligible components are emitted as nested JSON, all others as strings.
    """

    def __init__(self, resolver=None, datefmt: Optional[str] = None):
        """
        Args:
            resolver: MessageResolver used for the message field (optional)
            datefmt: Unused by the JSON layout, accepted for dictConfig
        """
        super().__init__(datefmt=datefmt)
        self.resolver = resolver
        self._local = threading.local()

    def resolve_message(self, record: logging.LogRecord) -> Any:
        """
        Get the message field for a record

        Args:
            record: Log record to format

        Returns:
            Structured value or plain string
        """
        message = record.getMessage()
        if self.resolver is None:
            return message
        # Records logged while resolving are formatted with the plain message
        if getattr(self._local, 'resolving', False):
            return message
        self._local.resolving = True
        try:
            return self.resolver.resolve(message, record.name)
        finally:
            self._local.resolving = False

    def record_fields(self, record: logging.LogRecord) -> Dict[str, Any]:
        """Collect the JSON fields of a record, message already resolved"""
        fields: Dict[str, Any] = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': self.resolve_message(record),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }
        if record.exc_info:
            fields['exception'] = self.formatException(record.exc_info)
        if hasattr(record, 'extra_data'):
            fields['extra'] = record.extra_data
        return fields

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as one JSON line

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log string
        """
        native = TypeConverter.to_native(self.record_fields(record))

        try:
            return json.dumps(native, ensure_ascii=False)
        except (TypeError, ValueError):
            # Extras may hold arbitrary objects
            return json.dumps(native, ensure_ascii=False, default=str)


def setup_logging(
    log_level: str = 'INFO',
    enable_json: bool = False,
    log_file: Optional[Path] = None,
    enable_console: bool = True,
    resolver=None
) -> None:
    """
    Configure root logging

    Args:
        log_level: Logging level
        enable_json: Use JSON formatting (with message resolution)
        log_file: Rotating log file (optional)
        enable_console: Enable console logging
        resolver: MessageResolver for the JSON formatter's message field
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Clear existing handlers
    root_logger.handlers.clear()

    if enable_json:
        formatter = JSONFormatter(resolver=resolver)
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    # Console handler
    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # File handler with rotation
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUP_COUNT
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logging.getLogger(__name__).debug(f"Logging configured: level={log_level}, json={enable_json}")


def configure_from_settings(settings=None, resolver=None) -> None:
    """
    Configure root logging from LOG_LEVEL, LOG_JSON and LOG_FILE

    Args:
        settings: Config instance (a fresh Config if omitted)
        resolver: MessageResolver for the JSON formatter's message field
    """
    settings = settings or Config()
    setup_logging(
        log_level=settings.log_level,
        enable_json=settings.log_json,
        log_file=Path(settings.log_file) if settings.log_file else None,
        resolver=resolver
    )
