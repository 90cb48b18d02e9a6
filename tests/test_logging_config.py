"""Tests for logging configuration."""

import json
import logging
import os
import sys
from unittest.mock import patch

import pytest

from message_resolver.lib.logging_config import JSONFormatter, configure_from_settings, setup_logging
from message_resolver.resolver import MessageResolver


def make_record(name="orders.api", msg="a: %s, b: %s", args=(1, "x"), exc_info=None, level=logging.INFO):
    return logging.LogRecord(
        name=name,
        level=level,
        pathname=__file__,
        lineno=42,
        msg=msg,
        args=args,
        exc_info=exc_info,
        func="handler",
    )


class TestJSONFormatter:
    """Tests for the JSON formatter."""

    def test_plain_message_without_resolver(self):
        """Test the message stays a string when no resolver is attached."""
        data = json.loads(JSONFormatter().format(make_record()))

        assert data["message"] == "a: 1, b: x"
        assert data["level"] == "INFO"
        assert data["logger"] == "orders.api"
        assert data["function"] == "handler"
        assert data["line"] == 42
        assert data["module"] == "test_logging_config"
        assert "timestamp" in data

    def test_eligible_message_resolved(self):
        """Test messages from target components become nested JSON."""
        formatter = JSONFormatter(resolver=MessageResolver(components=["orders"]))
        data = json.loads(formatter.format(make_record()))

        assert data["message"] == {"a": 1, "b": "x"}

    def test_ineligible_message_kept(self):
        """Test messages from other components stay strings."""
        formatter = JSONFormatter(resolver=MessageResolver(components=["orders"]))
        data = json.loads(formatter.format(make_record(name="billing")))

        assert data["message"] == "a: 1, b: x"

    def test_resolver_logging_during_format(self):
        """Test a record logged from inside resolution keeps its plain message."""
        resolver = MessageResolver(components=["orders"])
        formatter = JSONFormatter(resolver=resolver)
        nested = []

        def log_and_resolve(message, component_id):
            nested.append(json.loads(formatter.format(make_record(name="orders.inner", msg="c: 3", args=()))))
            return {"resolved": True}

        with patch.object(resolver, "resolve", side_effect=log_and_resolve):
            data = json.loads(formatter.format(make_record()))

        assert data["message"] == {"resolved": True}
        assert nested[0]["message"] == "c: 3"
        assert formatter.resolve_message(make_record()) == {"a": 1, "b": "x"}

    def test_decimal_values_serialized(self):
        """Test fractional values come out as JSON numbers."""
        formatter = JSONFormatter(resolver=MessageResolver(components=["orders"]))
        record = make_record(msg="ratio: 0.25, total: 1e3", args=())
        data = json.loads(formatter.format(record))

        assert data["message"] == {"ratio": 0.25, "total": 1000}

    def test_exception_info(self):
        """Test exception tracebacks are included."""
        try:
            raise ValueError("bad value")
        except ValueError:
            record = make_record(exc_info=sys.exc_info())

        data = json.loads(JSONFormatter().format(record))

        assert "ValueError: bad value" in data["exception"]

    def test_extra_data(self):
        """Test extra_data is emitted under extra."""
        record = make_record()
        record.extra_data = {"request_id": "r-1", "attempt": 2}

        data = json.loads(JSONFormatter().format(record))

        assert data["extra"] == {"request_id": "r-1", "attempt": 2}

    def test_unserializable_extra(self):
        """Test arbitrary objects in extra_data are written as text."""
        class Opaque:
            def __str__(self):
                return "opaque-object"

        record = make_record()
        record.extra_data = {"obj": Opaque()}

        data = json.loads(JSONFormatter().format(record))

        assert data["extra"] == {"obj": "opaque-object"}


@pytest.mark.usefixtures("restore_root_logging")
class TestSetupLogging:
    """Tests for setup_logging."""

    def test_level(self):
        """Test the root level is set."""
        setup_logging(log_level="WARNING")
        assert logging.getLogger().level == logging.WARNING

    def test_unknown_level_defaults_to_info(self):
        """Test unknown level names fall back to INFO."""
        setup_logging(log_level="chatty")
        assert logging.getLogger().level == logging.INFO

    def test_console_handler(self):
        """Test a single console handler is installed."""
        setup_logging()
        handlers = logging.getLogger().handlers

        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)

    def test_no_handlers(self):
        """Test console output can be disabled."""
        setup_logging(enable_console=False)
        assert logging.getLogger().handlers == []

    def test_json_console_output(self, capsys):
        """Test JSON lines with resolved messages on stdout."""
        setup_logging(enable_json=True, resolver=MessageResolver(components=["orders"]))

        logging.getLogger("orders.worker").info("status: ok, count: 2")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        assert json.loads(line)["message"] == {"status": "ok", "count": 2}

    def test_json_output_at_debug_level(self, capsys):
        """Test records logged while a message is resolved do not recurse."""
        setup_logging(log_level="DEBUG", enable_json=True, resolver=MessageResolver(components=["orders"]))

        logging.getLogger("orders.svc").info("a: 1")
        logging.getLogger("orders.svc").info("b: 2")

        records = [json.loads(line) for line in capsys.readouterr().out.strip().splitlines()]
        messages = [r["message"] for r in records if r["logger"] == "orders.svc"]
        checks = [r["message"] for r in records if r["logger"] == "message_resolver.resolver"]

        assert messages == [{"a": 1}, {"b": 2}]
        assert checks
        assert all(isinstance(m, str) and m.startswith("Component check") for m in checks)

    def test_file_handler(self, tmp_path):
        """Test the rotating file handler writes JSON lines."""
        log_file = tmp_path / "logs" / "resolver.log"
        setup_logging(
            enable_json=True,
            log_file=log_file,
            enable_console=False,
            resolver=MessageResolver(components=["orders"]),
        )

        logging.getLogger("orders").warning("{api:OrderAPI} failed, code: 503")
        logging.getLogger("billing").warning("code: 500")

        lines = log_file.read_text(encoding="utf-8").strip().splitlines()
        assert json.loads(lines[0])["message"] == {"api": "OrderAPI", "code": 503}
        assert json.loads(lines[1])["message"] == "code: 500"

    def test_configure_from_settings(self, tmp_path):
        """Test LOG_LEVEL, LOG_JSON and LOG_FILE are applied."""
        log_file = tmp_path / "app.log"
        env = {"LOG_LEVEL": "warning", "LOG_JSON": "true", "LOG_FILE": str(log_file)}

        with patch.dict(os.environ, env):
            configure_from_settings(resolver=MessageResolver(components=["orders"]))

        root_logger = logging.getLogger()
        assert root_logger.level == logging.WARNING
        assert any(isinstance(h.formatter, JSONFormatter) for h in root_logger.handlers)

        logging.getLogger("orders").info("dropped: yes")
        logging.getLogger("orders").error("status: down")

        lines = log_file.read_text(encoding="utf-8").strip().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["message"] == {"status": "down"}
