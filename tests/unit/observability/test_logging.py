"""
authproxy — unit tests for observability logging

File: tests/unit/observability/test_logging.py

Purpose
- Validate structured JSON logging, text logging, and redaction guarantees.

What this test file should cover
- JSON line validity and redaction of secret-bearing keys and assignments.
- Text format rendering of extra fields.
- Handler teardown restoring propagation.
"""

from __future__ import annotations

import io
import json
import logging
from uuid import uuid4

import pytest

from authproxy.observability.logging import (
    LoggingConfig,
    default_log_redactor,
    get_active_logger,
    setup_logging,
    shutdown_logging,
)


def _logger_name() -> str:
    return f"authproxy.tests.logging.{uuid4().hex}"


def test_json_logging_redacts_secrets() -> None:
    stream = io.StringIO()
    name = _logger_name()
    setup_logging(LoggingConfig(level="DEBUG", log_format="json", stream=stream, logger_name=name))
    logger = logging.getLogger(name)

    logger.info(
        "loaded cookie_secret=abc123 for client",
        extra={"config": {"client_secret": "hunter2", "provider": "github"}},
    )
    shutdown_logging()

    lines = stream.getvalue().splitlines()
    assert len(lines) == 1
    event = json.loads(lines[0])
    assert event["level"] == "INFO"
    assert event["logger"] == name
    assert event["message"] == "loaded cookie_secret=***REDACTED*** for client"
    assert event["fields"] == {"config": {"client_secret": "***REDACTED***", "provider": "github"}}
    assert event["timestamp"].endswith("Z")
    assert "hunter2" not in stream.getvalue()


def test_text_logging_renders_extra_fields() -> None:
    stream = io.StringIO()
    name = _logger_name()
    setup_logging(LoggingConfig(level="INFO", log_format="text", stream=stream, logger_name=name))

    logging.getLogger(f"{name}.child").warning("using htpasswd file", extra={"path": "/etc/htpasswd"})
    logging.getLogger(name).debug("not emitted")
    shutdown_logging()

    output = stream.getvalue()
    assert f"WARNING {name}.child: using htpasswd file path=/etc/htpasswd" in output
    assert "not emitted" not in output


def test_shutdown_restores_propagation() -> None:
    name = _logger_name()
    logger = setup_logging(LoggingConfig(stream=io.StringIO(), logger_name=name))

    assert logger.propagate is False
    assert get_active_logger() is logger

    shutdown_logging()

    assert logger.propagate is True
    assert logger.handlers == []
    assert get_active_logger() is None


def test_setup_replaces_previous_configuration() -> None:
    first_stream = io.StringIO()
    second_stream = io.StringIO()
    name = _logger_name()
    setup_logging(LoggingConfig(stream=first_stream, logger_name=name))
    setup_logging(LoggingConfig(stream=second_stream, logger_name=name))

    logging.getLogger(name).info("hello")
    shutdown_logging()

    assert first_stream.getvalue() == ""
    assert "hello" in second_stream.getvalue()


def test_unknown_level_is_rejected() -> None:
    with pytest.raises(ValueError, match="unsupported logging level"):
        setup_logging(LoggingConfig(level="LOUD", stream=io.StringIO(), logger_name=_logger_name()))


def test_default_redactor_is_deep() -> None:
    redacted = default_log_redactor(
        {
            "signature_key": "sha256:abc",
            "nested": [{"password": "pw", "user": "alice"}],
            "header": "Bearer abc.def",
        }
    )

    assert redacted == {
        "signature_key": "***REDACTED***",
        "nested": [{"password": "***REDACTED***", "user": "alice"}],
        "header": "Bearer ***REDACTED***",
    }
