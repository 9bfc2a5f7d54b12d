"""Logging setup and redaction helpers."""

from authproxy.observability.logging import (
    LoggingConfig,
    default_log_redactor,
    get_active_logger,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    "LoggingConfig",
    "default_log_redactor",
    "get_active_logger",
    "setup_logging",
    "shutdown_logging",
]
