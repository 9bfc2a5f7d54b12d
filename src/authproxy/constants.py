"""Stable constants shared across the config engine and the CLI."""

from __future__ import annotations

from typing import Final

VERSION: Final[str] = "0.4.0"

# Environment variables bound to security-sensitive fields share this prefix.
ENV_PREFIX: Final[str] = "AUTHPROXY_"

# Valid AES key sizes for the cookie cipher.
COOKIE_SECRET_SIZES: Final[tuple[int, ...]] = (16, 24, 32)

COOKIE_SAMESITE_VALUES: Final[tuple[str, ...]] = ("", "none", "lax", "strict")

REAL_CLIENT_IP_HEADERS: Final[tuple[str, ...]] = (
    "X-Real-IP",
    "X-Forwarded-For",
    "X-ProxyUser-IP",
)

DEFAULT_REQUEST_LOGGING_FORMAT: Final[str] = (
    "{{.Client}} - {{.Username}} [{{.Timestamp}}] {{.Host}} {{.RequestMethod}} "
    "{{.Upstream}} {{.RequestURI}} {{.Protocol}} {{.UserAgent}} {{.StatusCode}} "
    "{{.ResponseSize}} {{.RequestDuration}}"
)

# Separator used when a repeatable setting arrives as one string (env or file).
LIST_DELIMITER: Final[str] = ","

__all__ = [
    "COOKIE_SAMESITE_VALUES",
    "COOKIE_SECRET_SIZES",
    "DEFAULT_REQUEST_LOGGING_FORMAT",
    "ENV_PREFIX",
    "LIST_DELIMITER",
    "REAL_CLIENT_IP_HEADERS",
    "VERSION",
]
