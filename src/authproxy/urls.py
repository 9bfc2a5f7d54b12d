"""URL parsing used for the redirect URL, upstreams, and provider endpoints."""

from __future__ import annotations

import re
from typing import Final
from urllib.parse import SplitResult, urlsplit

_DISALLOWED: Final[re.Pattern[str]] = re.compile(r"[\x00-\x20\x7f]")
_PATHLESS_SCHEMES: Final[frozenset[str]] = frozenset({"file", "unix"})


class URLParseError(ValueError):
    """Raised when a configured URL cannot be parsed."""


def parse_url(raw: str, *, require_absolute: bool = False) -> SplitResult:
    """Split ``raw`` into URL components, rejecting malformed input.

    With ``require_absolute`` the URL must carry a scheme and, apart from
    ``file:`` and ``unix:`` targets, a host.
    """

    bad = _DISALLOWED.search(raw)
    if bad is not None:
        raise URLParseError(f'parse "{raw}": invalid character {bad.group()!r} in URL')
    try:
        parts = urlsplit(raw)
        # Accessing the port validates it.
        parts.port  # noqa: B018
    except ValueError as exc:
        raise URLParseError(f'parse "{raw}": {exc}') from exc

    if require_absolute:
        if not parts.scheme:
            raise URLParseError(f'parse "{raw}": missing protocol scheme')
        if not parts.netloc and parts.scheme not in _PATHLESS_SCHEMES:
            raise URLParseError(f'parse "{raw}": missing host')
    return parts


def parse_optional_url(raw: str) -> SplitResult | None:
    """Like ``parse_url`` but an empty setting means "not configured"."""

    if not raw:
        return None
    return parse_url(raw)


def with_default_path(parts: SplitResult, default: str = "/") -> SplitResult:
    if parts.path:
        return parts
    return parts._replace(path=default)


__all__ = ["URLParseError", "parse_optional_url", "parse_url", "with_default_path"]
