"""Cookie attribute checks run during validation."""

from __future__ import annotations

from typing import Final

from authproxy.constants import COOKIE_SAMESITE_VALUES

_SEPARATORS: Final[str] = '()<>@,;:\\"/[]?={} \t'
# RFC 6265 cookie-name: a token of visible ASCII without separators.
_TOKEN_CHARS: Final[frozenset[str]] = frozenset(
    chr(code) for code in range(0x21, 0x7F) if chr(code) not in _SEPARATORS
)


def cookie_name_is_valid(name: str) -> bool:
    """Report whether ``name`` is a cookie-name token the proxy can emit."""

    return bool(name) and all(char in _TOKEN_CHARS for char in name)


def samesite_is_valid(value: str) -> bool:
    return value in COOKIE_SAMESITE_VALUES


__all__ = ["cookie_name_is_valid", "samesite_is_valid"]
