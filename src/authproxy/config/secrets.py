"""Cookie secret decoding: base64 (padding optional) when it yields an AES key, raw otherwise."""

from __future__ import annotations

import base64
import binascii
import re
from typing import Final

from authproxy.constants import COOKIE_SECRET_SIZES

_URLSAFE_B64: Final[re.Pattern[str]] = re.compile(r"[A-Za-z0-9_-]*={0,2}")


def add_padding(secret: str) -> str:
    """Restore ``=`` padding trimmed off a base64 string."""

    remainder = len(secret) % 4
    if remainder == 2:
        return secret + "=="
    if remainder == 3:
        return secret + "="
    return secret


def secret_bytes(secret: str) -> bytes:
    """Decode ``secret`` as URL-safe base64, falling back to its raw UTF-8 bytes.

    The decoded form only wins when it has a usable AES key length, so a raw
    passphrase of the right size and a base64-encoded key both work.
    """

    try:
        decoded = base64.urlsafe_b64decode(_strict_ascii(add_padding(secret)))
    except (binascii.Error, ValueError):
        return secret.encode("utf-8")
    if len(decoded) in COOKIE_SECRET_SIZES:
        return decoded
    return secret.encode("utf-8")


def was_decoded(secret: str) -> bool:
    """Whether ``secret_bytes`` used the base64 form of ``secret``."""

    return secret_bytes(secret) != secret.encode("utf-8")


def _strict_ascii(text: str) -> bytes:
    # b64decode silently drops characters outside the alphabet unless checked first.
    if not _URLSAFE_B64.fullmatch(text) or len(text) % 4:
        raise ValueError("not url-safe base64")
    return text.encode("ascii")


__all__ = ["add_padding", "secret_bytes", "was_decoded"]
