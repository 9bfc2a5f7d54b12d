"""Parsing of the ``algorithm:secret`` request-signature key setting."""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Final

# Digest names accepted in a signature key, mapped to their hashlib constructors.
SUPPORTED_DIGESTS: Final[dict[str, Callable[..., Any]]] = {
    "md5": hashlib.md5,
    "sha1": hashlib.sha1,
    "sha224": hashlib.sha224,
    "sha256": hashlib.sha256,
    "sha384": hashlib.sha384,
    "sha512": hashlib.sha512,
}


class SignatureKeyError(ValueError):
    """Raised when a signature key is malformed or names an unknown digest."""


@dataclass(frozen=True, slots=True)
class SignatureData:
    """Resolved digest algorithm and shared secret for request signing."""

    algorithm: str
    key: str


def parse_signature_key(value: str) -> SignatureData:
    """Split ``value`` into a digest name and a secret.

    Exactly one colon is allowed; the digest must be one of ``SUPPORTED_DIGESTS``.
    """

    components = value.split(":")
    if len(components) != 2:
        raise SignatureKeyError(f"invalid signature hash:key spec: {value}")

    algorithm, secret_key = components
    if algorithm not in SUPPORTED_DIGESTS:
        raise SignatureKeyError(f"unsupported signature hash algorithm: {value}")
    return SignatureData(algorithm=algorithm, key=secret_key)


__all__ = ["SUPPORTED_DIGESTS", "SignatureData", "SignatureKeyError", "parse_signature_key"]
