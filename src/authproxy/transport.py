"""Outbound HTTP transport policy, resolved once at startup and passed to every client."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS: Final[float] = 10.0


@dataclass(frozen=True, slots=True)
class TransportPolicy:
    """TLS behaviour for outbound requests to identity providers."""

    verify_tls: bool = True
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS


def resolve_transport_policy(ssl_insecure_skip_verify: bool) -> TransportPolicy:
    if ssl_insecure_skip_verify:
        logger.warning("TLS certificate verification is disabled for outbound requests")
        return TransportPolicy(verify_tls=False)
    return TransportPolicy()


def build_http_client(policy: TransportPolicy) -> httpx.Client:
    """Return a synchronous client honouring ``policy``; the caller closes it."""

    return httpx.Client(verify=policy.verify_tls, timeout=policy.timeout_seconds)


__all__ = ["DEFAULT_TIMEOUT_SECONDS", "TransportPolicy", "build_http_client", "resolve_transport_policy"]
