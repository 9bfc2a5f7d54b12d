"""
authproxy — OpenID Connect provider and issuer discovery

File: src/authproxy/providers/oidc.py

Purpose
- Describe an OIDC provider and, unless discovery is skipped, fill its endpoints from the
  issuer's ``/.well-known/openid-configuration`` document.

Functional requirements
- Discovery failures surface as ``OIDCDiscoveryError`` with an operator-readable message.
- The discovered issuer must equal the configured issuer.

Non-functional requirements
- Discovery uses the caller's ``httpx.Client`` so the transport policy applies.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import ClassVar, Final

import httpx

from authproxy.providers.base import Provider, ProviderKind

logger = logging.getLogger(__name__)

DISCOVERY_PATH: Final[str] = "/.well-known/openid-configuration"
_REQUIRED_DISCOVERY_KEYS: Final[tuple[str, ...]] = (
    "issuer",
    "authorization_endpoint",
    "token_endpoint",
    "jwks_uri",
)


class OIDCDiscoveryError(RuntimeError):
    """Raised when the issuer's discovery document cannot be used."""


@dataclass(frozen=True, slots=True)
class IDTokenVerifier:
    """Parameters the proxy needs to verify ID tokens from this issuer."""

    issuer: str
    jwks_url: str
    client_id: str


@dataclass(frozen=True, slots=True)
class DiscoveryDocument:
    issuer: str
    authorization_endpoint: str
    token_endpoint: str
    jwks_uri: str
    userinfo_endpoint: str = ""


def discovery_url(issuer_url: str) -> str:
    return issuer_url.rstrip("/") + DISCOVERY_PATH


def discover(issuer_url: str, client: httpx.Client) -> DiscoveryDocument:
    """Fetch and check the discovery document published by ``issuer_url``."""

    url = discovery_url(issuer_url)
    logger.debug("fetching OIDC discovery document", extra={"url": url})
    try:
        response = client.get(url, headers={"Accept": "application/json"})
        response.raise_for_status()
        payload = response.json()
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise OIDCDiscoveryError(
            f"failed to fetch OIDC discovery document from {url}: {exc}"
        ) from exc
    except ValueError as exc:
        raise OIDCDiscoveryError(f"invalid OIDC discovery document from {url}: {exc}") from exc

    if not isinstance(payload, Mapping):
        raise OIDCDiscoveryError(f"invalid OIDC discovery document from {url}: not an object")

    missing = [
        key
        for key in _REQUIRED_DISCOVERY_KEYS
        if not isinstance(payload.get(key), str) or not payload.get(key)
    ]
    if missing:
        raise OIDCDiscoveryError(
            f"invalid OIDC discovery document from {url}: missing {', '.join(missing)}"
        )

    if payload["issuer"] != issuer_url:
        raise OIDCDiscoveryError(
            "oidc: issuer did not match the issuer returned by provider, "
            f'expected "{issuer_url}" got "{payload["issuer"]}"'
        )

    userinfo = payload.get("userinfo_endpoint")
    return DiscoveryDocument(
        issuer=payload["issuer"],
        authorization_endpoint=payload["authorization_endpoint"],
        token_endpoint=payload["token_endpoint"],
        jwks_uri=payload["jwks_uri"],
        userinfo_endpoint=userinfo if isinstance(userinfo, str) else "",
    )


@dataclass
class OIDCProvider(Provider):
    issuer_url: str = ""
    verifier: IDTokenVerifier | None = None

    kind: ClassVar[ProviderKind] = ProviderKind.OIDC
    display_name: ClassVar[str] = "OpenID Connect"

    def apply_defaults(self) -> None:
        self.data.set_default_scope("openid email profile")

    def set_verifier(self, issuer_url: str, jwks_url: str) -> None:
        self.issuer_url = issuer_url
        self.verifier = IDTokenVerifier(
            issuer=issuer_url, jwks_url=jwks_url, client_id=self.data.client_id
        )

    def set_issuer_url(self, issuer_url: str, client: httpx.Client) -> None:
        """Discover endpoints from ``issuer_url``; configured endpoints take precedence."""

        document = discover(issuer_url, client)
        self.data.set_default_url("login_url", document.authorization_endpoint)
        self.data.set_default_url("redeem_url", document.token_endpoint)
        if document.userinfo_endpoint:
            self.data.set_default_url("profile_url", document.userinfo_endpoint)
        self.set_verifier(issuer_url, document.jwks_uri)


__all__ = [
    "DISCOVERY_PATH",
    "DiscoveryDocument",
    "IDTokenVerifier",
    "OIDCDiscoveryError",
    "OIDCProvider",
    "discover",
    "discovery_url",
]
