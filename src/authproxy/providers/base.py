"""
authproxy — provider descriptor base types

File: src/authproxy/providers/base.py

Purpose
- Shared OAuth provider settings and the generic descriptor every variant extends.

What should be included in this file
- ``ProviderKind`` closed set of variants.
- ``ProviderData``: client credentials, scope, prompt behaviour, endpoint URLs.
- ``Provider``: generic descriptor; variants override ``apply_defaults``.

Non-functional requirements
- Descriptors are plain data handed to the proxy; no network I/O happens here.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import ClassVar
from urllib.parse import SplitResult, urlsplit, urlunsplit


class ProviderKind(enum.Enum):
    """Identity provider variants understood by the proxy."""

    AZURE = "azure"
    BITBUCKET = "bitbucket"
    GITHUB = "github"
    GITLAB = "gitlab"
    GOOGLE = "google"
    OIDC = "oidc"
    GENERIC = "generic"


@dataclass(slots=True)
class ProviderData:
    """Settings common to every provider variant."""

    client_id: str
    client_secret: str
    scope: str = ""
    prompt: str = ""
    approval_prompt: str = ""
    login_url: SplitResult | None = None
    redeem_url: SplitResult | None = None
    profile_url: SplitResult | None = None
    validate_url: SplitResult | None = None
    protected_resource: SplitResult | None = None

    def set_default_url(self, attribute: str, raw: str) -> None:
        """Fill ``attribute`` with ``raw`` unless the operator configured it."""

        if getattr(self, attribute) is None:
            setattr(self, attribute, urlsplit(raw))

    def set_default_scope(self, scope: str) -> None:
        if not self.scope:
            self.scope = scope

    def endpoint(self, attribute: str) -> str:
        value = getattr(self, attribute)
        if value is None:
            return ""
        return urlunsplit(value)


@dataclass
class Provider:
    """Generic OAuth2 provider; every endpoint must come from configuration."""

    data: ProviderData

    kind: ClassVar[ProviderKind] = ProviderKind.GENERIC
    display_name: ClassVar[str] = "OAuth2"

    def __post_init__(self) -> None:
        self.apply_defaults()

    def apply_defaults(self) -> None:
        """Fill endpoints and scope the operator left unset."""

    def describe(self) -> dict[str, object]:
        """Loggable summary of the descriptor (no secrets)."""

        return {
            "provider": self.kind.value,
            "scope": self.data.scope,
            "login_url": self.data.endpoint("login_url"),
            "redeem_url": self.data.endpoint("redeem_url"),
            "profile_url": self.data.endpoint("profile_url"),
            "validate_url": self.data.endpoint("validate_url"),
        }


__all__ = ["Provider", "ProviderData", "ProviderKind"]
