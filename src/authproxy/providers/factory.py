"""
authproxy — provider descriptor construction

File: src/authproxy/providers/factory.py

Purpose
- Build the shared ``ProviderData`` from ``Options``, pick the variant by name, and apply
  the variant's configuration and requirement checks.

Functional requirements
- Endpoint URLs are parsed independently; one bad URL does not hide the others.
- Unknown provider names fall back to ``Provider`` (generic) rather than failing.
- Every finding is appended to the caller's report; nothing here raises for bad input.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Final

from authproxy.providers.base import Provider, ProviderData
from authproxy.providers.oidc import OIDCDiscoveryError, OIDCProvider
from authproxy.providers.variants import (
    AzureProvider,
    BitbucketProvider,
    GitHubProvider,
    GitLabProvider,
    GoogleProvider,
)
from authproxy.transport import TransportPolicy, build_http_client
from authproxy.urls import URLParseError, parse_optional_url, parse_url

if TYPE_CHECKING:
    import httpx

    from authproxy.config.options import Options
    from authproxy.config.report import ValidationReport

logger = logging.getLogger(__name__)

HttpClientFactory = Callable[[TransportPolicy], "httpx.Client"]

PROVIDERS: Final[dict[str, type[Provider]]] = {
    "azure": AzureProvider,
    "bitbucket": BitbucketProvider,
    "github": GitHubProvider,
    "gitlab": GitLabProvider,
    "google": GoogleProvider,
    "oidc": OIDCProvider,
}

# (ProviderData attribute, Options attribute, label used in messages)
_ENDPOINTS: Final[tuple[tuple[str, str, str], ...]] = (
    ("login_url", "login_url", "login"),
    ("redeem_url", "redeem_url", "redeem"),
    ("profile_url", "profile_url", "profile"),
    ("validate_url", "validate_url", "validate"),
    ("protected_resource", "protected_resource", "resource"),
)


def new_provider(name: str, data: ProviderData) -> Provider:
    """Return the descriptor registered for ``name``, or a generic one."""

    provider_type = PROVIDERS.get(name.strip().lower(), Provider)
    return provider_type(data)


def build_provider_data(options: Options, report: ValidationReport) -> ProviderData:
    data = ProviderData(
        client_id=options.client_id,
        client_secret=options.client_secret,
        scope=options.scope,
        prompt=options.prompt,
        approval_prompt=options.approval_prompt,
    )
    for attribute, option_name, label in _ENDPOINTS:
        raw = getattr(options, option_name)
        try:
            setattr(data, attribute, parse_optional_url(raw))
        except URLParseError as exc:
            report.add(f'error parsing {label}-url="{raw}" {exc}')
    return data


def configure_provider(
    options: Options,
    report: ValidationReport,
    *,
    http_client_factory: HttpClientFactory | None = None,
) -> Provider:
    """Resolve ``options.provider`` into a configured descriptor.

    The descriptor is stored on ``options.provider_descriptor`` and returned.
    """

    data = build_provider_data(options, report)
    provider = new_provider(options.provider, data)
    if type(provider) is Provider and options.provider.strip().lower() != "generic":
        logger.warning(
            "unknown provider name, using generic OAuth2 settings",
            extra={"provider": options.provider},
        )

    if isinstance(provider, AzureProvider):
        provider.configure(options.azure_tenant)
    elif isinstance(provider, BitbucketProvider):
        provider.set_team(options.bitbucket_team)
    elif isinstance(provider, GitHubProvider):
        provider.set_org_team(options.github_org, options.github_teams)
    elif isinstance(provider, GitLabProvider):
        provider.set_groups(options.gitlab_groups)
    elif isinstance(provider, GoogleProvider):
        _configure_google(provider, options, report)
    elif isinstance(provider, OIDCProvider):
        _configure_oidc(provider, options, report, http_client_factory or build_http_client)

    options.provider_descriptor = provider
    return provider


def _configure_google(
    provider: GoogleProvider, options: Options, report: ValidationReport
) -> None:
    credentials_path = options.google_service_account_json
    if options.google_groups or options.google_admin_email or credentials_path:
        if not options.google_groups:
            report.add("missing setting: google-group")
        if not options.google_admin_email:
            report.add("missing setting: google-admin-email")
        if not credentials_path:
            report.add("missing setting: google-service-account-json")

    if not credentials_path:
        return
    try:
        # Ownership passes to the descriptor; group lookups read it later.
        credentials = open(credentials_path, "rb")  # noqa: SIM115
    except OSError:
        report.add(f"invalid Google credentials file: {credentials_path}")
        return
    provider.set_group_restriction(options.google_groups, options.google_admin_email, credentials)


def _configure_oidc(
    provider: OIDCProvider,
    options: Options,
    report: ValidationReport,
    http_client_factory: HttpClientFactory,
) -> None:
    issuer = options.oidc_issuer_url
    if options.skip_oidc_discovery:
        if not options.login_url:
            report.add("missing setting: login-url")
        if not options.redeem_url:
            report.add("missing setting: redeem-url")
        if not options.oidc_jwks_url:
            report.add("missing setting: oidc-jwks-url")
        if issuer and options.oidc_jwks_url:
            provider.set_verifier(issuer, options.oidc_jwks_url)
        return

    if not issuer:
        report.add("missing-setting: oidc-issuer-url")
        return
    try:
        parse_url(issuer, require_absolute=True)
    except URLParseError as exc:
        report.add(f"invalid oidc-issuer-url: {exc}")
        return
    policy = options.transport_policy or TransportPolicy()
    try:
        with http_client_factory(policy) as client:
            provider.set_issuer_url(issuer, client)
    except OIDCDiscoveryError as exc:
        report.add(str(exc))


__all__ = [
    "PROVIDERS",
    "HttpClientFactory",
    "build_provider_data",
    "configure_provider",
    "new_provider",
]
