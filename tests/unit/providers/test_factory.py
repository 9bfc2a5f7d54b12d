"""
authproxy — unit tests for provider descriptor construction

File: tests/unit/providers/test_factory.py

Purpose
- Validate variant selection, default endpoints, and per-variant requirement checks.

Functional requirements
- Offline operation; no identity provider is contacted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from authproxy.config.options import Options
from authproxy.config.report import ValidationReport
from authproxy.providers import (
    AzureProvider,
    BitbucketProvider,
    GitHubProvider,
    GitLabProvider,
    GoogleProvider,
    OIDCProvider,
    Provider,
    ProviderData,
    ProviderKind,
    build_provider_data,
    configure_provider,
    new_provider,
)

OptionsBuilder = Callable[..., Options]


def _configure(options: Options) -> tuple[Provider, tuple[str, ...]]:
    report = ValidationReport()
    provider = configure_provider(options, report)
    return provider, report.items()


@pytest.mark.parametrize(
    ("name", "expected_type"),
    [
        ("azure", AzureProvider),
        ("bitbucket", BitbucketProvider),
        ("github", GitHubProvider),
        ("gitlab", GitLabProvider),
        ("google", GoogleProvider),
        ("oidc", OIDCProvider),
        ("GitHub", GitHubProvider),
        ("generic", Provider),
        ("keycloak", Provider),
    ],
)
def test_new_provider_selects_variant(name: str, expected_type: type[Provider]) -> None:
    provider = new_provider(name, ProviderData(client_id="id", client_secret="secret"))

    assert type(provider) is expected_type


def test_unknown_provider_falls_back_to_generic_with_warning(
    make_options: OptionsBuilder, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING, logger="authproxy.providers.factory"):
        provider, messages = _configure(make_options(provider="keycloak"))

    assert messages == ()
    assert provider.kind is ProviderKind.GENERIC
    assert provider.data.login_url is None
    assert any("unknown provider" in record.getMessage() for record in caplog.records)


def test_provider_data_carries_client_settings(make_options: OptionsBuilder) -> None:
    report = ValidationReport()
    data = build_provider_data(
        make_options(scope="openid", prompt="login", approval_prompt="auto"), report
    )

    assert report.items() == ()
    assert data.client_id == "client-id"
    assert data.client_secret == "client-secret"
    assert data.scope == "openid"
    assert data.prompt == "login"
    assert data.approval_prompt == "auto"


def test_each_bad_endpoint_url_is_reported(make_options: OptionsBuilder) -> None:
    report = ValidationReport()
    data = build_provider_data(
        make_options(
            login_url="https://login example.com",
            redeem_url="https://idp.example.com/token",
            validate_url="http://idp.example.com:70000/",
        ),
        report,
    )

    messages = report.items()
    assert len(messages) == 2
    assert messages[0].startswith('error parsing login-url="https://login example.com" ')
    assert messages[1].startswith('error parsing validate-url="http://idp.example.com:70000/" ')
    assert data.login_url is None
    assert data.redeem_url is not None
    assert data.endpoint("redeem_url") == "https://idp.example.com/token"


def test_google_defaults(make_options: OptionsBuilder) -> None:
    provider, messages = _configure(make_options(provider="google"))

    assert messages == ()
    assert isinstance(provider, GoogleProvider)
    assert provider.data.endpoint("login_url") == (
        "https://accounts.google.com/o/oauth2/auth?access_type=offline"
    )
    assert provider.data.scope == "profile email"
    assert provider.service_account_credentials is None


def test_configured_endpoints_override_defaults(make_options: OptionsBuilder) -> None:
    provider, messages = _configure(
        make_options(provider="github", login_url="https://github.example.com/login/oauth/authorize")
    )

    assert messages == ()
    assert provider.data.endpoint("login_url") == "https://github.example.com/login/oauth/authorize"
    assert provider.data.endpoint("redeem_url") == "https://github.com/login/oauth/access_token"


def test_google_requires_all_group_settings(make_options: OptionsBuilder) -> None:
    _, messages = _configure(make_options(google_admin_email="admin@example.com"))

    assert messages == (
        "missing setting: google-group",
        "missing setting: google-service-account-json",
    )


def test_google_credentials_file_is_opened_and_handed_over(
    make_options: OptionsBuilder, tmp_path: Path
) -> None:
    credentials = tmp_path / "service-account.json"
    credentials.write_text('{"type": "service_account"}', encoding="utf-8")

    provider, messages = _configure(
        make_options(
            google_groups=["admins@example.com"],
            google_admin_email="admin@example.com",
            google_service_account_json=str(credentials),
        )
    )

    assert messages == ()
    assert isinstance(provider, GoogleProvider)
    assert provider.groups == ["admins@example.com"]
    assert provider.admin_email == "admin@example.com"
    handle = provider.service_account_credentials
    assert handle is not None
    try:
        assert handle.read() == b'{"type": "service_account"}'
    finally:
        handle.close()


def test_google_unopenable_credentials_file_is_reported(
    make_options: OptionsBuilder, tmp_path: Path
) -> None:
    missing = tmp_path / "missing.json"

    _, messages = _configure(
        make_options(
            google_groups=["admins@example.com"],
            google_admin_email="admin@example.com",
            google_service_account_json=str(missing),
        )
    )

    assert messages == (f"invalid Google credentials file: {missing}",)


def test_azure_tenant_is_applied(make_options: OptionsBuilder) -> None:
    provider, _ = _configure(make_options(provider="azure", azure_tenant="contoso"))

    assert isinstance(provider, AzureProvider)
    assert provider.tenant == "contoso"
    assert provider.data.endpoint("login_url") == (
        "https://login.microsoftonline.com/contoso/oauth2/authorize"
    )
    assert provider.data.endpoint("protected_resource") == "https://graph.windows.net"


def test_azure_blank_tenant_uses_common(make_options: OptionsBuilder) -> None:
    provider, _ = _configure(make_options(provider="azure", azure_tenant=""))

    assert provider.data.endpoint("redeem_url") == (
        "https://login.microsoftonline.com/common/oauth2/token"
    )


def test_bitbucket_team_extends_scope(make_options: OptionsBuilder) -> None:
    provider, _ = _configure(make_options(provider="bitbucket", bitbucket_team="platform"))

    assert isinstance(provider, BitbucketProvider)
    assert provider.team == "platform"
    assert provider.data.scope == "email team"


def test_github_org_and_teams(make_options: OptionsBuilder) -> None:
    provider, _ = _configure(
        make_options(provider="github", github_org="acme", github_teams=["ops", "dev"])
    )

    assert isinstance(provider, GitHubProvider)
    assert provider.org == "acme"
    assert provider.teams == ["ops", "dev"]


def test_gitlab_groups(make_options: OptionsBuilder) -> None:
    provider, _ = _configure(make_options(provider="gitlab", gitlab_groups=["acme/ops"]))

    assert isinstance(provider, GitLabProvider)
    assert provider.groups == ["acme/ops"]
    assert provider.data.scope == "read_user"


def test_descriptor_is_stored_on_options(make_options: OptionsBuilder) -> None:
    options = make_options(provider="gitlab")

    provider, _ = _configure(options)

    assert options.provider_descriptor is provider
    assert provider.describe()["provider"] == "gitlab"
