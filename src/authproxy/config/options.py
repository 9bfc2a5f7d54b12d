"""
authproxy — the ``Options`` record, its defaults, and the per-field source bindings.

File: src/authproxy/config/options.py

Purpose
- Define every proxy setting exactly once: its default (on the dataclass) and its
  flag / config-file key / environment identities (in ``FIELDS``).

What should be included in this file
- ``Options`` with externally sourced fields and validation-derived fields.
- ``FieldSpec`` binding table driving flag generation and the source merger.
- ``new_options`` defaults provider.

Non-functional requirements
- The binding table is explicit data, so precedence rules stay auditable per field.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from datetime import timedelta
from typing import TYPE_CHECKING, Final, Literal
from urllib.parse import SplitResult

from authproxy.constants import DEFAULT_REQUEST_LOGGING_FORMAT, ENV_PREFIX

if TYPE_CHECKING:
    from authproxy.config.signature import SignatureData
    from authproxy.providers.base import Provider
    from authproxy.transport import TransportPolicy

FieldKind = Literal["str", "bool", "duration", "list"]


@dataclass(slots=True)
class Options:
    """Proxy settings; mutated by merge and validation, read-only afterwards."""

    proxy_prefix: str = "/oauth2"
    proxy_websockets: bool = True
    http_address: str = "127.0.0.1:4180"
    https_address: str = ":443"
    force_https: bool = False
    redirect_url: str = ""
    client_id: str = ""
    client_secret: str = ""
    tls_cert_file: str = ""
    tls_key_file: str = ""

    authenticated_emails_file: str = ""
    azure_tenant: str = "common"
    bitbucket_team: str = ""
    email_domains: list[str] = field(default_factory=list)
    whitelist_domains: list[str] = field(default_factory=list)
    github_org: str = ""
    github_teams: list[str] = field(default_factory=list)
    gitlab_groups: list[str] = field(default_factory=list)
    google_groups: list[str] = field(default_factory=list)
    google_admin_email: str = ""
    google_service_account_json: str = ""
    htpasswd_file: str = ""
    display_htpasswd_form: bool = True
    custom_templates_dir: str = ""
    banner: str = ""
    footer: str = ""

    cookie_name: str = "_oauth2_proxy"
    cookie_secret: str = ""
    cookie_domain: str = ""
    cookie_path: str = "/"
    cookie_expire: timedelta = timedelta(hours=168)
    cookie_refresh: timedelta = timedelta(0)
    cookie_secure: bool = True
    cookie_httponly: bool = True
    cookie_samesite: str = ""

    upstreams: list[str] = field(default_factory=list)
    skip_auth_regex: list[str] = field(default_factory=list)
    skip_auth_strip_headers: bool = True
    pass_basic_auth: bool = True
    basic_auth_password: str = ""
    pass_access_token: bool = False
    pass_host_header: bool = True
    skip_provider_button: bool = False
    pass_user_headers: bool = True
    ssl_insecure_skip_verify: bool = False
    set_xauthrequest: bool = False
    skip_auth_preflight: bool = False

    flush_interval: timedelta = timedelta(0)

    provider: str = "google"
    oidc_issuer_url: str = ""
    oidc_jwks_url: str = ""
    skip_oidc_discovery: bool = False
    login_url: str = ""
    redeem_url: str = ""
    profile_url: str = ""
    protected_resource: str = ""
    validate_url: str = ""
    scope: str = ""
    # Switch to "login" once approval_prompt is retired.
    prompt: str = ""
    approval_prompt: str = "force"

    request_logging: bool = True
    request_logging_format: str = DEFAULT_REQUEST_LOGGING_FORMAT
    real_client_ip_header: str = "X-Real-IP"

    signature_key: str = ""

    # Populated by validation only.
    redirect_url_parsed: SplitResult | None = field(default=None, repr=False)
    proxy_urls: list[SplitResult] = field(default_factory=list, repr=False)
    compiled_regex: list[re.Pattern[str]] = field(default_factory=list, repr=False)
    provider_descriptor: Provider | None = field(default=None, repr=False)
    signature_data: SignatureData | None = field(default=None, repr=False)
    transport_policy: TransportPolicy | None = field(default=None, repr=False)


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Resolution identities of one ``Options`` field."""

    name: str
    flag: str
    file_key: str
    kind: FieldKind
    help: str
    env: str | None = None


def _spec(
    name: str,
    kind: FieldKind,
    help_text: str,
    *,
    flag: str | None = None,
    file_key: str | None = None,
    env: bool = False,
) -> FieldSpec:
    return FieldSpec(
        name=name,
        flag=flag if flag is not None else name.replace("_", "-"),
        file_key=file_key if file_key is not None else name,
        kind=kind,
        help=help_text,
        env=f"{ENV_PREFIX}{name.upper()}" if env else None,
    )


FIELDS: Final[tuple[FieldSpec, ...]] = (
    _spec("http_address", "str", "[http://]<addr>:<port> or unix://<path> to listen on for HTTP clients"),
    _spec("https_address", "str", "<addr>:<port> to listen on for HTTPS clients"),
    _spec("force_https", "bool", "redirect http requests to https"),
    _spec("tls_cert_file", "str", "path to certificate file"),
    _spec("tls_key_file", "str", "path to private key file"),
    _spec("redirect_url", "str", 'the OAuth Redirect URL, e.g. "https://app.example.com/oauth2/callback"'),
    _spec(
        "upstreams",
        "list",
        "the http url(s) of the upstream endpoint or file:// paths for static files (repeatable)",
        flag="upstream",
    ),
    _spec("set_xauthrequest", "bool", "set X-Auth-Request-User and X-Auth-Request-Email response headers"),
    _spec("pass_user_headers", "bool", "pass X-Forwarded-User and X-Forwarded-Email information to upstream"),
    _spec("pass_basic_auth", "bool", "pass HTTP Basic Auth header to upstream"),
    _spec("basic_auth_password", "str", "the password to set when passing the HTTP Basic Auth header"),
    _spec("pass_access_token", "bool", "pass OAuth access_token to upstream via X-Forwarded-Access-Token header"),
    _spec("pass_host_header", "bool", "pass the request Host Header to upstream"),
    _spec(
        "skip_auth_regex",
        "list",
        "bypass authentication for requests with paths that match (repeatable)",
    ),
    _spec("skip_auth_strip_headers", "bool", "strip proxy-set headers also for requests allowed by --skip-auth-regex"),
    _spec("skip_provider_button", "bool", "skip the sign-in page and go directly to the provider"),
    _spec("skip_auth_preflight", "bool", "skip authentication for OPTIONS requests"),
    _spec("ssl_insecure_skip_verify", "bool", "skip validation of certificates presented when using HTTPS"),
    _spec("flush_interval", "duration", "period between response flushing when streaming responses"),
    _spec(
        "email_domains",
        "list",
        "authenticate emails with the specified domain (repeatable); use * to authenticate any email",
        flag="email-domain",
    ),
    _spec(
        "whitelist_domains",
        "list",
        "allowed domain for redirection after authentication, leading '.' allows subdomains (repeatable)",
        flag="whitelist-domain",
        env=True,
    ),
    _spec("azure_tenant", "str", "go to a tenant-specific or common (tenant-independent) endpoint"),
    _spec("bitbucket_team", "str", "restrict logins to members of this team"),
    _spec("github_org", "str", "restrict logins to members of this organisation"),
    _spec("github_teams", "list", "restrict logins to members of this team slug (repeatable)", flag="github-team"),
    _spec("gitlab_groups", "list", "restrict logins to members of this group full path (repeatable)", flag="gitlab-group"),
    _spec("google_groups", "list", "restrict logins to members of this google group (repeatable)", flag="google-group"),
    _spec("google_admin_email", "str", "the google admin to impersonate for api calls"),
    _spec("google_service_account_json", "str", "the path to the service account json credentials"),
    _spec("client_id", "str", "the OAuth Client ID", env=True),
    _spec("client_secret", "str", "the OAuth Client Secret", env=True),
    _spec("authenticated_emails_file", "str", "authenticate against emails via file (one per line)"),
    _spec("htpasswd_file", "str", "additionally authenticate against a htpasswd file"),
    _spec("display_htpasswd_form", "bool", "display username / password login form if an htpasswd file is provided"),
    _spec("custom_templates_dir", "str", "path to custom html templates"),
    _spec("banner", "str", 'custom sign-in banner text/html; "-" disables the default banner'),
    _spec("footer", "str", 'custom footer text/html; "-" disables the default footer'),
    _spec("proxy_prefix", "str", "the url root path that this proxy should be nested under"),
    _spec("proxy_websockets", "bool", "enables WebSocket proxying"),
    _spec("cookie_name", "str", "the name of the cookie that the proxy creates", env=True),
    _spec("cookie_secret", "str", "the seed string for secure cookies (optionally base64 encoded)", env=True),
    _spec("cookie_domain", "str", "an optional cookie domain (e.g. '.example.com')", env=True),
    _spec("cookie_path", "str", "url path under which the cookie applies (e.g. '/poc/')", env=True),
    _spec("cookie_expire", "duration", "expire timeframe for cookie", env=True),
    _spec("cookie_refresh", "duration", "refresh the cookie after this duration; 0 to disable", env=True),
    _spec("cookie_secure", "bool", "set secure (HTTPS) cookie flag"),
    _spec("cookie_httponly", "bool", "set HttpOnly cookie flag"),
    _spec("cookie_samesite", "str", 'set SameSite cookie attribute (lax, strict, none, or "")'),
    _spec("request_logging", "bool", "log requests to stdout"),
    _spec("request_logging_format", "str", "template for request log lines"),
    _spec("real_client_ip_header", "str", "HTTP header carrying the client ip address (blank to disable)"),
    _spec("provider", "str", "OAuth provider"),
    _spec("oidc_issuer_url", "str", "OpenID Connect issuer URL (e.g. https://accounts.google.com)"),
    _spec("oidc_jwks_url", "str", "OpenID Connect JWKS URL for token verification"),
    _spec("skip_oidc_discovery", "bool", "skip OIDC discovery (login-url, redeem-url and oidc-jwks-url must be set)"),
    _spec("login_url", "str", "authentication endpoint"),
    _spec("redeem_url", "str", "token redemption endpoint"),
    _spec("profile_url", "str", "profile access endpoint"),
    _spec("protected_resource", "str", "the resource that is protected (Azure AD only)", flag="resource", file_key="resource"),
    _spec("validate_url", "str", "access token validation endpoint"),
    _spec("scope", "str", "OAuth scope specification"),
    _spec("prompt", "str", "OIDC prompt (overrides approval-prompt)"),
    _spec("approval_prompt", "str", "OAuth approval_prompt (see also: prompt)"),
    _spec("signature_key", "str", "request signature key (algorithm:secretkey)", env=True),
)

FIELDS_BY_NAME: Final[dict[str, FieldSpec]] = {spec.name: spec for spec in FIELDS}
FIELDS_BY_FILE_KEY: Final[dict[str, FieldSpec]] = {spec.file_key: spec for spec in FIELDS}

DERIVED_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "redirect_url_parsed",
        "proxy_urls",
        "compiled_regex",
        "provider_descriptor",
        "signature_data",
        "transport_policy",
    }
)


def new_options() -> Options:
    """Return an ``Options`` with every field at its built-in default."""

    return Options()


def sourced_field_names() -> tuple[str, ...]:
    """Names of all fields that external sources may set, in declaration order."""

    return tuple(item.name for item in fields(Options) if item.name not in DERIVED_FIELDS)


__all__ = [
    "DERIVED_FIELDS",
    "FIELDS",
    "FIELDS_BY_FILE_KEY",
    "FIELDS_BY_NAME",
    "FieldKind",
    "FieldSpec",
    "Options",
    "new_options",
    "sourced_field_names",
]
