"""
authproxy — semantic validation of merged options.

File: src/authproxy/config/validation.py

Purpose
- Turn merged raw settings into typed, cross-checked settings, or explain every reason they
  cannot be used.

What should be included in this file
- An ordered tuple of checks sharing one ``ValidationReport``.
- Population of the derived fields (parsed URLs, compiled regexes, provider descriptor,
  signature data, transport policy).

Functional requirements
- No check short-circuits a later one; the operator sees all findings in one error.
- Merge messages are reported ahead of validation messages.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Final

from authproxy.config.cookies import cookie_name_is_valid, samesite_is_valid
from authproxy.config.durations import format_duration
from authproxy.config.options import Options
from authproxy.config.report import ValidationReport
from authproxy.config.secrets import secret_bytes, was_decoded
from authproxy.config.signature import SignatureKeyError, parse_signature_key
from authproxy.constants import COOKIE_SECRET_SIZES, REAL_CLIENT_IP_HEADERS
from authproxy.providers.factory import HttpClientFactory, configure_provider
from authproxy.transport import resolve_transport_policy
from authproxy.urls import URLParseError, parse_url, with_default_path

logger = logging.getLogger(__name__)

EMAIL_VALIDATION_MESSAGE: Final[str] = (
    "missing setting for email validation: email-domain or authenticated-emails-file required."
    "\n      use email-domain=* to authorize all email addresses"
)


@dataclass(frozen=True, slots=True)
class _Context:
    http_client_factory: HttpClientFactory | None


_Check = Callable[[Options, ValidationReport, _Context], None]


def validate_options(
    options: Options,
    *,
    prior_messages: Iterable[str] = (),
    http_client_factory: HttpClientFactory | None = None,
) -> Options:
    """Run every check against ``options`` and populate its derived fields.

    Raises ``ConfigValidationError`` carrying ``prior_messages`` followed by every
    finding when anything is wrong; otherwise returns ``options``.
    """

    report = ValidationReport(prior_messages)
    context = _Context(http_client_factory=http_client_factory)
    logger.debug("validating options", extra={"checks": len(_CHECKS)})
    for check in _CHECKS:
        check(options, report, context)

    if report.has_issues:
        logger.debug("validation failed", extra={"issues": len(report)})
    report.raise_for_issues()

    logger.info(
        "configuration validated",
        extra={
            "provider": options.provider,
            "upstreams": len(options.proxy_urls),
            "skip_auth_regex": len(options.compiled_regex),
        },
    )
    return options


def _check_transport(options: Options, report: ValidationReport, context: _Context) -> None:
    options.transport_policy = resolve_transport_policy(options.ssl_insecure_skip_verify)


def _check_required(options: Options, report: ValidationReport, context: _Context) -> None:
    if not options.cookie_secret:
        report.add("missing setting: cookie-secret")
    if not options.client_id:
        report.add("missing setting: client-id")
    if not options.client_secret:
        report.add("missing setting: client-secret")
    if not (options.authenticated_emails_file or options.email_domains or options.htpasswd_file):
        report.add(EMAIL_VALIDATION_MESSAGE)


def _check_redirect_url(options: Options, report: ValidationReport, context: _Context) -> None:
    if not options.redirect_url:
        return
    try:
        options.redirect_url_parsed = parse_url(options.redirect_url)
    except URLParseError as exc:
        report.add(f'error parsing redirect-url="{options.redirect_url}" {exc}')


def _check_upstreams(options: Options, report: ValidationReport, context: _Context) -> None:
    options.proxy_urls = []
    for raw in options.upstreams:
        try:
            parts = parse_url(raw, require_absolute=True)
        except URLParseError as exc:
            report.add(f"error parsing upstream: {exc}")
            continue
        options.proxy_urls.append(with_default_path(parts))


def _check_skip_auth_regex(options: Options, report: ValidationReport, context: _Context) -> None:
    options.compiled_regex = []
    for pattern in options.skip_auth_regex:
        try:
            compiled = re.compile(pattern)
        except re.error as exc:
            report.add(f'error compiling regex="{pattern}" {exc}')
            continue
        options.compiled_regex.append(compiled)


def _check_provider(options: Options, report: ValidationReport, context: _Context) -> None:
    configure_provider(options, report, http_client_factory=context.http_client_factory)


def _check_cookie_secret_size(
    options: Options, report: ValidationReport, context: _Context
) -> None:
    if not (options.pass_access_token or options.cookie_refresh):
        return
    size = len(secret_bytes(options.cookie_secret))
    if size in COOKIE_SECRET_SIZES:
        return
    suffix = ""
    if was_decoded(options.cookie_secret):
        suffix = f' note: cookie secret was base64 decoded from "{options.cookie_secret}"'
    report.add(
        "cookie_secret must be 16, 24, or 32 bytes to create an AES cipher when "
        f"pass_access_token == true or cookie_refresh != 0, but is {size} bytes.{suffix}"
    )


def _check_cookie_refresh(options: Options, report: ValidationReport, context: _Context) -> None:
    if options.cookie_refresh >= options.cookie_expire:
        report.add(
            f"cookie_refresh ({format_duration(options.cookie_refresh)}) must be less than "
            f"cookie_expire ({format_duration(options.cookie_expire)})"
        )


def _check_samesite(options: Options, report: ValidationReport, context: _Context) -> None:
    if not samesite_is_valid(options.cookie_samesite):
        report.add(
            f"cookie_samesite ({options.cookie_samesite}) must be one of "
            "['', 'lax', 'strict', 'none']"
        )


def _check_signature_key(options: Options, report: ValidationReport, context: _Context) -> None:
    if not options.signature_key:
        return
    try:
        options.signature_data = parse_signature_key(options.signature_key)
    except SignatureKeyError as exc:
        report.add(str(exc))


def _check_cookie_name(options: Options, report: ValidationReport, context: _Context) -> None:
    if not cookie_name_is_valid(options.cookie_name):
        report.add(f'invalid cookie name: "{options.cookie_name}"')


def _check_real_client_ip_header(
    options: Options, report: ValidationReport, context: _Context
) -> None:
    header = options.real_client_ip_header
    if header and header not in REAL_CLIENT_IP_HEADERS:
        report.add(f'unsupported real-client-ip-header "{header}"')


_CHECKS: Final[tuple[_Check, ...]] = (
    _check_transport,
    _check_required,
    _check_redirect_url,
    _check_upstreams,
    _check_skip_auth_regex,
    _check_provider,
    _check_cookie_secret_size,
    _check_cookie_refresh,
    _check_samesite,
    _check_signature_key,
    _check_cookie_name,
    _check_real_client_ip_header,
)


__all__ = ["EMAIL_VALIDATION_MESSAGE", "validate_options"]
