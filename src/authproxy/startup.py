"""
authproxy — hand-off from validated options to the proxy service.

File: src/authproxy/startup.py

Purpose
- Derive the sign-in banner text, open the htpasswd file, and bundle both with the
  validated options for the service constructor.

Functional requirements
- An htpasswd file that cannot be opened is fatal and distinct from validation failures.
- Opened files belong to the returned ``ServiceSettings``; ``close`` releases them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from authproxy.config.options import Options

logger = logging.getLogger(__name__)

BANNER_DISABLED = "-"


class ResourceOpenError(OSError):
    """Raised when a file the service needs at startup cannot be opened."""


@dataclass(slots=True)
class ServiceSettings:
    """Everything the proxy service constructor receives."""

    options: Options
    sign_in_message: str = ""
    htpasswd_file: TextIO | None = field(default=None, repr=False)
    display_htpasswd_form: bool = False

    def close(self) -> None:
        if self.htpasswd_file is not None:
            self.htpasswd_file.close()
        release_provider_resources(self.options)


def release_provider_resources(options: Options) -> None:
    """Close files the provider descriptor opened during validation."""

    credentials = getattr(options.provider_descriptor, "service_account_credentials", None)
    if credentials is not None:
        credentials.close()


def sign_in_message(options: Options) -> str:
    """Text shown above the sign-in button.

    An explicit banner wins (``-`` disables it). Otherwise the allowed email
    domains are listed, unless an authenticated-emails file widens the set or
    the only domain is ``*``.
    """

    if options.banner:
        return "" if options.banner == BANNER_DISABLED else options.banner
    if not options.email_domains or options.authenticated_emails_file:
        return ""
    if len(options.email_domains) > 1:
        return "Authenticate using one of the following domains: " + ", ".join(
            options.email_domains
        )
    if options.email_domains[0] != "*":
        return f"Authenticate using {options.email_domains[0]}"
    return ""


def open_htpasswd_file(path: str) -> TextIO:
    logger.info("using htpasswd file", extra={"path": path})
    try:
        return open(path, encoding="utf-8")  # noqa: SIM115
    except OSError as exc:
        raise ResourceOpenError(f"unable to open {path}: {exc.strerror or exc}") from exc


def build_service_settings(options: Options) -> ServiceSettings:
    """Bundle validated ``options`` with the startup resources derived from them."""

    settings = ServiceSettings(options=options, sign_in_message=sign_in_message(options))
    if options.htpasswd_file:
        settings.htpasswd_file = open_htpasswd_file(options.htpasswd_file)
        settings.display_htpasswd_form = options.display_htpasswd_form
    return settings


__all__ = [
    "BANNER_DISABLED",
    "ResourceOpenError",
    "ServiceSettings",
    "build_service_settings",
    "open_htpasswd_file",
    "release_provider_resources",
    "sign_in_message",
]
