"""Shared fixtures for authproxy tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest

from authproxy.config.options import Options, new_options
from authproxy.observability.logging import shutdown_logging

VALID_COOKIE_SECRET = "0123456789abcdef"


@pytest.fixture(autouse=True)
def _cleanup_logging() -> Iterator[None]:
    yield
    shutdown_logging()


@pytest.fixture()
def make_options() -> Callable[..., Options]:
    """Return a builder for options that pass validation unless overridden."""

    def build(**overrides: object) -> Options:
        options = new_options()
        options.client_id = "client-id"
        options.client_secret = "client-secret"
        options.cookie_secret = VALID_COOKIE_SECRET
        options.email_domains = ["example.com"]
        for name, value in overrides.items():
            if not hasattr(options, name):
                raise AttributeError(name)
            setattr(options, name, value)
        return options

    return build
