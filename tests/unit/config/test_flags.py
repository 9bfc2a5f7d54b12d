"""Unit tests for the generated flag set."""

from __future__ import annotations

import pytest

from authproxy.config.flags import build_parser, flag_values_from_namespace, parse_flags
from authproxy.config.options import FIELDS


def test_every_field_has_a_flag() -> None:
    parser = build_parser()
    option_strings = {
        option for action in parser._actions for option in action.option_strings
    }

    for spec in FIELDS:
        assert f"--{spec.flag}" in option_strings


def test_only_explicit_flags_reach_the_values() -> None:
    namespace = parse_flags(["--provider", "github", "--cookie-expire", "12h"])

    assert flag_values_from_namespace(namespace) == {"provider": "github", "cookie_expire": "12h"}
    assert namespace.config is None
    assert namespace.version is False
    assert namespace.log_level == "INFO"
    assert namespace.log_format == "text"


def test_bool_flags_accept_bare_and_explicit_values() -> None:
    namespace = parse_flags(["--force-https", "--cookie-secure=false"])

    assert flag_values_from_namespace(namespace) == {
        "force_https": "true",
        "cookie_secure": "false",
    }


def test_repeatable_flags_accumulate() -> None:
    namespace = parse_flags(
        ["--upstream", "http://a:8080", "--upstream=http://b:8080", "--email-domain", "*"]
    )

    assert flag_values_from_namespace(namespace) == {
        "upstreams": ["http://a:8080", "http://b:8080"],
        "email_domains": ["*"],
    }


def test_out_of_band_flags() -> None:
    namespace = parse_flags(
        ["--config", "/etc/authproxy.toml", "--version", "--log-level", "debug", "--log-format", "json"]
    )

    assert namespace.config == "/etc/authproxy.toml"
    assert namespace.version is True
    assert namespace.log_level == "DEBUG"
    assert namespace.log_format == "json"
    assert flag_values_from_namespace(namespace) == {}


def test_unknown_flags_are_usage_errors() -> None:
    with pytest.raises(SystemExit) as excinfo:
        parse_flags(["--no-such-flag"])

    assert excinfo.value.code == 2


def test_abbreviated_flags_are_not_accepted() -> None:
    with pytest.raises(SystemExit):
        parse_flags(["--cookie-sec", "x"])
