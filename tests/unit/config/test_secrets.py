"""Unit tests for cookie secret decoding."""

from __future__ import annotations

import base64

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from authproxy.config.secrets import add_padding, secret_bytes, was_decoded


@pytest.mark.parametrize(
    ("secret", "expected"),
    [
        ("abcd", "abcd"),
        ("abcdef", "abcdef=="),
        ("abcdefg", "abcdefg="),
        ("", ""),
    ],
)
def test_add_padding(secret: str, expected: str) -> None:
    assert add_padding(secret) == expected


def test_base64_secret_of_aes_length_is_decoded_with_or_without_padding() -> None:
    key = b"0123456789abcdef"
    padded = base64.urlsafe_b64encode(key).decode("ascii")

    assert padded.endswith("==")
    assert secret_bytes(padded) == key
    assert secret_bytes(padded.rstrip("=")) == key
    assert was_decoded(padded)


def test_raw_secret_is_used_when_decoding_gives_wrong_length() -> None:
    # Valid base64, but it decodes to 12 bytes.
    assert secret_bytes("0123456789abcdef") == b"0123456789abcdef"
    assert not was_decoded("0123456789abcdef")


def test_raw_secret_is_used_when_not_base64() -> None:
    secret = "not base64 at all!"

    assert secret_bytes(secret) == secret.encode("utf-8")


def test_base64_form_wins_when_both_readings_have_valid_lengths() -> None:
    # 32 raw characters that also decode to a 24-byte key.
    secret = "0123456789abcdef0123456789abcdef"

    assert len(secret_bytes(secret)) == 24
    assert was_decoded(secret)


@given(
    key=st.sampled_from([16, 24, 32]).flatmap(lambda n: st.binary(min_size=n, max_size=n)),
    strip_padding=st.booleans(),
)
@settings(max_examples=50, derandomize=True, deadline=None)
def test_encoded_aes_keys_decode_to_the_key(key: bytes, strip_padding: bool) -> None:
    encoded = base64.urlsafe_b64encode(key).decode("ascii")
    if strip_padding:
        encoded = encoded.rstrip("=")

    assert secret_bytes(encoded) == key


@given(
    secret=st.sampled_from([16, 24, 32]).flatmap(
        lambda n: st.text(
            alphabet=st.characters(min_codepoint=33, max_codepoint=126), min_size=n, max_size=n
        )
    )
)
@settings(max_examples=50, derandomize=True, deadline=None)
def test_raw_secrets_of_aes_length_yield_a_usable_key(secret: str) -> None:
    assert len(secret_bytes(secret)) in {16, 24, 32}
