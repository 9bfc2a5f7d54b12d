"""Unit tests for the signature key parser."""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from authproxy.config.signature import (
    SUPPORTED_DIGESTS,
    SignatureData,
    SignatureKeyError,
    parse_signature_key,
)

_SECRETS = st.text(
    alphabet=st.characters(blacklist_characters=":", blacklist_categories=("Cs",)),
    max_size=40,
)


@given(algorithm=st.sampled_from(sorted(SUPPORTED_DIGESTS)), secret=_SECRETS)
@settings(max_examples=60, derandomize=True, deadline=None)
def test_supported_algorithms_parse(algorithm: str, secret: str) -> None:
    parsed = parse_signature_key(f"{algorithm}:{secret}")

    assert parsed == SignatureData(algorithm=algorithm, key=secret)


@pytest.mark.parametrize("value", ["sha256", "sha256:a:b", "", "::"])
def test_wrong_colon_count_is_rejected(value: str) -> None:
    with pytest.raises(SignatureKeyError) as excinfo:
        parse_signature_key(value)

    assert str(excinfo.value) == f"invalid signature hash:key spec: {value}"


@pytest.mark.parametrize("value", ["sha3:secret", "SHA256:secret", ":secret", "blake2b:x"])
def test_unknown_algorithm_is_rejected(value: str) -> None:
    with pytest.raises(SignatureKeyError) as excinfo:
        parse_signature_key(value)

    assert str(excinfo.value) == f"unsupported signature hash algorithm: {value}"
