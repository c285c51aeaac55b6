"""Token Hashing — tests for the keyed HMAC-SHA256 digest.

Tests cover:
    - Known HMAC-SHA256 vectors for the test pepper
    - Determinism, input sensitivity, pepper sensitivity
    - Tokens are always 32 bytes
    - Empty or non-Base64 pepper raises ConfigurationError naming the setting
"""

import pytest

from surveillance_pseudonym.core.errors import ConfigurationError
from surveillance_pseudonym.core.hash_tokens import TokenHasher, TOKEN_LENGTH

PEPPER = "MmbSvONGwV4J3WkG2Io5CrYTpSl2whWw9gjOodfVw2w="
OTHER_PEPPER = "0WAoZ+nfpzBJrducAjGm0oBTnFB+jFfxwA/dcFGhsqA="


@pytest.fixture
def hasher():
    return TokenHasher(PEPPER)


# ─── Pepper validation ───────────────────────────────────────────

@pytest.mark.parametrize("pepper", ["", "   ", None])
def test_pepper_must_be_set(pepper):
    with pytest.raises(ConfigurationError) as exc_info:
        TokenHasher(pepper)
    assert "hash_pepper" in str(exc_info.value)
    assert "must be set" in str(exc_info.value)


def test_pepper_must_be_base64():
    with pytest.raises(ConfigurationError) as exc_info:
        TokenHasher("!!!not_base64!!!")
    assert "hash_pepper" in str(exc_info.value)
    assert "Base64" in str(exc_info.value)


# ─── Hashing ─────────────────────────────────────────────────────

@pytest.mark.parametrize("pseudonym, expected_hex", [
    (
        "123e4567-e89b-12d3-a456-426614174000",
        "aa47bc4669a4a3118526220f9f88737c5e327f206ab570a63f36f214ed973d52",
    ),
    (
        "550e8400-e29b-41d4-a716-446655440000",
        "f8c01affe442db74dcc2368fe9dca2c19b772eeb4fbc503c0208ff1c8ce34991",
    ),
    (
        "f47ac10b-58cc-4372-a567-0e02b2c3d479",
        "cdef39d617ed85465ea2100b525e566bfb3d0db9b228641c4da6f04ad67a438b",
    ),
])
def test_hash_is_hmac_sha256(hasher, pseudonym, expected_hex):
    assert hasher.hash(pseudonym).hex() == expected_hex


def test_hash_is_deterministic(hasher):
    assert hasher.hash("testInput") == hasher.hash("testInput")


def test_hash_differs_for_different_inputs(hasher):
    assert hasher.hash("input1") != hasher.hash("input2")


def test_hash_depends_on_pepper(hasher):
    assert hasher.hash("same Input") != TokenHasher(OTHER_PEPPER).hash("same Input")


@pytest.mark.parametrize("pseudonym", [
    "a", "123456", "langerTextMitSonderzeichen!@#$%^&*()", "x" * 200,
])
def test_hash_has_fixed_length(hasher, pseudonym):
    assert len(hasher.hash(pseudonym)) == TOKEN_LENGTH
