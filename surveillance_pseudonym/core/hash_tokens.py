"""Token Hashing — keyed one-way digest that turns raw pseudonyms into storable tokens.

Invariants:
    - Raw pseudonyms are never persisted or logged, only their HMAC-SHA256 digest
    - Same input + same pepper -> same 32-byte token
    - Pepper is Base64 in configuration and must never change in production
      (a new pepper orphans every existing link)

Design Decisions:
    - New HMAC object per call: hmac objects carry state and are not shared across tasks
"""

import base64
import binascii
import hashlib
import hmac

from surveillance_pseudonym.core.domain_types import TokenHash
from surveillance_pseudonym.core.errors import ConfigurationError

PEPPER_SETTING = "hash_pepper"
TOKEN_LENGTH = 32


def decode_pepper(pepper_b64: str | None) -> bytes:
    if not pepper_b64 or not pepper_b64.strip():
        raise ConfigurationError(PEPPER_SETTING, "Pepper secret must be set")
    try:
        return base64.b64decode(pepper_b64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ConfigurationError(
            PEPPER_SETTING, f"Pepper secret must be Base64 encoded ({e})",
        ) from e


class TokenHasher:
    """HMAC-SHA256 keyed by the configured pepper."""

    def __init__(self, pepper_b64: str | None):
        self._key = decode_pepper(pepper_b64)

    def hash(self, pseudonym: str) -> TokenHash:
        digest = hmac.new(
            self._key, pseudonym.encode("utf-8"), hashlib.sha256,
        ).digest()
        return TokenHash(digest)
