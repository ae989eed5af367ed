"""Ephemeral signing keys for request objects.

Each flow invocation gets its own freshly generated key. The private half
never leaves the process and is dropped as soon as the request object has
been signed.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from authlib.jose import JsonWebKey, Key

logger = logging.getLogger(__name__)

# JWS algorithm -> key type
KEY_TYPES = {
    "PS256": "RSA",
    "RS256": "RSA",
    "ES256": "EC",
}


class EphemeralKey:
    """A single-use asymmetric signing key.

    Use as a context manager so the private key is discarded on exit::

        with generate_ephemeral_key("PS256") as key:
            token = jwt.encode(header, claims, key.signing_key)
    """

    def __init__(self, key: Key, alg: str):
        self._key: Key | None = key
        self.alg = alg
        self.kid: str = key.kid
        self._public_jwk = key.as_dict(is_private=False, alg=alg, use="sig")
        self._thumbprint = key.thumbprint()

    @property
    def signing_key(self) -> Key:
        """The private key, available until the key is discarded."""
        if self._key is None:
            raise ValueError(f"Ephemeral key {self.kid} has already been discarded")
        return self._key

    @property
    def is_discarded(self) -> bool:
        return self._key is None

    def public_jwk(self) -> dict[str, Any]:
        """Public JWK for verifying signatures made with this key."""
        return dict(self._public_jwk)

    def thumbprint(self) -> str:
        """RFC 7638 JWK thumbprint of the public key."""
        return self._thumbprint

    def discard(self) -> None:
        """Drop the private key so it cannot be used again."""
        if self._key is not None:
            logger.debug(f"Discarding ephemeral key {self.kid}")
        self._key = None

    def __enter__(self) -> EphemeralKey:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.discard()


def generate_ephemeral_key(alg: str = "PS256", key_size: int = 2048) -> EphemeralKey:
    """Generate a fresh signing key with a random key identifier.

    Args:
        alg: JWS algorithm the key will sign with
        key_size: RSA modulus size in bits, ignored for EC keys

    Returns:
        A new EphemeralKey

    Raises:
        ValueError: If the algorithm is unsupported or the RSA key is too small
    """
    kty = KEY_TYPES.get(alg)
    if kty is None:
        raise ValueError(f"Unsupported signing algorithm: {alg}")

    options = {"kid": str(uuid.uuid4())}

    if kty == "RSA":
        if key_size < 2048:
            raise ValueError(f"RSA keys must be at least 2048 bits, got {key_size}")
        key = JsonWebKey.generate_key("RSA", key_size, options=options, is_private=True)
    else:
        key = JsonWebKey.generate_key("EC", "P-256", options=options, is_private=True)

    logger.debug(f"Generated ephemeral {kty} key {key.kid} for {alg}")
    return EphemeralKey(key, alg)
