"""PKCE (Proof Key for Code Exchange) values for pushed request objects.

FAPI 2.0 requires PKCE with the S256 method. The challenge travels inside the
signed request object; the verifier stays with the caller for the token
request.
"""

from __future__ import annotations

from authlib.common.security import generate_token
from authlib.oauth2.rfc7636 import create_s256_code_challenge

CODE_CHALLENGE_METHOD = "S256"

# RFC 7636 Section 4.1 allows 43-128 characters
CODE_VERIFIER_LENGTH = 128


def generate_code_verifier(length: int = CODE_VERIFIER_LENGTH) -> str:
    """Generate a fresh high-entropy code verifier.

    Raises:
        ValueError: If the length is outside the RFC 7636 range
    """
    if not (43 <= length <= 128):
        raise ValueError(f"code_verifier must be 43-128 characters, got {length}")
    return generate_token(length)


def code_challenge_for(code_verifier: str) -> str:
    """Derive the S256 code challenge sent in the request object."""
    return create_s256_code_challenge(code_verifier)
