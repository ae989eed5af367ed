"""Security utilities for authorization requests.

Provides cryptographically secure generation of the anti-replay values sent in
the request object and the URL checks applied to configured and discovered
endpoints.
"""

from __future__ import annotations

import secrets
import string
from urllib.parse import urlparse

_URL_SAFE_ALPHABET = string.ascii_letters + string.digits + "-._~"


def _random_token(length: int) -> str:
    return "".join(secrets.choice(_URL_SAFE_ALPHABET) for _ in range(length))


def generate_state() -> str:
    """Generate cryptographically secure state parameter.

    The state parameter ties the authorization response back to this request
    and protects the redirect against CSRF.

    Returns:
        Cryptographically secure random state string (32 characters)
    """
    return _random_token(32)


def generate_nonce() -> str:
    """Generate cryptographically secure nonce for ID token replay protection.

    Returns:
        Cryptographically secure random nonce string (32 characters)
    """
    return _random_token(32)


def is_secure_url(url: str) -> bool:
    """Check that a URL uses HTTPS, or plain HTTP on localhost.

    Args:
        url: URL to check

    Returns:
        True if the URL is acceptable for OAuth endpoints and redirects
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    if not parsed.netloc:
        return False
    return parsed.scheme == "https" or (
        parsed.scheme == "http" and parsed.hostname == "localhost"
    )
