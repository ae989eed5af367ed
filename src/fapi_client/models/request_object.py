"""Request object models (RFC 9101 JWT-Secured Authorization Request)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

REQUEST_OBJECT_TYPE = "oauth-authz-req+jwt"


@dataclass(frozen=True)
class RequestObjectClaims:
    """Claim set carried by a signed authorization request object."""

    # Required fields first
    client_id: str
    audience: str
    redirect_uri: str
    scope: str
    state: str
    nonce: str
    issued_at: int
    expires_at: int
    jwt_id: str

    # Optional fields with defaults last
    response_type: str = "code"
    code_challenge: str | None = None
    code_challenge_method: str | None = None

    def __post_init__(self) -> None:
        """FAPI 2.0 only allows S256 code challenges."""
        if self.code_challenge is None:
            if self.code_challenge_method is not None:
                raise ValueError(
                    "code_challenge_method given without code_challenge"
                )
            return
        if self.code_challenge_method != "S256":
            raise ValueError("Only S256 code challenge method is supported")
        # base64url of a SHA-256 digest, unpadded
        if len(self.code_challenge) != 43:
            raise ValueError("code_challenge must be a 43 character S256 digest")

    def to_claims(self) -> dict[str, Any]:
        """Convert to the JWT payload.

        The client is both issuer and subject of its own request object.
        """
        claims: dict[str, Any] = {
            "iss": self.client_id,
            "sub": self.client_id,
            "aud": self.audience,
            "iat": self.issued_at,
            "nbf": self.issued_at,
            "exp": self.expires_at,
            "jti": self.jwt_id,
            "response_type": self.response_type,
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": self.scope,
            "state": self.state,
            "nonce": self.nonce,
        }

        if self.code_challenge:
            claims["code_challenge"] = self.code_challenge
            claims["code_challenge_method"] = self.code_challenge_method

        return claims


@dataclass(frozen=True)
class SignedRequestObject:
    """A signed request object, created once and sent once."""

    jwt: str
    claims: RequestObjectClaims
    key_id: str

    @property
    def state(self) -> str:
        return self.claims.state

    @property
    def nonce(self) -> str:
        return self.claims.nonce
