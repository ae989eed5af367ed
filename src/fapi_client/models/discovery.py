"""Authorization server metadata model.

Covers the OpenID Connect Discovery and RFC 8414 fields a FAPI 2.0 client
needs, including the RFC 9126 pushed authorization request endpoint.
"""

from __future__ import annotations

from pydantic import BaseModel, field_validator

from fapi_client.services.security import is_secure_url


class DiscoveryDocument(BaseModel):
    """Authorization server metadata fetched once per flow.

    Unknown metadata fields are ignored.
    """

    # Required for a PAR based authorization code flow
    issuer: str
    authorization_endpoint: str
    pushed_authorization_request_endpoint: str  # RFC 9126

    # Optional but commonly used
    token_endpoint: str | None = None
    jwks_uri: str | None = None
    response_types_supported: list[str] | None = None
    scopes_supported: list[str] | None = None
    request_object_signing_alg_values_supported: list[str] | None = None
    code_challenge_methods_supported: list[str] | None = None
    require_pushed_authorization_requests: bool = False
    dpop_signing_alg_values_supported: list[str] | None = None

    @field_validator(
        "authorization_endpoint",
        "pushed_authorization_request_endpoint",
        "token_endpoint",
        "jwks_uri",
    )
    @classmethod
    def validate_endpoint_urls(cls, v: str | None) -> str | None:
        if v is not None and not is_secure_url(v):
            raise ValueError(f"Endpoint must use HTTPS or localhost: {v}")
        return v

    @field_validator("response_types_supported")
    @classmethod
    def validate_code_response_type(cls, v: list[str] | None) -> list[str] | None:
        if v is not None and "code" not in v:
            raise ValueError("Authorization server must support the code response type")
        return v

    @field_validator("code_challenge_methods_supported")
    @classmethod
    def validate_pkce_support(cls, v: list[str] | None) -> list[str] | None:
        if v is not None and "S256" not in v:
            raise ValueError("Authorization server must support S256 PKCE method")
        return v

    def supports_signing_alg(self, alg: str) -> bool:
        """Check if the server accepts request objects signed with ``alg``.

        Servers that do not advertise a list are assumed to accept it.
        """
        if self.request_object_signing_alg_values_supported is None:
            return True
        return alg in self.request_object_signing_alg_values_supported
