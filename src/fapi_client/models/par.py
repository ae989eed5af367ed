"""Pushed Authorization Request models (RFC 9126)."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from pydantic import BaseModel


@dataclass(frozen=True)
class PushedAuthorizationRequest:
    """Parameters posted to the pushed authorization request endpoint."""

    endpoint: str
    client_id: str
    request: str  # Signed request object

    def to_form_data(self) -> dict[str, str]:
        """Convert to form data for application/x-www-form-urlencoded request.

        RFC 9126 Section 2.1: PAR requests use form encoding like the token
        endpoint.
        """
        return {
            "client_id": self.client_id,
            "request": self.request,
        }


class PushedAuthorizationResponse(BaseModel):
    """PAR endpoint response body.

    Represents both the success response (RFC 9126 Section 2.2) and the
    error response (RFC 9126 Section 2.3).
    """

    # Success response fields
    request_uri: str | None = None
    expires_in: int | None = None

    # Error response fields
    error: str | None = None
    error_description: str | None = None
    error_uri: str | None = None

    def is_success(self) -> bool:
        return self.error is None and bool(self.request_uri)

    def is_error(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class PushedAuthorizationResult:
    """The request URI reference returned by a successful PAR call.

    Consumed immediately to build the authorization redirect.
    """

    request_uri: str
    expires_in: int | None = None
    received_at: float = field(default_factory=time.time)

    @property
    def expires_at(self) -> float | None:
        """Unix timestamp after which the request URI is no longer usable."""
        if self.expires_in is None:
            return None
        return self.received_at + self.expires_in

    def is_expired(self) -> bool:
        expires_at = self.expires_at
        if expires_at is None:
            return False
        return time.time() >= expires_at

    def build_authorization_url(self, authorization_endpoint: str) -> str:
        """Build the URL the end user's browser is redirected to.

        The request URI is appended as-is so the URN form returned by the
        server stays readable in the redirect.
        """
        separator = "&" if "?" in authorization_endpoint else "?"
        return f"{authorization_endpoint}{separator}request_uri={self.request_uri}"
