"""Exception hierarchy for FAPI 2.0 authorization request failures.

Each step of the flow fails with its own exception type so callers can branch
on the failure kind without inspecting messages.
"""

from __future__ import annotations


class FlowError(Exception):
    """Base exception for all authorization request flow errors."""

    pass


class DiscoveryError(FlowError):
    """Raised when authorization server metadata discovery fails."""

    pass


class IssuerMismatchError(DiscoveryError):
    """Raised when discovered metadata names a different issuer.

    RFC 8414 Section 3.3: the issuer in the metadata must be identical to the
    issuer the client used to build the discovery URL.
    """

    pass


class RequestObjectError(FlowError):
    """Raised when the request object cannot be built or signed."""

    pass


class ParError(FlowError):
    """Raised when the pushed authorization request is rejected or unreachable.

    Carries the provider's error code and description when the server
    returned a RFC 6749 style error body.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error: str | None = None,
        error_description: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.error = error
        self.error_description = error_description
