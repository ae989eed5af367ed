"""Authorization flow result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from fapi_client.models.errors import FlowError


@dataclass(frozen=True)
class AuthorizationRedirect:
    """Outcome of a successful authorization request initiation.

    ``state``, ``nonce`` and ``code_verifier`` must be kept by the caller to
    validate the callback and redeem the authorization code later.
    """

    url: str
    request_uri: str
    expires_in: int | None
    state: str
    nonce: str
    code_verifier: str | None = None
    key_thumbprint: str | None = None
    public_jwk: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FlowResult:
    """Result-style wrapper around a flow invocation.

    Holds either a redirect or the error that aborted the flow.
    """

    redirect: AuthorizationRedirect | None = None
    error: FlowError | None = None

    def is_success(self) -> bool:
        return self.error is None and self.redirect is not None

    def is_error(self) -> bool:
        return self.error is not None
