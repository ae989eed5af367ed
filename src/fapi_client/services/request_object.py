"""Request object construction and signing service.

Builds RFC 9101 JWT-Secured Authorization Requests as profiled by FAPI 2.0:
the authorization parameters travel as a short-lived JWT signed with the
flow's ephemeral key.
"""

from __future__ import annotations

import logging
import time
import uuid

from authlib.jose import jwt
from authlib.jose.errors import JoseError

from fapi_client.models.config import ClientConfiguration
from fapi_client.models.errors import RequestObjectError
from fapi_client.models.request_object import (
    REQUEST_OBJECT_TYPE,
    RequestObjectClaims,
    SignedRequestObject,
)
from fapi_client.primitives.keys import EphemeralKey
from fapi_client.primitives.pkce import CODE_CHALLENGE_METHOD, code_challenge_for
from fapi_client.services.security import generate_nonce, generate_state

logger = logging.getLogger(__name__)


class RequestObjectBuilder:
    """Builds and signs authorization request objects.

    Every call generates a fresh state, nonce and ``jti`` so no two request
    objects can be replayed as one another.
    """

    def __init__(self, config: ClientConfiguration):
        self.config = config

    def build_claims(
        self, audience: str, code_verifier: str | None = None
    ) -> RequestObjectClaims:
        """Build the claim set for one authorization request.

        Args:
            audience: Authorization endpoint the request object is meant for
            code_verifier: PKCE verifier whose S256 challenge is embedded, if any

        Returns:
            RequestObjectClaims with fresh anti-replay values

        Raises:
            RequestObjectError: If the claim set is invalid
        """
        issued_at = int(time.time())
        code_challenge = code_challenge_for(code_verifier) if code_verifier else None

        try:
            return RequestObjectClaims(
                client_id=self.config.client_id,
                audience=audience,
                redirect_uri=self.config.redirect_uri,
                scope=self.config.scope,
                state=generate_state(),
                nonce=generate_nonce(),
                issued_at=issued_at,
                expires_at=issued_at + self.config.request_object_lifetime,
                jwt_id=str(uuid.uuid4()),
                code_challenge=code_challenge,
                code_challenge_method=(
                    CODE_CHALLENGE_METHOD if code_challenge else None
                ),
            )
        except ValueError as e:
            raise RequestObjectError(f"Invalid request object claims: {e}") from e

    def sign(
        self, claims: RequestObjectClaims, key: EphemeralKey
    ) -> SignedRequestObject:
        """Sign a claim set with the ephemeral key.

        Args:
            claims: Claims to sign
            key: Ephemeral key for this flow

        Returns:
            SignedRequestObject holding the compact JWT

        Raises:
            RequestObjectError: If signing fails
        """
        header = {"alg": key.alg, "kid": key.kid, "typ": REQUEST_OBJECT_TYPE}

        try:
            token = jwt.encode(header, claims.to_claims(), key.signing_key, check=False)
        except (JoseError, ValueError) as e:
            raise RequestObjectError(f"Failed to sign request object: {e}") from e

        logger.debug(
            f"Signed request object {claims.jwt_id} with {key.alg} key {key.kid}, "
            f"expires at {claims.expires_at}"
        )

        return SignedRequestObject(
            jwt=token.decode("ascii"),
            claims=claims,
            key_id=key.kid,
        )

    def build(
        self,
        audience: str,
        key: EphemeralKey,
        code_verifier: str | None = None,
    ) -> SignedRequestObject:
        """Build and sign a request object in one step."""
        return self.sign(self.build_claims(audience, code_verifier), key)
