"""Tests for request object construction and signing.

- Claim set contents and lifetime
- Header parameters
- Signature verification against the ephemeral key
- Freshness of anti-replay values
"""

import pytest
from authlib.jose import jwt
from authlib.jose.errors import BadSignatureError

from fapi_client.models.errors import RequestObjectError
from fapi_client.primitives.keys import generate_ephemeral_key
from fapi_client.primitives.pkce import code_challenge_for, generate_code_verifier
from fapi_client.services.request_object import RequestObjectBuilder
from tests.conftest import AUTHORIZATION_ENDPOINT


class TestRequestObjectBuilder:
    @pytest.fixture(autouse=True)
    def setup(self, client_config):
        self.config = client_config
        self.builder = RequestObjectBuilder(client_config)
        self.key = generate_ephemeral_key("ES256")

    def test_claims_contain_authorization_parameters(self):
        # Act
        signed = self.builder.build(AUTHORIZATION_ENDPOINT, self.key)

        # Assert
        claims = jwt.decode(signed.jwt, self.key.public_jwk())
        assert claims["iss"] == "travel-agency-app"
        assert claims["sub"] == "travel-agency-app"
        assert claims["aud"] == AUTHORIZATION_ENDPOINT
        assert claims["response_type"] == "code"
        assert claims["client_id"] == "travel-agency-app"
        assert claims["redirect_uri"] == "https://app.travelagency.com/callback"
        assert claims["scope"] == "openid profile airline_api"
        assert claims["state"] == signed.state
        assert claims["nonce"] == signed.nonce
        assert "code_challenge" not in claims

    def test_short_expiry(self):
        # Act
        signed = self.builder.build(AUTHORIZATION_ENDPOINT, self.key)

        # Assert
        claims = jwt.decode(signed.jwt, self.key.public_jwk())
        claims.validate()
        assert claims["exp"] - claims["iat"] == 300
        assert claims["nbf"] == claims["iat"]

    def test_header_identifies_key_and_type(self):
        # Act
        signed = self.builder.build(AUTHORIZATION_ENDPOINT, self.key)

        # Assert
        claims = jwt.decode(signed.jwt, self.key.public_jwk())
        assert claims.header["alg"] == "ES256"
        assert claims.header["kid"] == self.key.kid
        assert claims.header["typ"] == "oauth-authz-req+jwt"
        assert signed.key_id == self.key.kid

    def test_pkce_challenge_embedded(self):
        # Arrange
        code_verifier = generate_code_verifier()

        # Act
        signed = self.builder.build(AUTHORIZATION_ENDPOINT, self.key, code_verifier)

        # Assert
        claims = jwt.decode(signed.jwt, self.key.public_jwk())
        assert claims["code_challenge"] == code_challenge_for(code_verifier)
        assert claims["code_challenge_method"] == "S256"

    def test_signature_fails_with_other_key(self):
        # Arrange
        signed = self.builder.build(AUTHORIZATION_ENDPOINT, self.key)
        other_key = generate_ephemeral_key("ES256")

        # Act & Assert
        with pytest.raises(BadSignatureError):
            jwt.decode(signed.jwt, other_key.public_jwk())

    def test_fresh_values_per_build(self):
        # Act
        first = self.builder.build(AUTHORIZATION_ENDPOINT, self.key)
        second = self.builder.build(AUTHORIZATION_ENDPOINT, self.key)

        # Assert
        assert first.state != second.state
        assert first.nonce != second.nonce
        assert first.claims.jwt_id != second.claims.jwt_id

    def test_discarded_key_cannot_sign(self):
        # Arrange
        self.key.discard()

        # Act & Assert
        with pytest.raises(RequestObjectError):
            self.builder.build(AUTHORIZATION_ENDPOINT, self.key)

    def test_rsa_pss_signature(self):
        # Arrange
        rsa_key = generate_ephemeral_key("PS256")

        # Act
        signed = self.builder.build(AUTHORIZATION_ENDPOINT, rsa_key)

        # Assert
        claims = jwt.decode(signed.jwt, rsa_key.public_jwk())
        assert claims.header["alg"] == "PS256"
