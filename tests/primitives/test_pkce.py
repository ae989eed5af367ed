import base64
import hashlib
import string

import pytest

from fapi_client.primitives.pkce import code_challenge_for, generate_code_verifier

UNRESERVED = set(string.ascii_letters + string.digits + "-._~")


class TestCodeVerifier:
    def test_default_verifier_meets_rfc7636(self) -> None:
        # Act
        verifier = generate_code_verifier()

        # Assert
        assert len(verifier) == 128
        assert set(verifier) <= UNRESERVED

    def test_verifiers_are_unique(self) -> None:
        assert generate_code_verifier() != generate_code_verifier()

    @pytest.mark.parametrize("length", [42, 129])
    def test_length_outside_range_rejected(self, length) -> None:
        with pytest.raises(ValueError):
            generate_code_verifier(length)


class TestCodeChallenge:
    def test_challenge_is_s256_of_verifier(self) -> None:
        # Arrange
        verifier = generate_code_verifier()

        # Act
        challenge = code_challenge_for(verifier)

        # Assert base64url(sha256(code_verifier)) without padding
        expected = (
            base64.urlsafe_b64encode(hashlib.sha256(verifier.encode("ascii")).digest())
            .decode("ascii")
            .rstrip("=")
        )
        assert challenge == expected
        assert len(challenge) == 43

    def test_rfc7636_appendix_b_example(self) -> None:
        verifier = "dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk"

        assert code_challenge_for(verifier) == (
            "E9Melhoa2OwvFrEMTJguCHaoeK1t8URWbuGJSstw-cM"
        )
