from typing import Any

import httpx
import pytest

from fapi_client.models.config import ClientConfiguration

ISSUER = "https://idp.airline.com"
AUTHORIZATION_ENDPOINT = "https://idp.airline.com/authorize"
PAR_ENDPOINT = "https://idp.airline.com/par"
REQUEST_URI = "urn:ietf:params:oauth:request_uri:abc123"


def discovery_metadata(**overrides: Any) -> dict[str, Any]:
    metadata = {
        "issuer": ISSUER,
        "authorization_endpoint": AUTHORIZATION_ENDPOINT,
        "pushed_authorization_request_endpoint": PAR_ENDPOINT,
        "token_endpoint": "https://idp.airline.com/token",
        "response_types_supported": ["code"],
        "code_challenge_methods_supported": ["S256"],
        "request_object_signing_alg_values_supported": ["PS256", "ES256"],
        "require_pushed_authorization_requests": True,
    }
    metadata.update(overrides)
    return metadata


class MockProvider:
    """Mock authorization server serving discovery and PAR over httpx."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.discovery_response: tuple[int, Any] = (200, discovery_metadata())
        self.par_response: tuple[int, Any] = (
            201,
            {"request_uri": REQUEST_URI, "expires_in": 90},
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.endswith("/.well-known/openid-configuration"):
            return httpx.Response(
                self.discovery_response[0], json=self.discovery_response[1]
            )
        if path == "/par":
            return httpx.Response(self.par_response[0], json=self.par_response[1])
        return httpx.Response(404, json={"error": "not_found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def par_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "POST"]


@pytest.fixture
def client_config() -> ClientConfiguration:
    return ClientConfiguration(
        client_id="travel-agency-app",
        redirect_uri="https://app.travelagency.com/callback",
        issuer=ISSUER,
        scopes=("openid", "profile", "airline_api"),
    )


@pytest.fixture
def mock_provider() -> MockProvider:
    return MockProvider()
