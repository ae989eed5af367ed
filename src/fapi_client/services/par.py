"""Pushed Authorization Request service.

Implements RFC 9126: the client posts its signed request object directly to
the authorization server and gets back a short-lived ``request_uri`` to use
in the browser redirect.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from fapi_client.models.errors import ParError
from fapi_client.models.par import (
    PushedAuthorizationRequest,
    PushedAuthorizationResponse,
    PushedAuthorizationResult,
)

logger = logging.getLogger(__name__)


class PushedAuthorizationClient:
    """Submits pushed authorization requests.

    Uses application/x-www-form-urlencoded encoding as required by RFC 9126.
    A rejected or unreachable request raises ParError; there is no retry.
    """

    def __init__(self, http_client: httpx.AsyncClient):
        """Initialize the PAR client.

        Args:
            http_client: Client to send requests with, owned and closed by
                the caller
        """
        self._http_client = http_client

    async def push(
        self, par_request: PushedAuthorizationRequest
    ) -> PushedAuthorizationResult:
        """Push an authorization request to the server.

        Args:
            par_request: Endpoint, client id and signed request object

        Returns:
            PushedAuthorizationResult with the request URI reference

        Raises:
            ParError: If the server rejects the request or cannot be reached
        """
        logger.debug(
            f"Pushing authorization request for client {par_request.client_id} "
            f"to {par_request.endpoint}"
        )

        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        }

        try:
            response = await self._http_client.post(
                par_request.endpoint,
                data=par_request.to_form_data(),
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise ParError(
                f"HTTP error during pushed authorization request: {e}"
            ) from e

        return self._parse_par_response(response)

    def _parse_par_response(
        self, response: httpx.Response
    ) -> PushedAuthorizationResult:
        """Parse the PAR endpoint response.

        RFC 9126 Section 2.2 answers success with 201 Created; 200 is also
        accepted since some servers use it.

        Raises:
            ParError: For error responses and malformed success responses
        """
        try:
            response_data = response.json()
            par_response = PushedAuthorizationResponse.model_validate(response_data)
        except (ValueError, ValidationError) as e:
            raise ParError(
                f"Invalid pushed authorization response "
                f"(HTTP {response.status_code}): {response.text}",
                status_code=response.status_code,
            ) from e

        if response.status_code in (200, 201) and par_response.is_success():
            logger.info(
                f"Pushed authorization request accepted, request_uri expires in "
                f"{par_response.expires_in}s"
            )
            return PushedAuthorizationResult(
                request_uri=par_response.request_uri,
                expires_in=par_response.expires_in,
            )

        if par_response.is_error():
            error_description = (
                par_response.error_description or "No description provided"
            )
            logger.warning(
                f"Pushed authorization request failed with {response.status_code}: "
                f"{par_response.error} - {error_description}"
            )
            raise ParError(
                f"Pushed authorization request rejected ({response.status_code}): "
                f"{par_response.error} - {error_description}",
                status_code=response.status_code,
                error=par_response.error,
                error_description=par_response.error_description,
            )

        if response.status_code in (200, 201):
            raise ParError(
                "Pushed authorization response missing required request_uri",
                status_code=response.status_code,
            )

        raise ParError(
            f"Pushed authorization request failed with HTTP "
            f"{response.status_code}: {response.text}",
            status_code=response.status_code,
        )
