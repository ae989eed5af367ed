"""FAPI 2.0 authorization request initiation.

Coordinates discovery, ephemeral key generation, request object signing and
pushed authorization to produce the URL the end user is redirected to.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

import httpx

from fapi_client.models.config import ClientConfiguration
from fapi_client.models.errors import FlowError
from fapi_client.models.flow import AuthorizationRedirect, FlowResult
from fapi_client.models.par import PushedAuthorizationRequest
from fapi_client.primitives.discovery import OIDCDiscovery
from fapi_client.primitives.keys import generate_ephemeral_key
from fapi_client.primitives.pkce import generate_code_verifier
from fapi_client.services.par import PushedAuthorizationClient
from fapi_client.services.request_object import RequestObjectBuilder

logger = logging.getLogger(__name__)


class RedirectHandler(Protocol):
    """Protocol for presenting the authorization URL to the end user.

    Allows different strategies:
    - Console output (print URL for the user to open)
    - Browser automation
    - Web framework redirect response
    """

    async def handle_redirect(self, authorization_url: str) -> None:
        """Present the authorization URL.

        Args:
            authorization_url: URL the user's browser must be sent to
        """
        ...


class ConsoleRedirectHandler:
    """Redirect handler that writes the authorization URL to standard output."""

    def __init__(self, message: str = "Redirect the user to: "):
        self.message = message

    async def handle_redirect(self, authorization_url: str) -> None:
        print(f"{self.message}{authorization_url}")


class CallbackRedirectHandler:
    """Redirect handler that delegates to an async callback."""

    def __init__(self, callback: Callable[[str], Awaitable[None]]):
        self.callback = callback

    async def handle_redirect(self, authorization_url: str) -> None:
        await self.callback(authorization_url)


class AuthorizationRequestInitiator:
    """Starts FAPI 2.0 authorization code flows with pushed request objects.

    Each call to ``run_flow`` is independent: it opens its own HTTP client,
    generates its own key, state and nonce, and keeps nothing afterwards.
    """

    def __init__(
        self,
        config: ClientConfiguration,
        redirect_handler: RedirectHandler | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the initiator.

        Args:
            config: Immutable client configuration
            redirect_handler: Handler for the final authorization URL,
                defaults to writing it to standard output
            transport: Optional httpx transport, mainly for testing
        """
        self.config = config
        self.redirect_handler = redirect_handler or ConsoleRedirectHandler()
        self._transport = transport
        self._request_builder = RequestObjectBuilder(config)

    async def run_flow(self) -> AuthorizationRedirect:
        """Run the authorization request flow.

        Performs, strictly in order:
        1. Discover authorization server metadata
        2. Generate an ephemeral signing key
        3. Build and sign the request object
        4. Push it to the PAR endpoint
        5. Hand the resulting authorization URL to the redirect handler

        Returns:
            AuthorizationRedirect: URL plus the values needed for the callback

        Raises:
            DiscoveryError: If metadata discovery fails; nothing is pushed
            RequestObjectError: If the request object cannot be signed
            ParError: If the server rejects the push; no URL is emitted
        """
        logger.info(
            f"Starting authorization request for client {self.config.client_id} "
            f"at {self.config.issuer}"
        )

        async with httpx.AsyncClient(
            timeout=self.config.timeout, transport=self._transport
        ) as http_client:
            # 1. Discover metadata
            logger.debug("Discovering authorization server metadata")
            discovery = OIDCDiscovery(http_client=http_client)
            document = await discovery.discover(self.config.issuer)

            if not document.supports_signing_alg(self.config.signing_alg):
                logger.warning(
                    f"Authorization server does not advertise "
                    f"{self.config.signing_alg} for request objects, supported: "
                    f"{document.request_object_signing_alg_values_supported}"
                )

            # 2-3. Generate key and sign request object
            logger.debug("Building signed request object")
            code_verifier = generate_code_verifier() if self.config.use_pkce else None

            # RSA key generation is CPU bound, keep it off the event loop
            key = await asyncio.to_thread(
                generate_ephemeral_key, self.config.signing_alg, self.config.key_size
            )
            with key:
                request_object = self._request_builder.build(
                    document.authorization_endpoint, key, code_verifier
                )
                public_jwk = key.public_jwk()
                key_thumbprint = key.thumbprint()

            # 4. Push authorization request
            logger.debug("Submitting pushed authorization request")
            par_client = PushedAuthorizationClient(http_client=http_client)
            par_result = await par_client.push(
                PushedAuthorizationRequest(
                    endpoint=document.pushed_authorization_request_endpoint,
                    client_id=self.config.client_id,
                    request=request_object.jwt,
                )
            )

        # 5. Emit redirect URL
        authorization_url = par_result.build_authorization_url(
            document.authorization_endpoint
        )
        await self.redirect_handler.handle_redirect(authorization_url)

        logger.info(f"Authorization request pushed for client {self.config.client_id}")

        return AuthorizationRedirect(
            url=authorization_url,
            request_uri=par_result.request_uri,
            expires_in=par_result.expires_in,
            state=request_object.state,
            nonce=request_object.nonce,
            code_verifier=code_verifier,
            key_thumbprint=key_thumbprint,
            public_jwk=public_jwk,
        )

    async def try_run_flow(self) -> FlowResult:
        """Run the flow, returning failures instead of raising them.

        Returns:
            FlowResult holding either the redirect or the FlowError subtype
            that aborted the flow
        """
        try:
            redirect = await self.run_flow()
        except FlowError as e:
            logger.error(f"Authorization request flow failed: {e}")
            return FlowResult(error=e)
        return FlowResult(redirect=redirect)
