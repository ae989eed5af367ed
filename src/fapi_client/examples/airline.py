"""
Start a FAPI 2.0 authorization request against an airline identity provider.

Defaults target the travel agency client. Override them with FAPI_CLIENT_ID,
FAPI_REDIRECT_URI, FAPI_ISSUER, FAPI_SCOPES and FAPI_SIGNING_ALG, either in the
environment or in a .env file.
"""

import asyncio
import logging
import sys

from dotenv import load_dotenv

from fapi_client.initiator import AuthorizationRequestInitiator, ConsoleRedirectHandler
from fapi_client.models.config import ClientConfiguration


async def main() -> int:
    config = ClientConfiguration.from_env(
        client_id="travel-agency-app",
        redirect_uri="https://app.travelagency.com/callback",
        issuer="https://idp.airline.com",
        scopes=("openid", "profile", "airline_api"),
    )
    initiator = AuthorizationRequestInitiator(
        config, ConsoleRedirectHandler("Redirect the travel agent to: ")
    )

    result = await initiator.try_run_flow()
    if result.is_error():
        logging.error(f"{type(result.error).__name__}: {result.error}")
        return 1

    logging.info(f"Request URI expires in {result.redirect.expires_in}s")
    return 0


if __name__ == "__main__":
    load_dotenv()
    logging.basicConfig(level=logging.INFO)
    sys.exit(asyncio.run(main()))
