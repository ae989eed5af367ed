"""Authorization server metadata discovery primitive.

Implements OpenID Connect Discovery 1.0 and RFC 8414 (Authorization Server
Metadata) lookup for a configured issuer.
"""

from __future__ import annotations

import logging
from urllib.parse import urljoin, urlparse

import httpx
from pydantic import ValidationError

from fapi_client.models.discovery import DiscoveryDocument
from fapi_client.models.errors import DiscoveryError, IssuerMismatchError

logger = logging.getLogger(__name__)


class OIDCDiscovery:
    """Fetches and validates authorization server metadata for an issuer.

    Tries the OpenID Connect location first and falls back to the RFC 8414
    location. The discovered issuer must match the configured one.
    """

    def __init__(self, http_client: httpx.AsyncClient):
        """Initialize discovery.

        Args:
            http_client: Client to send requests with, owned and closed by
                the caller
        """
        self._http_client = http_client

    async def discover(self, issuer: str) -> DiscoveryDocument:
        """Discover the metadata document for an issuer.

        Args:
            issuer: Issuer URL to discover metadata for

        Returns:
            Validated discovery document

        Raises:
            IssuerMismatchError: If the document names a different issuer
            DiscoveryError: If no discovery location yields a valid document
        """
        discovery_urls = self._build_discovery_urls(issuer)
        failures: list[str] = []

        for url in discovery_urls:
            logger.debug(f"Trying authorization server metadata discovery: {url}")
            try:
                response = await self._http_client.get(
                    url, headers={"Accept": "application/json"}
                )
            except httpx.RequestError as e:
                # Network error - try next URL
                failures.append(f"{url}: {e}")
                continue

            if response.status_code != 200:
                failures.append(
                    f"{url}: HTTP {response.status_code} {self._error_text(response)}"
                )
                if response.status_code >= 500:
                    # Server error - don't try other URLs
                    break
                continue

            try:
                document = DiscoveryDocument.model_validate(response.json())
            except (ValueError, ValidationError) as e:
                # Invalid metadata - try next URL
                failures.append(f"{url}: invalid metadata: {e}")
                continue

            self._validate_issuer(issuer, document)
            logger.debug(f"Discovered authorization server metadata from: {url}")
            return document

        raise DiscoveryError(
            f"Failed to discover authorization server metadata for {issuer}: "
            + "; ".join(failures)
        )

    def _validate_issuer(self, issuer: str, document: DiscoveryDocument) -> None:
        """Check the document was issued for the issuer we asked about.

        RFC 8414 Section 3.3. Trailing slashes are not significant here.
        """
        if document.issuer.rstrip("/") != issuer.rstrip("/"):
            raise IssuerMismatchError(
                f"Discovered issuer {document.issuer} does not match "
                f"configured issuer {issuer}"
            )

    def _error_text(self, response: httpx.Response) -> str:
        """Extract a short error description from a failed response."""
        try:
            data = response.json()
        except ValueError:
            return response.text[:200]
        if isinstance(data, dict) and "error" in data:
            description = data.get("error_description")
            return f"{data['error']} - {description}" if description else data["error"]
        return response.text[:200]

    def _build_discovery_urls(self, issuer: str) -> list[str]:
        """Build ordered list of discovery URLs to try.

        OpenID Connect Discovery appends the well-known suffix to the issuer,
        RFC 8414 Section 3 inserts it between host and path.

        Args:
            issuer: Issuer URL

        Returns:
            Ordered list of URLs to try for discovery
        """
        parsed = urlparse(issuer)
        base_url = f"{parsed.scheme}://{parsed.netloc}"
        path = parsed.path.rstrip("/")

        urls = [f"{base_url}{path}/.well-known/openid-configuration"]
        urls.append(urljoin(base_url, f"/.well-known/oauth-authorization-server{path}"))

        return urls
