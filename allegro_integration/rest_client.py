"""Allegro REST API Sync Client.

Sends endpoint request descriptors over httpx and records every call with
the audit log builder.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from .audit import AuditLogBuilder
from .config import AllegroConfig
from .endpoints import ApiRequest

logger = logging.getLogger(__name__)


class AllegroRestClient:
    """Synchronous client for the Allegro REST API."""

    def __init__(
        self,
        config: Optional[AllegroConfig] = None,
        audit: Optional[AuditLogBuilder] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        """Initialize the REST client.

        Args:
            config: Allegro configuration. If not provided, loads from environment.
            audit: Audit log builder. Defaults to a builder without a logger,
                   which records nothing.
            http_client: Preconfigured httpx client (mainly for tests).
        """
        self.config = config or AllegroConfig.from_env()
        self.audit = audit or AuditLogBuilder(self.config)
        self._client = http_client or httpx.Client(timeout=self.config.timeout)
        logger.info(f"Allegro REST client initialized for {self.config.api_host}")

    def close(self):
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def send(
        self, api_request: ApiRequest, extra_fields: Optional[Dict[str, Any]] = None
    ) -> httpx.Response:
        """Send a request descriptor and audit the exchange.

        Transport errors are audited as calls without a response and then
        re-raised. HTTP error statuses are returned, not raised.
        """
        request = api_request.to_httpx(self.config)

        try:
            response = self._client.send(request)
        except httpx.TransportError as e:
            logger.error(f"{request.method} {request.url.path} failed: {e}")
            self.audit.log_rest(request, None, extra_fields)
            raise

        self.audit.log_rest(request, response, extra_fields)
        return response

    def send_json(
        self, api_request: ApiRequest, extra_fields: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Send a request descriptor and return the decoded JSON response.

        Raises:
            httpx.HTTPStatusError: If the response status is 4xx/5xx.
        """
        response = self.send(api_request, extra_fields)
        if response.status_code >= 400:
            logger.error(f"{api_request!r} failed with status {response.status_code}")
            logger.error(f"Response body: {response.text}")
        response.raise_for_status()

        if not response.content:
            return None
        return response.json()
