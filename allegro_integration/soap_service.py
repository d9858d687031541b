"""Allegro WebAPI (SOAP) service wrapper.

The SOAP transport is zeep; this module only captures what zeep sent and
received so every call can be audited.
"""

import logging
from typing import Any, Dict, Optional

from lxml import etree
from zeep import Client
from zeep.exceptions import Fault
from zeep.helpers import serialize_object
from zeep.plugins import HistoryPlugin
from zeep.transports import Transport

from .audit import AuditLogBuilder
from .config import AllegroConfig
from .headers import render_header_block

logger = logging.getLogger(__name__)


def _envelope_to_string(envelope) -> Optional[str]:
    if envelope is None:
        return None
    if isinstance(envelope, bytes):
        return envelope.decode("utf-8", errors="replace")
    if isinstance(envelope, str):
        return envelope
    return etree.tostring(envelope, encoding="unicode")


class ZeepServiceHandle:
    """Exposes the last call recorded by a zeep ``HistoryPlugin``."""

    def __init__(self, history: HistoryPlugin):
        self.history = history

    def _last(self, direction: str) -> Optional[Dict[str, Any]]:
        try:
            entry = self.history.last_sent if direction == "sent" else self.history.last_received
        except IndexError:
            return None
        return entry or None

    @property
    def last_request(self) -> Optional[str]:
        sent = self._last("sent")
        return _envelope_to_string(sent.get("envelope")) if sent else None

    @property
    def last_request_headers(self) -> Optional[str]:
        sent = self._last("sent")
        if not sent or sent.get("http_headers") is None:
            return None
        return render_header_block(sent["http_headers"])

    @property
    def last_response(self) -> Optional[str]:
        received = self._last("received")
        return _envelope_to_string(received.get("envelope")) if received else None

    @property
    def last_response_headers(self) -> Optional[str]:
        received = self._last("received")
        if not received or received.get("http_headers") is None:
            return None
        return render_header_block(received["http_headers"])


class AllegroSoapService:
    """Allegro WebAPI client with per-call audit logging."""

    def __init__(
        self,
        config: Optional[AllegroConfig] = None,
        audit: Optional[AuditLogBuilder] = None,
        client: Optional[Client] = None,
    ):
        """Initialize the SOAP service.

        Args:
            config: Allegro configuration. If not provided, loads from environment.
            audit: Audit log builder. Defaults to a builder without a logger.
            client: Preconfigured zeep client. When omitted, one is created
                    from the configured WSDL on first use.
        """
        self.config = config or AllegroConfig.from_env()
        self.audit = audit or AuditLogBuilder(self.config)
        self.history = HistoryPlugin()
        self.handle = ZeepServiceHandle(self.history)
        self._client = client
        if self._client is not None:
            self._client.plugins.append(self.history)

    @property
    def client(self) -> Client:
        """Get the zeep client, loading the WSDL if needed."""
        if self._client is None:
            try:
                transport = Transport(
                    timeout=self.config.timeout,
                    operation_timeout=self.config.timeout,
                )
                self._client = Client(
                    self.config.soap_wsdl_url,
                    transport=transport,
                    plugins=[self.history],
                )
                logger.info(f"SOAP client created for {self.config.soap_wsdl_url}")
            except Exception as e:
                logger.error(f"Failed to create SOAP client for {self.config.soap_wsdl_url}: {e}")
                raise
        return self._client

    def call(
        self, operation: str, extra_fields: Optional[Dict[str, Any]] = None, **params
    ) -> Any:
        """Invoke a WebAPI operation and audit it.

        Returns:
            The operation result serialized to plain Python objects.

        Raises:
            zeep.exceptions.Fault: After the fault has been audited.
        """
        try:
            result = self.client.service[operation](**params)
        except Fault as fault:
            logger.error(f"SOAP {operation} failed: {fault.message}")
            self.audit.log_soap(self.handle, fault, extra_fields)
            raise

        self.audit.log_soap(self.handle, None, extra_fields)
        return serialize_object(result)

    # ── Operations ──────────────────────────────────────────────────────

    def do_login_with_access_token(self, access_token: str) -> Any:
        """Open a WebAPI session with a REST OAuth access token."""
        return self.call(
            "doLoginWithAccessToken",
            accessToken=access_token,
            countryCode=self.config.country_code,
            webapiKey=self.config.webapi_key,
        )

    def do_my_billing(self, session_handle: str) -> Any:
        """Get the account billing summary."""
        return self.call("doMyBilling", sessionHandle=session_handle)

    def do_get_my_payments(self, session_id: str, **filters) -> Any:
        """Get received payments (buyerId, itemId, transRecvDateFrom, ...)."""
        return self.call("doGetMyPayments", sessionId=session_id, **filters)

    def do_my_account2(
        self,
        session_handle: str,
        account_type: str,
        offset: int = 0,
        limit: int = 100,
        **filters,
    ) -> Any:
        """Get "My Allegro" listings of the given account type."""
        return self.call(
            "doMyAccount2",
            sessionHandle=session_handle,
            accountType=account_type,
            offset=offset,
            limit=limit,
            **filters,
        )

    def do_request_payout(self, session_id: str) -> Any:
        """Request a payout of the account balance."""
        return self.call("doRequestPayout", sessionId=session_id)
