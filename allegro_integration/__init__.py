"""Allegro API Integration Package.

This package provides request builders for the Allegro REST API, a wrapper
for the legacy WebAPI (SOAP) service, and audit logging of every call made
through either of them.
"""

from .audit import AuditLogBuilder, AuditRecord, Severity
from .config import AllegroConfig
from .exchanges import HttpResponse, RestExchange, SoapExchange, SoapFault
from .models import AccessToken, TokenParseError
from .rest_client import AllegroRestClient
from .soap_service import AllegroSoapService

__all__ = [
    "AccessToken",
    "AllegroConfig",
    "AllegroRestClient",
    "AllegroSoapService",
    "AuditLogBuilder",
    "AuditRecord",
    "HttpResponse",
    "RestExchange",
    "Severity",
    "SoapExchange",
    "SoapFault",
    "TokenParseError",
]
