"""Audit logging for Allegro REST and SOAP calls.

Every completed call (or a call that never got a response) is turned into a
single structured record and handed to an injected ``logging.Logger``. The
record context travels in ``extra={"audit": context}``.

Building a record is best-effort: malformed tokens, undecodable bodies or
odd header blocks degrade to None/placeholder fields. Nothing in this module
raises into the caller's business flow.
"""

import hashlib
import json
import logging
import traceback
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

import httpx

from .config import AllegroConfig
from .constants import NO_STATUS, UNKNOWN_METHOD
from .exchanges import (
    Exchange,
    HttpResponse,
    RestExchange,
    SoapExchange,
    SoapFault,
    SoapServiceHandle,
)
from .headers import headers_to_dict, parse_header_block
from .models import AccessToken

logger = logging.getLogger(__name__)

SOAP_ACTION_HEADER = "SOAPAction"


class Severity(str, Enum):
    """Audit record severity."""

    DEBUG = "debug"
    ERROR = "error"

    @property
    def level(self) -> int:
        """Matching stdlib logging level."""
        return logging.ERROR if self is Severity.ERROR else logging.DEBUG


@dataclass
class AuditRecord:
    """Structured log entry derived from one exchange."""

    severity: Severity
    summary: str
    context: Dict[str, Any] = field(default_factory=dict)


def request_hash(method: str, path: str, query: str, body: Any) -> str:
    """Fingerprint a REST request for correlating identical calls."""
    payload = json.dumps([method, path, query, body], separators=(",", ":"), default=str)
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()


def soap_request_hash(raw_request: Optional[str]) -> str:
    """Fingerprint a SOAP request by its raw payload."""
    return hashlib.sha1((raw_request or "").encode("utf-8")).hexdigest()


def _decode_body(body: Optional[bytes], headers: httpx.Headers) -> Any:
    """Decode a body for the log context.

    Bodies whose Content-Type contains "json" are JSON-decoded; anything
    else, or JSON that fails to decode, is returned as text.
    """
    if body is None:
        return None

    text = body.decode("utf-8", errors="replace")
    if "json" not in headers.get("Content-Type", ""):
        return text

    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return text


def _error_fields(response_body: Any) -> Dict[str, Any]:
    """Lift the first entry of an Allegro ``errors`` list into fault fields.

    Only the first entry is read and its values are copied as sent.
    """
    fields: Dict[str, Any] = {"faultCode": None, "faultString": None}
    if not isinstance(response_body, dict):
        return fields

    errors = response_body.get("errors")
    if not isinstance(errors, list) or not errors or not isinstance(errors[0], dict):
        return fields

    fields["faultCode"] = errors[0].get("code")
    fields["faultString"] = errors[0].get("message")
    return fields


def _backtrace() -> List[Dict[str, Any]]:
    """Call-site snapshot, innermost frame first, without this module's frames."""
    try:
        frames = traceback.extract_stack()
    except Exception:
        return []

    return [
        {"function": frame.name, "file": frame.filename, "line": frame.lineno}
        for frame in reversed(frames)
        if frame.filename != __file__
    ]


class AuditLogBuilder:
    """Turns completed REST/SOAP exchanges into structured audit log entries."""

    def __init__(
        self,
        config: Optional[AllegroConfig] = None,
        audit_logger: Optional[logging.Logger] = None,
        token_parser: Callable[[str], AccessToken] = AccessToken.parse,
    ):
        """Initialize the builder.

        Args:
            config: Credentials used to tag records with the client id.
            audit_logger: Destination logger. Without one, ``log_*`` calls
                do nothing.
            token_parser: Parses the bearer credential into claims.
        """
        self.config = config
        self._audit_logger = audit_logger
        self._token_parser = token_parser

    @property
    def enabled(self) -> bool:
        return self._audit_logger is not None

    @property
    def client_id(self) -> Optional[str]:
        return self.config.client_id if self.config else None

    # ── Emission ────────────────────────────────────────────────────────

    def log_rest(
        self,
        request: Union[httpx.Request, RestExchange],
        response: Optional[Union[httpx.Response, HttpResponse]] = None,
        extra_fields: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Log a REST call. A missing response is logged as an error."""
        if not self.enabled:
            return
        try:
            record = self.build_rest_record(request, response, extra_fields)
        except Exception as e:
            logger.error(f"Failed to build REST audit record: {e}")
            return
        self._emit(record)

    def log_soap(
        self,
        service_handle: Union[SoapServiceHandle, SoapExchange],
        fault=None,
        extra_fields: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Log a SOAP call. A supplied fault makes the record an error."""
        if not self.enabled:
            return
        try:
            record = self.build_soap_record(service_handle, fault, extra_fields)
        except Exception as e:
            logger.error(f"Failed to build SOAP audit record: {e}")
            return
        self._emit(record)

    def log(self, exchange: Exchange, extra_fields: Optional[Mapping[str, Any]] = None) -> None:
        """Log any exchange."""
        if not self.enabled:
            return
        try:
            record = self.build_record(exchange, extra_fields)
        except Exception as e:
            logger.error(f"Failed to build audit record: {e}")
            return
        self._emit(record)

    def _emit(self, record: AuditRecord) -> None:
        try:
            self._audit_logger.log(
                record.severity.level,
                record.summary,
                extra={"audit": record.context},
            )
        except Exception as e:
            logger.error(f"Failed to emit audit record '{record.summary}': {e}")

    # ── Record building ─────────────────────────────────────────────────

    def build_record(
        self, exchange: Exchange, extra_fields: Optional[Mapping[str, Any]] = None
    ) -> AuditRecord:
        if isinstance(exchange, RestExchange):
            return self._rest_record(exchange, extra_fields)
        if isinstance(exchange, SoapExchange):
            return self._soap_record(exchange, extra_fields)
        raise TypeError(f"Unsupported exchange type: {type(exchange).__name__}")

    def build_rest_record(
        self,
        request: Union[httpx.Request, RestExchange],
        response: Optional[Union[httpx.Response, HttpResponse]] = None,
        extra_fields: Optional[Mapping[str, Any]] = None,
    ) -> AuditRecord:
        if isinstance(request, RestExchange):
            exchange = request
            if response is not None:
                if isinstance(response, httpx.Response):
                    response = HttpResponse.from_httpx(response)
                exchange = replace(exchange, response=response)
        else:
            exchange = RestExchange.from_httpx(request, response)
        return self._rest_record(exchange, extra_fields)

    def build_soap_record(
        self,
        service_handle: Union[SoapServiceHandle, SoapExchange],
        fault=None,
        extra_fields: Optional[Mapping[str, Any]] = None,
    ) -> AuditRecord:
        if isinstance(service_handle, SoapExchange):
            exchange = service_handle
            if fault is not None:
                if not isinstance(fault, SoapFault):
                    fault = SoapFault.from_zeep(fault)
                exchange = replace(exchange, fault=fault)
        else:
            exchange = SoapExchange.from_handle(service_handle, fault)
        return self._soap_record(exchange, extra_fields)

    def _rest_record(
        self, exchange: RestExchange, extra_fields: Optional[Mapping[str, Any]]
    ) -> AuditRecord:
        response = exchange.response

        if response is None or response.status_code > 299:
            severity = Severity.ERROR
        else:
            severity = Severity.DEBUG

        status = response.status_code if response is not None else NO_STATUS
        request_body = _decode_body(exchange.body, exchange.headers)
        response_body = _decode_body(response.body, response.headers) if response is not None else None

        context: Dict[str, Any] = {
            "clientId": self.client_id,
            "userId": self._extract_user_id(exchange.headers),
            "requestMethod": exchange.method,
            "requestUrl": str(exchange.url),
            "requestUriPath": exchange.path,
            "requestHeaders": headers_to_dict(exchange.headers),
            "requestQuery": exchange.query,
            "requestBody": request_body,
            "responseStatusCode": status,
            "responseHeaders": headers_to_dict(response.headers) if response is not None else None,
            "responseBody": response_body,
            "backtrace": _backtrace(),
            "requestHash": request_hash(exchange.method, exchange.path, exchange.query, request_body),
        }
        context.update(_error_fields(response_body))
        context.update(extra_fields or {})

        return AuditRecord(
            severity=severity,
            summary=f"{exchange.method} {exchange.path} - {status}",
            context=context,
        )

    def _soap_record(
        self, exchange: SoapExchange, extra_fields: Optional[Mapping[str, Any]]
    ) -> AuditRecord:
        method = self._extract_soap_action(exchange.last_request_headers)
        fault = exchange.fault

        context: Dict[str, Any] = {
            "clientId": self.client_id,
            "requestMethod": method,
            "backtrace": _backtrace(),
            "request": exchange.last_request,
            "requestHeaders": exchange.last_request_headers,
            "requestHash": soap_request_hash(exchange.last_request),
            "response": exchange.last_response,
            "responseHeaders": exchange.last_response_headers,
            "faultCode": fault.code if fault else None,
            "faultString": fault.message if fault else None,
        }
        context.update(extra_fields or {})

        return AuditRecord(
            severity=Severity.ERROR if fault else Severity.DEBUG,
            summary=f"{method} - {'ERROR' if fault else 'OK'}",
            context=context,
        )

    # ── Field extraction ────────────────────────────────────────────────

    def _extract_user_id(self, headers: httpx.Headers) -> Optional[str]:
        """Read the user id claim from the bearer token, if there is one."""
        auth_header = headers.get("Authorization")
        if not auth_header:
            return None

        parts = auth_header.split(" ")
        if len(parts) < 2 or not parts[1]:
            return None

        try:
            token = self._token_parser(parts[1])
        except Exception as e:
            logger.debug(f"Could not parse bearer token for audit: {e}")
            return None

        return token.user_id

    @staticmethod
    def _extract_soap_action(raw_headers: Optional[str]) -> str:
        action = parse_header_block(raw_headers).get(SOAP_ACTION_HEADER)
        return action if action is not None else UNKNOWN_METHOD
