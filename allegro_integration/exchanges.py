"""Completed REST and SOAP exchanges handed to the audit log builder."""

from dataclasses import dataclass, field
from typing import Optional, Protocol, Union, runtime_checkable

import httpx


@dataclass
class HttpResponse:
    """Response half of a REST exchange."""

    status_code: int
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: Optional[bytes] = None

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "HttpResponse":
        try:
            body = response.content
        except httpx.ResponseNotRead:
            body = None
        return cls(status_code=response.status_code, headers=response.headers, body=body)


@dataclass
class RestExchange:
    """One REST call: the request as sent and the response, if any."""

    method: str
    url: httpx.URL
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: Optional[bytes] = None
    response: Optional[HttpResponse] = None

    def __post_init__(self):
        self.url = httpx.URL(self.url)
        self.headers = httpx.Headers(self.headers)
        self.method = self.method.upper()

    @classmethod
    def from_httpx(
        cls,
        request: httpx.Request,
        response: Optional[Union[httpx.Response, HttpResponse]] = None,
    ) -> "RestExchange":
        """Build an exchange from httpx objects."""
        try:
            body = request.content
        except httpx.RequestNotRead:
            body = None

        if isinstance(response, httpx.Response):
            response = HttpResponse.from_httpx(response)

        return cls(
            method=request.method,
            url=request.url,
            headers=request.headers,
            body=body,
            response=response,
        )

    @property
    def path(self) -> str:
        return self.url.path

    @property
    def query(self) -> str:
        return self.url.query.decode("ascii", errors="replace")


@runtime_checkable
class SoapServiceHandle(Protocol):
    """What a SOAP transport exposes about its most recent call."""

    @property
    def last_request(self) -> Optional[str]: ...

    @property
    def last_request_headers(self) -> Optional[str]: ...

    @property
    def last_response(self) -> Optional[str]: ...

    @property
    def last_response_headers(self) -> Optional[str]: ...


@dataclass
class SoapFault:
    """SOAP fault code and message."""

    code: Optional[str]
    message: Optional[str]

    @classmethod
    def from_zeep(cls, fault) -> "SoapFault":
        """Map a ``zeep.exceptions.Fault`` (or anything shaped like it)."""
        code = getattr(fault, "code", None)
        message = getattr(fault, "message", None)
        return cls(
            code=str(code) if code is not None else None,
            message=str(message) if message is not None else None,
        )


@dataclass
class SoapExchange:
    """One SOAP call as captured by the transport."""

    last_request: Optional[str] = None
    last_request_headers: Optional[str] = None
    last_response: Optional[str] = None
    last_response_headers: Optional[str] = None
    fault: Optional[SoapFault] = None

    @classmethod
    def from_handle(cls, handle: SoapServiceHandle, fault=None) -> "SoapExchange":
        """Snapshot the last call of a service handle."""
        if fault is not None and not isinstance(fault, SoapFault):
            fault = SoapFault.from_zeep(fault)
        return cls(
            last_request=handle.last_request,
            last_request_headers=handle.last_request_headers,
            last_response=handle.last_response,
            last_response_headers=handle.last_response_headers,
            fault=fault,
        )


Exchange = Union[RestExchange, SoapExchange]
