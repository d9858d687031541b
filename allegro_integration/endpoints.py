"""Allegro REST endpoint request builders.

Each class describes one API operation: method, path, query, headers and
body. ``to_httpx()`` turns it into an ``httpx.Request`` ready to be sent.
"""

import json
from typing import Any, Dict, List, Mapping, Optional, Union
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from .config import AllegroConfig
from .constants import PUBLIC_V1
from .models import AccessToken, OfferVariantSet

TokenLike = Union[str, AccessToken]
QueryValue = Union[str, int, float, bool, None, List[Union[str, int, float, bool]]]


def _path_param(value: Any) -> str:
    return quote(str(value), safe="")


def _require_user_id(token: TokenLike) -> str:
    """Get the seller id claim, parsing raw token strings."""
    if not isinstance(token, AccessToken):
        token = AccessToken.parse(token)
    if not token.user_id:
        raise ValueError("Access token has no user_name claim")
    return token.user_id


class ApiRequest:
    """Base class for REST request descriptors."""

    method: str = "GET"
    accept: str = PUBLIC_V1
    content_type: Optional[str] = PUBLIC_V1

    def __init__(
        self,
        token: TokenLike,
        path: str,
        query: Optional[Mapping[str, QueryValue]] = None,
        body: Any = None,
    ):
        self.token = token
        self.path = path
        self.query = dict(query) if query else {}
        self.body = body

    @property
    def bearer(self) -> str:
        return self.token.raw if isinstance(self.token, AccessToken) else str(self.token)

    def headers(self) -> Dict[str, str]:
        """Get the standard headers for Allegro REST requests."""
        headers = {
            "Authorization": f"Bearer {self.bearer}",
            "Accept": self.accept,
        }
        if self.content_type:
            headers["Content-Type"] = self.content_type
        return headers

    def params(self) -> Dict[str, Any]:
        """Query parameters with unset values dropped."""
        params: Dict[str, Any] = {}
        for name, value in self.query.items():
            if value is None:
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            elif isinstance(value, (list, tuple)):
                value = ["true" if v is True else "false" if v is False else v for v in value]
            params[name] = value
        return params

    def content(self) -> Optional[bytes]:
        """Encoded JSON body, if the operation carries one."""
        if self.body is None:
            return None
        body = self.body
        if isinstance(body, BaseModel):
            body = body.model_dump(by_alias=True, exclude_none=True)
        return json.dumps(body, separators=(",", ":")).encode("utf-8")

    def to_httpx(self, config: AllegroConfig) -> httpx.Request:
        params = self.params()
        return httpx.Request(
            self.method,
            config.api_url(self.path),
            params=params or None,
            headers=self.headers(),
            content=self.content(),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.method} {self.path})"


# ── Offer events & variants ─────────────────────────────────────────────


class GetOfferEventsRequestV1(ApiRequest):
    """GET /sale/offer-events"""

    def __init__(self, token: TokenLike, query: Optional[Mapping[str, QueryValue]] = None):
        super().__init__(token, "/sale/offer-events", query)


class GetOfferVariantsRequestV1(ApiRequest):
    """GET /sale/offer-variants (variant sets of the seller)."""

    def __init__(self, token: TokenLike, query: Optional[Mapping[str, QueryValue]] = None):
        query = dict(query or {})
        query.setdefault("user.id", _require_user_id(token))
        super().__init__(token, "/sale/offer-variants", query)


class GetOfferVariantRequestV1(ApiRequest):
    """GET /sale/offer-variants/{setId}"""

    def __init__(self, token: TokenLike, set_id: str):
        super().__init__(token, f"/sale/offer-variants/{_path_param(set_id)}")


class PutOfferVariantRequestV1(ApiRequest):
    """PUT /sale/offer-variants/{setId} (create or update a variant set)."""

    method = "PUT"

    def __init__(
        self,
        token: TokenLike,
        set_id: str,
        variant_set: Union[OfferVariantSet, Dict[str, Any]],
    ):
        super().__init__(token, f"/sale/offer-variants/{_path_param(set_id)}", body=variant_set)


class DeleteOfferVariantRequestV1(ApiRequest):
    """DELETE /sale/offer-variants/{setId}"""

    method = "DELETE"

    def __init__(self, token: TokenLike, set_id: str):
        super().__init__(token, f"/sale/offer-variants/{_path_param(set_id)}")


# ── After-sales service conditions ──────────────────────────────────────


class GetWarrantyRequestV1(ApiRequest):
    """GET /after-sales-service-conditions/warranties/{warrantyId}"""

    def __init__(self, token: TokenLike, warranty_id: str):
        super().__init__(
            token, f"/after-sales-service-conditions/warranties/{_path_param(warranty_id)}"
        )


class _SellerConditionsRequest(ApiRequest):
    resource = ""

    def __init__(self, token: TokenLike, query: Optional[Mapping[str, QueryValue]] = None):
        query = dict(query or {})
        query.setdefault("seller.id", _require_user_id(token))
        super().__init__(token, f"/after-sales-service-conditions/{self.resource}", query)


class GetWarrantiesRequestV1(_SellerConditionsRequest):
    """GET /after-sales-service-conditions/warranties?seller.id="""

    resource = "warranties"


class GetReturnPoliciesRequestV1(_SellerConditionsRequest):
    """GET /after-sales-service-conditions/return-policies?seller.id="""

    resource = "return-policies"


class GetImpliedWarrantiesRequestV1(_SellerConditionsRequest):
    """GET /after-sales-service-conditions/implied-warranties?seller.id="""

    resource = "implied-warranties"


# ── Orders, refunds and billing ─────────────────────────────────────────


class GetRefundClaimsRequestV1(ApiRequest):
    """GET /order/refund-claims"""

    def __init__(self, token: TokenLike, query: Optional[Mapping[str, QueryValue]] = None):
        super().__init__(token, "/order/refund-claims", query)


class GetCheckoutFormsRequestV1(ApiRequest):
    """GET /order/checkout-forms"""

    def __init__(self, token: TokenLike, query: Optional[Mapping[str, QueryValue]] = None):
        super().__init__(token, "/order/checkout-forms", query)


class GetCheckoutFormRequestV1(ApiRequest):
    """GET /order/checkout-forms/{checkoutFormId}"""

    def __init__(self, token: TokenLike, checkout_form_id: str):
        super().__init__(token, f"/order/checkout-forms/{_path_param(checkout_form_id)}")


class GetBillingEntriesRequestV1(ApiRequest):
    """GET /billing/billing-entries"""

    def __init__(self, token: TokenLike, query: Optional[Mapping[str, QueryValue]] = None):
        super().__init__(token, "/billing/billing-entries", query)


# ── Seller account ──────────────────────────────────────────────────────


class GetPointsOfServiceRequestV2(ApiRequest):
    """GET /points-of-service?seller.id="""

    def __init__(self, token: TokenLike):
        super().__init__(token, "/points-of-service", {"seller.id": _require_user_id(token)})


class GetUserRatingsRequestV1(ApiRequest):
    """GET /sale/user-ratings?user.id="""

    content_type = None

    def __init__(
        self,
        token: TokenLike,
        recommended: Optional[bool] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ):
        super().__init__(
            token,
            "/sale/user-ratings",
            {
                "user.id": _require_user_id(token),
                "recommended": recommended,
                "offset": offset,
                "limit": limit,
            },
        )
