"""Tests for REST endpoint request builders."""

import json

import pytest

from allegro_integration.constants import PUBLIC_V1
from allegro_integration.endpoints import (
    DeleteOfferVariantRequestV1,
    GetBillingEntriesRequestV1,
    GetCheckoutFormRequestV1,
    GetOfferEventsRequestV1,
    GetOfferVariantsRequestV1,
    GetPointsOfServiceRequestV2,
    GetRefundClaimsRequestV1,
    GetReturnPoliciesRequestV1,
    GetUserRatingsRequestV1,
    GetWarrantyRequestV1,
    PutOfferVariantRequestV1,
)
from allegro_integration.models import (
    AccessToken,
    OfferVariantOffer,
    OfferVariantParameter,
    OfferVariantSet,
    TokenParseError,
)


def test_standard_headers(config):
    request = GetOfferEventsRequestV1("abc").to_httpx(config)
    assert request.method == "GET"
    assert request.headers["Authorization"] == "Bearer abc"
    assert request.headers["Accept"] == PUBLIC_V1
    assert request.headers["Content-Type"] == PUBLIC_V1


def test_offer_events_query(config):
    request = GetOfferEventsRequestV1(
        "abc", {"type": ["OFFER_ACTIVATED", "OFFER_ENDED"], "limit": 10, "from": None}
    ).to_httpx(config)

    assert str(request.url).startswith("https://api.allegro.pl/sale/offer-events?")
    assert request.url.params.get_list("type") == ["OFFER_ACTIVATED", "OFFER_ENDED"]
    assert request.url.params["limit"] == "10"
    assert "from" not in request.url.params


def test_no_query_leaves_url_clean(config):
    request = GetRefundClaimsRequestV1("abc").to_httpx(config)
    assert str(request.url) == "https://api.allegro.pl/order/refund-claims"


def test_access_token_object_is_sent_raw(config, seller_token):
    token = AccessToken.parse(seller_token)
    request = GetBillingEntriesRequestV1(token).to_httpx(config)
    assert request.headers["Authorization"] == f"Bearer {seller_token}"


def test_path_parameters(config):
    assert GetWarrantyRequestV1("t", "w-1").to_httpx(config).url.path == (
        "/after-sales-service-conditions/warranties/w-1"
    )
    assert GetCheckoutFormRequestV1("t", "cf-9").to_httpx(config).url.path == "/order/checkout-forms/cf-9"


def test_delete_offer_variant(config):
    request = DeleteOfferVariantRequestV1("t", "set-1").to_httpx(config)
    assert request.method == "DELETE"
    assert request.url.path == "/sale/offer-variants/set-1"
    assert request.content == b""


def test_put_offer_variant_serializes_model_by_alias(config):
    variant_set = OfferVariantSet(
        name="T-shirts",
        offers=[OfferVariantOffer(id="1", color_pattern="red"), OfferVariantOffer(id="2")],
        parameters=[OfferVariantParameter(id="color/pattern")],
    )
    request = PutOfferVariantRequestV1("t", "set-1", variant_set).to_httpx(config)

    assert request.method == "PUT"
    assert json.loads(request.content) == {
        "name": "T-shirts",
        "offers": [{"id": "1", "colorPattern": "red"}, {"id": "2"}],
        "parameters": [{"id": "color/pattern"}],
    }


def test_put_offer_variant_accepts_plain_dict(config):
    request = PutOfferVariantRequestV1("t", "set-1", {"name": "x", "offers": []}).to_httpx(config)
    assert request.content == b'{"name":"x","offers":[]}'


def test_points_of_service_uses_seller_claim(config, seller_token):
    request = GetPointsOfServiceRequestV2(AccessToken.parse(seller_token)).to_httpx(config)
    assert request.url.path == "/points-of-service"
    assert request.url.params["seller.id"] == "12345"


def test_raw_token_string_is_parsed_for_seller_claim(config, seller_token):
    request = GetReturnPoliciesRequestV1(seller_token, {"limit": 5}).to_httpx(config)
    assert request.url.path == "/after-sales-service-conditions/return-policies"
    assert request.url.params["seller.id"] == "12345"
    assert request.url.params["limit"] == "5"


def test_caller_can_override_seller_id(config, seller_token):
    request = GetOfferVariantsRequestV1(seller_token, {"user.id": "999"}).to_httpx(config)
    assert request.url.params["user.id"] == "999"


def test_user_ratings_query(config, seller_token):
    request = GetUserRatingsRequestV1(seller_token, recommended=True, limit=5).to_httpx(config)
    params = request.url.params
    assert params["user.id"] == "12345"
    assert params["recommended"] == "true"
    assert params["limit"] == "5"
    assert "offset" not in params


def test_user_ratings_sends_no_content_type(config, seller_token):
    request = GetUserRatingsRequestV1(seller_token).to_httpx(config)
    assert request.headers["Accept"] == PUBLIC_V1
    assert "Content-Type" not in request.headers


def test_numeric_seller_claim(config, make_token):
    request = GetPointsOfServiceRequestV2(make_token(user_name=12345)).to_httpx(config)
    assert request.url.params["seller.id"] == "12345"


def test_seller_endpoints_require_user_claim(make_token):
    with pytest.raises(ValueError):
        GetPointsOfServiceRequestV2(make_token())


def test_seller_endpoints_reject_garbage_token():
    with pytest.raises(TokenParseError):
        GetUserRatingsRequestV1("garbage")
