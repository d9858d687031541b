"""Data models for Allegro API integration."""

from typing import Any, Dict, List, Optional

import jwt
from pydantic import BaseModel, Field, ValidationError, field_validator

from .constants import USER_ID_CLAIM


class TokenParseError(ValueError):
    """Raised when a bearer string is not a readable Allegro access token."""


class AccessToken(BaseModel):
    """Allegro OAuth access token (JWT) with its claims.

    The signature is not verified: the SDK only reads claims such as the
    seller identifier, it never authorizes anything on their basis.
    """

    raw: str
    user_name: Optional[str] = None
    client_id: Optional[str] = None
    authorities: List[str] = Field(default_factory=list)
    exp: Optional[int] = None
    claims: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("user_name", "client_id", mode="before")
    @classmethod
    def _claim_to_str(cls, value: Any) -> Optional[str]:
        # Identifier claims may be encoded as JSON numbers.
        return None if value is None else str(value)

    @classmethod
    def parse(cls, raw: str) -> "AccessToken":
        """Parse a JWT string into an AccessToken.

        Raises:
            TokenParseError: If the string is not a decodable JWT.
        """
        try:
            claims = jwt.decode(raw, options={"verify_signature": False})
        except jwt.PyJWTError as e:
            raise TokenParseError(f"Invalid access token: {e}") from e

        if not isinstance(claims, dict):
            raise TokenParseError("Access token payload is not an object")

        try:
            return cls(
                raw=raw,
                user_name=claims.get(USER_ID_CLAIM),
                client_id=claims.get("client_id"),
                authorities=claims.get("authorities") or [],
                exp=claims.get("exp"),
                claims=claims,
            )
        except ValidationError as e:
            raise TokenParseError(f"Unexpected access token claims: {e}") from e

    @property
    def user_id(self) -> Optional[str]:
        """Get the seller/user identifier claim."""
        return self.user_name

    def get_claim(self, name: str, default: Any = None) -> Any:
        """Get any claim by name."""
        return self.claims.get(name, default)

    def __str__(self) -> str:
        return self.raw


class ApiErrorDetail(BaseModel):
    """Single entry of an Allegro error response."""

    code: Optional[str] = None
    message: Optional[str] = None
    details: Optional[str] = None
    path: Optional[str] = None
    user_message: Optional[str] = Field(default=None, alias="userMessage")

    class Config:
        populate_by_name = True
        extra = "allow"


class ApiErrorResponse(BaseModel):
    """Allegro error response body."""

    errors: List[ApiErrorDetail] = Field(default_factory=list)

    class Config:
        populate_by_name = True
        extra = "allow"


class OfferVariantOffer(BaseModel):
    """Offer belonging to a variant set."""

    id: str
    color_pattern: Optional[str] = Field(default=None, alias="colorPattern")

    class Config:
        populate_by_name = True


class OfferVariantParameter(BaseModel):
    """Parameter the offers of a variant set differ by."""

    id: str

    class Config:
        populate_by_name = True


class OfferVariantSet(BaseModel):
    """Offer variant set (PUT /sale/offer-variants/{setId})."""

    name: str
    offers: List[OfferVariantOffer] = Field(default_factory=list)
    parameters: List[OfferVariantParameter] = Field(default_factory=list)

    class Config:
        populate_by_name = True
