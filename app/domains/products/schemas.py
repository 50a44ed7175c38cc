"""
Product domain Pydantic schemas for API requests and responses.

The request schema only fixes the shape of the body; the business rules
(name length, positive price) are enforced by the command validator.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class ProductCreate(BaseModel):
    """Body of POST /api/products."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"name": "Widget", "price": 9.99}
        }
    )

    name: str = Field(..., description="Product name (1-100 characters)")
    # JSON numbers only; strings such as "9.99" are rejected
    price: float = Field(..., strict=True, description="Unit price, greater than 0")


class ProductResponse(BaseModel):
    """Product document returned by GET /api/products/{id}."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {"id": 1, "name": "Widget", "price": 9.99}
        }
    )

    id: int = Field(..., description="Product ID")
    name: str = Field(..., description="Product name")
    price: Decimal = Field(..., description="Unit price")

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> float:
        # Rendered as a JSON number rather than pydantic's default string
        return float(price)
