from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """Stored product. The id is assigned by the store and never changes."""
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., gt=0, description="Product ID")
    name: str = Field(..., description="Product name")
    price: Decimal = Field(..., description="Unit price")
