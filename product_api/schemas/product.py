# product_api/schemas/product.py
from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

# NUMERIC(12,2): at most 10 integer digits
PRICE_LIMIT = Decimal("1e10")
# INTEGER column range
QUANTITY_MIN = -(2**31)
QUANTITY_MAX = 2**31 - 1


def _quantize_price(v: Decimal) -> Decimal:
    # Align with NUMERIC(12,2)
    try:
        return v.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ValueError("price cannot be represented with 2 decimals") from e


class ProductBase(BaseModel):
    """Fields a caller supplies for create and update."""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0, lt=PRICE_LIMIT)
    quantity: int = Field(..., ge=QUANTITY_MIN, le=QUANTITY_MAX)

    # --- Validators ---
    @field_validator("name")
    @classmethod
    def _name_strip_nonempty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

    @field_validator("description")
    @classmethod
    def _descr_strip(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        return v or None

    @field_validator("price")
    @classmethod
    def _price_quantize(cls, v: Decimal) -> Decimal:
        v = _quantize_price(v)
        # rounding can push 9999999999.995 over the column limit
        if v >= PRICE_LIMIT:
            raise ValueError(f"price must be less than {PRICE_LIMIT:f}")
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "name": "Widget",
                    "description": "A widget",
                    "price": 9.99,
                    "quantity": 5,
                }
            ]
        }
    )


class ProductCreate(ProductBase):
    """Create payload. An `id` in the body is ignored; the store assigns it."""
    pass


class ProductUpdate(ProductBase):
    """
    Update payload. All four fields are copied onto the stored record, so an
    omitted description clears it.
    """
    pass


class ProductRead(ProductBase):
    id: int
    model_config = ConfigDict(from_attributes=True)

    @field_serializer("price")
    def _price_as_number(self, v: Decimal) -> float:
        return float(v)


class HealthStatus(BaseModel):
    status: str = "UP"
    service: str
