"""Product Schemas - catalog request/response models.

Invariants:
    - stock >= 0 and price >= 0 on every write
    - in_stock is response-only; sending it on a write is a validation error
    - ProductUpdate is partial: only fields present are applied, and only
      category may be sent as null
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class CurrencyValue(BaseModel):
    """Alternate valuation of a product, e.g. {"type": "crayon", "amount": 3}."""
    type: str = Field(min_length=1, max_length=50)
    amount: float = Field(ge=0)

    @field_validator("type")
    @classmethod
    def strip_type(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("currency type cannot be empty or whitespace")
        return v


class ProductCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=200)
    description: str = Field("", max_length=5000)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    image: str = Field("/placeholder.svg", max_length=500)
    category: str | None = Field(None, max_length=100)
    stock: int = Field(0, ge=0)
    currencies: list[CurrencyValue] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


NULLABLE_UPDATE_FIELDS = frozenset({"category"})


class ProductUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    image: str | None = Field(None, max_length=500)
    category: str | None = Field(None, max_length=100)
    stock: int | None = Field(None, ge=0)
    currencies: list[CurrencyValue] | None = None

    @model_validator(mode="after")
    def reject_nulls(self) -> "ProductUpdate":
        nulls = sorted(
            name for name in self.model_fields_set - NULLABLE_UPDATE_FIELDS
            if getattr(self, name) is None
        )
        if nulls:
            raise ValueError(f"fields cannot be null: {', '.join(nulls)}")
        return self


class StockAdjustment(BaseModel):
    """Signed stock delta; positive restocks, negative writes off."""
    delta: int

    @field_validator("delta")
    @classmethod
    def non_zero(cls, v: int) -> int:
        if v == 0:
            raise ValueError("delta must be non-zero")
        return v


class ProductResponse(BaseModel):
    id: UUID
    name: str
    description: str
    price: float
    image: str
    category: str | None = None
    stock: int
    in_stock: bool
    currencies: list[CurrencyValue] = []
    created_at: datetime
