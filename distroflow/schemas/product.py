# distroflow/schemas/product.py
import uuid

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from distroflow.models.catalog import AdjustmentReason, MovementType


class ProductCreate(SQLModel):
    """
    Payload for creating a product.

    - id is optional: if omitted, a random one is generated.
    """

    model_config = ConfigDict(extra="forbid")

    id: str | None = None
    name: str = Field(max_length=255)
    sku: str = Field(default="", max_length=50)
    cost_price: float = Field(ge=0)
    sale_price: float = Field(ge=0)
    stock: int = Field(default=0, ge=0)
    category: str = Field(default="", max_length=50)

    @field_validator("name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    def resolved_id(self) -> str:
        return (self.id or "").strip() or uuid.uuid4().hex


class ProductUpdate(SQLModel):
    """
    Partial update payload; only provided fields are changed.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=255)
    sku: str | None = Field(default=None, max_length=50)
    cost_price: float | None = Field(default=None, ge=0)
    sale_price: float | None = Field(default=None, ge=0)
    stock: int | None = Field(default=None, ge=0)
    category: str | None = Field(default=None, max_length=50)


class StockAdjustment(SQLModel):
    """
    Signed stock correction (inventory count, damage, loss, ...).

    The resulting stock is clamped at zero.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int
    reason: AdjustmentReason
    notes: str = ""
    operator: str | None = None
    type: MovementType = "ajuste"


class StockEntry(SQLModel):
    """
    Goods received from a supplier.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int = Field(gt=0)
    notes: str = ""
    operator: str | None = None
