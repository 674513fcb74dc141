# distroflow/schemas/cart.py
from pydantic import ConfigDict
from sqlmodel import SQLModel, Field


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.
    """

    model_config = ConfigDict(extra="forbid")

    product_id: str
    quantity: int = Field(gt=0)


class CartItemUpdate(SQLModel):
    """
    Payload for replacing the quantity of a cart line.

    The value is stored as given.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int


class CartLineRead(SQLModel):
    """
    Read model for a single cart line, including line_total.
    """

    product_id: str
    name: str
    sku: str
    quantity: int
    unit_price: float
    line_total: float


class CartSummary(SQLModel):
    """
    Full cart response model with totals.
    """

    items: list[CartLineRead]
    total_quantity: int
    total_price: float
