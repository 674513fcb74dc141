# distroflow/models/sale.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field

from distroflow.models.catalog import Product

# Customer name used by the front-end for walk-in sales;
# receipts omit the customer line for it.
WALK_IN_CUSTOMER = "Cliente Avulso"


class CartItem(SQLModel):
    """
    Cart line: a value snapshot of the product taken when it was added,
    plus the requested quantity.

    One cart cannot hold 2 lines for the same product.
    """

    product: Product
    quantity: int


class Payment(SQLModel):
    """
    One part of a split payment.
    """

    method: str
    amount: float


class Customer(SQLModel):
    id: str
    name: str
    phone: str = ""


class Seller(SQLModel):
    id: str
    name: str


class Sale(SQLModel):
    """
    Finalized transaction.

    - items is a snapshot of the cart; later catalog edits do not touch it
    - total  = sum(sale_price * quantity)
    - profit = sum((sale_price - cost_price) * quantity)

    Never mutated or deleted after creation.
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    items: list[CartItem]
    total: float
    profit: float
    payment_method: str
    payments: list[Payment] = Field(default_factory=list)
    customer: Customer | None = None
    seller: Seller | None = None
    date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
