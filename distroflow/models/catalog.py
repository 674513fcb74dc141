# distroflow/models/catalog.py
import uuid
from datetime import datetime, timezone
from typing import Literal

from sqlmodel import SQLModel, Field

# entrada = supplier entry, saida = manual exit,
# ajuste = inventory adjustment, venda = sale
MovementType = Literal["entrada", "saida", "ajuste", "venda"]

AdjustmentReason = Literal[
    "erro_contagem",
    "avaria",
    "bonificacao",
    "perda",
    "entrada_fornecedor",
    "outros",
]


class Product(SQLModel):
    """
    Sellable catalog entry.

    Invariants:
      - stock never goes below zero
      - cost_price / sale_price are non-negative
    """

    id: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=255)
    sku: str = Field(default="", max_length=50)
    cost_price: float = Field(ge=0)
    sale_price: float = Field(ge=0)
    stock: int = Field(default=0, ge=0)
    category: str = Field(default="", max_length=50)


class StockMovement(SQLModel):
    """
    One line of the stock ledger (kardex).

    quantity is signed: sales are recorded as negative quantities.
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    product_id: str
    type: MovementType
    quantity: int
    previous_stock: int
    new_stock: int
    reason: AdjustmentReason | None = None
    notes: str = ""
    operator: str
    date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
