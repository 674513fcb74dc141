# distroflow/models/store.py
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field

from distroflow.models.catalog import Product, StockMovement
from distroflow.models.expense import Expense
from distroflow.models.sale import CartItem, Sale

# Catalog a brand-new store starts with.
SEED_PRODUCTS: list[dict[str, Any]] = [
    {"id": "1", "name": "Coca-Cola 2L", "sku": "BEB001", "cost_price": 5.50, "sale_price": 8.99, "stock": 48, "category": "Bebidas"},
    {"id": "2", "name": "Água Mineral 500ml", "sku": "BEB002", "cost_price": 0.80, "sale_price": 2.50, "stock": 120, "category": "Bebidas"},
    {"id": "3", "name": "Cerveja Lata 350ml", "sku": "BEB003", "cost_price": 2.20, "sale_price": 4.99, "stock": 72, "category": "Bebidas"},
    {"id": "4", "name": "Arroz 5kg", "sku": "ALM001", "cost_price": 18.00, "sale_price": 27.90, "stock": 25, "category": "Alimentos"},
    {"id": "5", "name": "Feijão 1kg", "sku": "ALM002", "cost_price": 6.50, "sale_price": 9.99, "stock": 40, "category": "Alimentos"},
    {"id": "6", "name": "Óleo de Soja 900ml", "sku": "ALM003", "cost_price": 5.80, "sale_price": 8.49, "stock": 35, "category": "Alimentos"},
    {"id": "7", "name": "Sabão em Pó 1kg", "sku": "LIM001", "cost_price": 8.00, "sale_price": 14.90, "stock": 3, "category": "Limpeza"},
    {"id": "8", "name": "Detergente 500ml", "sku": "LIM002", "cost_price": 1.50, "sale_price": 3.49, "stock": 60, "category": "Limpeza"},
    {"id": "9", "name": "Papel Higiênico 12un", "sku": "HIG001", "cost_price": 12.00, "sale_price": 19.90, "stock": 2, "category": "Higiene"},
    {"id": "10", "name": "Sabonete 90g", "sku": "HIG002", "cost_price": 1.20, "sale_price": 2.99, "stock": 80, "category": "Higiene"},
]


class StoreState(SQLModel):
    """
    Whole POS state: catalog, cart, sale history, expenses and stock ledger.

    Passed by reference to the service transition functions; there is no
    module-level instance. Transitions build complete new lists and assign
    them in one step, so readers never see a half-applied change.
    """

    products: list[Product] = Field(default_factory=list)
    cart: list[CartItem] = Field(default_factory=list)
    sales: list[Sale] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    stock_movements: list[StockMovement] = Field(default_factory=list)

    @classmethod
    def initial(cls) -> "StoreState":
        return cls(products=[Product(**p) for p in SEED_PRODUCTS])

    def find_product(self, product_id: str) -> Product | None:
        return next((p for p in self.products if p.id == product_id), None)


class StoredState(SQLModel, table=True):
    """
    Serialized StoreState, one row per storage key.
    """

    __tablename__ = "store_state"

    key: str = Field(
        primary_key=True,
        max_length=100,
        description="Storage key, e.g. 'distribuidora-store'",
    )

    payload: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
        description="StoreState serialized as JSON",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Last write timestamp (UTC)",
    )
