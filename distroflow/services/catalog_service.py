# distroflow/services/catalog_service.py
import logging
from typing import Any

from fastapi import HTTPException, status

from distroflow.models.catalog import (
    AdjustmentReason,
    MovementType,
    Product,
    StockMovement,
)
from distroflow.models.store import StoreState

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Catalog transitions over an explicit StoreState.

    Responsibilities:
      - add / update products
      - stock adjustments and supplier entries, each recorded in the
        stock ledger with previous and new stock
      - stock never drops below zero (adjustments are clamped)
    """

    # ----- Queries -----

    def list_products(
        self,
        state: StoreState,
        category: str | None = None,
    ) -> list[Product]:
        if category is None:
            return list(state.products)
        wanted = category.strip().lower()
        return [p for p in state.products if p.category.lower() == wanted]

    def get_product(self, state: StoreState, product_id: str) -> Product:
        product = state.find_product(product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def list_stock_movements(
        self,
        state: StoreState,
        product_id: str | None = None,
        limit: int = 100,
    ) -> list[StockMovement]:
        """
        Stock ledger, newest first, optionally for a single product.
        """
        movements = state.stock_movements
        if product_id is not None:
            movements = [m for m in movements if m.product_id == product_id]
        return list(reversed(movements))[:limit]

    # ----- Transitions -----

    def add_product(self, state: StoreState, product: Product) -> Product:
        if state.find_product(product.id) is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Product id {product.id} already exists",
            )
        state.products = [*state.products, product]
        return product

    def update_product(
        self,
        state: StoreState,
        product_id: str,
        updates: dict[str, Any],
    ) -> Product | None:
        """
        Shallow merge of `updates` into the matching product.

        Unknown product_id is a no-op and returns None. The id itself
        cannot be changed.
        """
        current = state.find_product(product_id)
        if current is None:
            return None

        fields = {k: v for k, v in updates.items() if k != "id"}
        updated = Product.model_validate({**current.model_dump(), **fields})

        state.products = [updated if p.id == product_id else p for p in state.products]
        return updated

    def adjust_stock(
        self,
        state: StoreState,
        product_id: str,
        quantity: int,
        reason: AdjustmentReason | None,
        notes: str,
        operator: str,
        movement_type: MovementType = "ajuste",
    ) -> StockMovement | None:
        """
        Apply a signed stock delta, clamped at zero.

        Unknown product_id is a no-op and returns None.
        """
        product = state.find_product(product_id)
        if product is None:
            return None

        new_stock = max(0, product.stock + quantity)
        movement = StockMovement(
            product_id=product_id,
            type=movement_type,
            quantity=quantity,
            previous_stock=product.stock,
            new_stock=new_stock,
            reason=reason,
            notes=notes,
            operator=operator,
        )
        self._apply_movement(state, product, movement)
        return movement

    def add_stock_entry(
        self,
        state: StoreState,
        product_id: str,
        quantity: int,
        notes: str,
        operator: str,
    ) -> StockMovement | None:
        """
        Record goods received from a supplier.

        Unknown product_id is a no-op and returns None.
        """
        product = state.find_product(product_id)
        if product is None:
            return None

        movement = StockMovement(
            product_id=product_id,
            type="entrada",
            quantity=quantity,
            previous_stock=product.stock,
            new_stock=product.stock + quantity,
            reason="entrada_fornecedor",
            notes=notes,
            operator=operator,
        )
        self._apply_movement(state, product, movement)
        return movement

    # ----- Helpers -----

    @staticmethod
    def _apply_movement(
        state: StoreState,
        product: Product,
        movement: StockMovement,
    ) -> None:
        updated = product.model_copy(update={"stock": movement.new_stock})
        state.products = [updated if p.id == product.id else p for p in state.products]
        state.stock_movements = [*state.stock_movements, movement]

        logger.info(
            "Stock %s for product %s: %s -> %s (%s)",
            movement.type,
            product.id,
            movement.previous_stock,
            movement.new_stock,
            movement.operator,
        )
