# distroflow/routers/products.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from distroflow.core.auth import require_auth
from distroflow.core.config import get_settings
from distroflow.database import get_session
from distroflow.models.caller import Caller
from distroflow.models.catalog import Product, StockMovement
from distroflow.repositories.store_repo import StoreRepository
from distroflow.schemas.product import (
    ProductCreate,
    ProductUpdate,
    StockAdjustment,
    StockEntry,
)
from distroflow.services.catalog_service import CatalogService

settings = get_settings()

router = APIRouter(tags=["Products"], dependencies=[Depends(require_auth)])

repo = StoreRepository()
service = CatalogService()


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Product not found",
    )


@router.get("/products", response_model=list[Product])
def list_products(
    category: str | None = None,
    session: Session = Depends(get_session),
):
    """
    List the catalog, optionally filtered by category.
    """
    state = repo.load(session, settings.STORE_STATE_KEY)
    return service.list_products(state, category=category)


@router.get("/products/{product_id}", response_model=Product)
def get_product(
    product_id: str,
    session: Session = Depends(get_session),
):
    state = repo.load(session, settings.STORE_STATE_KEY)
    return service.get_product(state, product_id)


@router.post(
    "/products",
    response_model=Product,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    """
    Add a product to the catalog.

    - 409 if the id is already taken.
    """
    product = Product(
        id=payload.resolved_id(),
        name=payload.name,
        sku=payload.sku.strip(),
        cost_price=payload.cost_price,
        sale_price=payload.sale_price,
        stock=payload.stock,
        category=payload.category.strip(),
    )
    with repo.transaction(session, settings.STORE_STATE_KEY) as state:
        return service.add_product(state, product)


@router.patch("/products/{product_id}", response_model=Product)
def update_product(
    product_id: str,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    """
    Partial update of a product.
    """
    with repo.transaction(session, settings.STORE_STATE_KEY) as state:
        updated = service.update_product(
            state, product_id, payload.model_dump(exclude_unset=True)
        )
        if updated is None:
            raise _not_found()
    return updated


@router.post(
    "/products/{product_id}/adjust-stock",
    response_model=StockMovement,
)
def adjust_stock(
    product_id: str,
    payload: StockAdjustment,
    session: Session = Depends(get_session),
    caller: Caller = Depends(require_auth),
):
    """
    Apply a signed stock correction (clamped at zero).

    The operator defaults to the caller's email.
    """
    with repo.transaction(session, settings.STORE_STATE_KEY) as state:
        movement = service.adjust_stock(
            state,
            product_id,
            quantity=payload.quantity,
            reason=payload.reason,
            notes=payload.notes,
            operator=payload.operator or caller.email,
            movement_type=payload.type,
        )
        if movement is None:
            raise _not_found()
    return movement


@router.post(
    "/products/{product_id}/stock-entry",
    response_model=StockMovement,
)
def add_stock_entry(
    product_id: str,
    payload: StockEntry,
    session: Session = Depends(get_session),
    caller: Caller = Depends(require_auth),
):
    """
    Record goods received from a supplier.
    """
    with repo.transaction(session, settings.STORE_STATE_KEY) as state:
        movement = service.add_stock_entry(
            state,
            product_id,
            quantity=payload.quantity,
            notes=payload.notes,
            operator=payload.operator or caller.email,
        )
        if movement is None:
            raise _not_found()
    return movement


@router.get("/stock-movements", response_model=list[StockMovement])
def list_stock_movements(
    product_id: str | None = None,
    limit: int = 100,
    session: Session = Depends(get_session),
):
    """
    Stock ledger, newest first.
    """
    state = repo.load(session, settings.STORE_STATE_KEY)
    return service.list_stock_movements(state, product_id=product_id, limit=limit)
