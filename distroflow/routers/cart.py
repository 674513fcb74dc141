# distroflow/routers/cart.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from distroflow.core.auth import require_auth
from distroflow.core.config import get_settings
from distroflow.database import get_session
from distroflow.repositories.store_repo import StoreRepository
from distroflow.schemas.cart import CartSummary, CartItemCreate, CartItemUpdate
from distroflow.services.cart_service import CartService
from distroflow.services.catalog_service import CatalogService

settings = get_settings()

router = APIRouter(
    prefix="/cart",
    tags=["Cart"],
    dependencies=[Depends(require_auth)],
)

repo = StoreRepository()
catalog_service = CatalogService()
service = CartService()


@router.get("", response_model=CartSummary)
def get_cart(session: Session = Depends(get_session)):
    """
    Get the current cart summary.
    """
    state = repo.load(session, settings.STORE_STATE_KEY)
    return service.get_cart_summary(state)


@router.post("", response_model=CartSummary)
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
):
    """
    Add a catalog product to the cart (quantities are summed).

    Returns the updated cart summary.
    """
    with repo.transaction(session, settings.STORE_STATE_KEY) as state:
        product = catalog_service.get_product(state, payload.product_id)
        service.add_to_cart(state, product, payload.quantity)
    return service.get_cart_summary(state)


@router.patch("/{product_id}", response_model=CartSummary)
def update_cart_item(
    product_id: str,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
):
    """
    Replace the quantity of a product in the cart.

    Returns the updated cart summary.
    """
    with repo.transaction(session, settings.STORE_STATE_KEY) as state:
        service.update_cart_quantity(state, product_id, payload.quantity)
    return service.get_cart_summary(state)


@router.delete("/{product_id}", response_model=CartSummary)
def remove_cart_item(
    product_id: str,
    session: Session = Depends(get_session),
):
    """
    Remove a product from the cart.

    Returns the updated cart summary.
    """
    with repo.transaction(session, settings.STORE_STATE_KEY) as state:
        service.remove_from_cart(state, product_id)
    return service.get_cart_summary(state)


@router.delete("", response_model=CartSummary)
def clear_cart(session: Session = Depends(get_session)):
    """
    Clear the entire cart.

    Returns an empty cart summary.
    """
    with repo.transaction(session, settings.STORE_STATE_KEY) as state:
        service.clear_cart(state)
    return service.get_cart_summary(state)
