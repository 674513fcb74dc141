# distroflow/routers/sales.py
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from distroflow.core.auth import require_auth
from distroflow.core.config import get_settings
from distroflow.database import get_session
from distroflow.models.sale import Sale
from distroflow.repositories.store_repo import StoreRepository
from distroflow.schemas.sale import (
    ReceiptRead,
    SaleCreate,
    SaleFilters,
    SalesHistorySummary,
)
from distroflow.services.receipt_service import (
    build_whatsapp_link,
    generate_whatsapp_receipt,
)
from distroflow.services.sale_service import SaleService

settings = get_settings()

router = APIRouter(
    prefix="/sales",
    tags=["Sales"],
    dependencies=[Depends(require_auth)],
)

repo = StoreRepository()
service = SaleService()


@router.post(
    "",
    response_model=Sale,
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    payload: SaleCreate,
    session: Session = Depends(get_session),
):
    """
    Finalize the current cart into a sale.

    - 400 if the cart is empty (nothing is written).
    - Stock is decremented per line, floored at zero.
    """
    with repo.transaction(session, settings.STORE_STATE_KEY) as state:
        sale = service.process_sale(
            state,
            payment_method=payload.payment_method,
            customer=payload.customer,
            seller=payload.seller,
            payments=payload.payments,
        )
        if sale is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
            )
    return sale


def sale_filters(
    search: str | None = None,
    payment_method: str | None = None,
    seller_id: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> SaleFilters:
    """
    Query-string filters shared by the history and summary endpoints.
    """
    return SaleFilters(
        search=search,
        payment_method=payment_method,
        seller_id=seller_id,
        date_from=date_from,
        date_to=date_to,
    )


@router.get("", response_model=list[Sale])
def list_sales(
    session: Session = Depends(get_session),
    filters: SaleFilters = Depends(sale_filters),
    skip: int = 0,
    limit: int = 50,
):
    """
    Sale history, newest first.

    Filters: search (id / customer / seller), payment_method,
    seller_id, date_from..date_to (store time zone days).
    """
    state = repo.load(session, settings.STORE_STATE_KEY)
    return service.list_sales(
        state, skip, limit, filters=filters, tz_name=settings.RECEIPT_TIMEZONE
    )


@router.get("/summary", response_model=SalesHistorySummary)
def sales_summary(
    session: Session = Depends(get_session),
    filters: SaleFilters = Depends(sale_filters),
):
    """
    Count, revenue, profit, margin and revenue per payment method
    over the filtered history (day closing).
    """
    state = repo.load(session, settings.STORE_STATE_KEY)
    sales = service.filter_sales(state, filters, tz_name=settings.RECEIPT_TIMEZONE)
    return service.history_summary(sales)


@router.get("/{sale_id}", response_model=Sale)
def get_sale(
    sale_id: str,
    session: Session = Depends(get_session),
):
    state = repo.load(session, settings.STORE_STATE_KEY)
    return service.get_sale(state, sale_id)


@router.get("/{sale_id}/receipt", response_model=ReceiptRead)
def get_receipt(
    sale_id: str,
    phone: str | None = None,
    session: Session = Depends(get_session),
):
    """
    WhatsApp receipt for a sale.

    Returns the encoded message and the wa.me link for `phone`,
    which defaults to the customer phone stored on the sale.
    """
    state = repo.load(session, settings.STORE_STATE_KEY)
    sale = service.get_sale(state, sale_id)

    message = generate_whatsapp_receipt(
        sale,
        distributor_name=settings.DISTRIBUTOR_NAME,
        tz_name=settings.RECEIPT_TIMEZONE,
    )
    if not phone:
        phone = sale.customer.phone if sale.customer else ""
    return ReceiptRead(message=message, url=build_whatsapp_link(phone, message))
