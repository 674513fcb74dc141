# distroflow/services/sale_service.py
import logging
from datetime import datetime, time, timezone
from zoneinfo import ZoneInfo

from fastapi import HTTPException, status

from distroflow.models.catalog import StockMovement
from distroflow.models.sale import Customer, Payment, Sale, Seller
from distroflow.models.store import StoreState
from distroflow.schemas.sale import SaleFilters, SalesHistorySummary

logger = logging.getLogger(__name__)

# Operator recorded on sale movements when no seller is attached.
SYSTEM_OPERATOR = "Sistema"


class SaleService:
    """
    Sale finalization and history.

    process_sale is a single transition over the StoreState:
      1. Guard: empty cart => no sale, state untouched.
      2. Compute total and profit from the cart snapshot prices.
      3. Stamp id + UTC timestamp.
      4. Decrement catalog stock per line, floored at zero.
      5. Record one 'venda' movement per line.
      6. Append the sale to history and clear the cart.

    Steps 4-6 are assigned together at the end.
    """

    def process_sale(
        self,
        state: StoreState,
        payment_method: str,
        customer: Customer | None = None,
        seller: Seller | None = None,
        payments: list[Payment] | None = None,
    ) -> Sale | None:
        if not state.cart:
            return None

        total = sum(it.product.sale_price * it.quantity for it in state.cart)
        profit = sum(
            (it.product.sale_price - it.product.cost_price) * it.quantity
            for it in state.cart
        )

        sale = Sale(
            items=[it.model_copy(deep=True) for it in state.cart],
            total=total,
            profit=profit,
            payment_method=payment_method,
            payments=list(payments or []),
            customer=customer,
            seller=seller,
        )

        operator = seller.name if seller else SYSTEM_OPERATOR
        sold: dict[str, int] = {}
        for it in state.cart:
            sold[it.product.id] = sold.get(it.product.id, 0) + it.quantity

        movements: list[StockMovement] = []
        products = []
        for product in state.products:
            quantity = sold.get(product.id)
            if quantity is None:
                products.append(product)
                continue

            # Overselling is clamped, not rejected.
            new_stock = max(0, product.stock - quantity)
            movements.append(
                StockMovement(
                    product_id=product.id,
                    type="venda",
                    quantity=-quantity,
                    previous_stock=product.stock,
                    new_stock=new_stock,
                    notes=f"Venda #{sale.id}",
                    operator=operator,
                    date=sale.date,
                )
            )
            products.append(product.model_copy(update={"stock": new_stock}))

        state.products = products
        state.cart = []
        state.sales = [*state.sales, sale]
        state.stock_movements = [*state.stock_movements, *movements]

        logger.info(
            "Sale %s processed: %d item(s), total=%.2f, payment=%s",
            sale.id,
            len(sale.items),
            sale.total,
            sale.payment_method,
        )
        return sale

    # -------- History --------

    def filter_sales(
        self,
        state: StoreState,
        filters: SaleFilters | None = None,
        tz_name: str = "UTC",
    ) -> list[Sale]:
        """
        Sales matching `filters`, newest first.

        Date bounds are whole days in `tz_name`.
        """
        filters = filters or SaleFilters()
        search = (filters.search or "").strip()
        needle = search.lower()

        start = end = None
        if filters.date_from:
            tz = ZoneInfo(tz_name)
            start = datetime.combine(filters.date_from, time.min, tzinfo=tz)
            end = datetime.combine(filters.date_to or filters.date_from, time.max, tzinfo=tz)

        def matches(sale: Sale) -> bool:
            if search and not (
                search in sale.id
                or (sale.customer and needle in sale.customer.name.lower())
                or (sale.seller and needle in sale.seller.name.lower())
            ):
                return False
            if filters.payment_method and sale.payment_method != filters.payment_method:
                return False
            if filters.seller_id and (not sale.seller or sale.seller.id != filters.seller_id):
                return False
            if start is not None:
                sale_date = sale.date
                if sale_date.tzinfo is None:
                    sale_date = sale_date.replace(tzinfo=timezone.utc)
                return start <= sale_date <= end
            return True

        # reversed() first so equal timestamps keep newest-recorded first
        return sorted(
            (s for s in reversed(state.sales) if matches(s)),
            key=lambda s: s.date,
            reverse=True,
        )

    def list_sales(
        self,
        state: StoreState,
        skip: int = 0,
        limit: int = 50,
        filters: SaleFilters | None = None,
        tz_name: str = "UTC",
    ) -> list[Sale]:
        """
        Sale history, newest first.
        """
        return self.filter_sales(state, filters, tz_name)[skip : skip + limit]

    def history_summary(self, sales: list[Sale]) -> SalesHistorySummary:
        revenue = sum(s.total for s in sales)
        profit = sum(s.profit for s in sales)

        by_payment_method: dict[str, float] = {}
        for sale in sales:
            by_payment_method[sale.payment_method] = (
                by_payment_method.get(sale.payment_method, 0.0) + sale.total
            )

        return SalesHistorySummary(
            sale_count=len(sales),
            revenue=revenue,
            profit=profit,
            margin=(profit / revenue * 100) if revenue > 0 else 0.0,
            by_payment_method=by_payment_method,
        )

    def get_sale(self, state: StoreState, sale_id: str) -> Sale:
        sale = next((s for s in state.sales if s.id == sale_id), None)
        if not sale:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Sale not found",
            )
        return sale
