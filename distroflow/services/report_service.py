# distroflow/services/report_service.py
from distroflow.models.store import StoreState
from distroflow.schemas.report import DashboardSummary, LowStockProduct, TopProduct


class ReportService:
    """
    Aggregated dashboard statistics, computed from the StoreState.
    """

    def dashboard_summary(
        self,
        state: StoreState,
        low_stock_threshold: int = 5,
        top_n_products: int = 5,
    ) -> DashboardSummary:
        sale_count = len(state.sales)
        revenue = sum(s.total for s in state.sales)
        gross_profit = sum(s.profit for s in state.sales)
        expenses_total = sum(e.value for e in state.expenses)

        # Top products by quantity sold, using the names captured at sale time
        totals: dict[str, TopProduct] = {}
        for sale in state.sales:
            for item in sale.items:
                pid = item.product.id
                row = totals.get(pid)
                if row is None:
                    row = TopProduct(
                        product_id=pid,
                        name=item.product.name,
                        total_quantity=0,
                        total_revenue=0.0,
                    )
                    totals[pid] = row
                row.total_quantity += item.quantity
                row.total_revenue += item.product.sale_price * item.quantity

        top_products = sorted(
            totals.values(),
            key=lambda t: (t.total_quantity, t.total_revenue),
            reverse=True,
        )[:top_n_products]

        low_stock = [
            LowStockProduct(id=p.id, name=p.name, sku=p.sku, stock=p.stock)
            for p in sorted(state.products, key=lambda p: p.stock)
            if p.stock <= low_stock_threshold
        ]

        return DashboardSummary(
            sale_count=sale_count,
            revenue=revenue,
            gross_profit=gross_profit,
            expenses_total=expenses_total,
            net_result=gross_profit - expenses_total,
            average_ticket=revenue / sale_count if sale_count else 0.0,
            low_stock=low_stock,
            top_products=top_products,
        )
