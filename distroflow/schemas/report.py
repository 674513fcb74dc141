# distroflow/schemas/report.py
from sqlmodel import SQLModel


class LowStockProduct(SQLModel):
    id: str
    name: str
    sku: str
    stock: int


class TopProduct(SQLModel):
    product_id: str
    name: str
    total_quantity: int
    total_revenue: float


class DashboardSummary(SQLModel):
    """
    Aggregated figures for the store dashboard.
    """

    sale_count: int
    revenue: float
    gross_profit: float
    expenses_total: float
    net_result: float
    average_ticket: float
    low_stock: list[LowStockProduct]
    top_products: list[TopProduct]
