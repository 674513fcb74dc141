# distroflow/schemas/sale.py
from datetime import date

from pydantic import ConfigDict, model_validator
from sqlmodel import SQLModel, Field

from distroflow.models.sale import Customer, Payment, Seller

# payment_method recorded when a sale is paid with several methods
MIXED_PAYMENT = "mixed"


class SaleCreate(SQLModel):
    """
    Payload for finalizing the current cart.

    Either payment_method or payments must be given:
      - payments with one entry  => payment_method defaults to its method
      - payments with 2+ entries => payment_method defaults to 'mixed'
    """

    model_config = ConfigDict(extra="forbid")

    payment_method: str | None = None
    payments: list[Payment] = Field(default_factory=list)
    customer: Customer | None = None
    seller: Seller | None = None

    @model_validator(mode="after")
    def resolve_payment_method(self) -> "SaleCreate":
        method = (self.payment_method or "").strip()
        if not method:
            if len(self.payments) == 1:
                method = self.payments[0].method
            elif self.payments:
                method = MIXED_PAYMENT
        if not method:
            raise ValueError("payment_method or payments is required")
        self.payment_method = method
        return self


class ReceiptRead(SQLModel):
    """
    WhatsApp receipt for a sale.

    - message: percent-encoded receipt text
    - url: wa.me deep link (phone reduced to digits)
    """

    message: str
    url: str


class SaleFilters(SQLModel):
    """
    Sale history filters. Unset fields do not filter.

    - search: substring of the sale id, or of the customer / seller
      name (case-insensitive for names)
    - date_from / date_to: calendar days in the store time zone, both
      inclusive; date_to defaults to date_from
    """

    search: str | None = None
    payment_method: str | None = None
    seller_id: str | None = None
    date_from: date | None = None
    date_to: date | None = None


class SalesHistorySummary(SQLModel):
    """
    Day-closing figures over a filtered sale history.

    - margin: profit / revenue in percent, 0 without revenue
    - by_payment_method: revenue per sale payment_method
    """

    sale_count: int
    revenue: float
    profit: float
    margin: float
    by_payment_method: dict[str, float]
