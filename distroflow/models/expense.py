# distroflow/models/expense.py
import uuid
from datetime import datetime, timezone
from typing import Literal

from sqlmodel import SQLModel, Field

ExpenseCategory = Literal[
    "Salários",
    "Combustível",
    "Aluguel",
    "Mercadoria",
    "Outros",
]

EXPENSE_CATEGORIES: list[str] = [
    "Salários",
    "Combustível",
    "Aluguel",
    "Mercadoria",
    "Outros",
]


class Expense(SQLModel):
    """
    Operating expense booked against the store.
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    description: str
    category: ExpenseCategory
    value: float = Field(ge=0)
    date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
