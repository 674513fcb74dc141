# distroflow/schemas/expense.py
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from distroflow.models.expense import ExpenseCategory


class ExpenseCreate(SQLModel):
    """
    Payload for booking an expense.

    - date defaults to now (UTC) when omitted.
    """

    model_config = ConfigDict(extra="forbid")

    description: str = Field(max_length=255)
    category: ExpenseCategory
    value: float = Field(ge=0)
    date: datetime | None = None

    @field_validator("description")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class ExpenseUpdate(SQLModel):
    """
    Partial update payload; only provided fields are changed.
    """

    model_config = ConfigDict(extra="forbid")

    description: str | None = Field(default=None, max_length=255)
    category: ExpenseCategory | None = None
    value: float | None = Field(default=None, ge=0)
    date: datetime | None = None
