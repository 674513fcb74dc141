# distroflow/services/expense_service.py
from typing import Any

from fastapi import HTTPException, status

from distroflow.models.expense import Expense
from distroflow.models.store import StoreState


class ExpenseService:
    """
    Expense bookkeeping over an explicit StoreState.
    """

    def list_expenses(self, state: StoreState) -> list[Expense]:
        return sorted(state.expenses, key=lambda e: e.date, reverse=True)

    def get_expense(self, state: StoreState, expense_id: str) -> Expense:
        expense = next((e for e in state.expenses if e.id == expense_id), None)
        if not expense:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Expense not found",
            )
        return expense

    def add_expense(self, state: StoreState, expense: Expense) -> Expense:
        state.expenses = [*state.expenses, expense]
        return expense

    def update_expense(
        self,
        state: StoreState,
        expense_id: str,
        updates: dict[str, Any],
    ) -> Expense | None:
        """
        Shallow merge; unknown expense_id is a no-op and returns None.
        """
        current = next((e for e in state.expenses if e.id == expense_id), None)
        if current is None:
            return None

        fields = {k: v for k, v in updates.items() if k != "id"}
        updated = Expense.model_validate({**current.model_dump(), **fields})
        state.expenses = [updated if e.id == expense_id else e for e in state.expenses]
        return updated

    def delete_expense(self, state: StoreState, expense_id: str) -> None:
        """
        Remove an expense; no-op if it does not exist.
        """
        state.expenses = [e for e in state.expenses if e.id != expense_id]
