# distroflow/routers/expenses.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from distroflow.core.auth import require_auth
from distroflow.core.config import get_settings
from distroflow.database import get_session
from distroflow.models.expense import Expense
from distroflow.repositories.store_repo import StoreRepository
from distroflow.schemas.expense import ExpenseCreate, ExpenseUpdate
from distroflow.services.expense_service import ExpenseService

settings = get_settings()

router = APIRouter(
    prefix="/expenses",
    tags=["Expenses"],
    dependencies=[Depends(require_auth)],
)

repo = StoreRepository()
service = ExpenseService()


@router.get("", response_model=list[Expense])
def list_expenses(session: Session = Depends(get_session)):
    """
    List expenses, newest first.
    """
    state = repo.load(session, settings.STORE_STATE_KEY)
    return service.list_expenses(state)


@router.get("/{expense_id}", response_model=Expense)
def get_expense(
    expense_id: str,
    session: Session = Depends(get_session),
):
    state = repo.load(session, settings.STORE_STATE_KEY)
    return service.get_expense(state, expense_id)


@router.post(
    "",
    response_model=Expense,
    status_code=status.HTTP_201_CREATED,
)
def create_expense(
    payload: ExpenseCreate,
    session: Session = Depends(get_session),
):
    expense = Expense(**payload.model_dump(exclude_none=True))
    with repo.transaction(session, settings.STORE_STATE_KEY) as state:
        return service.add_expense(state, expense)


@router.patch("/{expense_id}", response_model=Expense)
def update_expense(
    expense_id: str,
    payload: ExpenseUpdate,
    session: Session = Depends(get_session),
):
    with repo.transaction(session, settings.STORE_STATE_KEY) as state:
        updated = service.update_expense(
            state, expense_id, payload.model_dump(exclude_unset=True)
        )
        if updated is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Expense not found",
            )
    return updated


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(
    expense_id: str,
    session: Session = Depends(get_session),
):
    """
    Delete an expense (no-op if it does not exist).
    """
    with repo.transaction(session, settings.STORE_STATE_KEY) as state:
        service.delete_expense(state, expense_id)
    return None
