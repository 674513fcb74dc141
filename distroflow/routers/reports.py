# distroflow/routers/reports.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from distroflow.core.auth import require_auth
from distroflow.core.config import get_settings
from distroflow.database import get_session
from distroflow.repositories.store_repo import StoreRepository
from distroflow.schemas.report import DashboardSummary
from distroflow.services.report_service import ReportService

settings = get_settings()

router = APIRouter(prefix="/reports", tags=["Reports"])

repo = StoreRepository()
service = ReportService()


@router.get(
    "/summary",
    response_model=DashboardSummary,
    dependencies=[Depends(require_auth)],
)
def get_dashboard_summary(
    top_n_products: int = 5,
    session: Session = Depends(get_session),
):
    """
    Aggregated statistics for the dashboard.

    Low-stock products are those with stock <= LOW_STOCK_THRESHOLD.
    """
    state = repo.load(session, settings.STORE_STATE_KEY)
    return service.dashboard_summary(
        state,
        low_stock_threshold=settings.LOW_STOCK_THRESHOLD,
        top_n_products=top_n_products,
    )
