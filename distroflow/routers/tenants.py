# distroflow/routers/tenants.py
import logging
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from distroflow.core.auth import PROVISION_TENANTS, require_capability
from distroflow.core.config import get_settings
from distroflow.core.supabase_client import supabase_admin
from distroflow.repositories.tenant_gateway import SupabaseTenantGateway
from distroflow.schemas.tenant import TenantCreate, TenantProvisioned
from distroflow.services.tenant_service import TenantService

settings = get_settings()
logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request body"


class ErrorBodyRoute(APIRoute):
    """
    Route class answering every failure with {"error": <message>}
    instead of FastAPI's {"detail": ...}.

    - HTTPException          -> its status code
    - RequestValidationError -> 400
    """

    def get_route_handler(self) -> Callable:
        original_route_handler = super().get_route_handler()

        async def error_body_route_handler(request: Request) -> Response:
            try:
                return await original_route_handler(request)
            except HTTPException as exc:
                return JSONResponse(
                    status_code=exc.status_code,
                    content={"error": exc.detail},
                    headers=exc.headers,
                )
            except RequestValidationError as exc:
                return JSONResponse(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    content={"error": _validation_message(exc)},
                )

        return error_body_route_handler


router = APIRouter(
    prefix="/admin/tenants",
    tags=["Admin Tenants"],
    route_class=ErrorBodyRoute,
)


def get_tenant_gateway() -> SupabaseTenantGateway:
    """
    FastAPI dependency building the gateway on the service-role client.

    Raises:
        HTTPException(500): if the service role key is not configured.
    """
    try:
        client = supabase_admin()
    except RuntimeError as exc:
        logger.error("Tenant provisioning unavailable: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )
    return SupabaseTenantGateway(client)


@router.options("", include_in_schema=False)
def tenants_preflight():
    """
    Answer preflight requests that the CORS middleware does not handle
    (no Origin header).
    """
    return Response(
        status_code=status.HTTP_200_OK,
        headers={"Allow": "POST, OPTIONS"},
    )


@router.post(
    "",
    response_model=TenantProvisioned,
    dependencies=[Depends(require_capability(PROVISION_TENANTS))],
)
def provision_tenant(
    payload: TenantCreate,
    gateway: SupabaseTenantGateway = Depends(get_tenant_gateway),
):
    """
    Provision a tenant: admin user (created or reused), profile and
    subscription.

    Auth:
      - Bearer token required (401).
      - Caller needs the 'tenants:provision' capability (403).

    Errors are returned as {"error": "..."}.
    """
    service = TenantService(gateway, default_days=settings.DEFAULT_TRIAL_DAYS)
    return service.provision_tenant(payload)
