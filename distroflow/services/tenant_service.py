# distroflow/services/tenant_service.py
import logging
import math
import uuid
from datetime import datetime, timedelta, timezone

from fastapi import HTTPException, status

from distroflow.repositories.tenant_gateway import (
    SupabaseTenantGateway,
    TenantBackendError,
    UserAlreadyExistsError,
)
from distroflow.schemas.tenant import TenantCreate, TenantProvisioned

logger = logging.getLogger(__name__)


def _bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


class TenantService:
    """
    Provision a tenant in the managed backend.

    Steps:
      1. Validate payload (trim, lowercase email, daysGiven >= 0).
      2. Create the admin auth user, or reuse the existing one
         when the email is already registered.
      3. Upsert the admin profile linked to a new company id.
      4. Upsert the company subscription.

    There is no transaction across these calls. When step 3 or 4 fails,
    the rows created so far are deleted again (best effort); a reused
    user is never deleted.
    """

    def __init__(self, gateway: SupabaseTenantGateway, default_days: int = 30):
        self.gateway = gateway
        self.default_days = default_days

    def provision_tenant(self, payload: TenantCreate) -> TenantProvisioned:
        company_name = (payload.company_name or "").strip()
        admin_email = (payload.admin_email or "").strip().lower()
        admin_password = (payload.admin_password or "").strip()
        days_given = (
            self.default_days if payload.days_given is None else payload.days_given
        )

        if not company_name or not admin_email or not admin_password:
            raise _bad_request(
                "Required fields: companyName, adminEmail, adminPassword"
            )
        sub_status, period_end = self._subscription_period(days_given)

        company_id = str(uuid.uuid4())

        # 1) Auth user
        user_id, reused_existing_user = self._create_or_reuse_user(
            admin_email, admin_password
        )

        # 2) Profile
        try:
            self.gateway.upsert_profile(user_id, company_name, company_id)
        except TenantBackendError as exc:
            if not reused_existing_user:
                self._compensate(self.gateway.delete_user, user_id)
            raise _bad_request(f"Failed to create/link profile: {exc}")

        # 3) Subscription
        try:
            self.gateway.upsert_subscription(company_id, sub_status, period_end)
        except TenantBackendError as exc:
            self._compensate(self.gateway.delete_profile, user_id)
            if not reused_existing_user:
                self._compensate(self.gateway.delete_user, user_id)
            raise _bad_request(f"Failed to create subscription: {exc}")

        logger.info(
            "Tenant %s provisioned for %s (user %s, reused=%s, status=%s)",
            company_id,
            admin_email,
            user_id,
            reused_existing_user,
            sub_status,
        )

        return TenantProvisioned(
            company_id=company_id,
            user_id=user_id,
            admin_email=admin_email,
            reused_existing_user=reused_existing_user,
        )

    # ---- Helpers ----

    @staticmethod
    def _subscription_period(days_given: float) -> tuple[str, datetime | None]:
        """
        Subscription status and period end for `days_given`.

        Runs before anything is written, so a period that does not fit
        in a datetime is rejected up front.
        """
        if not math.isfinite(days_given) or days_given < 0:
            raise _bad_request("Invalid daysGiven")
        if days_given == 0:
            return "inactive", None
        try:
            return "active", datetime.now(timezone.utc) + timedelta(days=days_given)
        except (OverflowError, ValueError):
            raise _bad_request("Invalid daysGiven")

    def _create_or_reuse_user(self, email: str, password: str) -> tuple[str, bool]:
        try:
            return self.gateway.create_user(email, password), False
        except UserAlreadyExistsError:
            logger.info("Auth user %s already exists, reusing it", email)
        except TenantBackendError as exc:
            raise _bad_request(str(exc))

        try:
            existing_id = self.gateway.find_user_id_by_email(email)
        except TenantBackendError as exc:
            raise _bad_request(str(exc))

        if not existing_id:
            raise _bad_request("Email already registered, but the user could not be found")
        return existing_id, True

    @staticmethod
    def _compensate(action, user_id: str) -> None:
        """
        Run a compensating delete; a failure here is logged and must not
        hide the error that triggered the rollback.
        """
        try:
            action(user_id)
            logger.warning("Rolled back %s for user %s", action.__name__, user_id)
        except TenantBackendError:
            logger.exception("Rollback %s failed for user %s", action.__name__, user_id)
