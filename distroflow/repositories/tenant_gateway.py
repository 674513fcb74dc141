# distroflow/repositories/tenant_gateway.py
import logging
from datetime import datetime
from typing import Any

import httpx
from supabase import AuthError, Client, PostgrestAPIError

logger = logging.getLogger(__name__)

PROFILES_TABLE = "profiles"
SUBSCRIPTIONS_TABLE = "company_subscriptions"

# httpx.HTTPError covers timeouts and connection failures of both APIs
AUTH_ERRORS = (AuthError, httpx.HTTPError)
TABLE_ERRORS = (PostgrestAPIError, httpx.HTTPError)

# Fragments of the Supabase Auth message for an email that is already taken
_ALREADY_REGISTERED_MARKERS = (
    "already been registered",
    "already registered",
    "already exists",
)


class TenantBackendError(Exception):
    """
    A call to the managed backend failed. The message is safe to show
    to the administrator.
    """


class UserAlreadyExistsError(TenantBackendError):
    """
    Supabase Auth refused to create a user because the email is taken.
    """


def _table_message(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc)


class SupabaseTenantGateway:
    """
    Data access layer for tenant provisioning in Supabase.

    - Auth admin API: create / list / delete users
    - profiles and company_subscriptions tables
    - Translates Supabase client and transport errors into TenantBackendError.
    - No FastAPI, no orchestration.
    """

    def __init__(self, client: Client):
        self.client = client

    # ---- Auth users ----

    def create_user(self, email: str, password: str) -> str:
        """
        Create a confirmed auth user and return its id.

        Raises:
            UserAlreadyExistsError: if the email is already registered.
            TenantBackendError: on any other failure.
        """
        try:
            res = self.client.auth.admin.create_user(
                {
                    "email": email,
                    "password": password,
                    "email_confirm": True,
                }
            )
        except AuthError as exc:
            message = str(exc)
            if any(m in message.lower() for m in _ALREADY_REGISTERED_MARKERS):
                raise UserAlreadyExistsError(message)
            raise TenantBackendError(f"Failed to create user: {message}")
        except httpx.HTTPError as exc:
            raise TenantBackendError(f"Failed to create user: {exc}")

        user_id = res.user.id if res and res.user else None
        if not user_id:
            raise TenantBackendError("User created, but no id was returned")
        return str(user_id)

    def find_user_id_by_email(self, email: str) -> str | None:
        """
        Look an auth user up by (lowercased) email.

        Only the first 1000 users are scanned.
        """
        try:
            users = self.client.auth.admin.list_users(page=1, per_page=1000)
        except AUTH_ERRORS as exc:
            raise TenantBackendError(f"Failed to list users: {exc}")

        for user in users or []:
            if (user.email or "").lower() == email:
                return str(user.id)
        return None

    def delete_user(self, user_id: str) -> None:
        try:
            self.client.auth.admin.delete_user(user_id)
        except AUTH_ERRORS as exc:
            raise TenantBackendError(f"Failed to delete user {user_id}: {exc}")

    # ---- Tables ----

    def upsert_profile(self, user_id: str, name: str, company_id: str) -> None:
        row: dict[str, Any] = {
            "id": user_id,
            "name": name,
            "role": "admin",
            "active": True,
            "company_id": company_id,
        }
        try:
            self.client.table(PROFILES_TABLE).upsert(row, on_conflict="id").execute()
        except TABLE_ERRORS as exc:
            raise TenantBackendError(_table_message(exc))

    def delete_profile(self, user_id: str) -> None:
        try:
            self.client.table(PROFILES_TABLE).delete().eq("id", user_id).execute()
        except TABLE_ERRORS as exc:
            raise TenantBackendError(_table_message(exc))

    def upsert_subscription(
        self,
        company_id: str,
        status: str,
        current_period_end: datetime | None,
    ) -> None:
        row: dict[str, Any] = {
            "company_id": company_id,
            "status": status,
            "current_period_end": (
                current_period_end.isoformat() if current_period_end else None
            ),
            "manual_override": True,
            "blocked_reason": None,
        }
        try:
            self.client.table(SUBSCRIPTIONS_TABLE).upsert(
                row, on_conflict="company_id"
            ).execute()
        except TABLE_ERRORS as exc:
            raise TenantBackendError(_table_message(exc))
