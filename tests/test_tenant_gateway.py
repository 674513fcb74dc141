"""SupabaseTenantGateway against a mocked Supabase client."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import pytest
from supabase import AuthError, PostgrestAPIError

from distroflow.repositories.tenant_gateway import (
    PROFILES_TABLE,
    SUBSCRIPTIONS_TABLE,
    SupabaseTenantGateway,
    TenantBackendError,
    UserAlreadyExistsError,
)


class AuthFailure(AuthError):
    """AuthError carrying only a message, whatever the installed constructor."""

    def __init__(self, message: str):
        Exception.__init__(self, message)
        self.message = message


@pytest.fixture
def sb_client() -> MagicMock:
    return MagicMock()


class TestAuthUsers:

    def test_create_user_returns_id(self, sb_client):
        sb_client.auth.admin.create_user.return_value = SimpleNamespace(
            user=SimpleNamespace(id="user-1")
        )
        gateway = SupabaseTenantGateway(sb_client)

        assert gateway.create_user("a@b.com", "pw") == "user-1"
        sb_client.auth.admin.create_user.assert_called_once_with(
            {"email": "a@b.com", "password": "pw", "email_confirm": True}
        )

    def test_create_user_without_id(self, sb_client):
        sb_client.auth.admin.create_user.return_value = SimpleNamespace(user=None)
        with pytest.raises(TenantBackendError):
            SupabaseTenantGateway(sb_client).create_user("a@b.com", "pw")

    def test_find_user_by_email_is_case_insensitive(self, sb_client):
        sb_client.auth.admin.list_users.return_value = [
            SimpleNamespace(id="u1", email="other@b.com"),
            SimpleNamespace(id="u2", email="Dono@BoaVista.com"),
        ]
        gateway = SupabaseTenantGateway(sb_client)

        assert gateway.find_user_id_by_email("dono@boavista.com") == "u2"
        assert gateway.find_user_id_by_email("missing@b.com") is None
        sb_client.auth.admin.list_users.assert_called_with(page=1, per_page=1000)

    def test_create_user_email_taken(self, sb_client):
        sb_client.auth.admin.create_user.side_effect = AuthFailure(
            "A user with this email address has already been registered"
        )
        with pytest.raises(UserAlreadyExistsError):
            SupabaseTenantGateway(sb_client).create_user("a@b.com", "pw")

    def test_create_user_other_auth_error(self, sb_client):
        sb_client.auth.admin.create_user.side_effect = AuthFailure(
            "Password should be at least 6 characters"
        )
        with pytest.raises(TenantBackendError, match="Failed to create user") as exc:
            SupabaseTenantGateway(sb_client).create_user("a@b.com", "pw")
        assert not isinstance(exc.value, UserAlreadyExistsError)

    def test_create_user_connection_error(self, sb_client):
        sb_client.auth.admin.create_user.side_effect = httpx.ConnectError("connection refused")
        with pytest.raises(TenantBackendError) as exc:
            SupabaseTenantGateway(sb_client).create_user("a@b.com", "pw")
        assert not isinstance(exc.value, UserAlreadyExistsError)

    def test_list_users_failure(self, sb_client):
        sb_client.auth.admin.list_users.side_effect = AuthFailure("User not allowed")
        with pytest.raises(TenantBackendError, match="Failed to list users"):
            SupabaseTenantGateway(sb_client).find_user_id_by_email("a@b.com")

    def test_delete_user(self, sb_client):
        SupabaseTenantGateway(sb_client).delete_user("u1")
        sb_client.auth.admin.delete_user.assert_called_once_with("u1")

    def test_delete_user_failure(self, sb_client):
        sb_client.auth.admin.delete_user.side_effect = AuthFailure("User not found")
        with pytest.raises(TenantBackendError, match="Failed to delete user u1"):
            SupabaseTenantGateway(sb_client).delete_user("u1")


class TestTables:

    def test_upsert_profile(self, sb_client):
        SupabaseTenantGateway(sb_client).upsert_profile("u1", "Boa Vista", "c1")

        sb_client.table.assert_called_with(PROFILES_TABLE)
        sb_client.table.return_value.upsert.assert_called_once_with(
            {"id": "u1", "name": "Boa Vista", "role": "admin", "active": True, "company_id": "c1"},
            on_conflict="id",
        )

    def test_upsert_subscription_without_period(self, sb_client):
        SupabaseTenantGateway(sb_client).upsert_subscription("c1", "inactive", None)

        sb_client.table.assert_called_with(SUBSCRIPTIONS_TABLE)
        row = sb_client.table.return_value.upsert.call_args.args[0]
        assert row["status"] == "inactive"
        assert row["current_period_end"] is None
        assert row["manual_override"] is True

    def test_postgrest_error_is_translated(self, sb_client):
        sb_client.table.return_value.upsert.return_value.execute.side_effect = PostgrestAPIError(
            {"message": "permission denied for table profiles", "code": "42501"}
        )
        with pytest.raises(TenantBackendError, match="permission denied"):
            SupabaseTenantGateway(sb_client).upsert_profile("u1", "Boa Vista", "c1")

    def test_timeout_is_translated(self, sb_client):
        sb_client.table.return_value.upsert.return_value.execute.side_effect = httpx.ReadTimeout(
            "timed out"
        )
        with pytest.raises(TenantBackendError, match="timed out"):
            SupabaseTenantGateway(sb_client).upsert_subscription("c1", "inactive", None)

    def test_delete_profile(self, sb_client):
        SupabaseTenantGateway(sb_client).delete_profile("u1")

        sb_client.table.assert_called_with(PROFILES_TABLE)
        sb_client.table.return_value.delete.return_value.eq.assert_called_once_with("id", "u1")
