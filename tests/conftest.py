import os

# Settings are read at import time; configure them before importing the app.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SUPABASE_URL"] = "https://example.supabase.co"
os.environ["SUPABASE_KEY"] = "test-anon-key"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"
os.environ["SUPABASE_SERVICE_ROLE_KEY"] = "test-service-role-key"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from distroflow.database import engine
from distroflow.main import app
from distroflow.models.store import StoreState
from distroflow.routers.tenants import get_tenant_gateway
from tests.fakes import FakeTenantGateway
from tests.tokens import bearer, make_token


@pytest.fixture
def state() -> StoreState:
    return StoreState.initial()


@pytest.fixture
def db():
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(db):
    with Session(db) as s:
        yield s


@pytest.fixture
def gateway() -> FakeTenantGateway:
    return FakeTenantGateway()


@pytest.fixture
def client(db, gateway):
    app.dependency_overrides[get_tenant_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return bearer(make_token())


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return bearer(make_token("owner@distroflow.test", {"role": "super_admin"}))
