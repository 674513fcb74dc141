# distroflow/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from distroflow.core.config import get_settings
from distroflow.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from distroflow.models import store as _store_models  # noqa: F401


# Routers
from distroflow.routers.products import router as products_router
from distroflow.routers.cart import router as cart_router
from distroflow.routers.sales import router as sales_router
from distroflow.routers.expenses import router as expenses_router
from distroflow.routers.reports import router as reports_router
from distroflow.routers.tenants import router as tenants_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.

    Shutdown:
      - No special cleanup needed for sync engine.
    """
    logger.info("🔄 Startup: Connecting to database...")
    try:
        create_db_and_tables()
        logger.info("✅ Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"❌ Startup: DB connection FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME or "DistroFlow POS API",
    version="0.1.0",
    lifespan=lifespan,
)


# --- CORS configuration ---
# The tenant endpoint is called from the admin console; the POS routes
# from the web / Capacitor front-end.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Versioned API prefix, e.g. /api/v1
app.include_router(products_router, prefix=settings.API_V1_STR)
app.include_router(cart_router, prefix=settings.API_V1_STR)
app.include_router(sales_router, prefix=settings.API_V1_STR)
app.include_router(expenses_router, prefix=settings.API_V1_STR)
app.include_router(reports_router, prefix=settings.API_V1_STR)
app.include_router(tenants_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "distroflow-backend"}
