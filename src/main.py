"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.adapters.supabase_adapter import SupabaseAdapter
from src.api.router import api_router
from src.config import settings
from src.dashboard.views import DashboardService

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan management.

    Startup:
    - Create the record source adapter
    - Create the dashboard service over it

    Shutdown:
    - Close the record source HTTP client
    """
    logger.info("Starting Governance Dashboard...")

    record_source = SupabaseAdapter()
    app.state.record_source = record_source
    if settings.supabase_url:
        logger.info(f"Record source configured: {settings.supabase_url}")
    else:
        logger.warning("Record source not configured; set SUPABASE_URL")

    app.state.dashboard_service = DashboardService(record_source)
    logger.info("Dashboard service initialized")

    yield

    logger.info("Shutting down Governance Dashboard...")
    await record_source.close()
    logger.info("Record source closed")


app = FastAPI(
    title=settings.app_name,
    description="Filtering and aggregation engine for governance meetings",
    version=settings.app_version,
    lifespan=lifespan,
)

app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
