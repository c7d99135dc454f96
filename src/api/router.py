"""API router aggregation."""

from fastapi import APIRouter

from src.api.dashboard import dashboard_router
from src.api.health import router as health_router

api_router = APIRouter()
api_router.include_router(health_router)
# Dashboard page views
api_router.include_router(dashboard_router)
