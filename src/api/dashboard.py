"""Dashboard API endpoints for meetings, agenda items and action items.

Each page endpoint maps its query parameters onto a filter spec and
returns the assembled view: filtered rows plus the chart series.
"""

from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field

from src.adapters.base import RecordSourceError
from src.dashboard.filters import ActionItemFilter, AgendaItemFilter, MeetingFilter
from src.dashboard.schemas import ActionItemsView, AgendaItemsView, MeetingsView
from src.dashboard.views import DashboardService
from src.models import ActionItemStatus, ChildStatus, Territory

dashboard_router = APIRouter(prefix="/dashboard", tags=["dashboard"])


class RefreshResponse(BaseModel):
    """Response for the refresh endpoint."""

    success: bool = Field(description="Whether the snapshots were dropped")


def get_dashboard_service(request: Request) -> DashboardService:
    """Get DashboardService from app state."""
    if not hasattr(request.app.state, "dashboard_service"):
        raise HTTPException(status_code=500, detail="DashboardService not initialized")
    return request.app.state.dashboard_service


def _source_unavailable(e: RecordSourceError) -> HTTPException:
    return HTTPException(
        status_code=502,
        detail=f"Record source unavailable ({e.table})",
    )


@dashboard_router.get("/meetings", response_model=MeetingsView)
async def get_meetings(
    territory: list[str] = Query(default=[], description="Territory names"),
    date_from: date | None = Query(default=None, description="Earliest meeting date"),
    date_to: date | None = Query(default=None, description="Latest meeting date"),
    secretary: str | None = Query(default=None, description="Secretary name contains"),
    service: DashboardService = Depends(get_dashboard_service),
) -> MeetingsView:
    """Get the meetings table and per-territory chart."""
    spec = MeetingFilter(
        territories=frozenset(territory),
        date_from=date_from,
        date_to=date_to,
        secretary=secretary,
    )
    try:
        return await service.meetings_view(spec)
    except RecordSourceError as e:
        raise _source_unavailable(e) from e


@dashboard_router.get("/agenda-items", response_model=AgendaItemsView)
async def get_agenda_items(
    territory: list[str] = Query(default=[], description="Territory names"),
    date_from: date | None = Query(default=None, description="Earliest meeting date"),
    date_to: date | None = Query(default=None, description="Latest meeting date"),
    description: str | None = Query(default=None, description="Description contains"),
    child_status: ChildStatus | Literal["all"] | None = Query(
        default=None, description="Only items with actions in this status"
    ),
    service: DashboardService = Depends(get_dashboard_service),
) -> AgendaItemsView:
    """Get the agenda items table and per-territory chart."""
    spec = AgendaItemFilter(
        territories=frozenset(territory),
        date_from=date_from,
        date_to=date_to,
        description=description,
        child_status=child_status,
    )
    try:
        return await service.agenda_items_view(spec)
    except RecordSourceError as e:
        raise _source_unavailable(e) from e


@dashboard_router.get("/action-items", response_model=ActionItemsView)
async def get_action_items(
    territory: list[str] = Query(default=[], description="Territory names"),
    status: list[ActionItemStatus] = Query(default=[], description="Statuses"),
    date_from: date | None = Query(default=None, description="Earliest meeting date"),
    date_to: date | None = Query(default=None, description="Latest meeting date"),
    responsible: str | None = Query(default=None, description="Responsible contains"),
    agenda: str | None = Query(
        default=None, description="Agenda description or problem contains"
    ),
    service: DashboardService = Depends(get_dashboard_service),
) -> ActionItemsView:
    """Get the action items table, status chart, territory chart and trend."""
    spec = ActionItemFilter(
        territories=frozenset(territory),
        statuses=frozenset(status),
        date_from=date_from,
        date_to=date_to,
        responsible=responsible,
        agenda=agenda,
    )
    try:
        return await service.action_items_view(spec)
    except RecordSourceError as e:
        raise _source_unavailable(e) from e


@dashboard_router.get("/territories", response_model=list[Territory])
async def get_territories(
    service: DashboardService = Depends(get_dashboard_service),
) -> list[Territory]:
    """Get every territory for the filter dropdowns."""
    try:
        return await service.territories()
    except RecordSourceError as e:
        raise _source_unavailable(e) from e


@dashboard_router.post("/refresh", response_model=RefreshResponse)
async def refresh(
    service: DashboardService = Depends(get_dashboard_service),
) -> RefreshResponse:
    """Drop cached snapshots so the next request refetches them."""
    service.refresh()
    return RefreshResponse(success=True)
