"""Schemas for derived dashboard views.

These are the shapes consumed by charts and tables: status buckets,
territory rollups, monthly trend points, and the assembled page views.
"""

from pydantic import BaseModel, Field

from src.models import ActionItem, ActionItemStatus, AgendaItem, Meeting


class StatusBucket(BaseModel):
    """Count of action items in one status."""

    status: ActionItemStatus = Field(description="Action item status")
    count: int = Field(ge=0, description="Number of items in this status")
    percentage: int = Field(
        default=0,
        ge=0,
        le=100,
        description="Rounded share of the total (0 when the total is 0)",
    )


class TerritoryRollup(BaseModel):
    """Action item totals for one territory."""

    territory: str = Field(description="Territory display name")
    total: int = Field(default=0, ge=0)
    pending: int = Field(default=0, ge=0)
    in_progress: int = Field(default=0, ge=0)
    completed: int = Field(default=0, ge=0)


class MeetingTerritoryRollup(BaseModel):
    """Meeting totals for one territory."""

    territory: str = Field(description="Territory display name")
    total: int = Field(default=0, ge=0, description="Number of meetings")
    agenda_items: int = Field(default=0, ge=0, description="Sum of agenda item counts")
    action_items: int = Field(default=0, ge=0, description="Sum of action item counts")


class AgendaTerritoryRollup(BaseModel):
    """Agenda item totals for one territory."""

    territory: str = Field(description="Territory display name")
    total: int = Field(default=0, ge=0, description="Number of agenda items")
    pending_actions: int = Field(default=0, ge=0)
    in_progress_actions: int = Field(default=0, ge=0)
    completed_actions: int = Field(default=0, ge=0)


class MonthlyTrendPoint(BaseModel):
    """Totals for one calendar month of the trend window."""

    month: str = Field(description="Short pt-BR month label, e.g. 'jan'")
    full_month: str = Field(description="Full label, e.g. 'janeiro 2024'")
    year: int
    month_number: int = Field(ge=1, le=12)
    total: int = Field(default=0, ge=0)
    completed: int = Field(default=0, ge=0)
    not_completed: int = Field(default=0, ge=0)


class ViewBase(BaseModel):
    """Fields shared by every assembled page view."""

    count: int = Field(ge=0, description="Number of records after filtering")
    is_filtered: bool = Field(description="True if any filter is active")
    active_filters: int = Field(ge=0, description="Number of active filter groups")
    territories: list[str] = Field(
        default_factory=list,
        description="Territory options present in the unfiltered snapshot",
    )


class MeetingsView(ViewBase):
    """Meetings page: table rows, territory rollup and meetings per month."""

    items: list[Meeting] = Field(default_factory=list)
    by_territory: list[MeetingTerritoryRollup] = Field(default_factory=list)
    monthly_trend: list[MonthlyTrendPoint] = Field(default_factory=list)


class AgendaItemsView(ViewBase):
    """Agenda items page: table rows plus territory rollup."""

    items: list[AgendaItem] = Field(default_factory=list)
    by_territory: list[AgendaTerritoryRollup] = Field(default_factory=list)


class ActionItemsView(ViewBase):
    """Action items page: table rows plus all three chart series."""

    items: list[ActionItem] = Field(default_factory=list)
    status_distribution: list[StatusBucket] = Field(default_factory=list)
    by_territory: list[TerritoryRollup] = Field(default_factory=list)
    monthly_trend: list[MonthlyTrendPoint] = Field(default_factory=list)
