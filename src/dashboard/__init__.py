"""Filtering and aggregation engine for the governance dashboard.

Provides:
- Filter specs and filter_records: Multi-criteria record filtering
- aggregate_*: Status distribution, territory rollups, monthly trends
- normalize_*: Flatten joined upstream rows into dashboard records
- DashboardService: Snapshot loading, memoization and page views
"""

from src.dashboard.aggregations import (
    aggregate_agenda_items_by_territory,
    aggregate_by_territory,
    aggregate_meeting_trend,
    aggregate_meetings_by_territory,
    aggregate_monthly_trend,
    aggregate_status_distribution,
    trend_window,
)
from src.dashboard.filters import (
    ActionItemFilter,
    AgendaItemFilter,
    MeetingFilter,
    RecordFilter,
    active_filter_count,
    filter_records,
    has_active_filters,
    territory_options,
)
from src.dashboard.schemas import (
    ActionItemsView,
    AgendaItemsView,
    AgendaTerritoryRollup,
    MeetingsView,
    MeetingTerritoryRollup,
    MonthlyTrendPoint,
    StatusBucket,
    TerritoryRollup,
)
from src.dashboard.views import DashboardService

__all__ = [
    # Filters
    "RecordFilter",
    "MeetingFilter",
    "AgendaItemFilter",
    "ActionItemFilter",
    "filter_records",
    "active_filter_count",
    "has_active_filters",
    "territory_options",
    # Aggregations
    "aggregate_status_distribution",
    "aggregate_by_territory",
    "aggregate_meetings_by_territory",
    "aggregate_agenda_items_by_territory",
    "aggregate_monthly_trend",
    "aggregate_meeting_trend",
    "trend_window",
    # Schemas
    "StatusBucket",
    "TerritoryRollup",
    "MeetingTerritoryRollup",
    "AgendaTerritoryRollup",
    "MonthlyTrendPoint",
    "MeetingsView",
    "AgendaItemsView",
    "ActionItemsView",
    # Service
    "DashboardService",
]
