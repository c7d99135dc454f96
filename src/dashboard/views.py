"""View assembly for dashboard pages.

Combines a record snapshot, a filter spec and the aggregation engine
into the exact shapes the meetings, agenda items and action items pages
render. The builders are pure; DashboardService adds snapshot loading
and memoization on top of them.
"""

import datetime
from collections import OrderedDict
from collections.abc import Sequence

import structlog

from src.adapters.base import RecordSource
from src.config import settings
from src.dashboard.aggregations import (
    aggregate_agenda_items_by_territory,
    aggregate_by_territory,
    aggregate_meeting_trend,
    aggregate_meetings_by_territory,
    aggregate_monthly_trend,
    aggregate_status_distribution,
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
from src.dashboard.schemas import ActionItemsView, AgendaItemsView, MeetingsView
from src.models import ActionItem, AgendaItem, Meeting, Territory, TerritoryRecord

logger = structlog.get_logger()


def build_meetings_view(
    meetings: Sequence[Meeting],
    spec: MeetingFilter | None,
    now: datetime.date | datetime.datetime,
    filtered: list[Meeting] | None = None,
) -> MeetingsView:
    """Assemble the meetings page from a snapshot.

    Args:
        meetings: Unfiltered meetings snapshot
        spec: Active filter spec
        now: Reference time for the meetings-per-month trend
        filtered: Already filtered meetings, if the caller has them
    """
    items = filter_records(meetings, spec) if filtered is None else filtered
    active = active_filter_count(spec)
    return MeetingsView(
        items=items,
        count=len(items),
        is_filtered=has_active_filters(spec),
        active_filters=active,
        territories=territory_options(meetings),
        by_territory=aggregate_meetings_by_territory(items),
        monthly_trend=aggregate_meeting_trend(items, now),
    )


def build_agenda_items_view(
    agenda_items: Sequence[AgendaItem],
    spec: AgendaItemFilter | None = None,
    filtered: list[AgendaItem] | None = None,
) -> AgendaItemsView:
    """Assemble the agenda items page from a snapshot."""
    items = filter_records(agenda_items, spec) if filtered is None else filtered
    active = active_filter_count(spec)
    return AgendaItemsView(
        items=items,
        count=len(items),
        is_filtered=has_active_filters(spec),
        active_filters=active,
        territories=territory_options(agenda_items),
        by_territory=aggregate_agenda_items_by_territory(items),
    )


def build_action_items_view(
    action_items: Sequence[ActionItem],
    spec: ActionItemFilter | None,
    now: datetime.date | datetime.datetime,
    filtered: list[ActionItem] | None = None,
) -> ActionItemsView:
    """Assemble the action items page from a snapshot.

    The monthly trend depends on ``now`` as well as on the records, so
    this view changes across month boundaries even for the same input.
    """
    items = filter_records(action_items, spec) if filtered is None else filtered
    active = active_filter_count(spec)
    return ActionItemsView(
        items=items,
        count=len(items),
        is_filtered=has_active_filters(spec),
        active_filters=active,
        territories=territory_options(action_items),
        status_distribution=aggregate_status_distribution(items),
        by_territory=aggregate_by_territory(items),
        monthly_trend=aggregate_monthly_trend(items, now),
    )


class DashboardService:
    """Serves dashboard page views from cached record snapshots.

    Snapshots are fetched from the record source on first use and kept
    until refresh(). Filtered collections are memoized per
    (snapshot identity, filter spec) in a least-recently-used map of
    ``memo_size`` entries; trends are always recomputed because they
    depend on the current date.
    """

    def __init__(self, source: RecordSource, memo_size: int | None = None):
        """Initialize service with a record source.

        Args:
            source: Adapter implementing the RecordSource protocol
            memo_size: Max memoized filtered collections (default: settings)
        """
        self._source = source
        self._memo_size = memo_size or settings.memo_size
        self._snapshots: dict[str, list] = {}
        self._filtered: OrderedDict[tuple[str, int, RecordFilter | None], list] = (
            OrderedDict()
        )

    def refresh(self) -> None:
        """Drop every snapshot and memoized result."""
        logger.info(
            "dropping dashboard snapshots",
            snapshots=len(self._snapshots),
            memoized=len(self._filtered),
        )
        self._snapshots.clear()
        self._filtered.clear()

    async def _snapshot(self, kind: str) -> list:
        snapshot = self._snapshots.get(kind)
        if snapshot is None:
            fetch = {
                "territories": self._source.fetch_territories,
                "meetings": self._source.fetch_meetings,
                "agenda_items": self._source.fetch_agenda_items,
                "action_items": self._source.fetch_action_items,
            }[kind]
            snapshot = await fetch()
            self._snapshots[kind] = snapshot
            # Entries keyed on a replaced snapshot can never hit again
            for key in [k for k in self._filtered if k[0] == kind]:
                del self._filtered[key]
            logger.info("loaded snapshot", kind=kind, count=len(snapshot))
        return snapshot

    def _filter(
        self,
        kind: str,
        snapshot: list[TerritoryRecord],
        spec: RecordFilter | None,
    ) -> list:
        key = (kind, id(snapshot), spec)
        cached = self._filtered.get(key)
        if cached is not None:
            self._filtered.move_to_end(key)
            return cached

        cached = self._filtered[key] = filter_records(snapshot, spec)
        if len(self._filtered) > self._memo_size:
            self._filtered.popitem(last=False)
        return cached

    async def territories(self) -> list[Territory]:
        """Every territory known to the record source, ordered by name."""
        return await self._snapshot("territories")

    async def meetings_view(
        self,
        spec: MeetingFilter | None = None,
        now: datetime.datetime | None = None,
    ) -> MeetingsView:
        """Meetings page for the given filter spec."""
        meetings = await self._snapshot("meetings")
        filtered = self._filter("meetings", meetings, spec)
        return build_meetings_view(
            meetings,
            spec,
            now or datetime.datetime.now(),
            filtered=filtered,
        )

    async def agenda_items_view(
        self, spec: AgendaItemFilter | None = None
    ) -> AgendaItemsView:
        """Agenda items page for the given filter spec."""
        agenda_items = await self._snapshot("agenda_items")
        filtered = self._filter("agenda_items", agenda_items, spec)
        return build_agenda_items_view(agenda_items, spec, filtered=filtered)

    async def action_items_view(
        self,
        spec: ActionItemFilter | None = None,
        now: datetime.datetime | None = None,
    ) -> ActionItemsView:
        """Action items page for the given filter spec.

        Args:
            spec: Active filter spec
            now: Reference time for the trend window (default: current time)
        """
        action_items = await self._snapshot("action_items")
        filtered = self._filter("action_items", action_items, spec)
        return build_action_items_view(
            action_items,
            spec,
            now or datetime.datetime.now(),
            filtered=filtered,
        )
