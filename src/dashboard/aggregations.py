"""Aggregation engine for dashboard charts.

Reduces a filtered record collection into the derived views behind the
charts: status distribution, per-territory rollups, and the monthly
trend. Every function is pure; the trend takes the current time as an
explicit argument instead of reading the clock.

Rollups keep only the largest groups (``rollup_limit``, 8 by default) to
keep bar charts legible. Groups past the cutoff are dropped, not merged
into an "other" bucket.
"""

import datetime
from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

from pydantic import BaseModel

from src.config import settings
from src.dashboard.schemas import (
    AgendaTerritoryRollup,
    MeetingTerritoryRollup,
    MonthlyTrendPoint,
    StatusBucket,
    TerritoryRollup,
)
from src.models import (
    STATUS_ORDER,
    ActionItem,
    ActionItemStatus,
    AgendaItem,
    Meeting,
    TerritoryRecord,
)
from src.models.dates import (
    as_calendar_date,
    full_month_label,
    shift_months,
    short_month_label,
)

RecordT = TypeVar("RecordT", bound=TerritoryRecord)
RollupT = TypeVar("RollupT", bound=BaseModel)


def aggregate_status_distribution(items: Sequence[ActionItem]) -> list[StatusBucket]:
    """Count action items per status in canonical order.

    Always returns one bucket per status (Pending, InProgress, Completed),
    including empty ones. Items with an unknown status are left out, so
    the bucket counts sum to the number of items with a known status.

    Args:
        items: Action items to count

    Returns:
        Three StatusBucket entries in canonical order
    """
    counts = dict.fromkeys(STATUS_ORDER, 0)
    for item in items:
        if item.status is not None:
            counts[item.status] += 1

    total = sum(counts.values())
    return [
        StatusBucket(
            status=status,
            count=count,
            percentage=int(count * 100 / total + 0.5) if total else 0,
        )
        for status, count in counts.items()
    ]


def _rollup(
    collection: Iterable[RecordT],
    factory: Callable[[str], RollupT],
    accumulate: Callable[[RollupT, RecordT], None],
    limit: int | None,
) -> list[RollupT]:
    """Group records by territory name and keep the largest groups.

    Groups are sorted by ``total`` descending. The sort is stable, so
    groups with equal totals keep their first-encounter order.
    """
    groups: dict[str, RollupT] = {}
    for record in collection:
        group = groups.get(record.territory)
        if group is None:
            group = groups[record.territory] = factory(record.territory)
        group.total += 1
        accumulate(group, record)

    ranked = sorted(groups.values(), key=lambda g: g.total, reverse=True)
    cutoff = settings.rollup_limit if limit is None else limit
    return ranked[:cutoff]


def _count_status(group: TerritoryRollup, item: ActionItem) -> None:
    if item.status is ActionItemStatus.PENDING:
        group.pending += 1
    elif item.status is ActionItemStatus.IN_PROGRESS:
        group.in_progress += 1
    elif item.status is ActionItemStatus.COMPLETED:
        group.completed += 1


def _sum_meeting_counts(group: MeetingTerritoryRollup, meeting: Meeting) -> None:
    group.agenda_items += meeting.agenda_item_count
    group.action_items += meeting.action_item_count


def _sum_child_counts(group: AgendaTerritoryRollup, item: AgendaItem) -> None:
    group.pending_actions += item.pending_actions
    group.in_progress_actions += item.in_progress_actions
    group.completed_actions += item.completed_actions


def aggregate_by_territory(
    items: Iterable[ActionItem],
    limit: int | None = None,
) -> list[TerritoryRollup]:
    """Roll up action items per territory with per-status subtotals.

    Args:
        items: Action items to group
        limit: Maximum groups to keep (default: settings.rollup_limit)

    Returns:
        Rollups sorted by total descending, at most ``limit`` long
    """
    return _rollup(
        items,
        lambda name: TerritoryRollup(territory=name),
        _count_status,
        limit,
    )


def aggregate_meetings_by_territory(
    meetings: Iterable[Meeting],
    limit: int | None = None,
) -> list[MeetingTerritoryRollup]:
    """Roll up meetings per territory, summing agenda and action counts."""
    return _rollup(
        meetings,
        lambda name: MeetingTerritoryRollup(territory=name),
        _sum_meeting_counts,
        limit,
    )


def aggregate_agenda_items_by_territory(
    agenda_items: Iterable[AgendaItem],
    limit: int | None = None,
) -> list[AgendaTerritoryRollup]:
    """Roll up agenda items per territory, summing their child counts."""
    return _rollup(
        agenda_items,
        lambda name: AgendaTerritoryRollup(territory=name),
        _sum_child_counts,
        limit,
    )


def trend_window(
    now: datetime.date | datetime.datetime,
    months: int | None = None,
) -> list[datetime.date]:
    """First day of each month in the trend window, oldest first.

    The window ends with the month containing ``now``.
    """
    months = settings.trend_months if months is None else months
    today = as_calendar_date(now)
    return [shift_months(today, -offset) for offset in range(months - 1, -1, -1)]


def _monthly_trend(
    collection: Iterable[RecordT],
    now: datetime.date | datetime.datetime,
    is_completed: Callable[[RecordT], bool],
    months: int | None,
) -> list[MonthlyTrendPoint]:
    starts = trend_window(now, months)
    points = {
        (start.year, start.month): MonthlyTrendPoint(
            month=short_month_label(start),
            full_month=full_month_label(start),
            year=start.year,
            month_number=start.month,
        )
        for start in starts
    }

    for record in collection:
        record_date = record.calendar_date
        if record_date is None:
            continue
        point = points.get((record_date.year, record_date.month))
        if point is None:
            continue
        point.total += 1
        if is_completed(record):
            point.completed += 1

    for point in points.values():
        point.not_completed = point.total - point.completed
    return list(points.values())


def aggregate_monthly_trend(
    items: Iterable[ActionItem],
    now: datetime.date | datetime.datetime,
    months: int | None = None,
) -> list[MonthlyTrendPoint]:
    """Bucket action items by calendar month over the trend window.

    Each bucket covers one whole calendar month. Items dated outside the
    window, or with an unparsable date, are left out of every bucket.
    Pending and in-progress items both count as not completed.

    Args:
        items: Action items to bucket
        now: Reference time; its month is the last bucket
        months: Window length (default: settings.trend_months, 6)

    Returns:
        Exactly ``months`` points in chronological order
    """
    return _monthly_trend(items, now, lambda item: item.is_completed, months)


def aggregate_meeting_trend(
    meetings: Iterable[Meeting],
    now: datetime.date | datetime.datetime,
    months: int | None = None,
) -> list[MonthlyTrendPoint]:
    """Bucket meetings by calendar month over the trend window.

    Meetings have no completion state, so ``completed`` stays 0.
    """
    return _monthly_trend(meetings, now, lambda _: False, months)
