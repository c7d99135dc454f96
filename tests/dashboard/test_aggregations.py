"""Tests for the aggregation engine."""

from datetime import date, datetime

import pytest

from src.dashboard.aggregations import (
    aggregate_agenda_items_by_territory,
    aggregate_by_territory,
    aggregate_meeting_trend,
    aggregate_meetings_by_territory,
    aggregate_monthly_trend,
    aggregate_status_distribution,
    trend_window,
)
from src.models import ActionItem, ActionItemStatus

# Fixed reference time for deterministic trend windows
NOW = datetime(2024, 2, 20, 9, 30)


def _action(item_id: str, territory: str, status: str, day: str = "2024-01-10"):
    return ActionItem(id=item_id, territory=territory, meeting_date=day, status=status)


class TestStatusDistribution:
    """Tests for aggregate_status_distribution."""

    def test_scenario_counts(self, action_items):
        """North/South scenario yields 1 pending, 0 in progress, 2 completed."""
        buckets = aggregate_status_distribution(action_items)

        assert [(b.status, b.count) for b in buckets] == [
            (ActionItemStatus.PENDING, 1),
            (ActionItemStatus.IN_PROGRESS, 0),
            (ActionItemStatus.COMPLETED, 2),
        ]

    def test_canonical_order_regardless_of_input(self):
        """Bucket order does not follow input order."""
        items = [
            _action("1", "A", "completed"),
            _action("2", "A", "in_progress"),
            _action("3", "A", "pending"),
        ]
        buckets = aggregate_status_distribution(items)
        assert [b.status for b in buckets] == [
            ActionItemStatus.PENDING,
            ActionItemStatus.IN_PROGRESS,
            ActionItemStatus.COMPLETED,
        ]

    def test_empty_input_has_three_zero_buckets(self):
        """Empty input still yields three buckets with zero counts."""
        buckets = aggregate_status_distribution([])
        assert len(buckets) == 3
        assert all(b.count == 0 and b.percentage == 0 for b in buckets)

    def test_total_equals_input_size(self, action_items):
        """Bucket counts sum to the collection size."""
        items = action_items * 3
        assert sum(b.count for b in aggregate_status_distribution(items)) == len(items)

    def test_percentages_round_half_up(self, action_items):
        """Percentages are rounded shares of the total."""
        buckets = aggregate_status_distribution(action_items)
        assert [b.percentage for b in buckets] == [33, 0, 67]

    def test_percentage_half_rounds_up(self):
        """A share of exactly .5 rounds up."""
        items = [_action(str(i), "A", "pending") for i in range(1)] + [
            _action(str(i), "A", "completed") for i in range(1, 8)
        ]
        # 1/8 = 12.5%
        assert aggregate_status_distribution(items)[0].percentage == 13


class TestRollupByTerritory:
    """Tests for aggregate_by_territory."""

    def test_scenario(self, action_items):
        """North has two items, South one."""
        rollup = aggregate_by_territory(action_items)

        assert [(r.territory, r.total) for r in rollup] == [("North", 2), ("South", 1)]
        north = rollup[0]
        assert (north.pending, north.in_progress, north.completed) == (1, 0, 1)
        south = rollup[1]
        assert (south.pending, south.in_progress, south.completed) == (0, 0, 1)

    def test_sorted_by_total_descending(self):
        """Groups are ordered by total, largest first."""
        items = [
            _action("1", "A", "pending"),
            _action("2", "B", "pending"),
            _action("3", "B", "pending"),
            _action("4", "C", "pending"),
            _action("5", "C", "pending"),
            _action("6", "C", "pending"),
        ]
        rollup = aggregate_by_territory(items)
        assert [r.territory for r in rollup] == ["C", "B", "A"]
        assert all(
            rollup[i].total >= rollup[i + 1].total for i in range(len(rollup) - 1)
        )

    def test_ties_keep_first_encounter_order(self):
        """Equal totals keep the order territories first appeared in."""
        items = [
            _action("1", "Zeta", "pending"),
            _action("2", "Alpha", "pending"),
            _action("3", "Mid", "pending"),
            _action("4", "Alpha", "completed"),
            _action("5", "Zeta", "completed"),
        ]
        rollup = aggregate_by_territory(items)
        assert [r.territory for r in rollup] == ["Zeta", "Alpha", "Mid"]

    def test_truncates_to_eight_groups(self):
        """Only the eight largest groups survive; the rest are dropped."""
        items = []
        for rank in range(10):
            for n in range(10 - rank):
                items.append(_action(f"{rank}-{n}", f"T{rank}", "pending"))

        rollup = aggregate_by_territory(items)

        assert len(rollup) == 8
        assert [r.territory for r in rollup] == [f"T{i}" for i in range(8)]
        # Dropped groups are not merged into another bucket
        assert sum(r.total for r in rollup) == len(items) - 2 - 1

    def test_explicit_limit(self, action_items):
        """An explicit limit overrides the default cutoff."""
        assert len(aggregate_by_territory(action_items, limit=1)) == 1

    def test_empty_input(self):
        """Empty input yields no groups."""
        assert aggregate_by_territory([]) == []

    def test_groups_by_exact_display_name(self):
        """Same text groups together; different text never does."""
        items = [
            _action("1", "Vila Nova", "pending"),
            _action("2", "Vila Nova", "pending"),
            _action("3", "vila nova", "pending"),
        ]
        rollup = aggregate_by_territory(items)
        assert [(r.territory, r.total) for r in rollup] == [
            ("Vila Nova", 2),
            ("vila nova", 1),
        ]


class TestMeetingAndAgendaRollups:
    """Tests for meeting and agenda item rollups."""

    def test_meetings_sum_precomputed_counts(self, meetings):
        """Meeting rollup sums agenda and action counts per territory."""
        rollup = aggregate_meetings_by_territory(meetings)

        assert [r.territory for r in rollup] == ["North", "South", "East"]
        north = rollup[0]
        assert (north.total, north.agenda_items, north.action_items) == (2, 5, 7)

    def test_agenda_items_sum_child_counts(self, agenda_items):
        """Agenda rollup sums child counts per territory."""
        rollup = aggregate_agenda_items_by_territory(agenda_items)

        north = rollup[0]
        assert north.territory == "North"
        assert north.total == 2
        assert (
            north.pending_actions,
            north.in_progress_actions,
            north.completed_actions,
        ) == (2, 0, 1)


class TestTrendWindow:
    """Tests for trend_window."""

    def test_six_months_oldest_first(self):
        """Window covers the current month and the five before it."""
        assert trend_window(NOW) == [
            date(2023, 9, 1),
            date(2023, 10, 1),
            date(2023, 11, 1),
            date(2023, 12, 1),
            date(2024, 1, 1),
            date(2024, 2, 1),
        ]

    def test_end_of_month_reference(self):
        """The 31st does not skip short months."""
        window = trend_window(date(2024, 3, 31))
        assert window[-2] == date(2024, 2, 1)
        assert window[0] == date(2023, 10, 1)


class TestMonthlyTrend:
    """Tests for aggregate_monthly_trend."""

    def test_scenario(self, action_items):
        """January has two items, February one completed."""
        trend = aggregate_monthly_trend(action_items, NOW)

        assert [p.month for p in trend] == ["set", "out", "nov", "dez", "jan", "fev"]
        january, february = trend[4], trend[5]
        assert (january.total, january.completed, january.not_completed) == (2, 1, 1)
        assert (february.total, february.completed, february.not_completed) == (
            1,
            1,
            0,
        )
        assert february.full_month == "fevereiro 2024"
        assert (february.year, february.month_number) == (2024, 2)

    @pytest.mark.parametrize(
        "now",
        [
            datetime(2024, 1, 1),
            datetime(2024, 12, 31, 23, 59),
            date(2000, 2, 29),
        ],
    )
    def test_always_six_points(self, action_items, now):
        """Trend length is six for any input and reference time."""
        assert len(aggregate_monthly_trend(action_items, now)) == 6
        assert len(aggregate_monthly_trend([], now)) == 6

    def test_empty_input_all_zero(self):
        """Empty input yields six zero buckets."""
        trend = aggregate_monthly_trend([], NOW)
        assert len(trend) == 6
        assert all(p.total == 0 for p in trend)

    def test_month_boundaries_are_inclusive(self):
        """First and last day of a month fall in that month."""
        items = [
            _action("1", "A", "pending", "2024-01-01"),
            _action("2", "A", "pending", "2024-01-31"),
            _action("3", "A", "pending", "2023-12-31"),
        ]
        trend = aggregate_monthly_trend(items, NOW)
        assert trend[4].total == 2
        assert trend[3].total == 1

    def test_outside_window_excluded(self):
        """Items older than the window or in the future are left out."""
        items = [
            _action("1", "A", "pending", "2023-08-31"),
            _action("2", "A", "pending", "2024-03-01"),
            _action("3", "A", "pending", "2023-09-01"),
        ]
        trend = aggregate_monthly_trend(items, NOW)
        assert sum(p.total for p in trend) == 1
        assert trend[0].total == 1

    def test_pending_and_in_progress_are_not_completed(self):
        """Every non-completed status counts as not completed."""
        items = [
            _action("1", "A", "pending", "2024-02-01"),
            _action("2", "A", "in_progress", "2024-02-02"),
            _action("3", "A", "completed", "2024-02-03"),
        ]
        point = aggregate_monthly_trend(items, NOW)[-1]
        assert (point.total, point.completed, point.not_completed) == (3, 1, 2)

    def test_unparsable_dates_are_skipped(self):
        """Items with bad dates are left out of the trend only."""
        items = [
            _action("1", "A", "pending", "not a date"),
            _action("2", "A", "pending", "2024-02-10"),
        ]
        trend = aggregate_monthly_trend(items, NOW)
        assert sum(p.total for p in trend) == 1
        assert sum(b.count for b in aggregate_status_distribution(items)) == 2

    def test_window_moves_with_now(self, action_items):
        """Same input, later reference time, different output."""
        february = aggregate_monthly_trend(action_items, NOW)
        august = aggregate_monthly_trend(action_items, datetime(2024, 8, 1))
        assert sum(p.total for p in february) == 3
        assert sum(p.total for p in august) == 0


class TestMeetingTrend:
    """Tests for aggregate_meeting_trend."""

    def test_counts_meetings_per_month(self, meetings):
        """Meetings are bucketed by month with no completions."""
        trend = aggregate_meeting_trend(meetings, datetime(2024, 3, 15))

        assert [p.total for p in trend] == [0, 0, 0, 2, 1, 1]
        assert all(p.completed == 0 for p in trend)
        assert all(p.not_completed == p.total for p in trend)


class TestUnknownStatus:
    """Tests for action items whose upstream status is not recognized."""

    @pytest.fixture
    def items(self) -> list[ActionItem]:
        return [
            _action("1", "A", "pending", "2024-02-01"),
            _action("2", "A", "completed", "2024-02-02"),
            ActionItem(
                id="3",
                territory="A",
                meeting_date="2024-02-03",
                status=None,
                raw_status="Cancelado",
            ),
        ]

    def test_left_out_of_distribution(self, items):
        """Status buckets only count known statuses."""
        buckets = aggregate_status_distribution(items)

        assert [b.count for b in buckets] == [1, 0, 1]
        assert [b.percentage for b in buckets] == [50, 0, 50]

    def test_counted_in_rollup_total_only(self, items):
        """The territory total includes it; per-status subtotals do not."""
        group = aggregate_by_territory(items)[0]

        assert group.total == 3
        assert (group.pending, group.in_progress, group.completed) == (1, 0, 1)

    def test_counted_as_not_completed_in_trend(self, items):
        """The trend counts it in total and not_completed."""
        point = aggregate_monthly_trend(items, NOW)[-1]

        assert (point.total, point.completed, point.not_completed) == (3, 1, 2)
