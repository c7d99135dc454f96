"""Filter predicate engine for dashboard record collections.

A filter spec is a conjunction of independent criteria. Unset criteria
(empty sets, missing bounds, blank text) are vacuously true, so the
default spec matches every record.
"""

import datetime
from collections.abc import Iterable, Sequence
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models import (
    ActionItem,
    ActionItemStatus,
    AgendaItem,
    ChildStatus,
    Meeting,
    TerritoryRecord,
)

RecordT = TypeVar("RecordT", bound=TerritoryRecord)


def _blank_to_none(value: object) -> object:
    """Treat empty or whitespace-only free text as unset."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _contains(haystack: str, needle: str) -> bool:
    return needle.casefold() in haystack.casefold()


class RecordFilter(BaseModel):
    """Criteria shared by every record type.

    Territories are compared by display name. Date bounds are inclusive
    on both sides and compared as calendar dates.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    territories: frozenset[str] = Field(
        default_factory=frozenset,
        description="Territory names to include (empty = all)",
    )
    date_from: datetime.date | None = Field(
        default=None,
        description="Inclusive lower bound on the record date",
    )
    date_to: datetime.date | None = Field(
        default=None,
        description="Inclusive upper bound on the record date",
    )

    @field_validator("date_from", "date_to", mode="before")
    @classmethod
    def strip_time(cls, value: object) -> object:
        """Drop any time component so bounds compare as calendar dates."""
        if isinstance(value, datetime.datetime):
            return value.date()
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def _match_common(self, record: TerritoryRecord) -> bool:
        if self.territories and record.territory not in self.territories:
            return False

        if self.date_from is None and self.date_to is None:
            return True

        record_date = record.calendar_date
        if record_date is None:
            # Unparsable dates cannot satisfy a configured bound
            return False
        if self.date_from is not None and record_date < self.date_from:
            return False
        if self.date_to is not None and record_date > self.date_to:
            return False
        return True

    def matches(self, record: TerritoryRecord) -> bool:
        """Check whether a record satisfies every configured criterion."""
        return self._match_common(record)

    def active_criteria(self) -> list[bool]:
        """Flags for each criterion group, True when it constrains results.

        A date range counts once whichever bound is set.
        """
        return [
            bool(self.territories),
            self.date_from is not None or self.date_to is not None,
        ]


class MeetingFilter(RecordFilter):
    """Filter criteria for meetings."""

    secretary: str | None = Field(
        default=None,
        description="Case-insensitive substring of the secretary name",
    )

    blank_secretary = field_validator("secretary", mode="before")(_blank_to_none)

    def matches(self, record: Meeting) -> bool:
        if not self._match_common(record):
            return False
        if self.secretary and not _contains(record.secretary, self.secretary):
            return False
        return True

    def active_criteria(self) -> list[bool]:
        return super().active_criteria() + [bool(self.secretary)]


class AgendaItemFilter(RecordFilter):
    """Filter criteria for agenda items.

    ``child_status`` keeps agenda items with at least one action item in
    that status, not items with a specific count.
    """

    description: str | None = Field(
        default=None,
        description="Case-insensitive substring of the description",
    )
    child_status: ChildStatus | None = Field(
        default=None,
        description="Keep items with at least one action in this status",
    )

    blank_description = field_validator("description", mode="before")(
        _blank_to_none
    )
    @field_validator("child_status", mode="before")
    @classmethod
    def unset_child_status(cls, value: object) -> object:
        """Blank text and the "all" choice leave child status unconstrained."""
        value = _blank_to_none(value)
        if isinstance(value, str) and value.strip().casefold() == "all":
            return None
        return value

    def matches(self, record: AgendaItem) -> bool:
        if not self._match_common(record):
            return False
        if self.child_status is not None and record.child_count(self.child_status) == 0:
            return False
        if self.description and not _contains(record.description, self.description):
            return False
        return True

    def active_criteria(self) -> list[bool]:
        return super().active_criteria() + [
            self.child_status is not None,
            bool(self.description),
        ]


class ActionItemFilter(RecordFilter):
    """Filter criteria for action items.

    ``agenda`` matches when either the agenda description or the problem
    text contains it.
    """

    statuses: frozenset[ActionItemStatus] = Field(
        default_factory=frozenset,
        description="Statuses to include (empty = all)",
    )
    responsible: str | None = Field(
        default=None,
        description="Case-insensitive substring of the responsible people",
    )
    agenda: str | None = Field(
        default=None,
        description="Case-insensitive substring of agenda description or problem",
    )

    blank_text = field_validator("responsible", "agenda", mode="before")(
        _blank_to_none
    )

    def matches(self, record: ActionItem) -> bool:
        if self.statuses and record.status not in self.statuses:
            return False
        if not self._match_common(record):
            return False
        if self.responsible and not _contains(record.responsible, self.responsible):
            return False
        if self.agenda and not (
            _contains(record.agenda_description, self.agenda)
            or _contains(record.problem, self.agenda)
        ):
            return False
        return True

    def active_criteria(self) -> list[bool]:
        base = super().active_criteria()
        return [
            base[0],
            bool(self.statuses),
            base[1],
            bool(self.responsible),
            bool(self.agenda),
        ]


def filter_records(
    collection: Iterable[RecordT],
    spec: RecordFilter | None = None,
) -> list[RecordT]:
    """Return the records matching every criterion of ``spec``.

    Pure and total: input order is preserved, nothing is raised for
    individual records, and an empty list is returned when nothing matches.

    Args:
        collection: Records of a single type
        spec: Filter spec for that type (None matches everything)

    Returns:
        New list with the matching records
    """
    if spec is None:
        return list(collection)
    return [record for record in collection if spec.matches(record)]


def active_filter_count(spec: RecordFilter | None) -> int:
    """Number of criterion groups currently constraining results."""
    if spec is None:
        return 0
    return sum(spec.active_criteria())


def has_active_filters(spec: RecordFilter | None) -> bool:
    """Check if any criterion constrains results."""
    return active_filter_count(spec) > 0


def territory_options(collection: Sequence[TerritoryRecord]) -> list[str]:
    """Sorted distinct territory names present in a collection."""
    return sorted({record.territory for record in collection})
