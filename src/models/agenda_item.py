"""AgendaItem model ("Pauta")."""

import datetime
from typing import Literal

from pydantic import Field, computed_field, field_validator

from src.models.base import TerritoryRecord, date_to_text
from src.models.dates import parse_calendar_date

ChildStatus = Literal["pending", "in_progress", "completed"]


class AgendaItem(TerritoryRecord):
    """A topic discussed at a meeting, decomposed into action items.

    The three child counts are independent; no cross-field invariant
    relates them to each other or to any meeting total.
    """

    meeting_date: str = Field(description="Date of the meeting (ISO calendar date)")
    description: str = Field(default="", description="Agenda item description")
    pending_actions: int = Field(default=0, ge=0)
    in_progress_actions: int = Field(default=0, ge=0)
    completed_actions: int = Field(default=0, ge=0)

    normalize_date = field_validator("meeting_date", mode="before")(date_to_text)

    @property
    def calendar_date(self) -> datetime.date | None:
        return parse_calendar_date(self.meeting_date)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_actions(self) -> int:
        """Sum of the three child counts."""
        return self.pending_actions + self.in_progress_actions + self.completed_actions

    def child_count(self, status: ChildStatus) -> int:
        """Return the child count for one action status."""
        if status == "pending":
            return self.pending_actions
        if status == "in_progress":
            return self.in_progress_actions
        return self.completed_actions
