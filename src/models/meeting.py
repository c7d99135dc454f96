"""Meeting model ("Reunião")."""

import datetime

from pydantic import Field, field_validator

from src.models.base import TerritoryRecord, date_to_text
from src.models.dates import parse_calendar_date


class Meeting(TerritoryRecord):
    """A scheduled governance meeting tied to one territory.

    ``agenda_item_count`` and ``action_item_count`` arrive precomputed by
    the record source. They are never re-derived from the agenda or
    action collections.
    """

    date: str = Field(description="Meeting date (ISO calendar date)")
    time: str = Field(default="", description="Meeting time, may be empty")
    secretary: str = Field(description="Name of the meeting secretary")
    agenda_item_count: int = Field(
        default=0,
        ge=0,
        description="Number of agenda items discussed",
    )
    action_item_count: int = Field(
        default=0,
        ge=0,
        description="Number of action items across all agenda items",
    )

    normalize_date = field_validator("date", mode="before")(date_to_text)

    @property
    def calendar_date(self) -> datetime.date | None:
        """Meeting date, or None if it cannot be parsed."""
        return parse_calendar_date(self.date)
