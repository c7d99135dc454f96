"""ActionItem model ("Apontamento") for tasks raised at meetings."""

import datetime
from enum import Enum

from pydantic import Field, field_validator

from src.models.base import TerritoryRecord, date_to_text
from src.models.dates import parse_calendar_date


class ActionItemStatus(str, Enum):
    """Status of an action item.

    Values are the display strings stored upstream. Lookup also accepts
    the member names and a few spelling variants, case-insensitively.
    """

    PENDING = "Pendente"
    IN_PROGRESS = "Em andamento"
    COMPLETED = "Concluído"

    @classmethod
    def _missing_(cls, value: object) -> "ActionItemStatus | None":
        if not isinstance(value, str):
            return None
        key = value.strip().casefold().replace("-", "_").replace(" ", "_")
        return _STATUS_ALIASES.get(key)

    @classmethod
    def parse(cls, value: object) -> "ActionItemStatus":
        """Parse a status value.

        Raises:
            ValueError: If value is not one of the three known statuses
        """
        return cls(value)


_STATUS_ALIASES = {
    "pending": ActionItemStatus.PENDING,
    "pendente": ActionItemStatus.PENDING,
    "in_progress": ActionItemStatus.IN_PROGRESS,
    "inprogress": ActionItemStatus.IN_PROGRESS,
    "em_andamento": ActionItemStatus.IN_PROGRESS,
    "andamento": ActionItemStatus.IN_PROGRESS,
    "completed": ActionItemStatus.COMPLETED,
    "concluído": ActionItemStatus.COMPLETED,
    "concluido": ActionItemStatus.COMPLETED,
}

# Canonical order for status breakdowns
STATUS_ORDER = (
    ActionItemStatus.PENDING,
    ActionItemStatus.IN_PROGRESS,
    ActionItemStatus.COMPLETED,
)


class ActionItem(TerritoryRecord):
    """An action item raised against an agenda item.

    Action items are tracked tasks with:
    - The problem that was raised
    - The people responsible for it
    - A tri-state status

    An unrecognized upstream status is kept as ``status=None`` with the
    original text in ``raw_status``. Such items count as not completed.
    """

    meeting_date: str = Field(description="Date of the meeting (ISO calendar date)")
    agenda_description: str = Field(
        default="",
        description="Description of the parent agenda item",
    )
    problem: str = Field(default="", description="Problem raised at the meeting")
    responsible: str = Field(default="", description="Responsible people")
    status: ActionItemStatus | None = Field(
        default=ActionItemStatus.PENDING,
        description="Current status (None when the upstream value is unknown)",
    )
    raw_status: str = Field(default="", description="Status text as stored upstream")

    normalize_date = field_validator("meeting_date", mode="before")(date_to_text)

    @property
    def calendar_date(self) -> datetime.date | None:
        return parse_calendar_date(self.meeting_date)

    @property
    def is_completed(self) -> bool:
        """Check if action item is completed."""
        return self.status is ActionItemStatus.COMPLETED
